"""Documents module - master template, generated letters and schedule export."""
