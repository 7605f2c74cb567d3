"""Requirements module - per-stage requirement texts."""
