"""SAT Portal - thesis and internship administration API."""

__version__ = "0.1.0"
