"""taskpad: a terminal task list with filtering, search and sorting."""

__version__ = "0.1.0"
