"""idfcli - an ESP-IDF build front end."""

__version__ = "0.1.0"
