"""wingetkit — search, list, install and upgrade packages through winget."""

__version__ = "0.1.0"
