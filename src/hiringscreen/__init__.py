"""Application screening pipeline for the hiring marketplace."""

__version__ = "0.1.0"
