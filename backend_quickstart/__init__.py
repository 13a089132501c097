"""backend-quickstart: generate a production-ready Express backend skeleton."""

__version__ = "1.0.0"
