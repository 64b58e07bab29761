"""schemalens - relational schema discovery and relationship inference."""

__version__ = "0.1.0"
