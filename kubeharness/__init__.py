"""Name sanitising, validation, manifest building and resource operations over a pluggable store."""

__version__ = "0.1.0"