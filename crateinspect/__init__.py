"""Terminal browser for the dependency tree of a Cargo project."""

__version__ = "0.1.2"