"""Build tooling for a static GitHub portfolio site."""

__version__ = "0.1.0"
