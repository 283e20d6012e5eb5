"""Release tooling for editor extension packs."""

__version__ = "0.1.0"
