"""Lint awesome lists against repository-level curation conventions."""

__version__ = "0.1.0"
