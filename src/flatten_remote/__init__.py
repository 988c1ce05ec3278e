"""Flatten a remote GitHub or GitLab repository into a single text file."""

__version__ = "1.0.0"
