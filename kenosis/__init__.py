"""Kenosis: find software projects and reclaim the disk space of their dependency folders."""

__version__ = "0.1.0"

from kenosis.cli import main

__all__ = ["main", "__version__"]
