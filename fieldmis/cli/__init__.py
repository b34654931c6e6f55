"""Command line interface (``python -m fieldmis.cli``)."""

from .__main__ import main

__all__ = ["main"]
