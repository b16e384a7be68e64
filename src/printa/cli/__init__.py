"""CLI exports.

This package exposes `cli` and `main` from `root.py` so that
`python -m printa` and the console entry point both work.
"""

from .root import cli, main

__all__ = ["cli", "main"]
