"""Package initialization for printa."""

import contextlib
from importlib.metadata import PackageNotFoundError, version

__version__ = "1.0.6"
with contextlib.suppress(PackageNotFoundError):
    if __package__ is not None:
        __version__ = version(__package__)

__all__ = ["__version__"]
