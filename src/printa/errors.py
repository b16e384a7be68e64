"""Custom exception classes and error messages."""

ERROR_MSG_ROOT_MISSING = "project path does not exist"
ERROR_MSG_ROOT_NOT_DIR = "project path is not a directory"
ERROR_MSG_ROOT_UNREADABLE = "project path cannot be read"


class PathNotFoundError(Exception):
    """Raised when the walk root is missing or cannot be listed."""


class ConfigLoadError(Exception):
    """Raised when a configuration file cannot be loaded or holds invalid values."""
