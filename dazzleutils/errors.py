"""
Exception types raised by DazzleUtils.

Decode errors coming from the YAML, JSON and TOML codecs are not wrapped;
they propagate exactly as the codec raised them.
"""

from typing import Optional


class DazzleUtilsError(Exception):
    """Base class for all errors raised by this package."""


class UnsupportedFormatError(DazzleUtilsError, ValueError):
    """
    Raised when a file extension does not map to any known data format.

    Attributes:
        extension: The extension as found (without the leading dot)
        file_path: The path whose extension was inspected
        operation: Name of the operation that failed
    """

    def __init__(self, extension: str, file_path: str, operation: str = 'parse_data_by_file_path'):
        self.extension = extension
        self.file_path = file_path
        self.operation = operation
        super().__init__(
            f"{operation} error, extension '{extension}' of file {file_path} is not supported"
        )


class TaggedAssertionError(DazzleUtilsError, AssertionError):
    """
    Precondition failure carrying a caller-chosen tag.

    ``str(error)`` is ``"[tag] message"``; the untagged message is kept
    in ``error.message``.
    """

    def __init__(self, tag: Optional[str], message: str):
        self.tag = tag
        self.message = message
        super().__init__(f"[{tag}] {message}")
