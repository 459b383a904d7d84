"""
Exceptions for the lonelog package.

Malformed notation never raises; these cover configuration loading and
cursor arithmetic on the suggestion surface.
"""


class LonelogError(Exception):
    """Base exception for lonelog operations."""


class ConfigError(LonelogError):
    """Raised when a configuration source cannot be loaded or is invalid."""


class InvalidCursorError(LonelogError):
    """Raised when a cursor or replacement range falls outside its line."""


class DocumentReadError(LonelogError):
    """Raised when a document file cannot be opened or is not valid UTF-8."""
