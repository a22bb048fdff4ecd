"""Error definitions for ig-follow-diff."""

from typing import Any, Dict


class FollowDiffError(Exception):
    """Base exception for all ig-follow-diff errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context


class ConfigurationError(FollowDiffError):
    """Configuration is invalid or missing."""
    pass


class ArchiveError(FollowDiffError):
    """Export archive cannot be opened."""
    pass


class FileProcessingError(FollowDiffError):
    """Base exception for errors tied to a single archive entry."""
    pass


class ReadError(FileProcessingError):
    """Archive entry is missing or cannot be decoded as text."""
    pass


class ParseError(FileProcessingError):
    """Archive entry content is malformed for its detected format."""
    pass


class UnsupportedFormatError(FileProcessingError):
    """No extraction strategy exists for the detected format."""
    pass


def classify_error(exception: Exception) -> str:
    """
    Classify an exception into a report category.

    Args:
        exception: The exception to classify

    Returns:
        Category string: 'read', 'parse', 'unsupported', 'configuration',
        'archive', or 'unknown'
    """
    if isinstance(exception, ReadError):
        return 'read'
    elif isinstance(exception, ParseError):
        return 'parse'
    elif isinstance(exception, UnsupportedFormatError):
        return 'unsupported'
    elif isinstance(exception, ConfigurationError):
        return 'configuration'
    elif isinstance(exception, ArchiveError):
        return 'archive'
    elif isinstance(exception, (OSError, UnicodeDecodeError)):
        return 'read'
    elif isinstance(exception, (ValueError, KeyError, AttributeError, TypeError)):
        return 'parse'
    else:
        return 'unknown'
