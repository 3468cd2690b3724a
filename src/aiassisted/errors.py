"""Exceptions raised by ai-assisted operations."""

from enum import Enum


class ErrorKind(Enum):
    """Category of a failed operation."""

    MISSING_FILE = "missing-file"
    MALFORMED_HEADER = "malformed-header"
    PRECONDITION = "precondition"
    LOCK_TIMEOUT = "lock-timeout"
    FILESYSTEM = "filesystem"


class AssistError(Exception):
    """Base class for ai-assisted errors."""

    kind = ErrorKind.FILESYSTEM


class MissingFileError(AssistError):
    """A referenced path does not exist."""

    kind = ErrorKind.MISSING_FILE


class MalformedHeaderError(AssistError):
    """A rule file has no id: line or --- delimiter near the top."""

    kind = ErrorKind.MALFORMED_HEADER


class PreconditionError(AssistError):
    """A required directory or file is absent before the operation starts."""

    kind = ErrorKind.PRECONDITION


class LockTimeoutError(AssistError):
    """Another process held a canonical file's lock for too long."""

    kind = ErrorKind.LOCK_TIMEOUT
