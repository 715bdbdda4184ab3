"""
Custom exceptions for the safefetch project
"""

class SafefetchError(Exception):
    """Base exception for all safefetch-specific errors"""
    pass

class InvalidInputError(SafefetchError, ValueError):
    """Raised when invalid input is provided"""
    pass

class InvalidURLError(InvalidInputError):
    """Raised when an invalid URL is provided"""
    pass

class ConfigValidationError(SafefetchError):
    """Raised when configuration validation fails"""
    pass

class UnreachableError(SafefetchError):
    """Raised when the remote stream cannot be opened"""
    pass

class CorruptArchiveError(SafefetchError):
    """Raised when container framing is invalid or the stream is truncated"""
    pass

class UnsafeArchiveError(SafefetchError):
    """Raised when an archive entry would escape the destination root"""
    pass

class PathRejectedError(UnsafeArchiveError):
    """Raised by the path guard for a single rejected entry name"""

    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"Invalid archive entry {name!r}: {reason}")

class WriteError(SafefetchError, OSError):
    """Raised when a local filesystem operation fails during extraction"""
    pass
