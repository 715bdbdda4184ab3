"""safefetch - Fetch remote files and archives without escaping the destination."""
import logging

__version__ = "0.1.0"

from .core.download import (
    fetch,
    fetch_auto,
    fetch_gzip,
    fetch_gzip_tar,
    fetch_plain,
    fetch_zip,
    read_text,
)
from .utils.archive import FormatKind, format_for_address
from .utils.exceptions import (
    CorruptArchiveError,
    SafefetchError,
    UnreachableError,
    UnsafeArchiveError,
    WriteError,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    'fetch', 'fetch_auto', 'fetch_plain', 'fetch_gzip', 'fetch_zip', 'fetch_gzip_tar',
    'read_text', 'FormatKind', 'format_for_address', 'SafefetchError',
    'UnreachableError', 'CorruptArchiveError', 'UnsafeArchiveError', 'WriteError',
]
