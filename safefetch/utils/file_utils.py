"""File utility functions for safefetch"""
import logging
import os
from pathlib import Path
from typing import BinaryIO, Optional

from .. import constants
from .exceptions import WriteError
from .text_utils import format_bytes

logger = logging.getLogger(__name__)


def ensure_path_exists(path: Path) -> None:
    """Create directory if it doesn't exist.

    Raises:
        WriteError: If the directory cannot be created
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise WriteError(f"Failed to create directory {path}: {e}") from e


def _copy_chunks(source: BinaryIO, path: Path, chunk_size: int) -> int:
    written = 0
    try:
        with open(path, 'wb') as dest:
            while True:
                chunk = source.read(chunk_size)
                if not chunk:
                    break
                dest.write(chunk)
                written += len(chunk)
    except OSError as e:
        raise WriteError(f"Failed to write {path}: {e}") from e
    return written


def copy_stream(source: BinaryIO, dest_file: Path,
                chunk_size: int = constants.DEFAULT_CHUNK_SIZE) -> int:
    """Copy a whole stream into dest_file, creating parent directories.

    Args:
        source: Readable binary stream
        dest_file: File to create or truncate
        chunk_size: Read buffer size

    Returns:
        int: Number of bytes written

    Raises:
        WriteError: If the file cannot be created or written
    """
    dest_file = Path(dest_file)
    ensure_path_exists(dest_file.parent)
    written = _copy_chunks(source, dest_file, chunk_size)
    logger.debug("Wrote %s to %s", format_bytes(written), dest_file)
    return written


def write_entry(
    path: Path,
    is_dir: bool,
    content: Optional[BinaryIO] = None,
    mode: Optional[int] = None,
    chunk_size: int = constants.DEFAULT_CHUNK_SIZE
) -> int:
    """Materialize one validated archive entry.

    The path is trusted as is; callers validate it first.

    Args:
        path: Absolute destination path of the entry
        is_dir: Create a directory instead of a file
        content: Entry bytes, required for files
        mode: Permission bits to apply to a file, if any; owner read and
            write are always kept. Directory modes are left to the caller.
        chunk_size: Read buffer size

    Returns:
        int: Number of bytes written (0 for directories)

    Raises:
        WriteError: If any filesystem operation fails
    """
    if is_dir:
        ensure_path_exists(path)
        return 0

    if content is None:
        raise ValueError(f"File entry {path} has no content")
    ensure_path_exists(path.parent)
    written = _copy_chunks(content, path, chunk_size)
    if mode is not None:
        # owner read/write always kept
        set_mode(path, (mode & 0o777) | 0o600)
    return written


def set_mode(path: Path, mode: int) -> None:
    """Apply permission bits to path.

    Raises:
        WriteError: If the permissions cannot be changed
    """
    try:
        os.chmod(path, mode)
    except OSError as e:
        raise WriteError(f"Failed to set permissions on {path}: {e}") from e


def write_link(path: Path, target: Path, hardlink: bool = False) -> None:
    """Create a symbolic or hard link at path, replacing an earlier one.

    Args:
        path: Validated location of the link
        target: Symlink contents, or the existing file a hard link points to
        hardlink: Create a hard link instead of a symbolic one

    Raises:
        WriteError: If the link cannot be created
    """
    ensure_path_exists(path.parent)
    try:
        if path.is_symlink() or path.is_file():
            path.unlink()
        if hardlink:
            os.link(target, path)
        else:
            os.symlink(target, path)
    except OSError as e:
        raise WriteError(f"Failed to create link {path}: {e}") from e


def read_text_file(path: Path, encoding: str = 'utf-8') -> str:
    """Read content from a file"""
    return Path(path).read_text(encoding=encoding)


def write_text_file(path: Path, content: str, encoding: str = 'utf-8') -> None:
    """Write content to a file, creating parent directories"""
    path = Path(path)
    ensure_path_exists(path.parent)
    try:
        path.write_text(content, encoding=encoding)
    except OSError as e:
        raise WriteError(f"Failed to write {path}: {e}") from e
