"""Archive handling utilities.

Decoders consume their input stream exactly once, front to back. Archive
decoders yield ArchiveEntry objects whose content must be read before the
next entry is requested.
"""
import gzip
import logging
import tarfile
import tempfile
import zipfile
import zlib
from contextlib import ExitStack
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, Iterator, Optional, Tuple, Type

from .. import constants
from .exceptions import CorruptArchiveError, UnsafeArchiveError, WriteError

logger = logging.getLogger(__name__)

# Low-level failures that mean the container data itself is bad
CORRUPT_ERRORS: Tuple[Type[BaseException], ...] = (
    tarfile.TarError,
    zipfile.BadZipFile,
    gzip.BadGzipFile,
    zlib.error,
    EOFError,
)


class FormatKind(Enum):
    """Container format of a remote resource, declared by the caller."""
    PLAIN = 'plain'
    GZIP = 'gzip'
    ZIP = 'zip'
    GZIP_TAR = 'gzip_tar'

    @property
    def is_archive(self) -> bool:
        """Whether the format holds entries and extracts into a directory."""
        return self in (FormatKind.ZIP, FormatKind.GZIP_TAR)


@dataclass
class ArchiveEntry:
    """A single archive member as produced by a decoder."""
    name: str
    is_dir: bool
    content: Optional[BinaryIO] = None
    mode: Optional[int] = None
    link_target: Optional[str] = None
    is_hardlink: bool = False

    @property
    def is_link(self) -> bool:
        return self.link_target is not None


class CheckedReader:
    """Read-only stream wrapper turning decode failures into CorruptArchiveError."""

    def __init__(self, fileobj, label: str, errors: Tuple[Type[BaseException], ...] = CORRUPT_ERRORS):
        self._fileobj = fileobj
        self._label = label
        self._errors = errors

    def read(self, size: Optional[int] = -1) -> bytes:
        try:
            if size is None or size < 0:
                return self._fileobj.read()
            return self._fileobj.read(size)
        except self._errors as e:
            raise CorruptArchiveError(f"Corrupt data in {self._label}: {e}") from e

    def readable(self) -> bool:
        return True

    def close(self) -> None:
        self._fileobj.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


def format_for_address(address: str) -> FormatKind:
    """Pick a format from the address suffix.

    Args:
        address: URL or path of the resource

    Returns:
        FormatKind: GZIP_TAR for .tar.gz/.tgz, ZIP for .zip, GZIP for .gz,
        PLAIN otherwise
    """
    path = address.split('?', 1)[0].split('#', 1)[0].lower()
    for suffix, kind in constants.FORMAT_SUFFIXES:
        if path.endswith(suffix):
            return FormatKind(kind)
    return FormatKind.PLAIN


def decode_plain(stream: BinaryIO) -> BinaryIO:
    """Identity decoder."""
    return stream


def decode_gzip(stream: BinaryIO) -> CheckedReader:
    """Wrap a single gzip-framed stream; close the result when done."""
    return CheckedReader(gzip.GzipFile(fileobj=stream, mode='rb'), "gzip stream")


def _zip_mode(info: zipfile.ZipInfo) -> Optional[int]:
    perm = (info.external_attr >> 16) & 0o777
    return perm or None


def iter_zip_entries(stream: BinaryIO, chunk_size: int = constants.DEFAULT_CHUNK_SIZE) -> Iterator[ArchiveEntry]:
    """Yield the entries of a zip archive in stored order.

    The zip central directory sits at the end of the file, so the stream is
    spooled to an anonymous temporary file first.

    Raises:
        CorruptArchiveError: If the data is not a readable zip archive
    """
    with ExitStack() as stack:
        try:
            spool = stack.enter_context(tempfile.TemporaryFile(suffix='.zip'))
            while True:
                chunk = stream.read(chunk_size)
                if not chunk:
                    break
                spool.write(chunk)
            logger.debug("Spooled %d bytes of zip data", spool.tell())
            spool.seek(0)
        except OSError as e:
            raise WriteError(f"Failed to spool zip archive: {e}") from e

        try:
            zf = stack.enter_context(zipfile.ZipFile(spool, 'r'))
            infos = zf.infolist()
        except CORRUPT_ERRORS as e:
            raise CorruptArchiveError(f"Invalid zip archive: {e}") from e

        for info in infos:
            if info.is_dir():
                yield ArchiveEntry(info.filename, True, None, _zip_mode(info))
                continue
            try:
                member = zf.open(info, 'r')
            except CORRUPT_ERRORS as e:
                raise CorruptArchiveError(f"Invalid zip member {info.filename!r}: {e}") from e
            except (NotImplementedError, RuntimeError) as e:
                # Unsupported compression method or encrypted member
                raise CorruptArchiveError(f"Cannot read zip member {info.filename!r}: {e}") from e
            with CheckedReader(member, f"zip member {info.filename!r}") as content:
                yield ArchiveEntry(info.filename, False, content, _zip_mode(info))


def _tar_entry(tar: tarfile.TarFile, member: tarfile.TarInfo) -> ArchiveEntry:
    if member.isdir():
        return ArchiveEntry(member.name, True, None, member.mode)
    if member.isfile():
        fileobj = tar.extractfile(member)
        return ArchiveEntry(member.name, False, CheckedReader(fileobj, f"tar member {member.name!r}"), member.mode)
    if member.issym() or member.islnk():
        if not member.linkname:
            raise CorruptArchiveError(f"Tar link {member.name!r} has no target")
        return ArchiveEntry(member.name, False, None, member.mode,
                            link_target=member.linkname, is_hardlink=member.islnk())
    raise UnsafeArchiveError(f"Unsafe tar member (device/fifo): {member.name!r}")


def iter_tar_entries(stream: BinaryIO, chunk_size: int = constants.DEFAULT_CHUNK_SIZE) -> Iterator[ArchiveEntry]:
    """Yield the entries of a gzip-compressed tar archive in stored order.

    Regular files, directories and links are accepted. Link targets are not
    checked here; the caller validates them against its destination. After
    the last member the rest of the gzip stream is read so its CRC and
    length trailer are verified.

    Raises:
        CorruptArchiveError: If the gzip framing or tar headers are invalid
        UnsafeArchiveError: If a member is a device or fifo
    """
    with ExitStack() as stack:
        gz = stack.enter_context(gzip.GzipFile(fileobj=stream, mode='rb'))
        reader = CheckedReader(gz, "gzip stream")
        try:
            tar = stack.enter_context(tarfile.open(fileobj=reader, mode='r|'))
        except CORRUPT_ERRORS as e:
            raise CorruptArchiveError(f"Invalid tar archive: {e}") from e

        members = iter(tar)
        while True:
            try:
                member = next(members)
            except StopIteration:
                break
            except CORRUPT_ERRORS as e:
                raise CorruptArchiveError(f"Invalid tar archive: {e}") from e
            entry = _tar_entry(tar, member)
            if entry.content is None:
                yield entry
            else:
                with entry.content:
                    yield entry

        # tarfile stops at the end-of-archive block, before the gzip trailer
        while reader.read(chunk_size):
            pass


def iter_entries(kind: FormatKind, stream: BinaryIO,
                 chunk_size: int = constants.DEFAULT_CHUNK_SIZE) -> Iterator[ArchiveEntry]:
    """Dispatch to the entry decoder for an archive format.

    Raises:
        ValueError: If kind is not an archive format
    """
    if kind is FormatKind.ZIP:
        return iter_zip_entries(stream, chunk_size)
    if kind is FormatKind.GZIP_TAR:
        return iter_tar_entries(stream, chunk_size)
    raise ValueError(f"Unsupported archive format: {kind.value}")
