"""Download functionality for safefetch."""
import logging
import re
from contextlib import closing, contextmanager
from pathlib import Path
from typing import Any, BinaryIO, Dict, Iterator, Optional, Tuple, Union
from urllib.parse import urlparse
from urllib.request import url2pathname

import certifi
import requests
import urllib3

from .. import constants
from ..utils.archive import (
    ArchiveEntry,
    CheckedReader,
    FormatKind,
    decode_gzip,
    decode_plain,
    format_for_address,
    iter_entries,
)
from ..utils.exceptions import InvalidURLError, PathRejectedError, UnreachableError
from ..utils.file_utils import copy_stream, ensure_path_exists, set_mode, write_entry, write_link
from ..utils.pathguard import validate_entry, validate_link
from ..utils.text_utils import format_bytes
from . import config

logger = logging.getLogger(__name__)

# Failures while reading an already opened HTTP body
NETWORK_READ_ERRORS = (
    urllib3.exceptions.HTTPError,
    requests.exceptions.RequestException,
    ConnectionError,
)

Settings = Optional[Dict[str, Any]]


def validate_url(url: str) -> str:
    """Validate an address for fetching.

    Args:
        url: http(s) or file URL, or a local path

    Returns:
        str: The URL scheme ('http', 'https' or 'file')

    Raises:
        InvalidURLError: If URL is invalid
    """
    if not url:
        raise InvalidURLError("Invalid URL '': empty address")
    parsed = urlparse(url)
    # Bare paths and Windows drive letters count as local files
    if not parsed.scheme or re.fullmatch(r'[A-Za-z]', parsed.scheme):
        return 'file'
    scheme = parsed.scheme.lower()
    if scheme not in constants.SUPPORTED_SCHEMES:
        raise InvalidURLError(f"Invalid URL '{url}': Unsupported URL scheme")
    if scheme in ('http', 'https'):
        if not parsed.netloc:
            raise InvalidURLError(f"Invalid URL '{url}': Invalid URL structure")
        # percent-encoded userinfo and IDNA hosts pass; requests checks the rest
        if re.search(r'[\x00-\x20\x7f<>"{}|\\^`]', parsed.netloc):
            raise InvalidURLError(f"Invalid URL '{url}': Invalid characters in domain")
    return scheme


def _local_path(url: str) -> Path:
    parsed = urlparse(url)
    if parsed.scheme.lower() == 'file':
        path = url2pathname(parsed.path)
        if parsed.netloc and parsed.netloc != 'localhost':
            path = f"//{parsed.netloc}{path}"
        return Path(path)
    return Path(url)


@contextmanager
def open_resource(url: str, settings: Settings = None) -> Iterator[BinaryIO]:
    """Open a read-once byte stream over url.

    Args:
        url: Address of the resource
        settings: Optional settings overrides

    Yields:
        BinaryIO: Readable stream, closed when the context exits

    Raises:
        InvalidURLError: If the address is malformed or unsupported
        UnreachableError: If the stream cannot be opened
    """
    settings = config.resolve_settings(settings)
    scheme = validate_url(url)

    if scheme == 'file':
        path = _local_path(url)
        try:
            stream = open(path, 'rb')
        except OSError as e:
            raise UnreachableError(f"Cannot open {url}: {e}") from e
        with stream:
            yield stream
        return

    try:
        response = requests.get(
            url,
            headers={
                'User-Agent': settings['user_agent'],
                # Keep Content-Encoding off so .gz bodies arrive as stored
                'Accept-Encoding': 'identity',
            },
            stream=True,
            verify=certifi.where() if settings['verify_ssl'] else False,
            timeout=settings['timeout'],
        )
        response.raise_for_status()
    except (requests.exceptions.InvalidURL, requests.exceptions.MissingSchema,
            requests.exceptions.InvalidSchema) as e:
        raise InvalidURLError(f"Invalid URL '{url}': {e}") from e
    except requests.exceptions.RequestException as e:
        raise UnreachableError(f"Cannot open {url}: {e}") from e

    with closing(response):
        yield CheckedReader(response.raw, url, errors=NETWORK_READ_ERRORS)


def _fetch_file(url: str, kind: FormatKind, dest_file: Path, settings: Dict[str, Any]) -> None:
    decode = decode_gzip if kind is FormatKind.GZIP else decode_plain
    with open_resource(url, settings) as stream:
        decoded = decode(stream)
        try:
            written = copy_stream(decoded, dest_file, settings['chunk_size'])
        finally:
            if decoded is not stream:
                decoded.close()
    logger.info("Fetched %s into %s (%s)", url, dest_file, format_bytes(written))


def _extract_entry(entry: ArchiveEntry, dest_dir: Path, settings: Dict[str, Any]) -> Tuple[Path, int]:
    strict = settings['strict_entry_names']
    if entry.is_link:
        link_path, target = validate_link(entry.name, entry.link_target, dest_dir,
                                          hardlink=entry.is_hardlink, strict=strict)
        write_link(link_path, target if entry.is_hardlink else Path(entry.link_target), entry.is_hardlink)
        return link_path, 0
    path = validate_entry(entry.name, dest_dir, strict=strict)
    if entry.is_dir:
        return path, write_entry(path, True)
    mode = entry.mode if settings['preserve_permissions'] else None
    return path, write_entry(path, False, entry.content, mode, settings['chunk_size'])


def _fetch_archive(url: str, kind: FormatKind, dest_dir: Path, settings: Dict[str, Any]) -> None:
    preserve = settings['preserve_permissions']
    dir_modes: Dict[Path, int] = {}
    count = 0
    total = 0

    with open_resource(url, settings) as stream:
        ensure_path_exists(dest_dir)
        with closing(iter_entries(kind, stream, settings['chunk_size'])) as entries:
            for entry in entries:
                try:
                    path, written = _extract_entry(entry, dest_dir, settings)
                except PathRejectedError as e:
                    logger.warning("Aborting extraction of %s: %s", url, e)
                    raise
                if preserve and entry.is_dir and entry.mode is not None:
                    dir_modes[path] = entry.mode
                logger.debug("Extracted %s (%s)", entry.name, format_bytes(written))
                count += 1
                total += written

    # Directory modes last, deepest first
    for path in sorted(dir_modes, reverse=True):
        set_mode(path, (dir_modes[path] & 0o777) | 0o700)

    logger.info("Extracted %d entries (%s) from %s into %s", count, format_bytes(total), url, dest_dir)


def fetch(url: str, kind: FormatKind, target: Union[str, Path], settings: Settings = None) -> None:
    """Fetch url and materialize it at target according to kind.

    Args:
        url: Address of the resource
        kind: Declared format of the resource
        target: Destination file for PLAIN/GZIP, destination directory for
            ZIP/GZIP_TAR
        settings: Optional settings overrides

    Raises:
        InvalidURLError: If the address is malformed or unsupported
        UnreachableError: If the stream cannot be opened
        CorruptArchiveError: If the data cannot be decoded
        UnsafeArchiveError: If an entry would land outside target; entries
            written before it are kept
        WriteError: If a local filesystem operation fails
    """
    settings = config.resolve_settings(settings)
    target = Path(target)
    logger.info("Fetching %s (%s) into %s", url, kind.value, target)
    if kind.is_archive:
        _fetch_archive(url, kind, target, settings)
    else:
        _fetch_file(url, kind, target, settings)


def fetch_plain(url: str, dest_file: Union[str, Path], settings: Settings = None) -> None:
    """Copy the resource verbatim into dest_file."""
    fetch(url, FormatKind.PLAIN, dest_file, settings)


def fetch_gzip(url: str, dest_file: Union[str, Path], settings: Settings = None) -> None:
    """Decompress a gzip resource into dest_file."""
    fetch(url, FormatKind.GZIP, dest_file, settings)


def fetch_zip(url: str, dest_dir: Union[str, Path], settings: Settings = None) -> None:
    """Extract a zip resource into dest_dir."""
    fetch(url, FormatKind.ZIP, dest_dir, settings)


def fetch_gzip_tar(url: str, dest_dir: Union[str, Path], settings: Settings = None) -> None:
    """Extract a .tar.gz resource into dest_dir."""
    fetch(url, FormatKind.GZIP_TAR, dest_dir, settings)


def fetch_auto(url: str, target: Union[str, Path], settings: Settings = None) -> FormatKind:
    """Fetch url choosing the format from its suffix.

    Returns:
        FormatKind: The format that was used
    """
    kind = format_for_address(url)
    fetch(url, kind, target, settings)
    return kind


def read_text(url: str, settings: Settings = None, encoding: str = 'utf-8') -> str:
    """Read a whole resource as text."""
    with open_resource(url, settings) as stream:
        data = stream.read()
    return data.decode(encoding)
