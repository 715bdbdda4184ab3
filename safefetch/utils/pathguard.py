"""Archive entry name validation (zip-slip protection)."""
import re
from pathlib import Path, PurePosixPath
from typing import Tuple

from .exceptions import PathRejectedError

_SEPARATORS = re.compile(r'[/\\]')


def is_within_directory(directory: Path, target: Path) -> bool:
    """Check whether resolved target is directory itself or lies below it."""
    return target == directory or directory in target.parents


def validate_entry(name: str, destination: Path, strict: bool = True) -> Path:
    """Validate an archive entry name against a destination root.

    Args:
        name: Entry name as stored in the archive
        destination: Directory the archive is extracted into
        strict: Reject any name containing '..' as a substring. When False
            only names with a '..' path segment are rejected up front.

    Returns:
        Path: Absolute, normalized path of the entry under destination

    Raises:
        PathRejectedError: If the entry would resolve outside destination
    """
    if not name:
        raise PathRejectedError(name, "empty name")

    if strict:
        if '..' in name:
            raise PathRejectedError(name, "contains '..'")
    elif '..' in _SEPARATORS.split(name):
        raise PathRejectedError(name, "contains a '..' segment")

    root = Path(destination).resolve()
    target = (root / name).resolve()
    # Compare whole path components so /a/bc never matches root /a/b
    if not is_within_directory(root, target):
        raise PathRejectedError(name, f"resolves outside {root}")
    return target


def validate_link(name: str, link_target: str, destination: Path,
                  hardlink: bool = False, strict: bool = True) -> Tuple[Path, Path]:
    """Validate a link entry and the path it points at.

    The link itself is placed in its resolved parent directory rather than
    resolved, so an existing link from an earlier extraction is replaced
    instead of followed. Symlink targets are relative to the link's directory,
    hardlink targets to the destination root. Targets are judged by
    containment only; the '..' pre-filter does not apply to them.

    Args:
        name: Entry name as stored in the archive
        link_target: Link target as stored in the archive
        destination: Directory the archive is extracted into
        hardlink: Whether the entry is a hard link
        strict: Passed on to validate_entry for the entry name

    Returns:
        Tuple[Path, Path]: Path of the link, resolved path it points at

    Raises:
        PathRejectedError: If the link or its target lies outside destination
    """
    validate_entry(name, destination, strict=strict)
    root = Path(destination).resolve()
    leaf = PurePosixPath(name.replace('\\', '/')).name
    if leaf in ('', '.'):
        raise PathRejectedError(name, "link has no file name")
    link_path = (root / name).parent.resolve() / leaf
    if not is_within_directory(root, link_path.parent):
        raise PathRejectedError(name, f"resolves outside {root}")

    if not link_target or PurePosixPath(link_target).is_absolute() or Path(link_target).is_absolute():
        raise PathRejectedError(name, f"link target {link_target!r} is absolute")
    base = root if hardlink else link_path.parent
    target = (base / link_target).resolve()
    if target == link_path or not is_within_directory(root, target):
        raise PathRejectedError(name, f"link target {link_target!r} resolves outside {root}")
    return link_path, target
