"""Test fixtures for safefetch"""
import io
import tarfile
import zipfile
import pytest
from pathlib import Path


def build_zip(entries):
    """Build zip bytes from (name, data) pairs; data None means a directory."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, 'w', compression=zipfile.ZIP_DEFLATED) as zf:
        for name, data in entries:
            if data is None:
                zf.writestr(zipfile.ZipInfo(name if name.endswith('/') else name + '/'), b'')
            else:
                zf.writestr(name, data)
    return buf.getvalue()


def build_tar_gz(entries, links=(), modes=None):
    """Build tar.gz bytes from (name, data) pairs; data None means a directory.

    links holds (name, target, hardlink) triples appended after the entries,
    modes maps entry names to permission bits.
    """
    modes = modes or {}
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode='w:gz') as tf:
        for name, data in entries:
            info = tarfile.TarInfo(name=name)
            if data is None:
                info.type = tarfile.DIRTYPE
                info.mode = modes.get(name, 0o755)
                tf.addfile(info)
            else:
                info.size = len(data)
                info.mode = modes.get(name, 0o644)
                tf.addfile(info, io.BytesIO(data))
        for name, target, hardlink in links:
            info = tarfile.TarInfo(name=name)
            info.type = tarfile.LNKTYPE if hardlink else tarfile.SYMTYPE
            info.linkname = target
            tf.addfile(info)
    return buf.getvalue()


@pytest.fixture
def serve_file(tmp_path):
    """Write bytes under tmp_path/served and return a file:// URL for them."""
    served = tmp_path / "served"
    served.mkdir()

    def _serve(name: str, data: bytes) -> str:
        path = served / name
        path.write_bytes(data)
        return path.as_uri()
    return _serve


@pytest.fixture
def dest_dir(tmp_path):
    """Destination root for extractions (not created up front)."""
    return tmp_path / "dest"


@pytest.fixture
def sample_entries():
    """A small tree with a directory, nested files and binary content."""
    return [
        ("docs/", None),
        ("docs/readme.txt", b"read me\n"),
        ("bin/tool", bytes(range(256)) * 4),
        ("top.txt", b"top level"),
    ]


def assert_tree(root: Path, entries):
    for name, data in entries:
        path = root / name
        if data is None:
            assert path.is_dir(), name
        else:
            assert path.is_file(), name
            assert path.read_bytes() == data
