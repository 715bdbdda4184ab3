"""Package version lookup."""
from importlib import metadata

DISTRIBUTION = "safefetch"


def get_version() -> str:
    """Version of the installed distribution, or the in-tree one when not installed."""
    try:
        return metadata.version(DISTRIBUTION)
    except metadata.PackageNotFoundError:
        from safefetch import __version__
        return __version__


def default_user_agent() -> str:
    """User-Agent header sent with HTTP requests."""
    return f"safefetch/{get_version()}"
