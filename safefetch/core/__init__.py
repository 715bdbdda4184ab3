"""Core functionality for safefetch."""

from . import config
from . import platform
from . import download

__all__ = ['config', 'platform', 'download']
