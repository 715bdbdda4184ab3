"""Text utility functions for safefetch"""
from datetime import date
from typing import Optional


def format_bytes(size: float) -> str:
    """Convert bytes to human-readable format."""
    power = 2**10
    for unit in ("B", "KB", "MB", "GB", "TB"):
        if size < power:
            return f"{size:.1f} {unit}"
        size /= power
    return f"{size:.1f} TB"  # Handle values larger than TB


def now_formatted(today: Optional[date] = None) -> str:
    """Return a date stamp as yyyyMMdd, e.g. for snapshot suffixes."""
    return (today or date.today()).strftime("%Y%m%d")
