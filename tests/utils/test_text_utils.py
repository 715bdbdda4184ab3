"""Tests for text utility functions"""
from datetime import date
from unittest.mock import patch

from safefetch.utils.text_utils import format_bytes, now_formatted


def test_format_bytes():
    """Test format_bytes utility function."""
    assert format_bytes(0) == "0.0 B"
    assert format_bytes(500) == "500.0 B"
    assert format_bytes(1024) == "1.0 KB"
    assert format_bytes(1500) == "1.5 KB"
    assert format_bytes(1024**2) == "1.0 MB"
    assert format_bytes(1.2 * 1024**3) == "1.2 GB"
    assert format_bytes(1024**4) == "1.0 TB"


def test_now_formatted_explicit_date():
    assert now_formatted(date(2024, 3, 7)) == "20240307"


def test_now_formatted_today():
    with patch('safefetch.utils.text_utils.date') as mock_date:
        mock_date.today.return_value = date(2023, 12, 31)
        assert now_formatted() == "20231231"
