"""Tests for version lookup"""
from importlib import metadata
from unittest.mock import patch

import safefetch
from safefetch.core.version import default_user_agent, get_version


def test_get_version_from_metadata():
    with patch('importlib.metadata.version', return_value="2.0.1") as mock_version:
        assert get_version() == "2.0.1"
    mock_version.assert_called_once_with("safefetch")


def test_get_version_falls_back_when_not_installed():
    with patch('importlib.metadata.version', side_effect=metadata.PackageNotFoundError("safefetch")):
        assert get_version() == safefetch.__version__


def test_default_user_agent():
    with patch('safefetch.core.version.get_version', return_value="1.2.3"):
        assert default_user_agent() == "safefetch/1.2.3"
