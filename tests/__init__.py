"""Test suite for the safefetch project.

This package contains all tests for safefetch, organized by module:
- core/: Tests for fetching, configuration and host information
- utils/: Tests for the path guard, entry writer and archive decoders
"""
