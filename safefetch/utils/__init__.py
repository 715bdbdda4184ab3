"""Utility helpers: path guard, entry writer and archive decoders."""
