"""Filesystem walking helpers."""
