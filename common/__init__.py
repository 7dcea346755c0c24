"""Shared infrastructure for the folder audit tools."""
