"""Configuration, reporting and progress helpers."""
