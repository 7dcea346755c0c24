"""Folder audit workflows: file digests and file-name character audits."""

from .digest import export_digests  # noqa: F401
from .names import audit_folder, write_audit_reports  # noqa: F401

__all__ = ["export_digests", "audit_folder", "write_audit_reports"]
