"""
Persistence module for CSV import/export and backups.
"""

from .file_operations import FileOperationService, ImportResult

__all__ = [
    "FileOperationService",
    "ImportResult",
]
