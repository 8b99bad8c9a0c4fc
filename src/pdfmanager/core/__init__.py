"""Core utilities for pdfmanager."""

from pdfmanager.core.backup import (
    DEFAULT_KEEP_COUNT,
    BackupInfo,
    create_backup,
    list_backups,
    restore_backup,
    write_json,
)
from pdfmanager.core.config import get_library_root, get_paths
from pdfmanager.core.records import Book, ClassNote, Kind, Slide
from pdfmanager.core.reporter import ConsoleReporter, Level, RecordingReporter
from pdfmanager.core.store import Store, StoreFormatError

__all__ = [
    # Backup
    "create_backup",
    "write_json",
    "list_backups",
    "restore_backup",
    "BackupInfo",
    "DEFAULT_KEEP_COUNT",
    # Config
    "get_library_root",
    "get_paths",
    # Records
    "Kind",
    "Book",
    "Slide",
    "ClassNote",
    # Reporting
    "Level",
    "ConsoleReporter",
    "RecordingReporter",
    # Store
    "Store",
    "StoreFormatError",
]
