"""
Whole-file JSON writes with timestamped backups.

Every collection rewrite goes through write_json(): the previous file is
copied into the backups directory, the new content is written to a temp
file and moved over the original.
"""

from __future__ import annotations

import contextlib
import json
import os
import re
import shutil
import tempfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

DEFAULT_KEEP_COUNT = 20
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
BACKUP_NAME_PATTERN = re.compile(r"^(?P<stem>.+)_(?P<ts>\d{8}_\d{6})(?:_(?P<seq>\d+))?\.json$")


@dataclass
class BackupInfo:
    """A single backup of a collection or config file."""

    path: Path
    timestamp: datetime
    size_bytes: int
    stem: str
    sequence: int = 0  # counter suffix of same-second backups

    @property
    def age_days(self) -> float:
        return (datetime.now() - self.timestamp).total_seconds() / 86400


def _backup_target(file_path: Path, backup_dir: Path) -> Path:
    # Several writes can land within the same second; suffix a counter
    timestamp = datetime.now().strftime(TIMESTAMP_FORMAT)
    base = f"{file_path.stem}_{timestamp}"
    taken = [
        int(match.group("seq") or 0)
        for path in backup_dir.glob(f"{base}*{file_path.suffix}")
        if (match := BACKUP_NAME_PATTERN.match(path.name))
        and match.group("stem") == file_path.stem
        and match.group("ts") == timestamp
    ]
    if not taken:
        return backup_dir / f"{base}{file_path.suffix}"
    # Continue after the highest counter so pruned slots are never reused
    return backup_dir / f"{base}_{max(taken) + 1}{file_path.suffix}"


def create_backup(file_path: Path, backup_dir: Path | None = None) -> Path:
    """Copy a file into the backup directory under a timestamped name.

    Args:
        file_path: File to back up
        backup_dir: Target directory (defaults to file_path.parent / 'backups')

    Returns:
        Path to the backup copy

    Raises:
        FileNotFoundError: If file_path doesn't exist
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"Cannot back up non-existent file: {file_path}")

    backup_dir = Path(backup_dir) if backup_dir is not None else file_path.parent / "backups"
    backup_dir.mkdir(parents=True, exist_ok=True)

    backup_path = _backup_target(file_path, backup_dir)
    shutil.copy2(file_path, backup_path)
    return backup_path


def list_backups(backup_dir: Path, stem: str | None = None) -> list[BackupInfo]:
    """List backups, newest first.

    Args:
        backup_dir: Directory containing backups
        stem: Only include backups of this file stem (e.g. 'books')
    """
    backup_dir = Path(backup_dir)
    if not backup_dir.is_dir():
        return []

    backups = []
    for path in backup_dir.glob("*.json"):
        match = BACKUP_NAME_PATTERN.match(path.name)
        if not match:
            continue
        if stem is not None and match.group("stem") != stem:
            continue
        try:
            timestamp = datetime.strptime(match.group("ts"), TIMESTAMP_FORMAT)
        except ValueError:
            continue
        backups.append(
            BackupInfo(
                path=path,
                timestamp=timestamp,
                size_bytes=path.stat().st_size,
                stem=match.group("stem"),
                sequence=int(match.group("seq") or 0),
            )
        )

    return sorted(backups, key=lambda b: (b.timestamp, b.sequence), reverse=True)


def prune_backups(backup_dir: Path, stem: str, keep: int = DEFAULT_KEEP_COUNT) -> list[Path]:
    """Delete all but the newest `keep` backups of one file.

    Returns:
        Paths that were removed
    """
    removed = []
    for backup in list_backups(backup_dir, stem)[keep:]:
        backup.path.unlink()
        removed.append(backup.path)
    return removed


def restore_backup(file_path: Path, backup_dir: Path, index: int = 0) -> Path:
    """Replace a file with one of its backups.

    The current file is backed up first so a restore can itself be undone.

    Args:
        file_path: File to restore
        backup_dir: Directory containing backups
        index: Which backup to restore (0 = most recent)

    Returns:
        Path of the backup that was restored

    Raises:
        FileNotFoundError: If there is no backup at that index
    """
    file_path = Path(file_path)
    backups = list_backups(backup_dir, file_path.stem)
    if not backups:
        raise FileNotFoundError(f"No backups found for {file_path.name}")
    if index >= len(backups):
        raise FileNotFoundError(
            f"Backup index {index} out of range (only {len(backups)} backups of {file_path.name})"
        )

    chosen = backups[index]
    if file_path.exists():
        create_backup(file_path, backup_dir)
    shutil.copy2(chosen.path, file_path)
    return chosen.path


def write_json(
    file_path: Path,
    data: dict[str, Any] | list[Any],
    backup: bool = True,
    backup_dir: Path | None = None,
    keep_backups: int = DEFAULT_KEEP_COUNT,
    indent: int = 2,
) -> Path | None:
    """Rewrite a JSON file in full.

    Args:
        file_path: JSON file to write
        data: Object or array to serialize
        backup: Back up the existing file before replacing it
        backup_dir: Backup directory (defaults to file_path.parent / 'backups')
        keep_backups: Backups of this file to retain after the write
        indent: JSON indentation

    Returns:
        Path to the backup that was created, if any

    Raises:
        ValueError: If data cannot be serialized to JSON
        OSError: If the write fails
    """
    file_path = Path(file_path)
    backup_path = None

    try:
        text = json.dumps(data, indent=indent, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Cannot serialize data to JSON: {e}") from e

    if backup and file_path.exists():
        actual_dir = Path(backup_dir) if backup_dir is not None else file_path.parent / "backups"
        backup_path = create_backup(file_path, actual_dir)
        prune_backups(actual_dir, file_path.stem, keep_backups)

    temp_fd, temp_path = tempfile.mkstemp(
        suffix=".json",
        prefix=f".{file_path.name}.",
        dir=file_path.parent,
        text=True,
    )
    try:
        with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
            f.write(text)
            f.write("\n")
            f.flush()
            os.fsync(f.fileno())
        Path(temp_path).replace(file_path)
    except Exception as e:
        with contextlib.suppress(OSError):
            Path(temp_path).unlink()
        raise OSError(f"Failed to write {file_path}: {e}") from e

    return backup_path
