# ABOUTME: Backup utilities for target configuration files.
# ABOUTME: Handles timestamped backups with automatic retention cleanup (keep last 5 per target).
import logging
import re
import shutil
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)

# ABOUTME: Pattern matches: {label}_{YYYYMMDD}_{HHMMSS}_{micro}{suffix}
BACKUP_PATTERN = re.compile(r"^(.+?)_(\d{8}_\d{6}_\d{6})(\..+)?$")

MAX_BACKUPS_PER_LABEL = 5


def create_backup(source_path: Path, backup_dir: Path, label: str) -> Path:
    """Create a timestamped backup of a file.

    ABOUTME: Backup format: {label}_{YYYYMMDD}_{HHMMSS}_{ffffff}{suffix}
    ABOUTME: Uses shutil.copy2() to preserve file metadata
    ABOUTME: Creates backup_dir if it doesn't exist

    Args:
        source_path: Path to file to backup
        backup_dir: Directory where backup should be created
        label: Prefix identifying the file, usually the target id

    Returns:
        Path to created backup file

    Raises:
        FileNotFoundError: If source_path doesn't exist
        OSError: If backup creation fails

    Examples:
        >>> create_backup(Path("~/.claude.json").expanduser(), backup_dir, "claude").name
        'claude_20260108_143022_000123.json'
    """
    if not source_path.exists():
        raise FileNotFoundError(f"Source file not found: {source_path}")

    backup_dir.mkdir(parents=True, exist_ok=True)

    # Microseconds keep two exports in the same second apart
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    backup_path = backup_dir / f"{label}_{timestamp}{source_path.suffix}"

    shutil.copy2(source_path, backup_path)
    logger.debug(f"Backed up {source_path} to {backup_path}")

    cleanup_old_backups(backup_dir)

    return backup_path


def cleanup_old_backups(backup_dir: Path, max_backups_per_label: int = MAX_BACKUPS_PER_LABEL) -> list[Path]:
    """Remove old backup files, keeping only the most recent per label.

    ABOUTME: Groups backups by label prefix (before _timestamp)
    ABOUTME: Sorts by timestamp descending (newest first)
    ABOUTME: Logs warnings on errors but does not raise exceptions

    Returns:
        List of paths that were deleted
    """
    deleted_files: list[Path] = []

    if not backup_dir.exists():
        return deleted_files

    backups_by_label: dict[str, list[tuple[str, Path]]] = {}

    for file_path in backup_dir.iterdir():
        if not file_path.is_file():
            continue

        match = BACKUP_PATTERN.match(file_path.name)
        if not match:
            continue

        backups_by_label.setdefault(match.group(1), []).append((match.group(2), file_path))

    for backups in backups_by_label.values():
        backups.sort(key=lambda x: x[0], reverse=True)

        for _, file_path in backups[max_backups_per_label:]:
            try:
                file_path.unlink()
                deleted_files.append(file_path)
                logger.debug(f"Deleted old backup: {file_path}")
            except OSError as e:
                logger.warning(f"Failed to delete old backup {file_path}: {e}")

    return deleted_files
