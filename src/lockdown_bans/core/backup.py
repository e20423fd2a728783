"""Single-file backup of the ban list taken before each change.

The backup sits next to the save as ``Save_BanList.bak`` and is overwritten
by every mutating command, so ``revert`` undoes the most recent change.
"""

import re
import shutil
from pathlib import Path
from typing import Optional

from .errors import BackupError
from ..logging_config import get_logger

logger = get_logger("backup")

_SAV_SUFFIX = re.compile(r"\.sav$", re.IGNORECASE)


def backup_path_for(save_path: Path) -> Path:
    """Get the .bak path that belongs to a save file.

    Save_BanList.sav -> Save_BanList.bak; other names get .bak appended.
    """
    name = save_path.name
    if _SAV_SUFFIX.search(name):
        return save_path.with_name(_SAV_SUFFIX.sub(".bak", name))
    return save_path.with_name(f"{name}.bak")


def ensure_backup(save_path: Path) -> Optional[Path]:
    """Copy the save file to its .bak before it is modified.

    A missing save file or a failed copy does not stop the caller; the
    problem is logged and None is returned.

    Args:
        save_path: Path to Save_BanList.sav

    Returns:
        Path to the backup, or None if no backup was written
    """
    if not save_path.exists():
        logger.warning("Original file not found, no backup created: %s", save_path)
        return None

    bak_path = backup_path_for(save_path)
    try:
        shutil.copy2(save_path, bak_path)
    except OSError as e:
        logger.warning("Could not create backup %s: %s", bak_path, e)
        return None

    logger.info("Backup created: %s", bak_path)
    return bak_path


def revert_from_backup(save_path: Path) -> Path:
    """Restore the save file from its .bak.

    Args:
        save_path: Path to Save_BanList.sav

    Returns:
        Path of the backup that was restored

    Raises:
        BackupError: If there is no backup or it cannot be copied
    """
    bak_path = backup_path_for(save_path)
    if not bak_path.exists():
        raise BackupError("No backup file (.bak) found to revert from.")

    try:
        shutil.copy2(bak_path, save_path)
    except OSError as e:
        logger.error(f"Failed to revert from backup: {e}")
        raise BackupError(f"Error reverting from backup: {e}") from e

    logger.info("Reverted %s from %s", save_path, bak_path)
    return bak_path
