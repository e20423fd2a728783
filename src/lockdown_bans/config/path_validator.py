"""Path validation utilities to prevent dangerous file operations.

Provides validation for paths the ban list tools read from or write to:
- Operations on protected system directories
- Save paths that point at directories instead of files
"""

import os
from pathlib import Path

from ..logging_config import get_logger

logger = get_logger("path_validator")

# Protected Windows system directories that should never be modified
PROTECTED_DIRECTORIES = [
    "C:\\Windows",
    "C:\\Program Files",
    "C:\\Program Files (x86)",
    "C:\\ProgramData",
    "C:\\$Recycle.Bin",
    "C:\\System Volume Information",
]

# Additional protected paths based on environment variables
PROTECTED_ENV_PATHS = [
    "WINDIR",
    "SYSTEMROOT",
    "PROGRAMFILES",
    "PROGRAMFILES(X86)",
    "PROGRAMDATA",
]


def _get_protected_paths() -> set[Path]:
    """Build the set of protected paths including environment-based ones."""
    protected = set()

    if os.name == "nt":
        for dir_path in PROTECTED_DIRECTORIES:
            try:
                protected.add(Path(dir_path).resolve())
            except (OSError, ValueError):
                pass

    for env_var in PROTECTED_ENV_PATHS:
        env_value = os.environ.get(env_var)
        if env_value:
            try:
                protected.add(Path(env_value).resolve())
            except (OSError, ValueError):
                pass

    return protected


def is_safe_path(path: Path) -> bool:
    """Check if a path is safe for file operations.

    Args:
        path: The path to validate

    Returns:
        True if the path is outside every protected directory
    """
    try:
        resolved = path.resolve()
    except (OSError, ValueError) as e:
        logger.warning("Failed to resolve path %s: %s", path, e)
        return False

    for protected_path in _get_protected_paths():
        if resolved == protected_path or protected_path in resolved.parents:
            logger.warning("Path %s is in protected directory %s", path, protected_path)
            return False

    return True


def validate_save_path(save_path: Path) -> tuple[bool, str]:
    """Validate a ban list save path before storing it in the configuration.

    Args:
        save_path: The save path to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not save_path or not str(save_path).strip():
        return False, "Save path is empty"

    try:
        resolved = save_path.resolve()
    except (OSError, ValueError) as e:
        return False, f"Invalid path: {e}"

    if resolved.is_dir():
        return False, "Save path is a directory, expected Save_BanList.sav"

    if not is_safe_path(save_path):
        return False, "Path is in a protected system directory"

    return True, ""
