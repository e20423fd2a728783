"""Default paths for the ban list save file and application data"""

import os
from pathlib import Path


def _appdata_dir() -> Path:
    # %APPDATA% only exists on Windows; use the XDG-style location elsewhere
    appdata = os.environ.get("APPDATA")
    if appdata:
        return Path(appdata)
    return Path.home() / ".config"


class AppPaths:
    """Default paths for the game save and application files.

    All paths use environment variable expansion for portability.
    """

    # Environment override for the ban list location
    SAVE_PATH_ENV = "LOCKDOWN_SAVE_PATH"

    # Ban list save file
    SAVE_DEFAULT = Path(os.path.expandvars(
        r"%LOCALAPPDATA%/LockdownProtocol/Saved/SaveGames/Save_BanList.sav"
    ))

    # Configuration file location
    CONFIG_DIR = _appdata_dir() / "LockdownBans"
    CONFIG_FILE = CONFIG_DIR / "configuration.xml"

    # Cached Steam persona names
    NAME_CACHE_FILE = CONFIG_DIR / "names-cache.json"

    LOG_FILE_NAME = "lockdown_bans.log"

    @classmethod
    def expand_path(cls, path_str: str) -> Path:
        """Expand environment variables and ~ in a path string.

        Args:
            path_str: Path string potentially containing environment variables

        Returns:
            Path object with expanded variables
        """
        return Path(os.path.expandvars(path_str)).expanduser()

    @classmethod
    def ensure_config_dir(cls) -> Path:
        """Ensure the configuration directory exists.

        Returns:
            Path to the configuration directory
        """
        cls.CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        return cls.CONFIG_DIR

    @classmethod
    def resolve_save_path(cls, explicit: Path | None = None, configured: Path | None = None) -> Path:
        """Pick the ban list file to operate on.

        Resolution order: explicit path, LOCKDOWN_SAVE_PATH, the configured
        path, then the default game location.

        Args:
            explicit: Path passed on the command line or by the caller
            configured: Path stored in the configuration file

        Returns:
            Path to the Save_BanList.sav file
        """
        if explicit is not None:
            return explicit

        from_env = os.environ.get(cls.SAVE_PATH_ENV, "").strip()
        if from_env:
            return cls.expand_path(from_env)

        if configured is not None:
            return configured

        return cls.SAVE_DEFAULT
