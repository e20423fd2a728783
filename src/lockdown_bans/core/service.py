"""High-level ban list operations used by the command line.

Wraps the save codec with Steam64 validation and a .bak backup before
every change.
"""

from pathlib import Path
from typing import Iterable, Optional

from .backup import ensure_backup, revert_from_backup
from .ban_list import BanListFile
from .errors import BanListError
from .identifiers import (
    decode_community_lines,
    format_export_content,
    is_steam64,
    normalize_identifiers,
    parse_import_content,
    validate_steam_id,
)
from ..logging_config import get_logger

logger = get_logger("service")


class BanListService:
    """Validated, backed-up access to one Save_BanList.sav file.

    Calls must not overlap for the same file; each one reads and rewrites
    the whole save.
    """

    def __init__(self, save_path: Path, create_backups: bool = True):
        self.save_path = Path(save_path)
        self.create_backups = create_backups
        self.ban_list = BanListFile(self.save_path)

    def _backup(self) -> Optional[Path]:
        if not self.create_backups:
            return None
        return ensure_backup(self.save_path)

    def list_bans(self) -> list[str]:
        """Get the banned Steam64 IDs."""
        return self.ban_list.list_bans()

    def add_ban(self, steam_id: str) -> int:
        """Ban one player.

        Raises:
            InvalidSteamIdError: If the ID is not Steam64-shaped

        Returns:
            1 if the player was added, 0 if already banned
        """
        validate_steam_id(steam_id)
        self._backup()
        return self.ban_list.add_bans([steam_id])

    def add_many(self, steam_ids: Iterable[str]) -> int:
        """Ban every valid ID in a list, ignoring blanks and malformed IDs.

        Returns:
            Number of players newly banned (0 if no ID was valid)
        """
        ids = normalize_identifiers(steam_ids)
        valid = [steam_id for steam_id in ids if is_steam64(steam_id)]
        if len(valid) < len(ids):
            logger.info("Ignoring %d malformed IDs", len(ids) - len(valid))
        if not valid:
            return 0

        self._backup()
        return self.ban_list.add_bans(valid)

    def remove_ban(self, steam_id: str) -> int:
        """Unban one player.

        Raises:
            InvalidSteamIdError: If the ID is not Steam64-shaped

        Returns:
            1 if the player was removed, 0 if not banned
        """
        validate_steam_id(steam_id)
        self._backup()
        return self.ban_list.remove_ban(steam_id)

    def import_file(self, import_path: Path) -> int:
        """Ban every ID found in an exported text or JSON ban list.

        Raises:
            BanListError: UNKNOWN if the file is not UTF-8 text
        """
        try:
            content = Path(import_path).read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise BanListError.unknown(f"Cannot read {import_path} as UTF-8 text: {e}") from e
        return self.add_many(parse_import_content(content))

    def export_file(self, export_path: Path) -> int:
        """Write the ban list to a file (JSON when the name ends in .json).

        Returns:
            Number of IDs exported
        """
        export_path = Path(export_path)
        ids = self.list_bans()
        content = format_export_content(ids, as_json=export_path.suffix.lower() == ".json")
        export_path.parent.mkdir(parents=True, exist_ok=True)
        export_path.write_text(content, encoding="utf-8")
        logger.info("Exported %d IDs to %s", len(ids), export_path)
        return len(ids)

    def add_community(self, text: str) -> tuple[int, int]:
        """Merge a community ban list of base64-encoded lines.

        Returns:
            Tuple of (IDs found in the list, players newly banned)
        """
        ids = decode_community_lines(text)
        return len(ids), self.add_many(ids)

    def revert(self) -> Path:
        """Restore the save file from the backup taken before the last change."""
        return revert_from_backup(self.save_path)
