"""Read and update the ban list stored in Save_BanList.sav.

Every operation re-reads the file, locates the identifier array, and (for
writes) splices the new array back and writes the whole file. Nothing parsed
is kept between calls, so a file changed by the game in the meantime is
always picked up.

The functions are not safe to call concurrently on the same file: there is
no locking between the read and the write. Callers serialize requests.
"""

from pathlib import Path
from typing import Iterable

from .errors import BanListError
from .extractor import extract_identifiers
from .locator import scan_anchors
from .mutator import build_updated_buffer
from .recovery import ParsedBanList, recover
from ..logging_config import get_logger

logger = get_logger("ban_list")


def parse_buffer(buffer: bytes) -> ParsedBanList:
    """Decode the ban list from raw save data.

    Args:
        buffer: Complete save file contents

    Returns:
        ParsedBanList with the identifiers and, if known, the array region

    Raises:
        BanListError: INVALID_FILE_FORMAT if neither the anchors nor any
            recovery strategy locate the list
    """
    if not buffer:
        return ParsedBanList(identifiers=[], region=None, strategy="empty")

    scan = scan_anchors(buffer)
    region = scan.region
    if region is not None:
        return ParsedBanList(
            identifiers=extract_identifiers(region.records(buffer)),
            region=region,
            strategy="anchored",
        )

    recovered = recover(buffer, scan)
    if recovered is not None:
        return recovered

    raise BanListError.invalid_format(
        "An error occurred parsing the GVAS ban list file. Did not find expected pattern "
        f"(buffer length {len(buffer)}, start anchor at {scan.start_idx}, "
        f"end anchor at {scan.end_idx})."
    )


def merge_identifiers(current: Iterable[str], additions: Iterable[str]) -> list[str]:
    """Union of two identifier sequences, first occurrence order kept."""
    return list(dict.fromkeys([*current, *additions]))


class BanListFile:
    """A Save_BanList.sav file on disk.

    Holds only the path; every method reads the file again.
    """

    def __init__(self, file_path: Path):
        self.file_path = Path(file_path)

    def _check_access(self, mode: str) -> None:
        """Raise FILE_NOT_FOUND / FILE_NOT_ACCESSIBLE before any parsing."""
        if not self.file_path.exists():
            raise BanListError.not_found(self.file_path)

        try:
            with open(self.file_path, mode):
                pass
        except OSError as e:
            raise BanListError.not_accessible(self.file_path, e) from e

    def _read(self) -> bytes:
        try:
            with open(self.file_path, "rb") as f:
                return f.read()
        except OSError as e:
            raise BanListError.not_accessible(self.file_path, e) from e

    def _write(self, data: bytes) -> None:
        try:
            with open(self.file_path, "wb") as f:
                f.write(data)
        except OSError as e:
            raise BanListError.not_accessible(self.file_path, e) from e

    def _load(self, writable: bool) -> tuple[bytes, ParsedBanList]:
        self._check_access("r+b" if writable else "rb")
        buffer = self._read()
        return buffer, parse_buffer(buffer)

    def parse(self) -> ParsedBanList:
        """Read the file and decode the ban list.

        Returns:
            ParsedBanList for the current file contents
        """
        return self._load(writable=False)[1]

    def list_bans(self) -> list[str]:
        """Get the banned identifiers in file order."""
        return self.parse().identifiers

    def add_bans(self, identifiers: Iterable[str]) -> int:
        """Merge identifiers into the ban list.

        Identifiers are not validated here; callers check the Steam64 shape.

        Args:
            identifiers: Identifiers to ban

        Returns:
            Number of identifiers that were not already banned
        """
        identifiers = list(identifiers)
        buffer, parsed = self._load(writable=True)
        current = merge_identifiers(parsed.identifiers, [])
        updated = merge_identifiers(current, identifiers)
        added = len(updated) - len(current)

        self._store(buffer, parsed, updated)
        logger.info("Added %d of %d identifiers to %s", added, len(identifiers), self.file_path)
        return added

    def remove_ban(self, identifier: str) -> int:
        """Remove an identifier from the ban list.

        Args:
            identifier: Identifier to unban (exact match)

        Returns:
            1 if the identifier was banned, 0 otherwise
        """
        buffer, parsed = self._load(writable=True)
        current = merge_identifiers(parsed.identifiers, [])
        if identifier not in current:
            logger.info("%s is not banned in %s", identifier, self.file_path)
            return 0

        updated = [existing for existing in current if existing != identifier]
        self._store(buffer, parsed, updated)
        logger.info("Removed %s from %s", identifier, self.file_path)
        return 1

    def _store(self, buffer: bytes, parsed: ParsedBanList, updated: list[str]) -> None:
        """Write ``updated`` back unless it matches what is on disk."""
        if updated == parsed.identifiers:
            logger.debug("Ban list unchanged, not rewriting %s", self.file_path)
            return

        if not parsed.writable:
            raise BanListError.invalid_format(
                f"Ban list in {self.file_path} was recovered by '{parsed.strategy}' "
                "without array bounds and cannot be rewritten."
            )

        self._write(build_updated_buffer(buffer, parsed.region, updated))


def list_bans(file_path: Path) -> list[str]:
    """Get the banned identifiers stored in a save file."""
    return BanListFile(file_path).list_bans()


def add_bans(file_path: Path, identifiers: Iterable[str]) -> int:
    """Add identifiers to a save file; returns the number newly banned."""
    return BanListFile(file_path).add_bans(identifiers)


def remove_ban(file_path: Path, identifier: str) -> int:
    """Remove an identifier from a save file; returns 0 or 1."""
    return BanListFile(file_path).remove_ban(identifier)

