"""Shared fixtures: synthetic Save_BanList.sav buffers and isolated app paths."""
from __future__ import annotations

import struct
from pathlib import Path

import pytest

from lockdown_bans.config.paths import AppPaths
from lockdown_bans.core.layout import DELIMITER, END_ANCHOR, START_ANCHOR

ID1 = "76561198000000001"
ID2 = "76561198000000002"
ID3 = "76561198000000003"

# Non-zero filler so no anchor can match inside the surrounding "GVAS" data
PREFIX = b"GVAS\x02\x03\x04" + b"BanListProp\x01ArrayProperty\x01StrProperty\x01"
SUFFIX = b"\x01\x02\x03NextProperty\x04None\x01"


def build_save(
    identifiers: list[str],
    prefix: bytes = PREFIX,
    suffix: bytes = SUFFIX,
    count: int | None = None,
) -> bytes:
    """Build a save buffer with a canonical header in front of the array.

    Layout: prefix, int32 allocation, pad byte, count byte, start anchor,
    records, end anchor, suffix.
    """
    if count is None:
        count = len(identifiers)
    records = DELIMITER.join(identifier.encode("ascii") for identifier in identifiers)
    return (
        prefix
        + struct.pack("<i", 22 * count + 4)
        + b"\x00"
        + bytes([count & 0xFF])
        + START_ANCHOR
        + records
        + END_ANCHOR
        + suffix
    )


def start_offset(prefix: bytes = PREFIX) -> int:
    """Offset of the start anchor in a buffer made by build_save."""
    return len(prefix) + 6


def steam_ids(count: int, base: int = 76561198000000000) -> list[str]:
    return [str(base + i) for i in range(1, count + 1)]


@pytest.fixture(autouse=True)
def isolated_paths(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point config, cache, and log files at a temporary directory."""
    config_dir = tmp_path / "config"
    monkeypatch.setattr(AppPaths, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(AppPaths, "CONFIG_FILE", config_dir / "configuration.xml")
    monkeypatch.setattr(AppPaths, "NAME_CACHE_FILE", config_dir / "names-cache.json")
    monkeypatch.setattr(AppPaths, "SAVE_DEFAULT", tmp_path / "missing" / "Save_BanList.sav")
    for name in (AppPaths.SAVE_PATH_ENV, "STEAM_API_KEY", "FAST_LIST"):
        monkeypatch.delenv(name, raising=False)
    return config_dir


@pytest.fixture
def save_file(tmp_path: Path) -> Path:
    """A canonical ban list holding ID1 and ID2."""
    path = tmp_path / "Save_BanList.sav"
    path.write_bytes(build_save([ID1, ID2]))
    return path
