"""Tests for lockdown_bans.core.ban_list (list / add / remove on disk)."""
from __future__ import annotations

import os
import struct
import sys
from pathlib import Path

import pytest

from conftest import ID1, ID2, ID3, build_save, start_offset, steam_ids
from lockdown_bans.core.ban_list import (
    BanListFile,
    add_bans,
    list_bans,
    merge_identifiers,
    parse_buffer,
    remove_ban,
)
from lockdown_bans.core.errors import BanListError, BanListErrorKind
from lockdown_bans.core.layout import DELIMITER, END_ANCHOR, START_ANCHOR
from lockdown_bans.core.recovery import FIELD_MARKER


def _write(tmp_path: Path, data: bytes, name: str = "Save_BanList.sav") -> Path:
    path = tmp_path / name
    path.write_bytes(data)
    return path


def _header(data: bytes) -> tuple[int, int]:
    s = start_offset()
    return data[s - 1], struct.unpack("<i", data[s - 6:s - 2])[0]


# ===========================================================================
# Scenarios on a bare start/records/end buffer
# ===========================================================================


class TestScenarios:
    @pytest.fixture
    def bare_file(self, tmp_path: Path) -> Path:
        data = START_ANCHOR + ID1.encode() + DELIMITER + ID2.encode() + END_ANCHOR
        return _write(tmp_path, data)

    def test_list(self, bare_file: Path) -> None:
        assert list_bans(bare_file) == [ID1, ID2]

    def test_add_then_remove(self, bare_file: Path) -> None:
        assert add_bans(bare_file, [ID3]) == 1
        listed = list_bans(bare_file)
        assert len(listed) == 3
        assert set(listed) == {ID1, ID2, ID3}

        assert remove_ban(bare_file, ID2) == 1
        listed = list_bans(bare_file)
        assert len(listed) == 2
        assert ID2 not in listed

    def test_remove_absent_leaves_file_untouched(self, bare_file: Path) -> None:
        before = bare_file.read_bytes()
        assert remove_ban(bare_file, "00000000000000000") == 0
        assert bare_file.read_bytes() == before

    def test_windowed_recovery(self, tmp_path: Path) -> None:
        data = b"\xab" * 100 + ID1.encode() + b"\xab" * 200 + ID2.encode() + b"\xab" * 166 + END_ANCHOR
        path = _write(tmp_path, data)
        assert list_bans(path) == [ID1, ID2]


# ===========================================================================
# Set semantics and header invariants
# ===========================================================================


class TestAdd:
    def test_union_without_duplicates(self, save_file: Path) -> None:
        added = add_bans(save_file, [ID2, ID3, ID3])
        assert added == 1
        assert list_bans(save_file) == [ID1, ID2, ID3]

    def test_header_matches_count(self, save_file: Path) -> None:
        add_bans(save_file, [ID3])
        assert _header(save_file.read_bytes()) == (3, 70)

    def test_result_matches_fresh_serialization(self, save_file: Path) -> None:
        add_bans(save_file, [ID3])
        assert save_file.read_bytes() == build_save([ID1, ID2, ID3])

    def test_nothing_new_does_not_write(self, save_file: Path) -> None:
        os.utime(save_file, (1_000_000, 1_000_000))
        assert add_bans(save_file, [ID1]) == 0
        assert save_file.stat().st_mtime == 1_000_000

    def test_duplicates_in_file_are_collapsed(self, tmp_path: Path) -> None:
        path = _write(tmp_path, build_save([ID1, ID1, ID2]))
        assert add_bans(path, [ID3]) == 1
        assert list_bans(path) == [ID1, ID2, ID3]
        assert _header(path.read_bytes()) == (3, 70)

    def test_many_ids_wrap_count_byte(self, save_file: Path) -> None:
        ids = steam_ids(300, base=76561199000000000)
        assert add_bans(save_file, ids) == 300
        count_byte, allocation = _header(save_file.read_bytes())
        assert count_byte == 302 % 256
        assert allocation == 22 * 302 + 4
        assert len(list_bans(save_file)) == 302

    def test_codec_does_not_validate_shape(self, save_file: Path) -> None:
        assert add_bans(save_file, ["ABCDEFGHIJKLMNOPQ"]) == 1
        assert list_bans(save_file)[-1] == "ABCDEFGHIJKLMNOPQ"


class TestRemove:
    def test_remove_present(self, save_file: Path) -> None:
        assert remove_ban(save_file, ID1) == 1
        assert list_bans(save_file) == [ID2]
        assert _header(save_file.read_bytes()) == (1, 26)

    def test_remove_is_idempotent(self, save_file: Path) -> None:
        assert remove_ban(save_file, ID1) == 1
        after_first = save_file.read_bytes()
        assert remove_ban(save_file, ID1) == 0
        assert save_file.read_bytes() == after_first

    def test_remove_last_then_add(self, tmp_path: Path) -> None:
        path = _write(tmp_path, build_save([ID1]))
        assert remove_ban(path, ID1) == 1
        assert list_bans(path) == []
        assert _header(path.read_bytes()) == (0, 4)

        assert add_bans(path, [ID2]) == 1
        assert list_bans(path) == [ID2]

    def test_exact_match_only(self, save_file: Path) -> None:
        assert remove_ban(save_file, ID1[:-1]) == 0
        assert remove_ban(save_file, f" {ID1}") == 0
        assert list_bans(save_file) == [ID1, ID2]


def test_merge_identifiers_keeps_first_occurrence() -> None:
    assert merge_identifiers([ID2, ID1], [ID1, ID3, ID2]) == [ID2, ID1, ID3]


# ===========================================================================
# Parsing edge cases
# ===========================================================================


class TestParseBuffer:
    def test_empty_buffer_is_empty_list(self) -> None:
        parsed = parse_buffer(b"")
        assert parsed.identifiers == []
        assert parsed.region is None

    def test_canonical_strategy(self) -> None:
        parsed = parse_buffer(build_save([ID1]))
        assert parsed.strategy == "anchored"
        assert parsed.region.start_idx == start_offset()

    def test_trailing_partial_record(self) -> None:
        data = START_ANCHOR + ID1.encode() + DELIMITER + b"76561" + END_ANCHOR
        assert parse_buffer(data).identifiers == [ID1]

    def test_unrecognized_buffer_raises(self) -> None:
        data = bytes(range(1, 200))
        with pytest.raises(BanListError) as exc_info:
            parse_buffer(data)
        assert exc_info.value.kind is BanListErrorKind.INVALID_FILE_FORMAT
        assert "buffer length 199" in exc_info.value.message
        assert "end anchor at -1" in exc_info.value.message

    def test_failure_message_reports_found_anchor(self) -> None:
        data = END_ANCHOR + b"\x01" + START_ANCHOR
        with pytest.raises(BanListError) as exc_info:
            parse_buffer(data)
        assert "end anchor at 0" in exc_info.value.message

    def test_marker_recovery(self) -> None:
        data = b"\x01" + FIELD_MARKER + b"\x00\x01" + ID1.encode()
        parsed = parse_buffer(data)
        assert parsed.identifiers == [ID1]
        assert parsed.strategy == "marker"


# ===========================================================================
# Preconditions and read-only recovery
# ===========================================================================


class TestErrors:
    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(BanListError) as exc_info:
            list_bans(tmp_path / "nope.sav")
        assert exc_info.value.kind is BanListErrorKind.FILE_NOT_FOUND

    def test_directory_is_not_accessible(self, tmp_path: Path) -> None:
        with pytest.raises(BanListError) as exc_info:
            list_bans(tmp_path)
        assert exc_info.value.kind is BanListErrorKind.FILE_NOT_ACCESSIBLE

    @pytest.mark.skipif(
        sys.platform == "win32" or (hasattr(os, "geteuid") and os.geteuid() == 0),
        reason="permission bits are not enforced",
    )
    def test_read_only_file_cannot_be_modified(self, save_file: Path) -> None:
        save_file.chmod(0o444)
        try:
            assert list_bans(save_file) == [ID1, ID2]
            with pytest.raises(BanListError) as exc_info:
                add_bans(save_file, [ID3])
            assert exc_info.value.kind is BanListErrorKind.FILE_NOT_ACCESSIBLE
        finally:
            save_file.chmod(0o644)

    def test_heuristic_result_is_read_only(self, tmp_path: Path) -> None:
        data = b"\xab" * 10 + ID1.encode() + END_ANCHOR
        path = _write(tmp_path, data)
        assert list_bans(path) == [ID1]

        with pytest.raises(BanListError) as exc_info:
            add_bans(path, [ID2])
        assert exc_info.value.kind is BanListErrorKind.INVALID_FILE_FORMAT
        assert path.read_bytes() == data

        # Removing something absent needs no write and still succeeds
        assert remove_ban(path, ID2) == 0

    def test_add_to_empty_file_fails(self, tmp_path: Path) -> None:
        path = _write(tmp_path, b"")
        assert list_bans(path) == []
        with pytest.raises(BanListError) as exc_info:
            add_bans(path, [ID1])
        assert exc_info.value.kind is BanListErrorKind.INVALID_FILE_FORMAT

    def test_state_is_not_cached(self, save_file: Path) -> None:
        ban_list = BanListFile(save_file)
        assert ban_list.list_bans() == [ID1, ID2]
        save_file.write_bytes(build_save([ID3]))
        assert ban_list.list_bans() == [ID3]
        assert ban_list.add_bans([ID1]) == 1
        assert ban_list.list_bans() == [ID3, ID1]
