"""Locate the banned players array inside a raw save buffer.

The save file is never parsed as a whole. Instead the array is bounded by
two anchor byte sequences, both searched backward from the end of the file
so that the occurrence nearest to the end wins when a pattern repeats.
"""

from dataclasses import dataclass
from typing import Optional

from .layout import END_ANCHOR, START_ANCHOR
from ..logging_config import get_logger

logger = get_logger("locator")


@dataclass(frozen=True)
class ArrayRegion:
    """Bounds of the identifier array within a save buffer.

    ``start_idx`` is the offset of the start anchor and ``end_idx`` the offset
    of the end anchor. Header fields are addressed relative to ``start_idx``.
    """
    start_idx: int
    end_idx: int

    @property
    def data_start(self) -> int:
        """Offset of the first record byte (just past the start anchor)."""
        return self.start_idx + len(START_ANCHOR)

    def records(self, buffer: bytes) -> bytes:
        """Slice strictly between the two anchors."""
        return buffer[self.data_start:self.end_idx]


@dataclass(frozen=True)
class AnchorScan:
    """Offsets found by the primary backward search (-1 when missing)."""
    end_idx: int
    start_idx: int

    @property
    def region(self) -> Optional[ArrayRegion]:
        """The array region, or None if the anchors are missing or out of order."""
        if self.end_idx == -1 or self.start_idx == -1:
            return None
        region = ArrayRegion(self.start_idx, self.end_idx)
        if region.data_start > region.end_idx:
            return None
        return region


def find_pattern_reverse(buffer: bytes, pattern: bytes, start_index: Optional[int] = None) -> int:
    """Search backward for a byte pattern.

    Args:
        buffer: Raw save data
        pattern: Byte sequence to find
        start_index: Highest offset to test; defaults to the last offset
            where the whole pattern still fits

    Returns:
        Offset of the match nearest to ``start_index``, or -1 if not found
    """
    if start_index is None:
        start_index = len(buffer) - len(pattern)

    size = len(pattern)
    for i in range(start_index, -1, -1):
        if buffer[i:i + size] == pattern:
            return i
    return -1


def scan_anchors(buffer: bytes, start_anchor: bytes = START_ANCHOR) -> AnchorScan:
    """Run the primary anchor search.

    The end anchor is located first; the start anchor is then searched
    backward from just before it.

    Args:
        buffer: Raw save data
        start_anchor: Start anchor pattern to look for

    Returns:
        AnchorScan with the offsets found
    """
    end_idx = find_pattern_reverse(buffer, END_ANCHOR)
    if end_idx == -1:
        start_idx = -1
    else:
        start_idx = find_pattern_reverse(buffer, start_anchor, end_idx - 1)

    logger.debug("Anchor scan: start=%d end=%d (buffer %d bytes)", start_idx, end_idx, len(buffer))
    return AnchorScan(end_idx=end_idx, start_idx=start_idx)


def locate_region(buffer: bytes) -> Optional[ArrayRegion]:
    """Find the bounds of the identifier array.

    Args:
        buffer: Raw save data

    Returns:
        ArrayRegion, or None when the canonical layout is not present
    """
    return scan_anchors(buffer).region
