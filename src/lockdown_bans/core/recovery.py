"""Fallback recovery for save files that deviate from the canonical layout.

Each strategy takes the raw buffer and the result of the primary anchor
scan and returns either a ParsedBanList or None when it does not apply.
Strategies run in the order of RECOVERY_STRATEGIES; the first result wins.

Anchor-based strategies yield an ArrayRegion, so the recovered list can
still be rewritten. Heuristic strategies only find Steam64-shaped text and
return a read-only result (``region`` is None).
"""

import re
from dataclasses import dataclass
from typing import Callable, Optional

from .extractor import extract_identifiers
from .layout import END_ANCHOR, START_ANCHOR
from .locator import AnchorScan, ArrayRegion, find_pattern_reverse
from ..logging_config import get_logger

logger = get_logger("recovery")

# Shorter start anchors, tried when the count no longer fits in one byte and
# spills into the leading zero padding of the canonical anchor
START_ANCHOR_VARIANTS = (
    bytes([0x00, 0x00, 0x12, 0x00, 0x00, 0x00]),
)

# Bytes inspected in front of the end anchor by the windowed scan
SCAN_WINDOW = 500

# Property name stored in front of the ban list array
FIELD_MARKER = b"BannedPlayers"

STEAM64_BYTES = re.compile(rb"7656\d{13}")


@dataclass(frozen=True)
class ParsedBanList:
    """Identifiers read from a save buffer.

    Attributes:
        identifiers: Identifiers in file order
        region: Array bounds, or None when recovered heuristically
        strategy: Name of the strategy that produced the result
    """
    identifiers: list[str]
    region: Optional[ArrayRegion]
    strategy: str

    @property
    def writable(self) -> bool:
        return self.region is not None


RecoveryStrategy = Callable[[bytes, AnchorScan], Optional[ParsedBanList]]


def _from_region(buffer: bytes, region: ArrayRegion, strategy: str) -> ParsedBanList:
    return ParsedBanList(
        identifiers=extract_identifiers(region.records(buffer)),
        region=region,
        strategy=strategy,
    )


def _scan_identifiers(data: bytes) -> list[str]:
    # Leftmost non-overlapping matches: a hit consumes all 17 bytes, a miss
    # moves the window on by one byte
    return [match.group().decode("ascii") for match in STEAM64_BYTES.finditer(data)]


def forward_anchored_scan(buffer: bytes, scan: AnchorScan) -> Optional[ParsedBanList]:
    """First start anchor in the file, then the first end anchor after it."""
    start_idx = buffer.find(START_ANCHOR)
    if start_idx == -1:
        return None

    end_idx = buffer.find(END_ANCHOR, start_idx + len(START_ANCHOR))
    if end_idx == -1:
        return None

    return _from_region(buffer, ArrayRegion(start_idx, end_idx), "forward_anchored")


def alternate_start_anchor_scan(buffer: bytes, scan: AnchorScan) -> Optional[ParsedBanList]:
    """Retry the backward start-anchor search with shorter anchor variants.

    A variant match is normalized to where the canonical anchor would begin,
    so header offsets and the record slice stay the same.
    """
    if scan.end_idx == -1:
        return None

    for variant in START_ANCHOR_VARIANTS:
        variant_idx = find_pattern_reverse(buffer, variant, scan.end_idx - 1)
        if variant_idx == -1:
            continue

        padding = len(START_ANCHOR) - len(variant)
        if variant_idx < padding:
            # No room for the spilled count byte in front of the match
            continue
        region = ArrayRegion(variant_idx - padding, scan.end_idx)
        if region.data_start > region.end_idx:
            continue

        return _from_region(buffer, region, "alternate_start_anchor")

    return None


def windowed_identifier_scan(buffer: bytes, scan: AnchorScan) -> Optional[ParsedBanList]:
    """Look for Steam64-shaped text just in front of the end anchor."""
    if scan.end_idx == -1 or scan.start_idx != -1:
        return None

    window = buffer[max(0, scan.end_idx - SCAN_WINDOW):scan.end_idx]
    identifiers = _scan_identifiers(window)
    if not identifiers:
        return None

    return ParsedBanList(identifiers=identifiers, region=None, strategy="windowed")


def marker_identifier_scan(buffer: bytes, scan: AnchorScan) -> Optional[ParsedBanList]:
    """Look for Steam64-shaped text after the ban list property name."""
    marker_idx = buffer.find(FIELD_MARKER)
    if marker_idx == -1:
        return None

    identifiers = _scan_identifiers(buffer[marker_idx + len(FIELD_MARKER):])
    if not identifiers:
        return None

    return ParsedBanList(identifiers=identifiers, region=None, strategy="marker")


RECOVERY_STRATEGIES: tuple[RecoveryStrategy, ...] = (
    forward_anchored_scan,
    alternate_start_anchor_scan,
    windowed_identifier_scan,
    marker_identifier_scan,
)


def recover(
    buffer: bytes,
    scan: AnchorScan,
    strategies: tuple[RecoveryStrategy, ...] = RECOVERY_STRATEGIES,
) -> Optional[ParsedBanList]:
    """Run the recovery strategies in order.

    Args:
        buffer: Raw save data
        scan: Result of the primary anchor search
        strategies: Strategies to try, highest priority first

    Returns:
        The first strategy result, or None if every strategy failed
    """
    for strategy in strategies:
        result = strategy(buffer, scan)
        if result is not None:
            logger.warning(
                "Canonical ban list layout not found; recovered %d IDs with %s",
                len(result.identifiers), result.strategy,
            )
            return result
        logger.debug("Recovery strategy %s not applicable", strategy.__name__)
    return None
