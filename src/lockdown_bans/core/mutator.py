"""Re-serialize the identifier array and patch the array header.

The header holds two derived fields in front of the start anchor:

- the element count, of which only the low byte is rewritten
- the allocation size, an int32 computed as ``22 * count + 4``

The allocation formula assumes every element carries a trailing delimiter
even though the last one does not. It mirrors what the game writes and is
kept verbatim.
"""

import struct

from .layout import (
    ALLOCATION_FIELD_OFFSET,
    COUNT_FIELD_OFFSET,
    DELIMITER,
    allocation_size,
)
from .locator import ArrayRegion
from ..logging_config import get_logger

logger = get_logger("mutator")

MAX_COUNT_BYTE = 0xFF


def serialize_identifiers(identifiers: list[str]) -> bytes:
    """Join identifiers with the delimiter (none before the first or after the last)."""
    return DELIMITER.join(identifier.encode("utf-8") for identifier in identifiers)


def patch_header(buffer: bytearray, region: ArrayRegion, count: int) -> None:
    """Write the count and allocation fields for ``count`` records in place.

    Fields whose offset falls before the start of the buffer are skipped.

    Args:
        buffer: Spliced save data
        region: Region the records were spliced into
        count: Number of records now stored
    """
    count_offset = region.start_idx + COUNT_FIELD_OFFSET
    if count_offset >= 0:
        if count > MAX_COUNT_BYTE:
            # Only one byte is rewritten; the engine sees count mod 256
            logger.warning(
                "Ban list holds %d entries; count byte wraps to %d",
                count, count & MAX_COUNT_BYTE,
            )
        buffer[count_offset] = count & MAX_COUNT_BYTE
    else:
        logger.debug("Count field offset %d outside buffer, not patched", count_offset)

    allocation_offset = region.start_idx + ALLOCATION_FIELD_OFFSET
    if allocation_offset >= 0:
        struct.pack_into("<i", buffer, allocation_offset, allocation_size(count))
    else:
        logger.debug("Allocation field offset %d outside buffer, not patched", allocation_offset)


def build_updated_buffer(buffer: bytes, region: ArrayRegion, identifiers: list[str]) -> bytes:
    """Splice a new identifier list into a save buffer.

    Args:
        buffer: Original save data
        region: Array bounds located in ``buffer``
        identifiers: Ordered, de-duplicated identifiers to store

    Returns:
        The complete new file contents
    """
    records = serialize_identifiers(identifiers)

    updated = bytearray()
    updated += buffer[:region.data_start]
    updated += records
    updated += buffer[region.end_idx:]

    patch_header(updated, region, len(identifiers))
    return bytes(updated)
