"""Byte layout of the ban list array inside Save_BanList.sav.

The game stores banned players as a GVAS ArrayProperty of FStrings.
Every Steam64 ID is serialized as an int32 length (18) followed by 17
ASCII characters and a null terminator, so the bytes between two IDs are
always ``00 12 00 00 00``. The array header ends with the element count,
whose upper three (zero) bytes together with the first length prefix form
the start anchor.

    ... [alloc:int32 @ start-6] .. [count @ start-1] 00 00 00 | 12 00 00 00
    7656xxxxxxxxxxxxx 00 12 00 00 00 7656xxxxxxxxxxxxx ... 00 05 00 00 00 ...
"""

# Upper count bytes + first FString length (18)
START_ANCHOR = bytes([0x00, 0x00, 0x00, 0x12, 0x00, 0x00, 0x00])

# Null terminator of the last ID + length of the property that follows
END_ANCHOR = bytes([0x00, 0x05, 0x00, 0x00, 0x00])

# Null terminator + next FString length
DELIMITER = bytes([0x00, 0x12, 0x00, 0x00, 0x00])

IDENTIFIER_LENGTH = 17

# Offsets of the header fields, relative to the start anchor
COUNT_FIELD_OFFSET = -1
ALLOCATION_FIELD_OFFSET = -6

# Allocation size bookkeeping used by the engine: 4 + 18 bytes per element
# plus the int32 element count
ALLOCATION_STRIDE = 22
ALLOCATION_TRAILER = 4


def allocation_size(count: int) -> int:
    """Value the engine expects in the allocation field for ``count`` IDs."""
    return ALLOCATION_STRIDE * count + ALLOCATION_TRAILER
