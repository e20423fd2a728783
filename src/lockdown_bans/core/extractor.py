"""Split the array region into records and decode the identifiers."""

from .layout import DELIMITER, IDENTIFIER_LENGTH


def split_on_delimiter(data: bytes, delimiter: bytes = DELIMITER) -> list[bytes]:
    """Split a byte slice on every occurrence of a delimiter.

    The chunk after the last delimiter is always included, even when empty.
    """
    parts = []
    start = 0

    while True:
        index = data.find(delimiter, start)
        if index == -1:
            break
        parts.append(data[start:index])
        start = index + len(delimiter)

    parts.append(data[start:])
    return parts


def decode_record(record: bytes) -> str | None:
    """Decode the identifier at the front of a record.

    Returns:
        The identifier, or None for records shorter than an identifier
    """
    if len(record) < IDENTIFIER_LENGTH:
        return None
    return record[:IDENTIFIER_LENGTH].decode("utf-8", errors="replace")


def extract_identifiers(data: bytes) -> list[str]:
    """Decode every identifier in the bytes between the two anchors.

    Args:
        data: Array contents, exclusive of both anchors

    Returns:
        Identifiers in the order they appear in the file
    """
    identifiers = []
    for record in split_on_delimiter(data):
        identifier = decode_record(record)
        if identifier is not None:
            identifiers.append(identifier)
    return identifiers
