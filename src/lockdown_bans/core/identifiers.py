"""Steam64 ID validation and ban list import/export formats."""

import base64
import binascii
import json
import re
from typing import Iterable

from .errors import InvalidSteamIdError
from ..logging_config import get_logger

logger = get_logger("identifiers")

STEAM64_PATTERN = re.compile(r"7656\d{13}")


def is_steam64(value: str) -> bool:
    """Check that a value is 17 digits starting with 7656."""
    return bool(STEAM64_PATTERN.fullmatch(value))


def validate_steam_id(value: str) -> str:
    """Return the ID unchanged if it is Steam64-shaped.

    Raises:
        InvalidSteamIdError: If the ID has the wrong shape
    """
    if not is_steam64(value):
        raise InvalidSteamIdError(
            "Invalid Steam64 ID format. It should be 17 digits starting with 7656."
        )
    return value


def normalize_identifiers(values: Iterable[str]) -> list[str]:
    """Strip whitespace, drop blanks, and de-duplicate in order."""
    stripped = (value.strip() for value in values)
    return list(dict.fromkeys(value for value in stripped if value))


def decode_community_lines(text: str) -> list[str]:
    """Decode a community ban list.

    Each non-blank line holds one base64-encoded identifier and is decoded
    on its own; lines that do not decode are skipped.

    Args:
        text: Raw community list contents

    Returns:
        Decoded identifiers in line order
    """
    identifiers = []
    for line_number, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line:
            continue
        try:
            identifiers.append(base64.b64decode(line).decode("utf-8").strip())
        except (binascii.Error, UnicodeDecodeError) as e:
            logger.debug("Skipping undecodable community line %d: %s", line_number, e)
    return identifiers


def parse_import_content(content: str) -> list[str]:
    """Read identifiers from an exported ban list.

    Accepts a JSON array, a JSON object with a ``steamIds`` array, or plain
    text with one identifier per line.
    """
    try:
        parsed = json.loads(content)
    except ValueError:
        return [line.strip() for line in content.splitlines() if line.strip()]

    if isinstance(parsed, list):
        return [str(value) for value in parsed]
    if isinstance(parsed, dict) and isinstance(parsed.get("steamIds"), list):
        return [str(value) for value in parsed["steamIds"]]
    if isinstance(parsed, (int, str)):
        # A single bare ID is valid JSON too
        return [str(parsed)]
    return []


def format_export_content(identifiers: list[str], as_json: bool = False) -> str:
    """Serialize identifiers for export as JSON or newline-separated text."""
    if as_json:
        return json.dumps({"steamIds": identifiers}, indent=2)
    return "\n".join(identifiers)
