"""Core business logic module.

This module contains the save codec and the operations built on it.

Submodules:
    layout: Anchor, delimiter, and header field constants of the ban list array
    locator: Backward anchor search bounding the identifier array
    extractor: Splits the array into records and decodes identifiers
    recovery: Ordered fallback strategies for non-canonical files
    mutator: Re-serializes identifiers and patches the array header
    ban_list: BanListFile with the list/add/remove operations
    backup: .bak backup and revert
    identifiers: Steam64 validation, import/export formats, community lines
    steam_names: Steam Web API persona name lookup with an on-disk cache
    service: BanListService combining validation, backups, and the codec

The save is Unreal Engine's GVAS format. Only the banned players array is
decoded; all other bytes are carried through unchanged.
"""

from .ban_list import BanListFile, add_bans, list_bans, remove_ban
from .errors import BanListError, BanListErrorKind
from .service import BanListService

__all__ = [
    "BanListFile",
    "BanListError",
    "BanListErrorKind",
    "BanListService",
    "add_bans",
    "list_bans",
    "remove_ban",
]
