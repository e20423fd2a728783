"""Player name lookup through the Steam Web API.

Names are cached on disk so that listing a large ban list does not hit the
API for players that were already resolved.
"""

import json
from pathlib import Path
from typing import Iterable, Optional

import requests

from ..logging_config import get_logger

logger = get_logger("steam_names")

PLAYER_SUMMARIES_URL = "https://api.steampowered.com/ISteamUser/GetPlayerSummaries/v0002/"
API_KEY_ENV = "STEAM_API_KEY"

# GetPlayerSummaries accepts at most 100 IDs per request
BATCH_SIZE = 100
REQUEST_TIMEOUT = 10


class NameCache:
    """Persistent steamid -> persona name mapping stored as JSON."""

    def __init__(self, cache_file: Path):
        self.cache_file = cache_file
        self._names: dict[str, str] = {}
        self._load()

    def _load(self):
        if not self.cache_file.exists():
            return

        try:
            data = json.loads(self.cache_file.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError) as e:
            # Corrupted cache, start fresh
            logger.warning("Ignoring unreadable name cache %s: %s", self.cache_file, e)
            return

        if isinstance(data, dict):
            self._names = {str(k): str(v) for k, v in data.items() if v}

    def get(self, steam_id: str) -> Optional[str]:
        return self._names.get(steam_id)

    def update(self, names: dict[str, str]) -> bool:
        """Merge names into the cache and save if anything changed.

        Returns:
            True if the cache file was rewritten
        """
        changed = {k: v for k, v in names.items() if self._names.get(k) != v}
        if not changed:
            return False

        self._names.update(changed)
        self.save()
        return True

    def save(self):
        self.cache_file.parent.mkdir(parents=True, exist_ok=True)
        self.cache_file.write_text(json.dumps(self._names, indent=2), encoding="utf-8")

    def clear(self):
        """Forget all names and delete the cache file."""
        self._names = {}
        self.cache_file.unlink(missing_ok=True)

    def __len__(self) -> int:
        return len(self._names)


class SteamNameResolver:
    """Resolve Steam64 IDs to persona names.

    Cached names are returned without a request. Without an API key only
    cached names are available.
    """

    def __init__(
        self,
        api_key: Optional[str],
        cache: Optional[NameCache] = None,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.cache = cache
        self.session = session or requests.Session()

    def resolve(self, steam_ids: Iterable[str]) -> dict[str, str]:
        """Look up names for a set of IDs.

        Args:
            steam_ids: Steam64 IDs to resolve

        Returns:
            Mapping of ID to persona name for every ID that could be resolved
        """
        unique_ids = list(dict.fromkeys(steam_ids))

        names: dict[str, str] = {}
        misses = []
        for steam_id in unique_ids:
            cached = self.cache.get(steam_id) if self.cache is not None else None
            if cached:
                names[steam_id] = cached
            else:
                misses.append(steam_id)

        if not self.api_key or not misses:
            return names

        fetched: dict[str, str] = {}
        for i in range(0, len(misses), BATCH_SIZE):
            fetched.update(self._fetch_batch(misses[i:i + BATCH_SIZE]))

        if fetched and self.cache is not None:
            self.cache.update(fetched)

        names.update(fetched)
        return names

    def _fetch_batch(self, batch: list[str]) -> dict[str, str]:
        try:
            response = self.session.get(
                PLAYER_SUMMARIES_URL,
                params={"key": self.api_key, "steamids": ",".join(batch)},
                timeout=REQUEST_TIMEOUT,
            )
            response.raise_for_status()
            players = response.json().get("response", {}).get("players", [])
        except (requests.RequestException, ValueError) as e:
            # Skip the batch; the remaining IDs simply stay unnamed
            logger.warning("Steam name lookup failed for %d IDs: %s", len(batch), e)
            return {}

        return {
            player["steamid"]: player["personaname"]
            for player in players
            if player.get("steamid") and player.get("personaname")
        }
