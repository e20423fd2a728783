"""Configuration data models"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass
class Settings:
    """Application settings"""
    save_path: Optional[Path] = None
    create_backups: bool = True
    fast_list: bool = False  # Skip Steam name lookups when listing
    name_cache_enabled: bool = True


@dataclass
class AppConfiguration:
    """Complete application configuration"""
    settings: Settings = field(default_factory=Settings)

    def has_custom_save_path(self) -> bool:
        """Check if the user configured a save path explicitly.

        Returns:
            True if a save path is stored in the configuration
        """
        return self.settings.save_path is not None
