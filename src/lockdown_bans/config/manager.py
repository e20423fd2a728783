"""Configuration management - load/save XML configuration"""

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional
from xml.dom import minidom

from .paths import AppPaths
from .schema import AppConfiguration, Settings
from ..logging_config import get_logger

logger = get_logger("config_manager")


class ConfigurationManager:
    """Manages application configuration persistence.

    Handles loading and saving configuration to XML format,
    falling back to defaults when the file is missing or unreadable.
    """

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = config_path or AppPaths.CONFIG_FILE
        self.config: Optional[AppConfiguration] = None

    def load(self) -> AppConfiguration:
        """Load configuration from XML file.

        Returns:
            AppConfiguration object with loaded settings

        Raises:
            FileNotFoundError: If config file doesn't exist
            ET.ParseError: If XML is malformed
        """
        logger.debug(f"Loading configuration from {self.config_path}")
        tree = ET.parse(self.config_path)
        root = tree.getroot()

        settings_elem = root.find("Settings")

        if settings_elem is not None:
            settings = Settings(
                save_path=self._parse_path(settings_elem, "SavePath"),
                create_backups=self._parse_bool(settings_elem, "CreateBackups", True),
                fast_list=self._parse_bool(settings_elem, "FastList", False),
                name_cache_enabled=self._parse_bool(settings_elem, "NameCacheEnabled", True),
            )
        else:
            # Missing Settings element - use all defaults
            settings = Settings()

        self.config = AppConfiguration(settings=settings)
        logger.debug(f"Configuration loaded: save path {settings.save_path or '(default)'}")
        return self.config

    def load_or_default(self) -> AppConfiguration:
        """Load configuration, creating defaults if it is missing or corrupted.

        Returns:
            The loaded or default AppConfiguration
        """
        if not self.config_path.exists():
            return self.create_default()

        try:
            return self.load()
        except (ET.ParseError, ValueError) as e:
            # Corrupted config = start from defaults
            logger.warning(f"Could not load config, using defaults: {e}")
            return self.create_default()

    def save(self) -> None:
        """Save current configuration to XML file.

        Creates the configuration directory if it doesn't exist.
        """
        if self.config is None:
            raise ValueError("No configuration to save")

        logger.debug(f"Saving configuration to {self.config_path}")

        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        root = ET.Element("LockdownBans", version="1.0")

        settings = self.config.settings
        settings_elem = ET.SubElement(root, "Settings")
        ET.SubElement(settings_elem, "SavePath").text = str(settings.save_path) if settings.save_path else ""
        ET.SubElement(settings_elem, "CreateBackups").text = str(settings.create_backups).lower()
        ET.SubElement(settings_elem, "FastList").text = str(settings.fast_list).lower()
        ET.SubElement(settings_elem, "NameCacheEnabled").text = str(settings.name_cache_enabled).lower()

        # Write pretty-printed XML
        xml_str = minidom.parseString(ET.tostring(root, encoding="unicode")).toprettyxml(indent="  ")
        # Remove extra blank lines that minidom adds
        lines = [line for line in xml_str.split('\n') if line.strip()]
        xml_str = '\n'.join(lines)

        self.config_path.write_text(xml_str, encoding="utf-8")

    def create_default(self) -> AppConfiguration:
        """Create a default configuration.

        Returns:
            New AppConfiguration with default values
        """
        self.config = AppConfiguration(settings=Settings())
        return self.config

    def set_save_path(self, save_path: Optional[Path]) -> None:
        """Store a custom ban list location and save configuration.

        Args:
            save_path: Path to Save_BanList.sav, or None to use the default
        """
        if self.config is None:
            self.load_or_default()
        self.config.settings.save_path = save_path
        self.save()

    # Helper methods for XML parsing
    @staticmethod
    def _parse_bool(parent: ET.Element, tag: str, default: bool = False) -> bool:
        """Parse a boolean value from child element."""
        elem = parent.find(tag)
        if elem is not None and elem.text:
            return elem.text.strip().lower() == "true"
        return default

    @staticmethod
    def _parse_path(parent: ET.Element, tag: str) -> Optional[Path]:
        """Parse a path value from child element."""
        elem = parent.find(tag)
        if elem is not None and elem.text and elem.text.strip():
            return AppPaths.expand_path(elem.text.strip())
        return None
