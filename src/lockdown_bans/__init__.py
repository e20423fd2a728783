"""Lockdown Ban Manager - Ban list editor for Lockdown Protocol save files.

This package provides:
    - Reading the ban list stored in Save_BanList.sav
    - Adding and removing banned Steam64 IDs with automatic .bak backups
    - Importing and exporting ban lists as text or JSON
    - Merging community ban lists (base64 encoded lines)
    - Optional player name lookup through the Steam Web API

The ban list lives inside an Unreal Engine GVAS save. Only the identifier
array is decoded; the rest of the file is carried through byte-for-byte.

Package Structure:
    cli: Command line entry point
    config: Configuration management, paths, schemas, and path validation
    core: Save codec, backups, identifier helpers, and the ban list service

Quick Start:
    Run from command line::

        lockdown-bans list
        lockdown-bans add 76561198000000000

    Or programmatically::

        from lockdown_bans.core.ban_list import add_bans, list_bans
        add_bans(path, ["76561198000000000"])

Configuration:
    - Config file: %APPDATA%/LockdownBans/configuration.xml
    - Log file: %APPDATA%/LockdownBans/lockdown_bans.log
    - Name cache: %APPDATA%/LockdownBans/names-cache.json
"""

__version__ = "1.0.0"
__app_name__ = "Lockdown Ban Manager"
