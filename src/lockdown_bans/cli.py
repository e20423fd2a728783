"""Command line entry point for Lockdown Ban Manager.

Invoked as::

    lockdown-bans [--save-file PATH] [--debug] COMMAND [ARGS]...

Commands
--------
- list              Show the banned Steam64 IDs (optionally with names)
- add / remove      Ban or unban one Steam64 ID
- import / export   Read or write a text/JSON ban list
- community         Merge a community list of base64-encoded IDs
- revert            Restore the ban list from the .bak backup
- clear-name-cache  Forget cached player names
- config            Show or change stored settings
"""

import functools
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __app_name__, __version__
from .config.manager import ConfigurationManager
from .config.path_validator import is_safe_path, validate_save_path
from .config.paths import AppPaths
from .core.errors import BackupError, BanListError, BanListErrorKind, InvalidSteamIdError
from .core.service import BanListService
from .core.steam_names import API_KEY_ENV, NameCache, SteamNameResolver
from .logging_config import get_logger, setup_logging

console = Console()
logger = get_logger("cli")

ERROR_MESSAGES = {
    BanListErrorKind.FILE_NOT_FOUND:
        "The Lockdown Protocol ban list was not found. Please check the file path.",
    BanListErrorKind.FILE_NOT_ACCESSIBLE:
        "Your Lockdown Protocol ban list was found, but can't be opened for "
        "reading/writing. Please close the game if running.",
    BanListErrorKind.INVALID_FILE_FORMAT:
        "Could not successfully parse your ban list file.",
}


@dataclass
class CliContext:
    """State shared by all commands of one invocation."""
    config_manager: ConfigurationManager
    save_path: Path

    @property
    def settings(self):
        return self.config_manager.config.settings

    def service(self) -> BanListService:
        return BanListService(self.save_path, create_backups=self.settings.create_backups)


pass_cli = click.make_pass_decorator(CliContext)


def _fail(message: str) -> None:
    console.print(f"[red]{escape(message)}[/red]")
    sys.exit(1)


def handle_errors(func):
    """Report ban list, backup, and validation errors and exit with status 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except BanListError as e:
            logger.error("%s: %s", e.kind.value, e.message)
            message = ERROR_MESSAGES.get(e.kind, f"An unknown error occurred: {e.message}")
            _fail(message)
        except (InvalidSteamIdError, BackupError) as e:
            logger.error("%s", e)
            _fail(str(e))
        except (OSError, ValueError) as e:
            # Undecodable input files land here as UnicodeDecodeError
            logger.exception("Unexpected error")
            _fail(f"An unknown error occurred: {e}")

    return wrapper


def _plural(count: int, word: str = "player") -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group()
@click.option(
    "--save-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help=f"Save_BanList.sav to edit (default: ${AppPaths.SAVE_PATH_ENV}, the configured path, "
         "or the game's save folder).",
)
@click.option("--debug", is_flag=True, help="Also log to the console.")
@click.version_option(__version__, prog_name=__app_name__)
@click.pass_context
def main(ctx: click.Context, save_file: Optional[Path], debug: bool) -> None:
    """Manage the Lockdown Protocol ban list."""
    setup_logging(debug=debug)
    logger.info(f"Starting {__app_name__} v{__version__}")

    config_manager = ConfigurationManager()
    config = config_manager.load_or_default()
    save_path = AppPaths.resolve_save_path(save_file, config.settings.save_path)
    logger.debug("Using ban list %s", save_path)

    ctx.obj = CliContext(config_manager=config_manager, save_path=save_path)


# ---------------------------------------------------------------------------
# Ban list commands
# ---------------------------------------------------------------------------


@main.command("list")
@click.option("--plain", is_flag=True, help="Print one ID per line and nothing else.")
@click.option("--fast", is_flag=True, help="Skip player name lookup.")
@pass_cli
@handle_errors
def list_cmd(cli: CliContext, plain: bool, fast: bool) -> None:
    """Show the banned Steam64 IDs."""
    banned = cli.service().list_bans()

    if plain:
        for steam_id in banned:
            click.echo(steam_id)
        return

    if not banned:
        console.print("No players are currently banned.")
        return

    fast = fast or cli.settings.fast_list or os.environ.get("FAST_LIST", "").lower() == "true"
    names = {} if fast else _lookup_names(cli, banned)

    table = Table(title="Current banned Steam64 IDs")
    table.add_column("#", justify="right")
    table.add_column("Steam64 ID", no_wrap=True)
    if names:
        table.add_column("Name")

    for index, steam_id in enumerate(banned, start=1):
        row = [str(index), steam_id]
        if names:
            row.append(escape(names.get(steam_id, "")))
        table.add_row(*row)

    console.print(table)

    if not fast and not os.environ.get(API_KEY_ENV):
        console.print(f"\nTo look up player names, set {API_KEY_ENV}.")


def _lookup_names(cli: CliContext, steam_ids: list[str]) -> dict[str, str]:
    cache = NameCache(AppPaths.NAME_CACHE_FILE) if cli.settings.name_cache_enabled else None
    resolver = SteamNameResolver(os.environ.get(API_KEY_ENV), cache=cache)
    return resolver.resolve(steam_ids)


@main.command("add")
@click.argument("steam_id")
@pass_cli
@handle_errors
def add_cmd(cli: CliContext, steam_id: str) -> None:
    """Ban a player by Steam64 ID."""
    added = cli.service().add_ban(steam_id)
    console.print(f"Successfully added {_plural(added)} to your ban list!")


@main.command("remove")
@click.argument("steam_id")
@pass_cli
@handle_errors
def remove_cmd(cli: CliContext, steam_id: str) -> None:
    """Unban a player by Steam64 ID."""
    removed = cli.service().remove_ban(steam_id)
    console.print(f"Successfully removed {_plural(removed)} from your ban list!")


@main.command("import")
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@pass_cli
@handle_errors
def import_cmd(cli: CliContext, source: Path) -> None:
    """Ban every ID in a text (one per line) or JSON file."""
    added = cli.service().import_file(source)
    console.print(f"Successfully added {_plural(added)} to your ban list!")


@main.command("export")
@click.argument("destination", type=click.Path(dir_okay=False, path_type=Path))
@pass_cli
@handle_errors
def export_cmd(cli: CliContext, destination: Path) -> None:
    """Write the ban list to a text file, or JSON if the name ends in .json."""
    if not is_safe_path(destination):
        _fail(f"Refusing to write to protected location: {destination}")

    count = cli.service().export_file(destination)
    console.print(f"Exported {_plural(count, 'ID')} to {escape(str(destination))}")


@main.command("community")
@click.argument("source", type=click.File("r", encoding="utf-8"))
@pass_cli
@handle_errors
def community_cmd(cli: CliContext, source) -> None:
    """Merge a community ban list (one base64-encoded ID per line, - for stdin)."""
    found, added = cli.service().add_community(source.read())
    console.print(f"Found {_plural(found, 'Steam ID')} in the community list.")
    if added:
        console.print(f"Successfully added {_plural(added, 'new player')} from the community ban list!")
    else:
        console.print("Ban list is up to date - no new community bans.")


@main.command("revert")
@pass_cli
@handle_errors
def revert_cmd(cli: CliContext) -> None:
    """Restore the ban list from the backup taken before the last change."""
    cli.service().revert()
    console.print("Successfully reverted ban list from backup.")


@main.command("clear-name-cache")
def clear_name_cache_cmd() -> None:
    """Forget all cached player names."""
    cache = NameCache(AppPaths.NAME_CACHE_FILE)
    count = len(cache)
    cache.clear()
    console.print(f"Cleared {_plural(count, 'cached name')}.")


# ---------------------------------------------------------------------------
# Configuration commands
# ---------------------------------------------------------------------------


@main.group("config")
def config_group() -> None:
    """Show or change stored settings."""


@config_group.command("show")
@pass_cli
def config_show_cmd(cli: CliContext) -> None:
    """Print the active settings."""
    settings = cli.settings
    table = Table(title="Settings", show_header=False)
    table.add_column("Setting")
    table.add_column("Value")
    table.add_row("Config file", escape(str(cli.config_manager.config_path)))
    table.add_row("Ban list in use", escape(str(cli.save_path)))
    configured = "(default)"
    if cli.config_manager.config.has_custom_save_path():
        configured = str(settings.save_path)
    table.add_row("Configured save path", escape(configured))
    table.add_row("Create backups", str(settings.create_backups).lower())
    table.add_row("Fast list", str(settings.fast_list).lower())
    table.add_row("Name cache", str(settings.name_cache_enabled).lower())
    console.print(table)


@config_group.command("set-save-path")
@click.argument("save_path", type=click.Path(dir_okay=False, path_type=Path))
@pass_cli
def config_set_save_path_cmd(cli: CliContext, save_path: Path) -> None:
    """Remember a custom Save_BanList.sav location."""
    is_valid, error = validate_save_path(save_path)
    if not is_valid:
        _fail(error)

    cli.config_manager.set_save_path(save_path)
    console.print(f"Save path set to {escape(str(save_path))}")


@config_group.command("clear-save-path")
@pass_cli
def config_clear_save_path_cmd(cli: CliContext) -> None:
    """Go back to the default save location."""
    cli.config_manager.set_save_path(None)
    console.print("Save path reset to the default location.")


@config_group.command("set")
@click.option("--backups/--no-backups", default=None, help="Copy the save to .bak before changes.")
@click.option("--fast-list/--no-fast-list", default=None, help="Skip name lookup when listing.")
@click.option("--name-cache/--no-name-cache", default=None, help="Cache looked-up player names.")
@pass_cli
def config_set_cmd(
    cli: CliContext,
    backups: Optional[bool],
    fast_list: Optional[bool],
    name_cache: Optional[bool],
) -> None:
    """Change boolean settings."""
    settings = cli.settings
    if backups is not None:
        settings.create_backups = backups
    if fast_list is not None:
        settings.fast_list = fast_list
    if name_cache is not None:
        settings.name_cache_enabled = name_cache

    cli.config_manager.save()
    console.print("Settings saved.")


if __name__ == "__main__":
    main()
