"""Allow running as ``python -m lockdown_bans``."""

from .cli import main

main()
