"""Allow ``python -m ai_hooks``."""

from ai_hooks.cli.main import cli

cli()
