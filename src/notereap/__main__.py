"""Allow ``python -m notereap``."""

from notereap.cli import cli

cli()
