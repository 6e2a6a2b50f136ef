"""Allow ``python -m koko``."""

from koko.cli.app import app

app()
