"""Main CLI application: registers all subcommands and global options."""

from __future__ import annotations

from pathlib import Path

import typer

from koko.logging import setup_logging

app = typer.Typer(
    name="koko",
    help="koko - Slack bot for the gateway schema change feed.",
    no_args_is_help=True,
    pretty_exceptions_enable=False,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show DEBUG-level logs."),  # noqa: B008
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress logs below WARNING."),  # noqa: B008
    log_dir: Path | None = typer.Option(  # noqa: B008
        None, "--log-dir", help="Also write a rotating log file into this directory."
    ),
) -> None:
    """koko - Slack bot for the gateway schema change feed."""
    setup_logging(verbose=verbose, quiet=quiet, log_dir=log_dir)


# Register subcommands; imported at bottom to avoid circular deps
from koko.cli.run_cmd import run_command  # noqa: E402
from koko.cli.version_cmd import version_command  # noqa: E402

app.command(name="run", help="Connect to Slack and process change feed events.")(run_command)
app.command(name="version", help="Show version and build information.")(version_command)
