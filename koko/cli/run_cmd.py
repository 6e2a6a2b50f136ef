"""koko run -- connect to Slack and process the change feed.

The run command is the long-running bot process:
  - loads the three credentials from the environment
  - opens the GitHub client used for pull request lookups
  - connects to Slack over Socket Mode and dispatches message events

Start: koko run
Stop:  Ctrl+C (SIGINT) or SIGTERM for graceful shutdown
"""

from __future__ import annotations

import asyncio
import signal

import typer
from loguru import logger
from rich.console import Console

from koko.config import KokoConfig, load_config
from koko.errors import ConfigError, SlackStartupError
from koko.github.client import GitHubClient
from koko.slack.app import SlackBot

console = Console(stderr=True)


def run_command() -> None:
    """Start the bot and block until it is stopped."""
    try:
        config = load_config()
        asyncio.run(_run_bot(config))
    except ConfigError as exc:
        console.print(f"[bold red]Configuration error:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc
    except SlackStartupError as exc:
        logger.error("Issue running Slack instance: {}", exc)
        raise typer.Exit(code=1) from exc
    except KeyboardInterrupt:
        console.print("\n[dim]Bot shutdown by user.[/dim]")


async def _run_bot(config: KokoConfig) -> None:
    """Main async entry point for the bot process."""
    github = GitHubClient(
        config.github_token.get_secret_value(),
        api_url=config.github_api_url,
    )
    async with github:
        bot = SlackBot(
            config.slack_app_token.get_secret_value(),
            config.slack_bot_token.get_secret_value(),
            github,
            debug=config.debug,
        )
        _install_signal_handlers(bot)
        await bot.run()


def _install_signal_handlers(bot: SlackBot) -> None:
    """Install SIGINT/SIGTERM handlers that trigger graceful shutdown."""
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, bot.stop)
