"""koko - Slack bot bridging the gateway schema change feed and GitHub."""

__version__ = "0.1.0"
