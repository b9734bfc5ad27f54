"""Command-line interface for webseed."""

from webseed.cli.app import app

__all__ = ["app"]
