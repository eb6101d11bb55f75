"""CLI command modules."""

from pgs3.cli.commands import objects, server

__all__ = ["objects", "server"]
