"""Main CLI entry point for pgs3."""

import sys

import click
from pydantic import ValidationError

from pgs3 import __version__
from pgs3.cli.commands import objects, server
from pgs3.core.settings import get_db_settings
from pgs3.infra.logging.config import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="pgs3")
@click.option(
    "--db",
    "connstring",
    default=None,
    metavar="CONNINFO",
    help="PostgreSQL connection string; overrides PGCONNSTRING and PGHOST/PGPORT/...",
)
@click.pass_context
def cli(ctx: click.Context, connstring: str | None) -> None:
    """pgs3 - S3-style object storage in a PostgreSQL table.

    All commands operate on the single bucket 'public'.

    \b
    Quick Start:
      pgs3 put hello.txt < hello.txt   # Upload from stdin
      pgs3 ls                          # List objects as JSON
      pgs3 get hello.txt               # Download to stdout
      pgs3 delete hello.txt            # Remove an object
      pgs3 serve 9000                  # Run the HTTP gateway
    """
    ctx.ensure_object(dict)
    try:
        ctx.obj["db_settings"] = get_db_settings().with_connstring(connstring)
    except ValidationError as e:
        raise click.BadParameter(str(e.errors()[0]["msg"]), param_hint="--db") from e


cli.add_command(objects.list_objects)
cli.add_command(objects.get_object)
cli.add_command(objects.put_object)
cli.add_command(objects.delete_object)
cli.add_command(server.serve)


def main() -> None:
    """Entry point for CLI.

    Usage errors exit with status 1 like every other failure.
    """
    setup_logging()
    try:
        exit_code = cli.main(obj={}, standalone_mode=False)
    except click.ClickException as e:
        e.show()
        sys.exit(1)
    except click.Abort:
        click.echo("Aborted!", err=True)
        sys.exit(1)
    sys.exit(exit_code or 0)


if __name__ == "__main__":
    main()
