"""Object commands: ls, get, put, delete.

Each command opens its own connection pool, runs one gateway call and exits
with status 0 on success or 1 on any failure.
"""

from __future__ import annotations

import sys
from typing import Any, NoReturn

import click

from pgs3.cli.utils import coro, error, format_bytes, gateway_session, success
from pgs3.core.exceptions import UploadTooLargeError
from pgs3.core.settings import get_app_settings
from pgs3.features.objects.buffer import UploadBuffer
from pgs3.features.objects.mime import guess_content_type
from pgs3.features.objects.schemas import PUBLIC_BUCKET, GatewayResult, decode_object_listing

STDIN_CHUNK_SIZE = 64 * 1024


def _fail(message: str) -> NoReturn:
    error(message)
    sys.exit(1)


def _check(result: GatewayResult) -> None:
    if not result.ok:
        _fail(result.error_message or str(result.status))


def _echo_payload(result: GatewayResult) -> None:
    click.echo((result.data or b"").decode())


def _print_long_listing(payload: bytes) -> None:
    entries = decode_object_listing(payload)
    if not entries:
        click.echo("No objects found")
        return

    click.echo(f"{'Key':<50} {'Size':<12} {'Last Modified':<25}")
    click.echo("-" * 89)

    total_size = 0
    for entry in entries:
        # Truncate long keys
        display_key = entry.key if len(entry.key) <= 48 else "..." + entry.key[-45:]
        modified = entry.last_modified.strftime("%Y-%m-%d %H:%M:%S")
        click.echo(f"{display_key:<50} {format_bytes(entry.size):<12} {modified:<25}")
        total_size += entry.size

    click.echo("-" * 89)
    click.echo(f"Total: {len(entries)} objects, {format_bytes(total_size)}")


def _read_stdin(max_size: int) -> bytes:
    stream = click.get_binary_stream("stdin")
    buffer = UploadBuffer(max_size)
    while chunk := stream.read(STDIN_CHUNK_SIZE):
        buffer.extend(chunk)
    return buffer.getvalue()


@click.command(name="ls")
@click.argument("prefix", default="")
@click.option("--long", "-l", "long_format", is_flag=True, help="Print a table instead of JSON")
@click.pass_obj
@coro
async def list_objects(obj: dict[str, Any], prefix: str, long_format: bool) -> None:
    """List objects, optionally only keys starting with PREFIX.

    Examples:
        pgs3 ls
        pgs3 ls reports/
        pgs3 ls --long images/2024/
    """
    async with gateway_session(obj["db_settings"]) as gateway:
        result = await gateway.list_objects(PUBLIC_BUCKET, prefix or None)

    _check(result)
    if long_format:
        _print_long_listing(result.data or b"[]")
    else:
        _echo_payload(result)


@click.command(name="get")
@click.argument("key")
@click.pass_obj
@coro
async def get_object(obj: dict[str, Any], key: str) -> None:
    """Write the bytes of KEY to stdout."""
    async with gateway_session(obj["db_settings"]) as gateway:
        result = await gateway.get_object(PUBLIC_BUCKET, key)

    _check(result)
    stdout = click.get_binary_stream("stdout")
    stdout.write(result.data or b"")
    stdout.flush()


@click.command(name="put")
@click.argument("key")
@click.option(
    "--content-type",
    "-t",
    default=None,
    help="Content type to store (default: guessed from the key's extension)",
)
@click.pass_obj
@coro
async def put_object(obj: dict[str, Any], key: str, content_type: str | None) -> None:
    """Store stdin under KEY.

    Examples:
        pgs3 put notes.txt < notes.txt
        cat image.bin | pgs3 put images/raw --content-type image/x-raw
    """
    try:
        content = _read_stdin(get_app_settings().max_upload_bytes)
    except UploadTooLargeError as e:
        _fail(e.detail)

    async with gateway_session(obj["db_settings"]) as gateway:
        result = await gateway.put_object(
            PUBLIC_BUCKET,
            key,
            content,
            content_type or guess_content_type(key),
        )

    _check(result)
    _echo_payload(result)


@click.command(name="delete")
@click.argument("key")
@click.pass_obj
@coro
async def delete_object(obj: dict[str, Any], key: str) -> None:
    """Delete KEY. Deleting a missing key also succeeds."""
    async with gateway_session(obj["db_settings"]) as gateway:
        result = await gateway.delete_object(PUBLIC_BUCKET, key)

    _check(result)
    success("Object deleted successfully")
