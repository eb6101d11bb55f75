"""serve command: run the HTTP gateway."""

from __future__ import annotations

from typing import Any

import click
import uvicorn

from pgs3.app.main import create_app
from pgs3.cli.utils import info, warning
from pgs3.core.settings import get_app_settings, get_logging_settings


def resolve_port(value: str | None, default: int) -> int:
    """Parse a port argument, falling back to ``default`` when invalid."""
    if value is None:
        return default
    try:
        port = int(value)
    except ValueError:
        port = 0
    if not 1 <= port <= 65535:
        warning(f"Invalid port '{value}', using {default}")
        return default
    return port


@click.command(name="serve")
@click.argument("port", required=False)
@click.option("--host", default=None, help="Host to bind (default: from settings or 0.0.0.0)")
@click.pass_obj
def serve(obj: dict[str, Any], port: str | None, host: str | None) -> None:
    """Run the HTTP gateway on PORT (default: 9000)."""
    settings = get_app_settings()
    bind_host = host or settings.host
    bind_port = resolve_port(port, settings.port)

    app = create_app(app_settings=settings, db_settings=obj["db_settings"])

    info(f"Serving bucket 'public' at http://{bind_host}:{bind_port}")
    uvicorn.run(
        app,
        host=bind_host,
        port=bind_port,
        # Logging is already configured by the CLI entry point
        log_config=None,
        log_level=get_logging_settings().level.lower(),
        access_log=settings.debug,
    )
