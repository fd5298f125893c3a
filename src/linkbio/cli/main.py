"""linkbio CLI — run the server and manage the database schema.

Usage:
    linkbio serve                    # Run the API with uvicorn
    linkbio serve --port 8080 --reload
    linkbio init-db                  # Create tables for LINKBIO_DATABASE_URL

All settings come from LINKBIO_* environment variables (or .env).
"""

from __future__ import annotations

import asyncio
import sys
from typing import Optional

import click
from pydantic import ValidationError

from linkbio import __version__
from linkbio.config import Settings, get_settings


def _load_settings() -> Settings:
    """Load settings or exit with a readable message."""
    try:
        return get_settings()
    except ValidationError as e:
        click.secho("Invalid configuration:", fg="red", err=True)
        for err in e.errors():
            click.secho(f"  {err['msg']}", fg="red", err=True)
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="linkbio")
def main():
    """linkbio — link-in-bio backend."""


@main.command()
@click.option("--host", help="Bind address (default: LINKBIO_HOST)")
@click.option("--port", "-p", type=int, help="Port (default: LINKBIO_PORT)")
@click.option("--reload", is_flag=True, help="Restart on code changes")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the HTTP server."""
    import uvicorn

    settings = _load_settings()
    uvicorn.run(
        "linkbio.main:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@main.command("init-db")
def init_db():
    """Create all database tables."""
    from linkbio.db.engine import build_engine, create_schema

    settings = _load_settings()

    async def _init():
        engine = build_engine(settings)
        try:
            await create_schema(engine)
        finally:
            await engine.dispose()

    asyncio.run(_init())
    click.secho("Database schema created.", fg="green")


if __name__ == "__main__":
    main()
