"""CLI entry point for the course catalog service."""

from __future__ import annotations

import sys

import click

from coursecatalog.config import ConfigError, Settings
from coursecatalog.logging import setup_logging
from coursecatalog.store import CatalogStore


def _load_settings(db_path: str | None) -> Settings:
    try:
        settings = Settings.from_env()
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    if db_path is not None:
        settings.db_path = db_path
    return settings


@click.group()
@click.version_option(package_name="coursecatalog")
def main() -> None:
    """Course catalog - provider course listings and search."""
    pass


@main.command("init-db")
@click.option(
    "--db",
    "db_path",
    default=None,
    help="SQLite database path (default: COURSECATALOG_DB_PATH or coursecatalog.db)",
)
def init_db(db_path: str | None) -> None:
    """Create the database tables if they don't exist."""
    settings = _load_settings(db_path)
    store = CatalogStore(settings.db_path)
    store.close()
    click.echo(f"Database ready at {settings.db_path}")


@main.command()
@click.option("--db", "db_path", default=None, help="SQLite database path")
@click.option("--host", default=None, help="Bind address (default: COURSECATALOG_HOST)")
@click.option("--port", type=int, default=None, help="Port (default: COURSECATALOG_PORT)")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def serve(db_path: str | None, host: str | None, port: int | None, verbose: bool) -> None:
    """Run the REST API with uvicorn."""
    import uvicorn  # noqa: PLC0415

    from coursecatalog.api.app import create_app  # noqa: PLC0415

    settings = _load_settings(db_path)
    setup_logging(
        log_dir=settings.log_dir,
        level="DEBUG" if verbose else settings.log_level,
    )

    app = create_app(settings=settings)
    uvicorn.run(
        app,
        host=host if host is not None else settings.host,
        port=port if port is not None else settings.port,
    )


if __name__ == "__main__":
    main()
