"""Typer CLI root application with serve command."""

import typer

from user_api.core.config import get_settings
from user_api.core.logging import setup_logging

app = typer.Typer(name="user-api", help="User account service CLI")


@app.callback()
def _main_callback() -> None:
    """Initialize logging for all CLI commands."""
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir)


@app.command()
def serve(
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload for development"),
    host: str = typer.Option("0.0.0.0", "--host", help="Bind host"),  # noqa: S104
    port: int | None = typer.Option(None, "--port", help="Bind port (defaults to SERVICE_PORT)"),
) -> None:
    """Start the API server."""
    import uvicorn

    uvicorn.run(
        "user_api.main:create_app",
        factory=True,
        host=host,
        port=port if port is not None else get_settings().service_port,
        reload=reload,
    )


def _register_subcommands() -> None:
    """Register all CLI subcommand groups."""
    from user_api.cli.db_cmd import db_app
    from user_api.cli.user_cmd import user_app

    app.add_typer(db_app, name="db", help="Database migration commands")
    app.add_typer(user_app, name="user", help="User management commands")


_register_subcommands()
