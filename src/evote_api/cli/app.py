"""Typer CLI root application with serve command."""

import typer

from evote_api.core.config import get_settings
from evote_api.core.logging import setup_logging

app = typer.Typer(name="evote-api", help="Electronic voting backend CLI")


@app.callback()
def _main_callback() -> None:
    """Initialize logging for all CLI commands."""
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir, json_logs=settings.log_json)


@app.command()
def serve(
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload for development"),
    host: str = typer.Option("0.0.0.0", "--host", help="Bind host"),  # noqa: S104
    port: int = typer.Option(8000, "--port", help="Bind port"),
) -> None:
    """Start the API server."""
    import uvicorn

    uvicorn.run(
        "evote_api.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


def _register_subcommands() -> None:
    """Register all CLI subcommand groups."""
    from evote_api.cli.audit_cmd import audit_app

    app.add_typer(
        audit_app,
        name="audit",
        help="Integrity audit and analysis commands (repairs are not serialized against the API)",
    )


_register_subcommands()
