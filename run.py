#!/usr/bin/env python3
"""
Application Entry Script.

Usage:
    python run.py --help
    python run.py --action server --reload --verbose
    python run.py --action migrate
    python run.py --action config
    python run.py --action info
"""

import subprocess
import sys
from pathlib import Path

import click

from notecode.backend.core.logging import get_logger, log_with_source, setup_logging

PROJECT_ROOT = Path(__file__).parent
ALEMBIC_INI = PROJECT_ROOT / "notecode" / "backend" / "migrations" / "alembic.ini"


def validate_project_root() -> Path:
    """Validate that we're running from the project root."""
    if not (PROJECT_ROOT / ".project_root").exists():
        click.echo(
            click.style("Error: .project_root not found. Run from project root.", fg="red"),
            err=True,
        )
        sys.exit(1)
    return PROJECT_ROOT


@click.command()
@click.option(
    "--action",
    type=click.Choice(["server", "migrate", "config", "info"]),
    default="info",
    help="Action to perform.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable INFO level logging.")
@click.option("--debug", "-d", is_flag=True, help="Enable DEBUG level logging.")
@click.option("--host", default=None, help="Server host (for server action).")
@click.option("--port", default=None, type=int, help="Server port (for server action).")
@click.option("--reload", is_flag=True, help="Enable auto-reload (for server action).")
@click.option(
    "--revision",
    default="head",
    help="Target revision (for migrate action).",
)
def main(
    action: str,
    verbose: bool,
    debug: bool,
    host: str | None,
    port: int | None,
    reload: bool,
    revision: str,
) -> None:
    """
    NoteCode Entry Point.

    Run the API server, apply database migrations, or inspect configuration.

    Examples:

        python run.py --action server --reload --verbose

        python run.py --action migrate --revision head

        python run.py --action config
    """
    validate_project_root()

    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"
    else:
        log_level = "WARNING"

    setup_logging(level=log_level, format_type="console")
    logger = get_logger(__name__)

    logger.debug("Starting", extra={"action": action, "log_level": log_level})

    if action == "server":
        run_server(logger, host, port, reload)
    elif action == "migrate":
        run_migrations(logger, revision)
    elif action == "config":
        show_config(logger)
    elif action == "info":
        show_info(logger)


def run_server(logger, host: str | None, port: int | None, reload: bool) -> None:
    """Start the API server under uvicorn."""
    from notecode.backend.core.config import get_app_config

    server = get_app_config().application.server
    server_host = host or server.host
    server_port = port or server.port

    log_with_source(
        logger, "cli", "info", "Starting server",
        host=server_host, port=server_port, reload=reload,
    )

    cmd = [
        sys.executable, "-m", "uvicorn",
        "notecode.backend.main:app",
        "--host", server_host,
        "--port", str(server_port),
    ]
    if reload:
        cmd.append("--reload")

    click.echo(f"Starting server at http://{server_host}:{server_port}")
    click.echo("Press Ctrl+C to stop\n")

    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except subprocess.CalledProcessError as e:
        logger.error("Server failed to start", extra={"exit_code": e.returncode})
        sys.exit(e.returncode)


def run_migrations(logger, revision: str) -> None:
    """Upgrade the database schema with Alembic."""
    if not ALEMBIC_INI.exists():
        click.echo(click.style(f"Error: {ALEMBIC_INI} not found", fg="red"), err=True)
        sys.exit(1)

    cmd = [sys.executable, "-m", "alembic", "-c", str(ALEMBIC_INI), "upgrade", revision]
    log_with_source(logger, "cli", "info", "Running migrations", revision=revision)
    click.echo(f"Upgrading database to revision: {revision}")

    result = subprocess.run(cmd, cwd=PROJECT_ROOT)
    if result.returncode != 0:
        logger.error("Migration failed", extra={"exit_code": result.returncode})
        sys.exit(result.returncode)
    click.echo(click.style("Upgrade completed", fg="green"))


def _echo_section(title: str, values: dict) -> None:
    click.echo(f"\n{title}:")
    click.echo("-" * 40)
    for key, value in values.items():
        if isinstance(value, dict):
            click.echo(f"  {key}:")
            for k, v in value.items():
                click.echo(f"    {k}: {v}")
        else:
            click.echo(f"  {key}: {value}")


def show_config(logger) -> None:
    """Display loaded YAML configuration. Secrets are never printed."""
    from notecode.backend.core.config import get_app_config

    try:
        app_config = get_app_config()
    except (FileNotFoundError, ValueError) as e:
        logger.error("Failed to load configuration", extra={"error": str(e)})
        click.echo(click.style(f"Error loading configuration: {e}", fg="red"))
        sys.exit(1)

    click.echo("Application Configuration")
    _echo_section("Application", app_config.application.model_dump())
    _echo_section("Database", app_config.database.model_dump())
    _echo_section("Logging", app_config.logging.model_dump())
    _echo_section("Features", app_config.features.model_dump())
    _echo_section("Security", app_config.security.model_dump())

    logger.info("Configuration displayed")


def show_info(logger) -> None:
    """Display application information."""
    from notecode.backend.core.config import get_app_config

    try:
        application = get_app_config().application
        name, version = application.name, application.version
    except (RuntimeError, FileNotFoundError, ValueError):
        name, version = "NoteCode", "unknown"

    click.echo(f"{name} {version}")
    click.echo("=" * 40)
    click.echo("Available Actions:")
    click.echo("  --action server    Start the API server")
    click.echo("  --action migrate   Apply database migrations")
    click.echo("  --action config    Display configuration")
    click.echo("  --action info      Show this information")
    click.echo()
    click.echo("Logging Options:")
    click.echo("  --verbose, -v      Enable INFO level logging")
    click.echo("  --debug, -d        Enable DEBUG level logging")

    logger.debug("Info displayed")


if __name__ == "__main__":
    main()
