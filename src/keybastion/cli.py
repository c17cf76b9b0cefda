"""Command-line interface for KeyBastion.

This module provides the CLI commands for running the API server and for
small offline security chores.
"""

import sys
from pathlib import Path
from typing import NoReturn

import click

from keybastion import __version__
from keybastion.core.config import get_settings
from keybastion.core.logging import configure_logging, get_logger


@click.group()
@click.version_option(version=__version__, prog_name="KeyBastion")
def cli() -> None:
    """KeyBastion - credential vault backend.

    Settings are read from KEYBASTION_* environment variables and .env.
    """


@cli.command()
@click.option("--host", type=str, default=None, help="Host to bind to (overrides config)")
@click.option("--port", type=int, default=None, help="Port to bind to (overrides config)")
@click.option(
    "--workers",
    type=int,
    default=None,
    help="Number of worker processes (overrides config)",
)
@click.option(
    "--reload",
    is_flag=True,
    default=False,
    help="Enable auto-reload for development",
)
def serve(host: str | None, port: int | None, workers: int | None, reload: bool) -> None:
    """Start the KeyBastion API server.

    With ephemeral signing keys or more than one worker, tokens issued by
    one process do not verify in another; configure PEM files for that.
    """
    import uvicorn

    settings = get_settings()

    bind_host = host or settings.host
    bind_port = port or settings.port
    bind_workers = workers or settings.workers

    configure_logging(settings)

    logger = get_logger(__name__)
    logger.info(
        "Starting KeyBastion server",
        host=bind_host,
        port=bind_port,
        workers=bind_workers,
        reload=reload,
        environment=settings.environment,
    )

    uvicorn.run(
        "keybastion.infrastructure.api.app:app",
        host=bind_host,
        port=bind_port,
        workers=1 if reload else bind_workers,
        reload=reload,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


@cli.command("generate-keys")
@click.option(
    "--out",
    "out_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("kb_data/keys"),
    show_default=True,
    help="Directory to write private.pem and public.pem into",
)
@click.option("--force", is_flag=True, help="Overwrite existing key files")
def generate_keys(out_dir: Path, force: bool) -> None:
    """Generate an RSA key pair for signing access tokens."""
    from keybastion.infrastructure.auth.key_loader import (
        generate_signing_keys,
        write_signing_keys,
    )

    existing = [p for p in (out_dir / "private.pem", out_dir / "public.pem") if p.exists()]
    if existing and not force:
        click.echo(f"Error: {existing[0]} already exists (use --force to overwrite)", err=True)
        sys.exit(1)

    private_path, public_path = write_signing_keys(generate_signing_keys(), out_dir)
    click.echo(f"Private key: {private_path}")
    click.echo(f"Public key:  {public_path}")
    click.echo("")
    click.echo("Set these in your environment:")
    click.echo(f"  KEYBASTION_RSA_PRIVATE_KEY_PATH={private_path}")
    click.echo(f"  KEYBASTION_RSA_PUBLIC_KEY_PATH={public_path}")


@cli.command("generate-password")
@click.option("--length", type=int, default=12, show_default=True, help="Password length")
@click.option("--lower/--no-lower", default=True, help="Include lowercase letters")
@click.option("--upper/--no-upper", default=True, help="Include uppercase letters")
@click.option("--digits/--no-digits", default=True, help="Include digits")
@click.option("--symbols/--no-symbols", default=True, help="Include symbols")
def generate_password(
    length: int, lower: bool, upper: bool, digits: bool, symbols: bool
) -> None:
    """Generate a random password and print its strength score."""
    from keybastion.domain.services.password_forge import (
        InvalidParametersError,
        default_password_forge,
    )

    try:
        password = default_password_forge.generate(length, lower, upper, digits, symbols)
    except InvalidParametersError as e:
        raise click.BadParameter(str(e), param_hint="--length / class flags") from e

    click.echo(password)
    click.echo(f"Strength: {default_password_forge.evaluate_strength(password)}/100")


@cli.command()
def info() -> None:
    """Display KeyBastion configuration information."""
    settings = get_settings()
    key_source = "PEM files" if settings.rsa_private_key_path else "ephemeral (generated at startup)"

    click.echo(f"""
KeyBastion v{settings.app_version}
{'=' * 40}
Environment:       {settings.environment}
Debug Mode:        {settings.debug}
API Prefix:        {settings.api_prefix}
Database:          {settings.database_url}
Signing Keys:      {key_source}
Access Token TTL:  {settings.access_token_expire_minutes} minutes
Refresh Token TTL: {settings.refresh_token_expire_days} days
Default Enc. Key:  {"yes (change it!)" if settings.uses_default_encryption_key else "no"}
""")


def main() -> NoReturn:
    """Main entry point for the CLI.

    This function is called when the `keybastion` command is run
    or when using `python -m keybastion`.
    """
    cli()


if __name__ == "__main__":
    main()
