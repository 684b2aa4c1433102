"""
copyplane CLI application - built with Click.

Commands:
    copyplane sanitize KEY...                 Show the secret key names keys map to
    copyplane eligibility SOURCE DESTINATION  Show the transfer strategy for two locations
    copyplane resolve-secret KEY              Read credentials from Secrets Manager
"""

import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from copyplane.core.config import AccessSettings, configure, get_settings
from copyplane.core.exceptions import CopyplaneError
from copyplane.core.logger import configure_default_logging
from copyplane.monitoring.prometheus import get_default_metrics
from copyplane.secrets.sanitizer import KeySanitizer
from copyplane.secrets.tokens import StaticSecretToken, TemporarySecretToken, resolve_secret_token
from copyplane.secrets.vault import create_vault
from copyplane.storage.factory import create_client_cache
from copyplane.storage.schema import LocationDescriptor
from copyplane.transfer.eligibility import choose_strategy

console = Console()


class OrderedGroup(click.Group):
    """Click Group that lists commands in the order they were added."""

    def list_commands(self, ctx):
        return list(self.commands.keys())


def _load_descriptor(value: str) -> LocationDescriptor:
    """Parse inline JSON, or JSON read from a file when prefixed with '@'."""
    try:
        text = Path(value[1:]).read_text() if value.startswith("@") else value
        return LocationDescriptor.from_dict(json.loads(text))
    except (OSError, TypeError, ValueError) as e:
        msg = f"Invalid location descriptor: {e}"
        raise click.BadParameter(msg) from e


def _mask(value: str) -> str:
    return value[:4] + "…" if len(value) > 4 else "…"


@click.group(cls=OrderedGroup)
@click.version_option(version="0.1.0", prog_name="copyplane")
@click.option("--log-level", default=None, help="Logging level (default: COPYPLANE_LOG_LEVEL or INFO)")
def cli(log_level):
    """
    copyplane - object-storage and secret access layer.

    \b
    Commands:
        sanitize         Map keys onto valid secret key names
        eligibility      Decide between direct copy and streaming
        resolve-secret   Read a credential token from Secrets Manager
    """
    configure(AccessSettings.from_env())
    configure_default_logging(log_level or get_settings().log_level)


@cli.command()
@click.argument("keys", nargs=-1, required=True)
def sanitize(keys):
    """Show the secret key name each KEY is stored under."""
    settings = get_settings()
    metrics = get_default_metrics() if settings.metrics_enabled else None
    sanitizer = KeySanitizer(limit=settings.key_size_limit, metrics=metrics)

    table = Table(title="Secret key names")
    table.add_column("Key")
    table.add_column("Stored as")
    table.add_column("Changed", justify="center")

    for key in keys:
        sanitized = sanitizer(key)
        table.add_row(key, sanitized, "yes" if sanitized != key else "no")

    console.print(table)


@cli.command()
@click.argument("source")
@click.argument("destination", required=False)
def eligibility(source, destination):
    """
    Show the transfer strategy for SOURCE to DESTINATION.

    Descriptors are JSON, inline or as @path/to/file.json, e.g.
    '{"type": "AmazonS3", "properties": {"bucketName": "b", "region": "eu-west-1"}}'
    """
    source_location = _load_descriptor(source)
    destination_location = _load_descriptor(destination) if destination else None

    strategy = choose_strategy(source_location, destination_location)
    console.print(f"[bold]{strategy.value}[/bold]")


@cli.command("resolve-secret")
@click.argument("key")
@click.option("--region", default=None, help="Vault region (default: COPYPLANE_VAULT_REGION)")
def resolve_secret(key, region):
    """Read the credential token stored under KEY, with secrets masked."""
    settings = get_settings()
    if region:
        settings = settings.with_vault_region(region)

    with create_client_cache(settings) as cache:
        try:
            vault = create_vault(cache, settings)
            token = resolve_secret_token(key, vault, metrics=cache.metrics)
        except CopyplaneError as e:
            raise click.ClickException(str(e)) from e

    table = Table(title=f"Secret '{key}'")
    table.add_column("Field")
    table.add_column("Value")

    match token:
        case TemporarySecretToken():
            table.add_row("variant", "temporary")
            table.add_row("accessKeyId", token.access_key_id)
            table.add_row("secretAccessKey", _mask(token.secret_access_key))
            table.add_row("sessionToken", _mask(token.session_token))
            table.add_row("expiration", str(token.expiration))
        case StaticSecretToken():
            table.add_row("variant", "static")
            table.add_row("accessKeyId", token.access_key_id)
            table.add_row("secretAccessKey", _mask(token.secret_access_key))

    console.print(table)
