"""Private AKS DNS zone linker CLI (zone-linker).

Usage:
    zone-linker handle event.json          # Process an Event Grid payload
    zone-linker handle - < event.json      # Same, reading stdin
    zone-linker decode RESOURCE_ID         # Show how a resource id is decoded
    zone-linker encode-targets ID [ID...]  # Build the target vnets setting
"""

from __future__ import annotations

import sys
from typing import TextIO

import click

from .config import ENV_TARGET_VNETS, Config, encode_target_virtual_networks
from .errors import ConfigurationError, MalformedResourceIdError
from .main import run, setup_logging
from .resource_id import decode


@click.group()
@click.version_option(version="0.1.0", prog_name="zone-linker")
def cli() -> None:
    """Private AKS DNS zone linker (zone-linker).

    Links private DNS zones created for private AKS clusters to a fixed
    set of virtual networks.
    """
    pass


@cli.command()
@click.argument("event_file", type=click.File("r"), default="-")
def handle(event_file: TextIO) -> None:
    """Process an Event Grid payload (one event or an array of events)."""
    try:
        config = Config.from_env()
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e

    setup_logging(config.log_level_number)
    sys.exit(run(event_file.read(), config))


@cli.command("decode")
@click.argument("resource_id")
def decode_command(resource_id: str) -> None:
    """Decode a resource id into subscription, resource group and name."""
    try:
        identifier = decode(resource_id)
    except MalformedResourceIdError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Subscription:   {identifier.subscription_id}")
    click.echo(f"Resource group: {identifier.resource_group_name}")
    click.echo(f"Name:           {identifier.name}")


@cli.command("encode-targets")
@click.argument("resource_ids", nargs=-1, required=True)
def encode_targets(resource_ids: tuple[str, ...]) -> None:
    """Encode virtual network resource ids for the target vnets setting."""
    for resource_id in resource_ids:
        try:
            decode(resource_id)
        except MalformedResourceIdError as e:
            raise click.ClickException(str(e)) from e

    click.echo(f"{ENV_TARGET_VNETS}={encode_target_virtual_networks(list(resource_ids))}")


def main() -> None:
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
