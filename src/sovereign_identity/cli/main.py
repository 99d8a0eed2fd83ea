"""CLI entry point for sovereign-identity.

Invoked as::

    sovereign [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m sovereign_identity.cli.main

Commands
--------
version         Show detailed version information
keygen          Generate a new principal keypair
address         Show the derived identity address for an owner
composite       Compute a composite score and tier from four scores
create          Create an identity
show            Show a stored identity
scores          Show (defaulted) scores for an owner
details         Show detail metrics for a dimension
set-authority   Delegate a dimension to an authority (owner only)
update-score    Write a dimension score (authority only)
update-details  Write detail metrics for a dimension (authority only)
serve           Run the HTTP server

Commands that touch records use ``--store-file`` (or ``SOVEREIGN_STORE_FILE``)
as a JSON snapshot; without it they operate on a fresh in-memory store.
"""
from __future__ import annotations

import json
import sys
from typing import NoReturn

import click
from rich.console import Console
from rich.table import Table

from sovereign_identity.scoring.dimensions import Dimension

console = Console()

_DIMENSION_CHOICE = click.Choice([d.value for d in Dimension], case_sensitive=False)

_store_file_option = click.option(
    "--store-file",
    type=click.Path(dir_okay=False),
    envvar="SOVEREIGN_STORE_FILE",
    default=None,
    help="Path to a JSON snapshot file acting as a persistent store.",
)


def _fail(message: str) -> NoReturn:
    console.print(f"[red]Error:[/red] {message}")
    sys.exit(1)


# ------------------------------------------------------------------
# Root group
# ------------------------------------------------------------------


@click.group()
@click.version_option(package_name="sovereign-identity")
def cli() -> None:
    """Portable multi-dimensional reputation identities"""


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from sovereign_identity import __version__

    console.print(f"[bold]sovereign-identity[/bold] v{__version__}")


# ------------------------------------------------------------------
# Stateless helpers
# ------------------------------------------------------------------


@cli.command(name="keygen")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print as JSON.")
def keygen_command(as_json: bool) -> None:
    """Generate a new Ed25519 keypair usable as a principal."""
    from sovereign_identity.principal import generate_keypair

    keypair = generate_keypair()
    if as_json:
        click.echo(json.dumps(keypair.to_dict(), indent=2))
        return
    console.print(f"  Principal:   [bold]{keypair.principal.text}[/bold]")
    console.print(f"  Private key: {keypair.private_key.hex()}")


@cli.command(name="address")
@click.argument("owner")
def address_command(owner: str) -> None:
    """Show the identity address derived from OWNER."""
    from sovereign_identity.addressing import detail_address, identity_address

    principal = _parse_principal(owner)
    address = identity_address(principal)
    console.print(f"  Identity: [bold]{address.text}[/bold]")
    for dimension in Dimension:
        console.print(f"  {dimension.value + ' details:':<20} {detail_address(address, dimension).text}")


@cli.command(name="composite")
@click.argument("trading", type=int)
@click.argument("civic", type=int)
@click.argument("developer", type=int)
@click.argument("infra", type=int)
def composite_command(trading: int, civic: int, developer: int, infra: int) -> None:
    """Compute the composite score and tier for four dimension scores."""
    from sovereign_identity.errors import InvalidScore
    from sovereign_identity.scoring import calculate, points_to_next_tier

    try:
        result = calculate(trading, civic, developer, infra)
    except InvalidScore as exc:
        _fail(str(exc))

    console.print(f"  Composite: [bold]{result.composite}[/bold]")
    console.print(f"  Tier:      [bold]{int(result.tier)}[/bold] ({result.tier.display_name})")
    console.print(f"  To next:   {points_to_next_tier(result.composite, result.tier)}")


# ------------------------------------------------------------------
# create
# ------------------------------------------------------------------


@cli.command(name="create")
@click.argument("owner")
@_store_file_option
def create_command(owner: str, store_file: str | None) -> None:
    """Create an identity for OWNER."""
    from sovereign_identity.errors import AlreadyExists

    client = _load_client(store_file)
    principal = _parse_principal(owner)
    try:
        address = client.create_identity(principal)
    except AlreadyExists as exc:
        _fail(str(exc))
    _save_client(client, store_file)

    record = client.get_identity_strict(principal)
    console.print(f"[green]Created[/green] identity for [bold]{principal.text}[/bold]")
    console.print(f"  Address: {address.text}")
    console.print(f"  Tier:    {int(record.tier)} ({record.tier.display_name})")


# ------------------------------------------------------------------
# show / scores / details
# ------------------------------------------------------------------


@cli.command(name="show")
@click.argument("owner")
@_store_file_option
def show_command(owner: str, store_file: str | None) -> None:
    """Show the stored identity of OWNER (fails if it does not exist)."""
    from sovereign_identity.errors import NotFound

    client = _load_client(store_file)
    try:
        record = client.get_identity_strict(_parse_principal(owner))
    except NotFound as exc:
        _fail(str(exc))

    data = record.to_dict()
    console.print(f"  Owner:        [bold]{record.owner.text}[/bold]")
    console.print(f"  Address:      {record.address.text}")
    console.print(f"  Created:      {data['created_at']}")
    console.print(f"  Last updated: {data['last_updated']}")

    table = Table(title="Dimensions", show_header=True)
    table.add_column("Dimension", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Authority")
    for dimension in Dimension:
        table.add_row(
            dimension.value.capitalize(),
            str(record.score_for(dimension)),
            record.authority_for(dimension).text,
        )
    console.print(table)
    console.print(f"\n  Composite: [bold]{record.composite_score}[/bold]")
    console.print(f"  Tier:      [bold]{int(record.tier)}[/bold] ({record.tier.display_name})")


@cli.command(name="scores")
@click.argument("owner")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print as JSON.")
@_store_file_option
def scores_command(owner: str, as_json: bool, store_file: str | None) -> None:
    """Show scores for OWNER. An owner without an identity reads as tier 1."""
    client = _load_client(store_file)
    record = client.get_identity_or_default(_parse_principal(owner))
    scores = record.scores

    if as_json:
        click.echo(json.dumps({"exists": record.exists, **scores.to_dict()}, indent=2))
        return

    if not record.exists:
        console.print("[yellow]No identity found; showing default values.[/yellow]")

    table = Table(title=f"Scores for {record.owner.text}", show_header=True)
    table.add_column("Dimension", style="cyan")
    table.add_column("Score", justify="right")
    for dimension in Dimension:
        table.add_row(dimension.value.capitalize(), str(scores.get(dimension)))
    console.print(table)
    console.print(f"\n  Composite: [bold]{scores.composite}[/bold]")
    console.print(f"  Tier:      [bold]{int(scores.tier)}[/bold] ({scores.tier.display_name})")
    console.print(f"  To next:   {record.points_to_next_tier}")


@cli.command(name="details")
@click.argument("owner")
@click.argument("dimension", type=_DIMENSION_CHOICE)
@_store_file_option
def details_command(owner: str, dimension: str, store_file: str | None) -> None:
    """Show DIMENSION detail metrics recorded for OWNER."""
    client = _load_client(store_file)
    record = client.get_details(_parse_principal(owner), dimension)
    if record is None:
        _fail(f"No {dimension.lower()} details recorded for {owner!r}.")

    table = Table(title=f"{record.dimension.value.capitalize()} details", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    for name, value in record.metrics.model_dump().items():
        table.add_row(name, str(value))
    console.print(table)
    console.print(f"\n  Last updated: {record.to_dict()['last_updated']}")


# ------------------------------------------------------------------
# set-authority / update-score / update-details
# ------------------------------------------------------------------


@cli.command(name="set-authority")
@click.argument("owner")
@click.argument("dimension", type=_DIMENSION_CHOICE)
@click.argument("authority")
@click.option(
    "--caller",
    default=None,
    help="Principal performing the change. Defaults to OWNER.",
)
@_store_file_option
def set_authority_command(
    owner: str,
    dimension: str,
    authority: str,
    caller: str | None,
    store_file: str | None,
) -> None:
    """Delegate DIMENSION of OWNER's identity to AUTHORITY."""
    from sovereign_identity.errors import SovereignError

    client = _load_client(store_file)
    try:
        client.set_authority(
            _parse_principal(caller or owner),
            _parse_principal(owner),
            dimension,
            _parse_principal(authority),
        )
    except SovereignError as exc:
        _fail(str(exc))
    _save_client(client, store_file)

    console.print(
        f"[green]Set[/green] {dimension.lower()} authority of [bold]{owner}[/bold] to {authority}"
    )


@cli.command(name="update-score")
@click.argument("owner")
@click.argument("dimension", type=_DIMENSION_CHOICE)
@click.argument("score", type=int)
@click.option("--caller", required=True, help="Authority principal submitting the score.")
@_store_file_option
def update_score_command(
    owner: str,
    dimension: str,
    score: int,
    caller: str,
    store_file: str | None,
) -> None:
    """Write SCORE to DIMENSION of OWNER's identity."""
    from sovereign_identity.errors import SovereignError

    client = _load_client(store_file)
    try:
        record = client.update_score(
            _parse_principal(caller), _parse_principal(owner), dimension, score
        )
    except SovereignError as exc:
        _fail(str(exc))
    _save_client(client, store_file)

    console.print(f"[green]Updated[/green] {dimension.lower()} score to [bold]{score}[/bold]")
    console.print(f"  Composite: {record.composite_score}")
    console.print(f"  Tier:      {int(record.tier)} ({record.tier.display_name})")


@cli.command(name="update-details")
@click.argument("owner")
@click.argument("dimension", type=_DIMENSION_CHOICE)
@click.argument("metrics")
@click.option("--caller", required=True, help="Authority principal submitting the metrics.")
@_store_file_option
def update_details_command(
    owner: str,
    dimension: str,
    metrics: str,
    caller: str,
    store_file: str | None,
) -> None:
    """Write METRICS (a JSON object) as DIMENSION details of OWNER's identity."""
    from sovereign_identity.errors import SovereignError

    try:
        parsed = json.loads(metrics)
    except json.JSONDecodeError as exc:
        _fail(f"METRICS is not valid JSON: {exc}")
    if not isinstance(parsed, dict):
        _fail("METRICS must be a JSON object.")

    client = _load_client(store_file)
    try:
        client.update_details(_parse_principal(caller), _parse_principal(owner), dimension, parsed)
    except SovereignError as exc:
        _fail(str(exc))
    _save_client(client, store_file)

    console.print(f"[green]Recorded[/green] {dimension.lower()} details for [bold]{owner}[/bold]")


# ------------------------------------------------------------------
# serve
# ------------------------------------------------------------------


@cli.command(name="serve")
@click.option("--host", default=None, help="Bind address.")
@click.option("--port", type=int, default=None, help="TCP port.")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Logging level.",
)
@_store_file_option
def serve_command(
    host: str | None,
    port: int | None,
    log_level: str | None,
    store_file: str | None,
) -> None:
    """Run the HTTP server (blocking)."""
    from sovereign_identity.config import SovereignConfig
    from sovereign_identity.errors import WireFormatError
    from sovereign_identity.server.app import run_server

    overrides: dict[str, object] = {
        key: value
        for key, value in {
            "host": host,
            "port": port,
            "log_level": log_level,
            "store_file": store_file,
        }.items()
        if value is not None
    }
    config = SovereignConfig.model_validate({**SovereignConfig.from_env().model_dump(), **overrides})
    config.configure_logging()
    try:
        run_server(config)
    except WireFormatError as exc:
        _fail(f"Could not load store file: {exc}")


# ------------------------------------------------------------------
# Helpers: file-backed persistence for CLI use
# ------------------------------------------------------------------


def _parse_principal(text: str):  # type: ignore[no-untyped-def]
    """Parse a base58 principal or exit with an error."""
    from sovereign_identity.principal import Principal

    try:
        return Principal.from_text(text)
    except ValueError as exc:
        _fail(f"{text!r} is not a valid principal: {exc}")


def _load_client(store_file: str | None):  # type: ignore[no-untyped-def]
    """Return a SovereignClient, pre-populated from a snapshot file if given."""
    from sovereign_identity.client import SovereignClient
    from sovereign_identity.errors import WireFormatError
    from sovereign_identity.store.snapshot import load_snapshot

    try:
        store, ledger = load_snapshot(store_file)
    except WireFormatError as exc:
        _fail(f"Could not load store file: {exc}")
    return SovereignClient(store, ledger)


def _save_client(client, store_file: str | None) -> None:  # type: ignore[no-untyped-def]
    """Persist client state to a snapshot file."""
    from sovereign_identity.store.snapshot import save_snapshot

    if not store_file:
        return
    save_snapshot(client.store, client.ledger, store_file)


if __name__ == "__main__":
    cli()
