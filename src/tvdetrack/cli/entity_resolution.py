"""CLI helpers for platform, driver and vehicle resolution."""

from __future__ import annotations

from typing import Iterable

import click

from tvdetrack.utils.entity_resolver import NamedEntity, resolve_entity


def resolve_entity_or_exit(
    ctx: click.Context, entities: Iterable[NamedEntity], reference: str, kind: str
) -> str:
    """Resolve an entity name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_entity(entities, reference, kind)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
