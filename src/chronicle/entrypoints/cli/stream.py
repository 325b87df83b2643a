"""CHRONICLE stream CLI: read-only views of the event log.

Nothing here writes. Commands open a unit of work, read, and roll back on
exit like any other unit of work that is never committed.

Requirements
- ``CHRONICLE_DB_URL`` must be set and the schema must be up to date.
"""

from __future__ import annotations

import json
from collections.abc import Sequence

import click
import click_extra as clickx
from rich.console import Console
from rich.table import Table

from chronicle.bootstrap import build_unit_of_work
from chronicle.interfaces.eventstore import EventEnvelope, StorageError

from .db import UPGRADE_SCHEMA_INSTRUCTIONS, get_checked_url
from .helpers import warn

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"  # pragma: no mutate


def render_events(events: Sequence[EventEnvelope], title: str) -> Table:
    """Build a Rich table with one row per envelope."""
    table = Table(title=title)
    table.add_column("seq", justify="right")
    table.add_column("stream")
    table.add_column("ver", justify="right")
    table.add_column("event type")
    table.add_column("recorded (UTC)")
    table.add_column("payload")
    for event in events:
        table.add_row(
            str(event.global_seq),
            f"{event.stream_type}:{event.stream_id}",
            str(event.version),
            event.event_type,
            event.recorded_at.strftime(TIMESTAMP_FORMAT) if event.recorded_at else "",
            json.dumps(event.payload, sort_keys=True),
        )
    return table


def _read(reader) -> Sequence[EventEnvelope]:
    url = get_checked_url()
    try:
        with build_unit_of_work(url) as uow:
            return reader(uow.eventstore)
    except StorageError as e:
        warn(UPGRADE_SCHEMA_INSTRUCTIONS)
        raise click.ClickException(f"Could not read the event store: {e}") from e


@click.group(cls=clickx.ExtraGroup)
def stream() -> None:
    """Inspect stored event streams."""


@stream.command()
@click.argument("stream_id")
def show(stream_id: str) -> None:
    """Show every event of STREAM_ID in version order."""
    events = _read(lambda store: store.read(stream_id))
    if not events:
        warn(f"Stream {stream_id!r} has no events.")
        return
    Console().print(render_events(events, title=f"Stream {stream_id}"))


@stream.command()
@click.option(
    "--after",
    "after",
    type=click.IntRange(min=0),
    default=0,
    show_default=True,
    help="Only show events with a global sequence number greater than this.",
)
@click.option(
    "--limit",
    "limit",
    type=click.IntRange(min=1),
    default=20,
    show_default=True,
    help="Maximum number of events to show.",
)
def tail(after: int, limit: int) -> None:
    """Show events across all streams in global order."""
    events = _read(lambda store: store.read_since(after, limit=limit))
    if not events:
        warn(f"No events after global sequence {after}.")
        return
    Console().print(render_events(events, title="Event log"))
