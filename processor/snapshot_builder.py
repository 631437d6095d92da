"""Build the snapshot persisted after each sync."""
from datetime import datetime, timezone
from typing import Iterable, Optional

from processor.models import Event, Snapshot

# Sorts after every real ISO date
MAX_DATE_SENTINEL = '9999-99-99'


def format_timestamp(moment: datetime) -> str:
    """
    Format a datetime as UTC ISO 8601 with millisecond precision.

    A naive datetime is taken to be in the local timezone.
    """
    utc = moment.astimezone(timezone.utc)
    return utc.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def build_snapshot(events: Iterable[Event], now: Optional[datetime] = None) -> Snapshot:
    """
    Sort events by start date and wrap them with generation metadata.

    Events without a start date sort last. Ties keep their input order.

    Args:
        events: Filtered, deduplicated events
        now: Generation time (defaults to the current UTC time)

    Returns:
        Snapshot ready to persist
    """
    ordered = sorted(events, key=lambda event: event.start_date or MAX_DATE_SENTINEL)
    generated_at = format_timestamp(now or datetime.now(timezone.utc))
    return Snapshot(generated_at=generated_at, events=tuple(ordered))
