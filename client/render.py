"""Presentation helpers for the event list."""
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from processor.models import Event

NO_MATCHES_MESSAGE = "No shows match those filters."
BACKEND_MISSING_MESSAGE = "No event data is available yet. The events backend has not been set up."
NO_DATA_STATUS = "No data yet (backend not added)"
NOT_REFRESHED_TEXT = "Not yet"


@dataclass(frozen=True)
class Card:
    """Display model for one event."""
    title: str
    date_text: str
    subtitle: str
    chips: Tuple[Tuple[str, str], ...]
    link: Optional[str]


def iso_to_pretty(iso_date: Optional[str]) -> str:
    """Format "2025-03-01" as "Mar 1, 2025"; missing dates read "TBA"."""
    if not iso_date:
        return "TBA"
    try:
        day = datetime.strptime(iso_date, '%Y-%m-%d')
    except ValueError:
        return iso_date
    return f"{day:%b} {day.day}, {day.year}"


def date_text(event: Event) -> str:
    if event.start_date and event.end_date and event.end_date != event.start_date:
        return f"{iso_to_pretty(event.start_date)} – {iso_to_pretty(event.end_date)}"
    return iso_to_pretty(event.start_date)


def build_card(event: Event) -> Card:
    """Build the display model for an event."""
    where = ' • '.join(part for part in (event.venue, event.city) if part)
    subtitle = date_text(event)
    if where:
        subtitle += f" • {where}"
    if event.times:
        subtitle += f" • {', '.join(event.times)}"

    chips = tuple(
        (label, value) for label, value in (
            ('Source', event.source),
            ('Type', event.category),
            ('City', event.city),
        ) if value
    )
    return Card(
        title=event.title,
        date_text=date_text(event),
        subtitle=subtitle,
        chips=chips,
        link=event.url
    )


def render_cards(events: Iterable[Event]) -> List[Card]:
    return [build_card(event) for event in events]


def option_values(events: Iterable[Event], attribute: str) -> List[str]:
    """
    Sorted distinct non-empty values of an event attribute.

    Args:
        events: Loaded events
        attribute: 'source', 'category' or 'city'

    Returns:
        Values for a filter select
    """
    return sorted({getattr(event, attribute) for event in events if getattr(event, attribute)})


def format_generated_at(generated_at: Optional[str]) -> str:
    """Human readable last-refresh time."""
    if not generated_at:
        return NOT_REFRESHED_TEXT
    try:
        moment = datetime.fromisoformat(generated_at.replace('Z', '+00:00'))
    except ValueError:
        return generated_at
    return moment.strftime('%Y-%m-%d %H:%M:%S %Z').strip()
