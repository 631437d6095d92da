"""Collapse repeated listings of the same show."""
import logging
from typing import Iterable, List, Tuple

from processor.models import Event

logger = logging.getLogger(__name__)


def identity_key(event: Event) -> Tuple[str, str, str]:
    """
    Build the identity key for an event.

    Args:
        event: Event to identify

    Returns:
        Tuple of (title, start date, venue), with missing parts as ''
    """
    return (event.title or '', event.start_date or '', event.venue or '')


def deduplicate(events: Iterable[Event]) -> List[Event]:
    """
    Keep the first occurrence of each identity key, preserving order.

    Args:
        events: Events in discovery order

    Returns:
        New list with later duplicates removed
    """
    seen = set()
    unique = []
    dropped = 0

    for event in events:
        key = identity_key(event)
        if key in seen:
            dropped += 1
            continue
        seen.add(key)
        unique.append(event)

    if dropped:
        logger.info(f"Dropped {dropped} duplicate events")
    return unique
