"""Restrict events to the Dallas-Fort Worth area."""
import logging
from typing import AbstractSet, Iterable, List, Optional

from processor.models import Event

logger = logging.getLogger(__name__)

DEFAULT_ALLOWED_CITIES = frozenset({
    'DFW',
    'Dallas',
    'Fort Worth',
    'Arlington',
    'Plano',
    'Irving',
    'Garland',
    'Grand Prairie',
    'Mesquite',
    'Carrollton',
    'Richardson',
    'Addison',
    'Frisco',
    'McKinney',
    'Denton',
    'Lewisville',
    'Grapevine',
    'Farmers Branch',
})


def parse_allowed_cities(value: Optional[str]) -> AbstractSet[str]:
    """
    Parse a comma-separated allow-list, falling back to the DFW defaults.

    Args:
        value: Raw setting such as "Dallas, Fort Worth" or None

    Returns:
        Set of locality names
    """
    if not value or not value.strip():
        return DEFAULT_ALLOWED_CITIES
    return frozenset(part.strip() for part in value.split(',') if part.strip())


def filter_by_locality(
    events: Iterable[Event],
    allowed_cities: AbstractSet[str] = DEFAULT_ALLOWED_CITIES
) -> List[Event]:
    """
    Keep events in an allowed city, plus events with no city at all.

    Args:
        events: Deduplicated events
        allowed_cities: Locality names, matched exactly and case-sensitively

    Returns:
        New list of retained events, in input order
    """
    kept = []
    for event in events:
        if event.city is None or event.city in allowed_cities:
            kept.append(event)
        else:
            logger.debug(f"Dropping out-of-area event '{event.title}' in {event.city}")
    return kept
