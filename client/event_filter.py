"""Filter and sort the event list shown to the user."""
import unicodedata
from datetime import datetime, time
from typing import Iterable, List, Optional, Sequence

from processor.models import Event, FilterCriteria, SortMode

# Sentinels substituted for a missing start date
SOONEST_MISSING_DATE = '9999-99-99'
LATEST_MISSING_DATE = ''

END_OF_DAY = time(23, 59, 59)


def _day_bound(iso_date: Optional[str], at: time) -> Optional[datetime]:
    if not iso_date:
        return None
    try:
        return datetime.combine(datetime.strptime(iso_date, '%Y-%m-%d').date(), at)
    except ValueError:
        return None


def overlaps_range(
    event_start: Optional[str],
    event_end: Optional[str],
    range_start: Optional[str],
    range_end: Optional[str]
) -> bool:
    """
    Check whether an event's run intersects the selected date range.

    An event without a start date always passes. Either range bound may
    be unset, leaving that side open.

    Args:
        event_start: Event start date (YYYY-MM-DD)
        event_end: Event end date, defaults to the start date
        range_start: Inclusive lower bound of the range
        range_end: Inclusive upper bound of the range

    Returns:
        True unless the event ends before the range or starts after it
    """
    if not event_start:
        return True

    starts = _day_bound(event_start, time.min)
    ends = _day_bound(event_end or event_start, END_OF_DAY)
    lower = _day_bound(range_start, time.min)
    upper = _day_bound(range_end, END_OF_DAY)

    if lower and ends and ends < lower:
        return False
    if upper and starts and starts > upper:
        return False
    return True


def search_text(event: Event) -> str:
    """Lowercased text searched by the free-text query."""
    parts = [event.title, event.venue, event.city, event.source, event.category]
    return ' '.join(part or '' for part in parts).lower()


def matches(event: Event, criteria: FilterCriteria) -> bool:
    """Return True if the event passes every filter in the criteria."""
    if criteria.source and event.source != criteria.source:
        return False
    if criteria.category and event.category != criteria.category:
        return False
    if criteria.city and event.city != criteria.city:
        return False

    if not overlaps_range(event.start_date, event.end_date, criteria.start, criteria.end):
        return False

    query = criteria.q.strip().lower()
    if query and query not in search_text(event):
        return False
    return True


def title_sort_key(title: Optional[str]):
    """Collation key ordering titles case- and accent-insensitively."""
    folded = (title or '').casefold()
    stripped = ''.join(
        ch for ch in unicodedata.normalize('NFKD', folded)
        if not unicodedata.combining(ch)
    )
    return (stripped, folded, title or '')


def sort_events(events: Iterable[Event], mode: Optional[SortMode]) -> List[Event]:
    """
    Order events for display. Sorting is stable.

    "latest" places undated events last by sorting them as the smallest
    date in descending order.

    Args:
        events: Events to order
        mode: Sort mode, or None to keep the given order

    Returns:
        New ordered list
    """
    if mode == SortMode.SOONEST:
        return sorted(events, key=lambda e: e.start_date or SOONEST_MISSING_DATE)
    if mode == SortMode.LATEST:
        return sorted(events, key=lambda e: e.start_date or LATEST_MISSING_DATE, reverse=True)
    if mode == SortMode.TITLE:
        return sorted(events, key=lambda e: title_sort_key(e.title))
    return list(events)


def apply_filters(events: Sequence[Event], criteria: FilterCriteria) -> List[Event]:
    """
    Compute the visible events for the given criteria.

    Args:
        events: Every event in the loaded snapshot; left unchanged
        criteria: Current filter selections

    Returns:
        New list of matching events in display order
    """
    return sort_events((e for e in events if matches(e, criteria)), criteria.sort)
