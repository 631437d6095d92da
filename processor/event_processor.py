"""Event processor for normalizing extracted event data."""
import logging
from datetime import datetime
from typing import Iterable, List, Optional

from dateutil import parser as dateparser

from processor.models import Event

logger = logging.getLogger(__name__)

# Formats tried after ISO 8601 parsing fails
DATE_FORMATS = [
    '%m/%d/%Y',      # US format
    '%m-%d-%Y',      # US format with dashes
    '%B %d, %Y',     # Full month name
    '%b %d, %Y',     # Abbreviated month name
    '%Y/%m/%d',      # Alternative ISO format
]


def normalize_date(value: object) -> Optional[str]:
    """
    Normalize a date or datetime value to ISO 8601 date format (YYYY-MM-DD).

    Args:
        value: Date string in ISO 8601 or a common US format

    Returns:
        ISO 8601 date string or None if the value cannot be parsed
    """
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    try:
        return dateparser.isoparse(text).date().isoformat()
    except (ValueError, OverflowError):
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date().isoformat()
        except ValueError:
            continue

    return None


def clean_text(value: object) -> Optional[str]:
    """Trim a string value; empty or non-string values become None."""
    if not isinstance(value, str):
        return None
    text = value.strip()
    return text or None


class EventProcessor:
    """Processor for normalizing candidate events into canonical form."""

    def process_events(self, raw_events: Iterable[Event]) -> List[Event]:
        """
        Normalize candidate events and drop those that cannot be listed.

        Args:
            raw_events: Candidate events from an extractor

        Returns:
            List of normalized events, in input order
        """
        raw_events = list(raw_events)
        processed_events = []

        for event in raw_events:
            processed_event = self.normalize_event(event)
            if processed_event:
                processed_events.append(processed_event)

        logger.info(
            f"Normalized {len(processed_events)} valid events out of "
            f"{len(raw_events)} candidates"
        )
        return processed_events

    def normalize_event(self, event: Event) -> Optional[Event]:
        """
        Normalize a single event.

        Args:
            event: Candidate Event object

        Returns:
            Normalized Event, or None when title or start date is missing
        """
        title = clean_text(event.title)
        if not title:
            logger.debug("Dropping event missing required field: title")
            return None

        start_date = normalize_date(event.start_date)
        if not start_date:
            logger.debug(
                f"Dropping event '{title}' with missing or invalid start date: "
                f"{event.start_date!r}"
            )
            return None

        end_date = normalize_date(event.end_date) or start_date

        return Event(
            title=title,
            venue=clean_text(event.venue),
            city=clean_text(event.city),
            start_date=start_date,
            end_date=end_date,
            times=tuple(t for t in (clean_text(t) for t in event.times) if t),
            url=clean_text(event.url),
            image=clean_text(event.image),
            source=clean_text(event.source) or '',
            category=clean_text(event.category) or ''
        )
