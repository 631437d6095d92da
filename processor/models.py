"""Data models for theatre event listings."""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple


@dataclass(frozen=True)
class Event:
    """Canonical theatre event record."""
    title: str
    source: str
    category: str
    venue: Optional[str] = None
    city: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    times: Tuple[str, ...] = ()
    url: Optional[str] = None
    image: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the JSON shape served to clients."""
        return {
            'title': self.title,
            'venue': self.venue,
            'city': self.city,
            'startDate': self.start_date,
            'endDate': self.end_date,
            'times': list(self.times),
            'url': self.url,
            'image': self.image,
            'source': self.source,
            'category': self.category
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Event':
        """Build an Event from its serialized JSON shape."""
        times = data.get('times') or []
        return cls(
            title=data.get('title') or '',
            venue=data.get('venue') or None,
            city=data.get('city') or None,
            start_date=data.get('startDate') or None,
            end_date=data.get('endDate') or None,
            times=tuple(str(t) for t in times),
            url=data.get('url') or None,
            image=data.get('image') or None,
            source=data.get('source') or '',
            category=data.get('category') or ''
        )


@dataclass(frozen=True)
class Snapshot:
    """Result of one sync run, persisted and served as a whole."""
    generated_at: str
    events: Tuple[Event, ...]

    @property
    def count(self) -> int:
        return len(self.events)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'generatedAt': self.generated_at,
            'count': self.count,
            'events': [event.to_dict() for event in self.events]
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Snapshot':
        """
        Build a Snapshot from its serialized JSON shape.

        Raises:
            ValueError: If the payload is not a JSON object
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"Snapshot payload must be an object, got {type(data).__name__}")
        events = data.get('events')
        if not isinstance(events, list):
            events = []
        return cls(
            generated_at=data.get('generatedAt'),
            events=tuple(
                Event.from_dict(item) for item in events if isinstance(item, dict)
            )
        )


class SortMode(str, Enum):
    """Ordering applied to the visible event list."""
    SOONEST = 'soonest'
    LATEST = 'latest'
    TITLE = 'title'


@dataclass(frozen=True)
class FilterCriteria:
    """
    User-selected filters for the client event list.

    Empty strings and None mean "no constraint". Dates are ISO
    (YYYY-MM-DD) and both bounds are inclusive.
    """
    q: str = ''
    start: Optional[str] = None
    end: Optional[str] = None
    source: str = ''
    category: str = ''
    city: str = ''
    sort: Optional[SortMode] = SortMode.SOONEST

    @classmethod
    def from_form(cls, form: Mapping[str, Optional[str]]) -> 'FilterCriteria':
        """
        Rebuild criteria from raw form values.

        Args:
            form: Mapping of control name to its current string value

        Returns:
            FilterCriteria; an unrecognized sort value leaves order unchanged
        """
        sort_value = form.get('sort') or SortMode.SOONEST.value
        try:
            sort = SortMode(sort_value)
        except ValueError:
            sort = None

        return cls(
            q=(form.get('q') or '').strip().lower(),
            start=form.get('start') or None,
            end=form.get('end') or None,
            source=form.get('source') or '',
            category=form.get('category') or '',
            city=form.get('city') or '',
            sort=sort
        )


def empty_snapshot_payload() -> Dict[str, Any]:
    """Payload served when no snapshot has been stored yet."""
    return {'generatedAt': None, 'count': 0, 'events': []}
