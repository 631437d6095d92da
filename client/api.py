"""Client for the events read and sync endpoints."""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

import requests

from client.event_filter import apply_filters
from client.render import (
    BACKEND_MISSING_MESSAGE,
    NO_DATA_STATUS,
    NO_MATCHES_MESSAGE,
    Card,
    format_generated_at,
    option_values,
    render_cards,
)
from processor.models import Event, FilterCriteria, Snapshot

logger = logging.getLogger(__name__)


class SyncError(Exception):
    """Raised when the sync endpoint reports a failure."""


@dataclass
class ListView:
    """What the list area shows for the current criteria."""
    count: int
    cards: List[Card]
    empty_message: Optional[str] = None


@dataclass
class BrowserState:
    """Client state after the last load."""
    status: str = ''
    last_refresh: str = ''
    events: List[Event] = field(default_factory=list)
    backend_available: bool = False
    sources: List[str] = field(default_factory=list)
    categories: List[str] = field(default_factory=list)
    cities: List[str] = field(default_factory=list)
    notice: Optional[str] = None


class EventsClient:
    """Loads snapshots and triggers syncs over HTTP."""

    EVENTS_PATH = '/api/events'
    SYNC_PATH = '/api/sync-events'

    def __init__(self, base_url: str, timeout: int = 30):
        """
        Initialize the client.

        Args:
            base_url: Site root serving the API
            timeout: HTTP request timeout in seconds (default: 30)
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.state = BrowserState()

    def load(self) -> BrowserState:
        """
        Load the current snapshot.

        Any failure leaves the client in the "no data yet" state.

        Returns:
            Updated BrowserState
        """
        try:
            response = requests.get(
                self.base_url + self.EVENTS_PATH,
                headers={'Cache-Control': 'no-store'},
                timeout=self.timeout
            )
            response.raise_for_status()
            snapshot = Snapshot.from_dict(response.json())
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Failed to load events: {e}")
            self.state = BrowserState(status=NO_DATA_STATUS)
            return self.state

        events = list(snapshot.events)
        self.state = BrowserState(
            status=f"Loaded {len(events)} listings",
            last_refresh=format_generated_at(snapshot.generated_at),
            events=events,
            backend_available=True,
            sources=option_values(events, 'source'),
            categories=option_values(events, 'category'),
            cities=option_values(events, 'city')
        )
        return self.state

    def refresh(self) -> int:
        """
        Ask the backend to re-sync, then reload.

        Returns:
            Number of events in the new snapshot

        Raises:
            SyncError: If the sync endpoint reports a failure
        """
        self.state.status = "Refreshing…"
        try:
            response = requests.post(self.base_url + self.SYNC_PATH, timeout=self.timeout)
        except requests.RequestException as e:
            self.state.status = "Refresh error"
            self.state.notice = str(e)
            raise SyncError(str(e)) from e

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if not response.ok or not data.get('ok'):
            message = data.get('error') or "Refresh failed"
            self.state.status = "Refresh error"
            self.state.notice = message
            raise SyncError(message)

        count = data.get('count', 0)
        logger.info(f"Refreshed: {count} events")
        self.load()
        self.state.notice = f"Refreshed: {count} events"
        return count

    def view(self, criteria: Optional[FilterCriteria] = None) -> ListView:
        """
        Build the list view for the given criteria.

        Args:
            criteria: Current filters (default: no filters, soonest first)

        Returns:
            ListView with count, cards and any empty-state message
        """
        if not self.state.backend_available:
            return ListView(count=0, cards=[], empty_message=BACKEND_MISSING_MESSAGE)

        visible = apply_filters(self.state.events, criteria or FilterCriteria())
        return ListView(
            count=len(visible),
            cards=render_cards(visible),
            empty_message=None if visible else NO_MATCHES_MESSAGE
        )
