"""Unit tests for the events API client."""
import pytest
import responses
from requests.exceptions import ConnectionError

from client.api import EventsClient, SyncError
from client.render import BACKEND_MISSING_MESSAGE, NO_MATCHES_MESSAGE
from processor.models import FilterCriteria

BASE_URL = 'https://dfw-theatre.example.com'
EVENTS_URL = BASE_URL + '/api/events'
SYNC_URL = BASE_URL + '/api/sync-events'

SNAPSHOT = {
    'generatedAt': '2025-02-10T15:30:00.000Z',
    'count': 2,
    'events': [
        {
            'title': 'Hamilton', 'venue': 'Winspear', 'city': 'Dallas',
            'startDate': '2025-03-01', 'endDate': '2025-03-23', 'times': [],
            'url': 'https://example.com/hamilton', 'image': None,
            'source': 'BroadwayWorld Dallas', 'category': 'Theatre'
        },
        {
            'title': 'Wicked', 'venue': 'Bass Hall', 'city': 'Fort Worth',
            'startDate': '2025-06-01', 'endDate': '2025-06-01', 'times': ['7:30 PM'],
            'url': None, 'image': None,
            'source': 'BroadwayWorld Dallas', 'category': 'Mixed'
        },
    ]
}


class TestEventsClientLoad:
    """Test cases for EventsClient.load."""

    @responses.activate
    def test_load_snapshot(self):
        responses.add(responses.GET, EVENTS_URL, json=SNAPSHOT, status=200)

        state = EventsClient(BASE_URL).load()

        assert state.status == 'Loaded 2 listings'
        assert state.backend_available
        assert state.last_refresh == '2025-02-10 15:30:00 UTC'
        assert [e.title for e in state.events] == ['Hamilton', 'Wicked']
        assert state.sources == ['BroadwayWorld Dallas']
        assert state.categories == ['Mixed', 'Theatre']
        assert state.cities == ['Dallas', 'Fort Worth']

    @responses.activate
    def test_load_empty_snapshot(self):
        responses.add(
            responses.GET, EVENTS_URL,
            json={'generatedAt': None, 'count': 0, 'events': []}, status=200
        )
        client = EventsClient(BASE_URL)

        state = client.load()
        view = client.view()

        assert state.last_refresh == 'Not yet'
        assert view.count == 0
        assert view.empty_message == NO_MATCHES_MESSAGE

    @responses.activate
    def test_load_failure_falls_back_to_no_data(self):
        responses.add(responses.GET, EVENTS_URL, body='nope', status=500)
        client = EventsClient(BASE_URL)

        state = client.load()
        view = client.view()

        assert state.status == 'No data yet (backend not added)'
        assert state.events == []
        assert view.cards == []
        assert view.empty_message == BACKEND_MISSING_MESSAGE
        assert len(responses.calls) == 1

    @responses.activate
    def test_load_unreachable(self):
        responses.add(responses.GET, EVENTS_URL, body=ConnectionError('down'))

        state = EventsClient(BASE_URL).load()

        assert not state.backend_available

    @responses.activate
    def test_load_invalid_json(self):
        responses.add(responses.GET, EVENTS_URL, body='<html>', status=200)

        assert not EventsClient(BASE_URL + '/').load().backend_available

    @responses.activate
    @pytest.mark.parametrize('body', ['null', '[]', '"events"'])
    def test_load_non_object_body(self, body):
        """Test that a JSON body other than an object is treated as no data."""
        responses.add(responses.GET, EVENTS_URL, body=body, status=200)

        state = EventsClient(BASE_URL).load()

        assert not state.backend_available
        assert state.status == 'No data yet (backend not added)'


class TestEventsClientView:
    """Test cases for EventsClient.view."""

    @responses.activate
    def test_view_filters_and_renders(self):
        responses.add(responses.GET, EVENTS_URL, json=SNAPSHOT, status=200)
        client = EventsClient(BASE_URL)
        client.load()

        view = client.view(FilterCriteria(q='bass'))

        assert view.count == 1
        assert view.cards[0].title == 'Wicked'
        assert view.cards[0].subtitle == 'Jun 1, 2025 • Bass Hall • Fort Worth • 7:30 PM'
        assert view.empty_message is None

    @responses.activate
    def test_view_no_matches(self):
        responses.add(responses.GET, EVENTS_URL, json=SNAPSHOT, status=200)
        client = EventsClient(BASE_URL)
        client.load()

        view = client.view(FilterCriteria(city='Plano'))

        assert view.count == 0
        assert view.empty_message == NO_MATCHES_MESSAGE


class TestEventsClientRefresh:
    """Test cases for EventsClient.refresh."""

    @responses.activate
    def test_refresh_success_reloads(self):
        responses.add(responses.POST, SYNC_URL, json={'ok': True, 'count': 2}, status=200)
        responses.add(responses.GET, EVENTS_URL, json=SNAPSHOT, status=200)
        client = EventsClient(BASE_URL)

        count = client.refresh()

        assert count == 2
        assert client.state.status == 'Loaded 2 listings'
        assert client.state.notice == 'Refreshed: 2 events'
        assert [call.request.method for call in responses.calls] == ['POST', 'GET']

    @responses.activate
    def test_refresh_failure_echoes_error(self):
        responses.add(
            responses.POST, SYNC_URL,
            json={'ok': False, 'error': '503 Server Error'}, status=502
        )
        client = EventsClient(BASE_URL)

        with pytest.raises(SyncError, match='503 Server Error'):
            client.refresh()

        assert client.state.status == 'Refresh error'
        assert client.state.notice == '503 Server Error'
        assert len(responses.calls) == 1

    @responses.activate
    def test_refresh_failure_without_body(self):
        responses.add(responses.POST, SYNC_URL, body='', status=500)

        with pytest.raises(SyncError, match='Refresh failed'):
            EventsClient(BASE_URL).refresh()

    @responses.activate
    def test_refresh_not_ok(self):
        responses.add(responses.POST, SYNC_URL, json={'ok': False}, status=200)

        with pytest.raises(SyncError, match='Refresh failed'):
            EventsClient(BASE_URL).refresh()

    @responses.activate
    def test_refresh_unreachable(self):
        responses.add(responses.POST, SYNC_URL, body=ConnectionError('down'))

        with pytest.raises(SyncError):
            EventsClient(BASE_URL).refresh()
