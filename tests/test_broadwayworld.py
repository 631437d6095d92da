"""Unit tests for BroadwayWorldScraper."""
from datetime import date

import pytest
import requests
import responses
from requests.exceptions import HTTPError, Timeout

from scraper.broadwayworld import BroadwayWorldScraper

SOURCE_URL = "https://www.broadwayworld.com/dallas/regionalshows.cfm"

JSONLD_HTML = """
<html><head>
<script type="application/ld+json">
{"@type": "TheaterEvent", "name": "Hamilton", "startDate": "2025-03-01",
 "location": {"name": "Winspear Opera House",
              "address": {"addressLocality": "Dallas"}}}
</script>
</head><body>
<div><a href="/dallas/regionalshows.cfm?showid=1">Anchor Only Show</a> (3/1 - 3/2)</div>
</body></html>
"""

ANCHOR_HTML = """
<html><body>
<table><tr><td><a href="/dallas/regionalshows.cfm?showid=7">Chicago</a></td>
<td>(5/1 - 5/12)</td></tr></table>
</body></html>
"""


class TestBroadwayWorldScraper:
    """Test cases for BroadwayWorldScraper class."""

    @responses.activate
    def test_fetch_events_structured_data(self):
        """Test that structured data is preferred when present."""
        responses.add(responses.GET, SOURCE_URL, body=JSONLD_HTML, status=200)

        events = BroadwayWorldScraper(timeout=30).fetch_events()

        assert [e.title for e in events] == ['Hamilton']
        assert events[0].category == 'Theatre'
        assert events[0].city == 'Dallas'

    @responses.activate
    def test_fetch_events_sends_user_agent(self):
        responses.add(responses.GET, SOURCE_URL, body=ANCHOR_HTML, status=200)

        BroadwayWorldScraper().fetch_events()

        assert responses.calls[0].request.headers['User-Agent'] == 'DFWTheatrePersonalUse/1.0'

    @responses.activate
    def test_fetch_events_uses_fallback_without_structured_data(self):
        responses.add(responses.GET, SOURCE_URL, body=ANCHOR_HTML, status=200)

        events = BroadwayWorldScraper().fetch_events()

        assert len(events) == 1
        assert events[0].title == 'Chicago'
        assert events[0].city == 'DFW'
        assert events[0].url == 'https://www.broadwayworld.com/dallas/regionalshows.cfm?showid=7'

    def test_extract_events_fallback_when_blocks_have_no_events(self):
        html = (
            '<script type="application/ld+json">{"@type": "Organization"}</script>'
            + ANCHOR_HTML
        )
        events = BroadwayWorldScraper().extract_events(html, today=date(2025, 1, 1))
        assert [e.start_date for e in events] == ['2025-05-01']

    def test_extract_events_neither_shape(self):
        assert BroadwayWorldScraper().extract_events('<html></html>') == []

    @responses.activate
    def test_custom_source_url(self):
        url = 'https://example.com/listings'
        responses.add(responses.GET, url, body='<html></html>', status=200)

        assert BroadwayWorldScraper(source_url=url).fetch_events() == []
        assert responses.calls[0].request.url == url

    @responses.activate
    def test_error_status_is_not_retried(self):
        """Test that a server error is raised after a single attempt."""
        responses.add(responses.GET, SOURCE_URL, body='Server Error', status=500)

        with pytest.raises(HTTPError):
            BroadwayWorldScraper().fetch_events()

        assert len(responses.calls) == 1

    @responses.activate
    def test_timeout(self):
        responses.add(responses.GET, SOURCE_URL, body=Timeout('Request timed out'))

        with pytest.raises(requests.RequestException):
            BroadwayWorldScraper().fetch_markup()

    @responses.activate
    def test_fetch_response_does_not_raise(self):
        responses.add(responses.GET, SOURCE_URL, body='gone', status=404)

        response = BroadwayWorldScraper().fetch_response()

        assert response.status_code == 404
        assert response.text == 'gone'
