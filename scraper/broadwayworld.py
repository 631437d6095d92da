"""Scraper for BroadwayWorld Dallas regional theatre listings."""
import logging
from datetime import date
from typing import List, Optional

import requests

from processor.models import Event
from scraper.anchor_fallback import AnchorFallbackExtractor
from scraper.structured_data import StructuredDataExtractor

logger = logging.getLogger(__name__)


class BroadwayWorldScraper:
    """Scraper for the BroadwayWorld Dallas regional shows page."""

    BASE_URL = "https://www.broadwayworld.com"
    SOURCE_URL = "https://www.broadwayworld.com/dallas/regionalshows.cfm"
    SOURCE_NAME = "BroadwayWorld Dallas"
    CATEGORY = "Theatre"
    USER_AGENT = "DFWTheatrePersonalUse/1.0"

    def __init__(self, timeout: int = 30, source_url: Optional[str] = None):
        """
        Initialize the scraper.

        Args:
            timeout: HTTP request timeout in seconds (default: 30)
            source_url: Listings page to fetch (default: SOURCE_URL)
        """
        self.timeout = timeout
        self.source_url = source_url or self.SOURCE_URL
        self.structured = StructuredDataExtractor(
            source=self.SOURCE_NAME,
            category=self.CATEGORY,
            base_url=self.BASE_URL
        )
        self.fallback = AnchorFallbackExtractor(
            base_url=self.BASE_URL,
            source=self.SOURCE_NAME
        )

    def fetch_markup(self) -> str:
        """
        Fetch the listings page. Failures are not retried.

        Returns:
            HTML content as string

        Raises:
            requests.RequestException: On network error or non-success status
        """
        response = self.fetch_response()
        response.raise_for_status()
        return response.text

    def fetch_response(self) -> requests.Response:
        """Fetch the listings page without checking the status."""
        logger.info(f"Fetching listings page {self.source_url}")
        return requests.get(
            self.source_url,
            headers={'User-Agent': self.USER_AGENT},
            timeout=self.timeout
        )

    def extract_events(self, html: str, today: Optional[date] = None) -> List[Event]:
        """
        Extract candidate events, preferring structured data.

        The anchor fallback runs only when structured data yields nothing.

        Args:
            html: Raw page markup
            today: Reference date for the fallback's year-less ranges

        Returns:
            Candidate events in discovery order
        """
        events = self.structured.extract(html)
        if events:
            return events

        logger.info("No structured-data events found, using listing link fallback")
        return self.fallback.extract(html, today=today)

    def fetch_events(self) -> List[Event]:
        """
        Fetch the listings page and extract candidate events.

        Returns:
            List of candidate Event objects
        """
        events = self.extract_events(self.fetch_markup())
        logger.info(f"Successfully extracted {len(events)} candidate events")
        return events
