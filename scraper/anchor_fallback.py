"""Fallback extraction from listing links with inline date ranges."""
import logging
import re
from datetime import date
from typing import List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from processor.models import Event

logger = logging.getLogger(__name__)

# "(3/1 - 3/23)": month/day pairs without a year
DATE_RANGE_PATTERN = re.compile(r'\((\d{1,2})/(\d{1,2})\s*-\s*(\d{1,2})/(\d{1,2})\)')
CONTAINER_TAGS = ['tr', 'li', 'div']
MIN_TITLE_LENGTH = 4


class AnchorFallbackExtractor:
    """Derives minimal events from anchors whose row carries a date range."""

    def __init__(
        self,
        base_url: str,
        source: str,
        city: str = 'DFW',
        category: str = 'Mixed'
    ):
        """
        Initialize the extractor.

        Args:
            base_url: Site root used to absolutize hrefs
            source: Label identifying the scraped site
            city: Placeholder locality assigned to every event
            category: Generic classification label
        """
        self.base_url = base_url
        self.source = source
        self.city = city
        self.category = category

    def extract(self, html: str, today: Optional[date] = None) -> List[Event]:
        """
        Extract one event per anchor whose enclosing row has a date range.

        Ranges are placed in the current calendar year, so a range that
        crosses New Year is misread.

        Args:
            html: Raw page markup
            today: Reference date for the year (defaults to today)

        Returns:
            Candidate events in document order, not deduplicated
        """
        year = (today or date.today()).year
        soup = BeautifulSoup(html or '', 'html.parser')
        events = []

        for link in soup.find_all('a'):
            title = link.get_text().strip()
            if len(title) < MIN_TITLE_LENGTH:
                continue

            container = link.find_parent(CONTAINER_TAGS)
            context = container.get_text() if container else ''
            match = DATE_RANGE_PATTERN.search(context)
            if not match:
                continue

            start_month, start_day, end_month, end_day = (int(g) for g in match.groups())
            try:
                start = date(year, start_month, start_day)
                end = date(year, end_month, end_day)
            except ValueError:
                logger.debug(f"Skipping '{title}' with impossible date range {match.group(0)}")
                continue

            href = link.get('href')
            events.append(Event(
                title=title,
                venue=None,
                city=self.city,
                start_date=start.isoformat(),
                end_date=end.isoformat(),
                times=(),
                url=urljoin(self.base_url, href) if href else None,
                source=self.source,
                category=self.category
            ))

        logger.info(f"Extracted {len(events)} events from listing links")
        return events
