"""Extract theatre events from embedded JSON-LD blocks."""
import json
import logging
import re
from typing import Any, Dict, List, NamedTuple, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from dateutil import parser as dateparser

from processor.event_processor import clean_text, normalize_date
from processor.models import Event

logger = logging.getLogger(__name__)

STRUCTURED_DATA_TYPES = ('application/ld+json',)
EVENT_TYPE_PATTERN = re.compile(r'event', re.IGNORECASE)
TIME_OF_DAY_PATTERN = re.compile(r'\d{1,2}:\d{2}')


class ParsedBlock(NamedTuple):
    """Outcome of parsing one structured-data block."""
    ok: bool
    nodes: List[Dict[str, Any]]


def parse_block(text: Optional[str]) -> ParsedBlock:
    """
    Parse the JSON text of one block into a flat list of candidate nodes.

    A block may hold a single object, an array of objects, or an object
    carrying an "@graph" array.

    Args:
        text: Raw script contents

    Returns:
        ParsedBlock; ok is False when the text is not valid JSON
    """
    try:
        data = json.loads(text or '')
    except ValueError:
        return ParsedBlock(ok=False, nodes=[])

    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        return ParsedBlock(ok=True, nodes=[])

    nodes = []
    for entry in data:
        if not isinstance(entry, dict):
            continue
        graph = entry.get('@graph')
        if isinstance(graph, list):
            nodes.extend(node for node in graph if isinstance(node, dict))
        else:
            nodes.append(entry)
    return ParsedBlock(ok=True, nodes=nodes)


def find_blocks(html: str) -> List[str]:
    """Return the text of every structured-data script in the markup."""
    soup = BeautifulSoup(html or '', 'html.parser')
    blocks = []
    for script in soup.find_all('script'):
        content_type = (script.get('type') or '').split(';', 1)[0].strip().lower()
        if content_type in STRUCTURED_DATA_TYPES:
            blocks.append(script.string or script.get_text())
    return blocks


def is_event_node(node: Dict[str, Any]) -> bool:
    """
    Decide whether a node describes an event.

    Args:
        node: Parsed JSON-LD object

    Returns:
        True if its @type mentions "Event" or it carries a start/end date
    """
    declared = node.get('@type')
    types = declared if isinstance(declared, list) else [declared]
    if any(isinstance(t, str) and EVENT_TYPE_PATTERN.search(t) for t in types):
        return True
    return 'startDate' in node or 'endDate' in node


def _child(node: Any, key: str) -> Optional[Dict[str, Any]]:
    value = node.get(key) if isinstance(node, dict) else None
    if isinstance(value, list):
        value = next((item for item in value if isinstance(item, dict)), None)
    return value if isinstance(value, dict) else None


def _first_text(*candidates: Any) -> Optional[str]:
    for candidate in candidates:
        text = clean_text(candidate)
        if text:
            return text
    return None


def resolve_venue(node: Dict[str, Any]) -> Optional[str]:
    # location.name
    return _first_text((_child(node, 'location') or {}).get('name'))


def resolve_city(node: Dict[str, Any]) -> Optional[str]:
    # location.address.addressLocality, then addressRegion
    address = _child(_child(node, 'location'), 'address') or {}
    return _first_text(address.get('addressLocality'), address.get('addressRegion'))


def resolve_image(node: Dict[str, Any]) -> Optional[str]:
    image = node.get('image')
    if isinstance(image, list):
        image = image[0] if image else None
    if isinstance(image, dict):
        image = image.get('url')
    return clean_text(image)


def resolve_times(raw_start: Any) -> List[str]:
    """Render the time of day carried by a start date, if any."""
    if not isinstance(raw_start, str) or not TIME_OF_DAY_PATTERN.search(raw_start):
        return []
    try:
        moment = dateparser.isoparse(raw_start.strip())
    except (ValueError, OverflowError):
        return []
    suffix = 'AM' if moment.hour < 12 else 'PM'
    return [f"{moment.hour % 12 or 12}:{moment.minute:02d} {suffix}"]


class StructuredDataExtractor:
    """Turns JSON-LD event markup into candidate events."""

    def __init__(
        self,
        source: str,
        category: str,
        base_url: Optional[str] = None
    ):
        """
        Initialize the extractor.

        Args:
            source: Label identifying the scraped site
            category: Classification label given to every event
            base_url: Used to absolutize relative listing URLs
        """
        self.source = source
        self.category = category
        self.base_url = base_url

    def extract(self, html: str) -> List[Event]:
        """
        Extract events from every structured-data block in the markup.

        Malformed blocks and incomplete nodes are skipped.

        Args:
            html: Raw page markup

        Returns:
            Candidate events in discovery order
        """
        nodes = []
        blocks = find_blocks(html)
        for index, text in enumerate(blocks):
            parsed = parse_block(text)
            if not parsed.ok:
                logger.debug(f"Skipping unparseable structured-data block {index}")
                continue
            nodes.extend(parsed.nodes)

        events = []
        for node in nodes:
            if not is_event_node(node):
                continue
            event = self.node_to_event(node)
            if event:
                events.append(event)

        logger.info(
            f"Extracted {len(events)} events from {len(blocks)} structured-data blocks"
        )
        return events

    def node_to_event(self, node: Dict[str, Any]) -> Optional[Event]:
        """
        Map one event-like node to an Event.

        Args:
            node: Parsed JSON-LD object

        Returns:
            Event or None when the node has no usable name or start date
        """
        title = clean_text(node.get('name'))
        start_date = normalize_date(node.get('startDate'))
        if not title or not start_date:
            return None

        url = clean_text(node.get('url'))
        if url and self.base_url:
            url = urljoin(self.base_url, url)

        return Event(
            title=title,
            venue=resolve_venue(node),
            city=resolve_city(node),
            start_date=start_date,
            end_date=normalize_date(node.get('endDate')) or start_date,
            times=tuple(resolve_times(node.get('startDate'))),
            url=url,
            image=resolve_image(node),
            source=self.source,
            category=self.category
        )
