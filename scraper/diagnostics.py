"""Markup diagnostics for checking what the listings page exposes."""
import re
from typing import Any, Dict

from bs4 import BeautifulSoup

MAX_SAMPLES = 25
SHOW_LINK_PATTERN = re.compile(r'regionalshows\.cfm\?showid=\d+')
API_HINT_PATTERN = re.compile(r'https?://[^"\' ]+(api|json|feed|rss)[^"\' ]+', re.IGNORECASE)
JSON_BLOB_MARKERS = ('__NEXT_DATA__', 'window.__NUXT__', 'dataLayer')


def inspect_markup(html: str, status: int) -> Dict[str, Any]:
    """
    Report which listing shapes are present in the fetched markup.

    Args:
        html: Raw page markup
        status: HTTP status of the fetch

    Returns:
        Dict with presence checks and up to 25 samples of each link kind
    """
    html = html or ''
    soup = BeautifulSoup(html, 'html.parser')

    checks = {
        'status': status,
        'length': len(html),
        'has_showid': 'showid' in html,
        'has_regionalshows_link': 'regionalshows.cfm?showid=' in html,
        'has_ld_json': 'application/ld+json' in html,
        'has_json_blob': any(marker in html for marker in JSON_BLOB_MARKERS)
    }

    show_links = [m.group(0) for m in SHOW_LINK_PATTERN.finditer(html)][:MAX_SAMPLES]
    api_hints = [m.group(0) for m in API_HINT_PATTERN.finditer(html)][:MAX_SAMPLES]
    anchor_links = [
        a.get('href') for a in soup.select("a[href*='showid']")
    ][:MAX_SAMPLES]

    return {
        'checks': checks,
        'showLinks': show_links,
        'apiHints': api_hints,
        'anchorLinks': anchor_links
    }
