"""Unit tests for markup diagnostics."""
from scraper.diagnostics import inspect_markup


class TestInspectMarkup:
    """Test cases for inspect_markup."""

    def test_listing_page(self):
        html = """
        <html><head>
        <script type="application/ld+json">{}</script>
        <script>window.dataLayer = []; fetch("https://www.example.com/api/shows");</script>
        </head><body>
        <a href="regionalshows.cfm?showid=12">Show 12</a>
        <a href="/dallas/regionalshows.cfm?showid=34">Show 34</a>
        <a href="/about">About</a>
        </body></html>
        """
        report = inspect_markup(html, 200)

        checks = report['checks']
        assert checks['status'] == 200
        assert checks['length'] == len(html)
        assert checks['has_showid'] is True
        assert checks['has_regionalshows_link'] is True
        assert checks['has_ld_json'] is True
        assert checks['has_json_blob'] is True
        assert report['showLinks'] == [
            'regionalshows.cfm?showid=12',
            'regionalshows.cfm?showid=34',
        ]
        assert report['anchorLinks'] == [
            'regionalshows.cfm?showid=12',
            '/dallas/regionalshows.cfm?showid=34',
        ]
        assert report['apiHints'] == ['https://www.example.com/api/shows']

    def test_empty_page(self):
        report = inspect_markup('', 503)
        assert report['checks'] == {
            'status': 503,
            'length': 0,
            'has_showid': False,
            'has_regionalshows_link': False,
            'has_ld_json': False,
            'has_json_blob': False,
        }
        assert report['showLinks'] == []
        assert report['apiHints'] == []
        assert report['anchorLinks'] == []

    def test_samples_are_capped(self):
        html = ''.join(f'<a href="regionalshows.cfm?showid={i}">S</a>' for i in range(40))
        report = inspect_markup(html, 200)
        assert len(report['showLinks']) == 25
        assert len(report['anchorLinks']) == 25
