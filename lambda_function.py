"""AWS Lambda handlers for DFW theatre event sync and read endpoints."""
import json
import logging
import os
import time
from typing import Dict, Any, Optional

from processor.geo_filter import parse_allowed_cities
from processor.pipeline import run_pipeline
from scraper.broadwayworld import BroadwayWorldScraper
from scraper.diagnostics import inspect_markup
from storage.snapshot_store import SnapshotStore

ALLOWED_SYNC_METHODS = ('GET', 'POST')


# Configure JSON logging
class JsonFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name
        }

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def setup_logging(log_level: str = 'INFO') -> None:
    """
    Configure logging with JSON formatter.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    root_logger = logging.getLogger()

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root_logger.addHandler(handler)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def json_response(status_code: int, body: Any) -> Dict[str, Any]:
    """Build an API Gateway proxy response with a JSON body."""
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': 'application/json'},
        'body': json.dumps(body)
    }


def request_method(event: Optional[Dict[str, Any]]) -> Optional[str]:
    """
    Read the HTTP method from an API Gateway event.

    Returns:
        Upper-case method, or None for non-HTTP invocations (e.g. schedules)
    """
    if not isinstance(event, dict):
        return None
    method = event.get('httpMethod')
    if not method:
        http = (event.get('requestContext') or {}).get('http') or {}
        method = http.get('method')
    return method.upper() if method else None


def _build_scraper() -> BroadwayWorldScraper:
    return BroadwayWorldScraper(
        timeout=int(os.environ.get('TIMEOUT_SECONDS', '30')),
        source_url=os.environ.get('SOURCE_URL') or None
    )


def _build_store() -> SnapshotStore:
    return SnapshotStore(
        table_name=os.environ.get('TABLE_NAME', 'dfw-theatre'),
        snapshot_key=os.environ.get('SNAPSHOT_KEY', 'events.json')
    )


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Sync handler: fetch listings, build a snapshot and store it.

    Serves POST (and GET) /api/sync-events and scheduled invocations.

    Args:
        event: API Gateway or EventBridge event payload
        context: Lambda context object

    Returns:
        Response with {ok, count} on success, or an error body
    """
    setup_logging(os.environ.get('LOG_LEVEL', 'INFO'))
    logger = logging.getLogger(__name__)

    method = request_method(event)
    if method and method not in ALLOWED_SYNC_METHODS:
        return {'statusCode': 405, 'body': 'Method not allowed'}

    start_time = time.time()
    logger.info("Sync started", extra={'method': method})

    try:
        scraper = _build_scraper()
        store = _build_store()
        allowed_cities = parse_allowed_cities(os.environ.get('ALLOWED_CITIES'))

        try:
            html = scraper.fetch_markup()
        except Exception as e:
            logger.error(
                f"Failed to fetch listings page: {str(e)}",
                extra={'error_type': type(e).__name__},
                exc_info=True
            )
            return json_response(502, {
                'ok': False,
                'message': 'Failed to fetch listings page',
                'error': str(e),
                'error_type': type(e).__name__
            })

        snapshot = run_pipeline(scraper.extract_events(html), allowed_cities)

        try:
            store.save_snapshot(snapshot)
        except Exception as e:
            logger.error(
                f"Failed to store snapshot: {str(e)}",
                extra={'error_type': type(e).__name__},
                exc_info=True
            )
            return json_response(500, {
                'ok': False,
                'message': 'Failed to store snapshot',
                'error': str(e),
                'error_type': type(e).__name__
            })

        duration = time.time() - start_time
        logger.info(
            f"Sync completed with {snapshot.count} events",
            extra={'duration_seconds': round(duration, 2)}
        )
        return json_response(200, {'ok': True, 'count': snapshot.count})

    except Exception as e:
        duration = time.time() - start_time
        logger.error(
            f"Sync failed: {str(e)}",
            extra={
                'duration_seconds': round(duration, 2),
                'error_type': type(e).__name__
            },
            exc_info=True
        )
        return json_response(500, {
            'ok': False,
            'message': 'Sync failed',
            'error': str(e),
            'error_type': type(e).__name__
        })


def events_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Read handler for GET /api/events.

    Returns the stored snapshot, or an empty snapshot if none exists yet.
    """
    setup_logging(os.environ.get('LOG_LEVEL', 'INFO'))
    logger = logging.getLogger(__name__)

    try:
        payload = _build_store().load_payload()
    except Exception as e:
        logger.error(
            f"Failed to read snapshot: {str(e)}",
            extra={'error_type': type(e).__name__},
            exc_info=True
        )
        return json_response(500, {
            'message': 'Failed to read snapshot',
            'error': str(e),
            'error_type': type(e).__name__
        })

    return json_response(200, payload)


def diagnostics_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """Report which listing shapes the upstream page currently exposes."""
    setup_logging(os.environ.get('LOG_LEVEL', 'INFO'))
    logger = logging.getLogger(__name__)

    scraper = _build_scraper()
    try:
        response = scraper.fetch_response()
    except Exception as e:
        logger.error(f"Failed to fetch listings page: {str(e)}", exc_info=True)
        return json_response(502, {'error': str(e), 'error_type': type(e).__name__})

    report = inspect_markup(response.text, response.status_code)
    report['url'] = scraper.source_url
    return json_response(200, report)
