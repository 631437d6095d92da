"""Compose the processing stages from candidate events to a snapshot."""
import logging
from datetime import datetime
from typing import AbstractSet, Iterable, Optional

from processor.deduplicator import deduplicate
from processor.event_processor import EventProcessor
from processor.geo_filter import DEFAULT_ALLOWED_CITIES, filter_by_locality
from processor.models import Event, Snapshot
from processor.snapshot_builder import build_snapshot

logger = logging.getLogger(__name__)


def run_pipeline(
    candidates: Iterable[Event],
    allowed_cities: AbstractSet[str] = DEFAULT_ALLOWED_CITIES,
    now: Optional[datetime] = None
) -> Snapshot:
    """
    Normalize, deduplicate, filter and sort candidate events.

    Args:
        candidates: Extractor output in discovery order
        allowed_cities: Locality allow-list for the geographic filter
        now: Generation time for the snapshot

    Returns:
        Snapshot of the surviving events
    """
    normalized = EventProcessor().process_events(candidates)
    unique = deduplicate(normalized)
    local = filter_by_locality(unique, allowed_cities)
    snapshot = build_snapshot(local, now=now)

    logger.info(
        f"Pipeline kept {snapshot.count} events "
        f"({len(normalized)} normalized, {len(unique)} unique, {len(local)} in area)"
    )
    return snapshot
