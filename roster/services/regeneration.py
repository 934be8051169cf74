"""
Month regeneration markers

A month document in ``scheduleStatus`` records when the month was last
generated and whether a later change (a vacation approval, edit or removal)
requires it to be generated again. Marking a month also drops its cache entry.
"""
import logging
from typing import Iterable, List, Optional, Tuple

from roster.services.schedule_cache import ScheduleCache
from roster.services.schedule_types import utc_now_iso
from roster.storage import SCHEDULE_STATUS, DocumentStore, WriteBatch
from roster.utils.date_helpers import month_key

logger = logging.getLogger(__name__)


class RegenerationTracker:

    def __init__(self, store: DocumentStore, cache: ScheduleCache):
        self.store = store
        self.cache = cache

    def status(self, year: int, month: int) -> Optional[dict]:
        return self.store.get(SCHEDULE_STATUS, month_key(year, month))

    def needs_generation(self, year: int, month: int) -> bool:
        """True when the month was never generated or has been marked stale."""
        status = self.status(year, month)
        return status is None or bool(status.get('stale'))

    def mark_stale(self, months: Iterable[Tuple[int, int]], reason: str,
                   batch: Optional[WriteBatch] = None) -> List[Tuple[int, int]]:
        """
        Flag months for regeneration

        With a caller-supplied batch the markers are only queued; the caller
        commits and then calls forget_cached() with the returned months.
        Without one they are committed here and the cache entries dropped.
        """
        months = sorted(set(months))
        if not months:
            return months
        own_batch = batch is None
        if own_batch:
            batch = self.store.batch()
        for year, month in months:
            status = self.status(year, month) or {}
            batch.set(SCHEDULE_STATUS, month_key(year, month), {
                **status,
                'stale': True,
                'reason': reason,
                'marked_at': utc_now_iso(),
            })
        if own_batch:
            batch.commit()
            self.forget_cached(months)
        logger.info(f"Marked {len(months)} month(s) for regeneration: {reason}")
        return months

    def forget_cached(self, months: Iterable[Tuple[int, int]]) -> None:
        for key in months:
            self.cache.invalidate(key)

    def record_generated(self, batch: WriteBatch, year: int, month: int) -> None:
        """Queue the 'freshly generated' marker in the generation batch."""
        batch.set(SCHEDULE_STATUS, month_key(year, month), {
            'stale': False,
            'reason': None,
            'generated_at': utc_now_iso(),
        })

    def invalidate(self, year: int, month: int) -> None:
        self.cache.invalidate((year, month))
