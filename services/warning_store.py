"""
In-memory warning index and forecast cache
"""

import logging
import threading
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from models import WarningRecord

logger = logging.getLogger(__name__)


class WarningStore:
    """
    Warning records grouped by warning area, rebuilt wholesale on refresh.

    The new index is built aside and swapped in under the lock, so a
    reader sees either the old complete index or the new one.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._index: Dict[str, Tuple[WarningRecord, ...]] = {}
        self.last_updated: Optional[datetime] = None

    def replace_all(self, records: Iterable[WarningRecord]) -> int:
        """
        Replace the whole index with a new batch of records.

        Args:
            records: Records in feed order

        Returns:
            Number of records indexed (records without an area are dropped)
        """
        grouped: Dict[str, List[WarningRecord]] = {}
        dropped = 0
        for record in records:
            if not record.area_id:
                dropped += 1
                continue
            grouped.setdefault(record.area_id, []).append(record)

        new_index = {area_id: tuple(items) for area_id, items in grouped.items()}
        indexed = sum(len(items) for items in new_index.values())

        with self._lock:
            self._index = new_index
            self.last_updated = datetime.now()

        if dropped:
            logger.debug(f"Dropped {dropped} warning records without an area id")
        logger.info(f"Indexed {indexed} warning records across {len(new_index)} areas")
        return indexed

    def lookup(self, area_id: Optional[str]) -> Tuple[WarningRecord, ...]:
        """Records for an area in insertion order; empty when absent"""
        if not area_id:
            return ()
        with self._lock:
            return self._index.get(area_id, ())

    def area_ids(self) -> List[str]:
        with self._lock:
            return list(self._index.keys())

    def __len__(self) -> int:
        with self._lock:
            return sum(len(items) for items in self._index.values())


class ForecastCache:
    """Raw forecast payloads by forecast area id; last fetch wins, never evicted"""

    def __init__(self):
        self._lock = threading.Lock()
        self._entries: Dict[str, Any] = {}

    def put(self, forecast_area_id: str, payload: Any):
        with self._lock:
            self._entries[forecast_area_id] = payload
        logger.debug(f"Cached forecast for {forecast_area_id}")

    def get(self, forecast_area_id: str) -> Optional[Any]:
        with self._lock:
            return self._entries.get(forecast_area_id)

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._entries.keys())
