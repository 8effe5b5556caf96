"""
Safety evaluation of a warning area against its active warnings
"""

import logging
from datetime import datetime
from typing import Optional

from constants import (
    REASON_NO_ACTIVE_WARNINGS,
    REASON_NO_WARNINGS_FOR_AREA,
    REASON_NOT_APPLICABLE,
)
from models import SafetyVerdict, SeverityLevel
from services.warning_store import WarningStore

logger = logging.getLogger(__name__)


class SafetyEvaluator:
    """Decides whether a warning area is safe at a given instant"""

    def __init__(self, store: WarningStore):
        self.store = store

    def evaluate(self, area_id: Optional[str], now: Optional[datetime] = None) -> SafetyVerdict:
        """
        Evaluate the safety of a warning area.

        Only orange and red warnings make an area unsafe. Yellow warnings
        keep the area safe but their description is still reported.

        Args:
            area_id: Warning area code, None when outside all districts
            now: Evaluation instant (defaults to the current local time)

        Returns:
            SafetyVerdict with is_safe, reason and the highest active level
        """
        if not area_id:
            return SafetyVerdict(False, REASON_NOT_APPLICABLE)

        records = self.store.lookup(area_id)
        if not records:
            return SafetyVerdict(True, REASON_NO_WARNINGS_FOR_AREA, SeverityLevel.GREEN)

        if now is None:
            now = datetime.now()

        highest = SeverityLevel.GREEN
        reason = REASON_NO_ACTIVE_WARNINGS

        for record in records:
            level = record.severity_level
            if level is None or not record.is_active(now):
                continue

            # Later records at the same level take over the reason
            if level >= highest:
                highest = level
                if level is SeverityLevel.GREEN:
                    reason = REASON_NOT_APPLICABLE
                else:
                    reason = record.description or level.value

        is_safe = not highest.is_unsafe
        logger.debug(f"Area {area_id}: highest active level {highest.value}, safe={is_safe}")
        return SafetyVerdict(is_safe, reason, highest)
