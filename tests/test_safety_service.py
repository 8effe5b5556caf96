"""
Tests for safety_service.py
"""

import pytest
from datetime import datetime, timedelta
from models import SeverityLevel, WarningRecord
from services.safety_service import SafetyEvaluator
from services.warning_store import WarningStore
from utils.timestamps import EPOCH

NOW = datetime(2025, 3, 20, 22, 0)


def active(level, description, area_id="LSB"):
    return WarningRecord(
        area_id, NOW - timedelta(hours=1), NOW + timedelta(hours=1), level, description
    )


def expired(level, description, area_id="LSB"):
    return WarningRecord(
        area_id, NOW - timedelta(hours=5), NOW - timedelta(hours=2), level, description
    )


class TestSafetyEvaluator:
    """Test cases for SafetyEvaluator"""

    def setup_method(self):
        self.store = WarningStore()
        self.evaluator = SafetyEvaluator(self.store)

    def test_no_area_id_is_not_applicable(self):
        """Test a point outside all districts is treated as unsafe"""
        assert tuple(self.evaluator.evaluate(None, NOW)) == (False, "Not applicable")
        assert tuple(self.evaluator.evaluate("", NOW)) == (False, "Not applicable")

    def test_no_records_for_area_is_safe(self):
        self.store.replace_all([active(SeverityLevel.RED, "Vento", area_id="PTO")])

        is_safe, reason = self.evaluator.evaluate("LSB", NOW)

        assert is_safe is True
        assert reason == "No active warnings for this area"

    def test_yellow_is_safe_but_reported(self):
        """Test a yellow warning keeps the area safe and surfaces its description"""
        self.store.replace_all([active(SeverityLevel.YELLOW, "Tempo Quente")])

        verdict = self.evaluator.evaluate("LSB", NOW)

        assert verdict.is_safe is True
        assert verdict.reason == "Tempo Quente"
        assert verdict.level is SeverityLevel.YELLOW

    @pytest.mark.parametrize("order", [0, 1])
    def test_red_beats_yellow_regardless_of_order(self, order):
        records = [active(SeverityLevel.YELLOW, "Chuva"), active(SeverityLevel.RED, "Vento")]
        if order:
            records.reverse()
        self.store.replace_all(records)

        assert tuple(self.evaluator.evaluate("LSB", NOW)) == (False, "Vento")

    def test_orange_is_unsafe(self):
        self.store.replace_all([active(SeverityLevel.ORANGE, "Agitação Marítima")])

        assert tuple(self.evaluator.evaluate("LSB", NOW)) == (False, "Agitação Marítima")

    def test_later_tie_overwrites_reason(self):
        """Test the last active record at the highest level supplies the reason"""
        self.store.replace_all(
            [
                active(SeverityLevel.ORANGE, "Vento"),
                active(SeverityLevel.ORANGE, "Neve"),
                active(SeverityLevel.YELLOW, "Chuva"),
            ]
        )

        assert tuple(self.evaluator.evaluate("LSB", NOW)) == (False, "Neve")

    def test_inactive_record_is_ignored(self):
        """Test a record whose window excludes now has no influence"""
        self.store.replace_all([expired(SeverityLevel.RED, "Vento")])

        verdict = self.evaluator.evaluate("LSB", NOW)

        assert tuple(verdict) == (True, "No active warnings")
        assert verdict.level is SeverityLevel.GREEN

    def test_inactive_red_does_not_mask_active_yellow(self):
        self.store.replace_all(
            [expired(SeverityLevel.RED, "Vento"), active(SeverityLevel.YELLOW, "Chuva")]
        )

        assert tuple(self.evaluator.evaluate("LSB", NOW)) == (True, "Chuva")

    def test_active_green_reports_not_applicable(self):
        self.store.replace_all([active(SeverityLevel.GREEN, "Nevoeiro")])

        assert tuple(self.evaluator.evaluate("LSB", NOW)) == (True, "Not applicable")

    def test_unknown_level_is_ignored(self):
        self.store.replace_all([active(None, "Misterioso")])

        assert tuple(self.evaluator.evaluate("LSB", NOW)) == (True, "No active warnings")

    def test_window_bounds_are_inclusive(self):
        record = WarningRecord("LSB", NOW, NOW, SeverityLevel.RED, "Vento")
        self.store.replace_all([record])

        assert tuple(self.evaluator.evaluate("LSB", NOW)) == (False, "Vento")

    def test_unparsable_bounds_never_active(self):
        """Test records with sentinel bounds stay inactive"""
        self.store.replace_all([WarningRecord("LSB", EPOCH, EPOCH, SeverityLevel.RED, "Vento")])

        assert self.evaluator.evaluate("LSB", NOW).is_safe is True

    def test_defaults_to_current_time(self):
        now = datetime.now()
        record = WarningRecord(
            "LSB", now - timedelta(days=1), now + timedelta(days=1), SeverityLevel.RED, "Vento"
        )
        self.store.replace_all([record])

        assert self.evaluator.evaluate("LSB").is_safe is False
