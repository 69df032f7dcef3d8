"""
Tests for calculation record persistence
"""

import json
import threading
from unittest.mock import MagicMock

from calculator import FreightCalculator
from sheetCredential import CalculationRecorder, build_record


def _result():
    return FreightCalculator.calculate({
        "width": 100,
        "length": 100,
        "height": 100,
        "weight": 12,
        "productType": "general",
        "shippingMethod": "land",
    })


class TestBuildRecord:
    """Test cases for record rows"""

    def test_row_layout(self):
        params = {"width": 100, "productType": "ทั่วไป"}
        row = build_record("U123", params, _result())

        assert row[0].endswith("+07:00")
        assert row[1] == "U123"
        assert json.loads(row[2]) == params
        assert row[3:] == [12.0, 1.0, 7500.0, "VOLUME", "SILVER"]

    def test_unknown_user(self):
        assert build_record(None, {}, _result())[1] == "unknown"


class TestCalculationRecorder:
    """Test cases for CalculationRecorder"""

    def setup_method(self):
        self.worksheet = MagicMock()
        self.factory = MagicMock(return_value=self.worksheet)
        self.recorder = CalculationRecorder(worksheet_factory=self.factory)

    def teardown_method(self):
        self.recorder.shutdown()

    def test_appends_row(self):
        assert self.recorder.record(["a", "b"]).result(timeout=5) is True
        self.worksheet.append_row.assert_called_once_with(["a", "b"], value_input_option="RAW")

    def test_worksheet_opened_once(self):
        self.recorder.record(["a", "b"]).result(timeout=5)
        self.recorder.record(["c", "d"]).result(timeout=5)
        self.factory.assert_called_once()

    def test_write_failure_is_logged_not_raised(self, caplog):
        self.worksheet.append_row.side_effect = RuntimeError("quota exceeded")

        assert self.recorder.record(["a", "b"]).result(timeout=5) is False
        assert "Failed to record calculation" in caplog.text

    def test_factory_failure_retried_on_next_record(self):
        self.factory.side_effect = [RuntimeError("auth failed"), self.worksheet]

        assert self.recorder.record(["a", "b"]).result(timeout=5) is False
        assert self.recorder.record(["a", "b"]).result(timeout=5) is True
        assert self.factory.call_count == 2

    def test_concurrent_writes_open_worksheet_once(self):
        """Test simultaneous first writes share one worksheet"""
        opened = threading.Event()

        def slow_factory():
            opened.wait(timeout=0.2)
            return self.worksheet

        factory = MagicMock(side_effect=slow_factory)
        recorder = CalculationRecorder(worksheet_factory=factory)
        try:
            futures = [recorder.record([str(i), "u"]) for i in range(4)]
            assert all(future.result(timeout=5) for future in futures)
        finally:
            opened.set()
            recorder.shutdown()

        factory.assert_called_once()
        assert self.worksheet.append_row.call_count == 4
