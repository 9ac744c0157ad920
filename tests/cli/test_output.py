"""Tests for CLI output formatting."""

import json

from rich.console import Console
from rich.panel import Panel

from src.cli.output import format_segments_table, format_transmission_result, mask_secret
from src.transmission import TransmissionResult


def _render(renderable) -> str:
    console = Console(width=200, record=True)
    console.print(renderable)
    return console.export_text()


class TestSegmentsTable:

    def test_one_row_per_segment(self):
        table = format_segments_table("ISA*00~\nBEG*00*SA*WEB-1~\nIEA*1~")
        assert table.row_count == 3

    def test_elements_are_listed(self):
        text = _render(format_segments_table("BEG*00*SA*WEB-1~"))
        assert "00 | SA | WEB-1" in text


class TestTransmissionResult:

    def test_json(self):
        result = TransmissionResult(success=True, message="ok", transaction_id="VAN-1")
        data = json.loads(format_transmission_result(result, as_json=True))
        assert data == {"success": True, "message": "ok", "transactionId": "VAN-1"}

    def test_panel_success(self):
        result = TransmissionResult(success=True, message="ok", transaction_id="VAN-1")
        panel = format_transmission_result(result)
        assert isinstance(panel, Panel)
        assert panel.title == "Sent"
        assert "Transaction: VAN-1" in _render(panel)

    def test_panel_failure(self):
        panel = format_transmission_result(TransmissionResult(success=False, message="API error: 500"))
        assert panel.title == "Failed"
        assert "Transaction" not in _render(panel)


class TestMaskSecret:

    def test_shows_last_four(self):
        assert mask_secret("supersecret") == "***cret"

    def test_short_value(self):
        assert mask_secret("abc") == "***"

    def test_empty(self):
        assert mask_secret(None) == "—"
        assert mask_secret("") == "—"
