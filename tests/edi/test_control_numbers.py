"""Tests for src/edi/control_numbers.py."""

import json
import threading
from datetime import datetime

import pytest

from src.edi.control_numbers import ControlNumberGenerator
from src.edi.x12 import MAX_CONTROL_NUMBER, X12Envelope
from src.errors import FloorLinkError


class TestInMemory:
    def test_starts_at_one(self):
        gen = ControlNumberGenerator()
        assert gen.last == 0
        assert [gen.next(), gen.next(), gen.next()] == [1, 2, 3]

    def test_wraps_after_maximum(self):
        gen = ControlNumberGenerator(start=MAX_CONTROL_NUMBER - 1)
        assert gen.next() == MAX_CONTROL_NUMBER
        assert gen.next() == 1

    def test_concurrent_allocation_is_unique(self):
        gen = ControlNumberGenerator()
        results: list[int] = []
        lock = threading.Lock()

        def worker():
            for _ in range(100):
                n = gen.next()
                with lock:
                    results.append(n)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sorted(results) == list(range(1, 801))


class TestNextEnvelope:
    def test_uses_number_for_interchange_and_group(self):
        env = ControlNumberGenerator(start=41).next_envelope()
        assert env.interchange_control_number == 42
        assert env.group_control_number == 42
        assert env.timestamp is not None

    def test_inherits_template_and_overrides(self):
        template = X12Envelope(sender_id="FLOORCO", usage_indicator="T")
        gen = ControlNumberGenerator(template=template)

        env = gen.next_envelope(segment_separator="")

        assert env.sender_id == "FLOORCO"
        assert env.usage_indicator == "T"
        assert env.segment_separator == ""

    def test_template_timestamp_is_kept(self):
        stamp = datetime(2024, 3, 1, 9, 30)
        gen = ControlNumberGenerator(template=X12Envelope(timestamp=stamp))
        assert gen.next_envelope().timestamp == stamp


class TestPersistence:
    def test_numbers_survive_restart(self, tmp_path):
        store = tmp_path / "numbers.json"
        gen = ControlNumberGenerator(store_path=store)
        gen.next()
        gen.next()

        assert json.loads(store.read_text()) == {"last": 2}
        assert ControlNumberGenerator(store_path=store).next() == 3

    def test_creates_parent_directory(self, tmp_path):
        store = tmp_path / "nested" / "numbers.json"
        ControlNumberGenerator(store_path=store).next()
        assert store.exists()

    def test_corrupt_store_raises(self, tmp_path):
        store = tmp_path / "numbers.json"
        store.write_text("not json")
        with pytest.raises(FloorLinkError) as exc_info:
            ControlNumberGenerator(store_path=store)
        assert exc_info.value.code == "E-4002"
