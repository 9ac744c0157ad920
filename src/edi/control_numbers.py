"""Interchange control number allocation.

Trading partners reject interchanges that reuse an ISA13 control number,
so the API and CLI draw envelopes from a ControlNumberGenerator instead
of using the serializer defaults. Numbers run 1..999999999 and wrap.
"""

import json
import logging
import threading
from dataclasses import replace
from datetime import datetime
from pathlib import Path

from src.edi.x12 import MAX_CONTROL_NUMBER, X12Envelope
from src.errors import FloorLinkError

logger = logging.getLogger(__name__)


class ControlNumberGenerator:
    """Thread-safe source of interchange control numbers.

    When ``store_path`` is set the last issued number is written to a JSON
    file after every allocation and read back on construction.

    Attributes:
        store_path: Optional JSON file holding ``{"last": <int>}``.
        template: Envelope whose other values new envelopes inherit.
    """

    def __init__(
        self,
        store_path: Path | str | None = None,
        start: int = 0,
        template: X12Envelope | None = None,
    ) -> None:
        self.store_path = Path(store_path).expanduser() if store_path else None
        self.template = template or X12Envelope()
        self._lock = threading.Lock()
        self._last = self._load() if self.store_path else start

    def _load(self) -> int:
        if not self.store_path.exists():
            return 0
        try:
            data = json.loads(self.store_path.read_text())
            last = int(data["last"])
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise FloorLinkError.from_code(
                "E-4002", path=str(self.store_path), detail=str(e)
            ) from e
        logger.debug("Loaded control number %d from %s", last, self.store_path)
        return last

    def _save(self) -> None:
        try:
            self.store_path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.store_path.with_suffix(".tmp")
            tmp.write_text(json.dumps({"last": self._last}))
            tmp.replace(self.store_path)
        except OSError as e:
            raise FloorLinkError.from_code(
                "E-4001", operation="write", path=str(self.store_path)
            ) from e

    @property
    def last(self) -> int:
        """Most recently issued number, 0 before the first allocation."""
        return self._last

    def next(self) -> int:
        """Allocate the next control number."""
        with self._lock:
            self._last = self._last + 1 if self._last < MAX_CONTROL_NUMBER else 1
            if self.store_path:
                self._save()
            return self._last

    def next_envelope(self, **overrides: object) -> X12Envelope:
        """Allocate a number and return an envelope carrying it.

        The same number is used for the interchange and the group.

        Args:
            **overrides: X12Envelope fields to set on top of the template.
        """
        number = self.next()
        envelope = replace(
            self.template,
            interchange_control_number=number,
            group_control_number=number,
            timestamp=self.template.timestamp or datetime.now(),
        )
        if overrides:
            envelope = replace(envelope, **overrides)
        return envelope
