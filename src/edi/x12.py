"""X12 serializers for 850, 810, 856 and 997 transaction sets.

Each serializer wraps its transaction set in a single ISA/GS/ST envelope:

    ISA ... GS ... ST <body> SE GE IEA

Elements are separated by ``*`` and every segment ends with ``~``. The
sub-element separator ``>`` is declared in ISA16 but never used. Segments
are joined with the envelope's ``segment_separator``: a newline by
default for readability, or ``""`` for a continuous stream as most
trading partners expect.
"""

import math
from dataclasses import dataclass, replace
from datetime import datetime

from src.edi.models import (
    EDI810Document,
    EDI850Document,
    EDI856Document,
    EDI997Acknowledgment,
    TransactionSet,
)

ELEMENT_SEPARATOR = "*"
SEGMENT_TERMINATOR = "~"
SUBELEMENT_SEPARATOR = ">"

MAX_CONTROL_NUMBER = 999_999_999

# Functional identifier codes (GS01) per transaction set
FUNCTIONAL_IDS = {
    TransactionSet.PURCHASE_ORDER: "PO",
    TransactionSet.INVOICE: "IN",
    TransactionSet.SHIP_NOTICE: "SH",
    TransactionSet.FUNCTIONAL_ACK: "FA",
}

_DELIMITER_TABLE = str.maketrans(
    {
        ELEMENT_SEPARATOR: " ",
        SEGMENT_TERMINATOR: " ",
        SUBELEMENT_SEPARATOR: " ",
        "\n": " ",
        "\r": " ",
    }
)


@dataclass(frozen=True)
class X12Envelope:
    """Interchange and group header values.

    Attributes:
        sender_id: ISA06/GS02 sender, padded to 15 characters in ISA.
        receiver_id: ISA08/GS03 receiver, padded to 15 characters in ISA.
        interchange_control_number: ISA13/IEA02, rendered as 9 digits.
        group_control_number: GS06/GE02.
        transaction_control_number: ST02/SE02.
        usage_indicator: ISA15, "P" for production or "T" for test.
        timestamp: Envelope date and time. Defaults to now at render time.
        segment_separator: String placed between segments.
    """

    sender_id: str = "SENDER"
    receiver_id: str = "RECEIVER"
    interchange_control_number: int = 1
    group_control_number: int = 1
    transaction_control_number: str = "0001"
    usage_indicator: str = "P"
    timestamp: datetime | None = None
    segment_separator: str = "\n"

    def __post_init__(self) -> None:
        if not 1 <= self.interchange_control_number <= MAX_CONTROL_NUMBER:
            raise ValueError(
                f"interchange_control_number must be 1..{MAX_CONTROL_NUMBER}, "
                f"got {self.interchange_control_number}"
            )
        if self.usage_indicator not in ("P", "T"):
            raise ValueError(f"usage_indicator must be 'P' or 'T', got {self.usage_indicator!r}")

    def swapped(self) -> "X12Envelope":
        """Return this envelope with sender and receiver exchanged."""
        return replace(self, sender_id=self.receiver_id, receiver_id=self.sender_id)


def format_element(value: object) -> str:
    """Render an element value.

    Integral numbers drop their decimal part (``10.0`` becomes ``10``) and
    delimiter characters in text are replaced with spaces.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Y" if value else "N"
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return str(round(value, 6))
    if isinstance(value, int):
        return str(value)
    return str(value).translate(_DELIMITER_TABLE)


def segment(segment_id: str, *elements: object) -> str:
    """Build one terminated segment from its elements."""
    parts = [segment_id, *(format_element(e) for e in elements)]
    return ELEMENT_SEPARATOR.join(parts) + SEGMENT_TERMINATOR


def compact_date(iso_date: str) -> str:
    """YYYY-MM-DD to YYYYMMDD."""
    return iso_date.replace("-", "")


def to_cents(amount: float) -> int:
    """Convert a positive amount to integer cents, rounding half up."""
    return math.floor(amount * 100 + 0.5)


def split_segments(x12: str) -> list[str]:
    """Split an interchange into segments, with or without line framing.

    Returns:
        Segments without their terminators, in order.
    """
    return [s.strip() for s in x12.split(SEGMENT_TERMINATOR) if s.strip()]


class _TransactionWriter:
    """Collects body segments and wraps them in the interchange envelope."""

    def __init__(self, transaction_set: TransactionSet, envelope: X12Envelope | None) -> None:
        self.transaction_set = transaction_set
        self.envelope = envelope or X12Envelope()
        self.body: list[str] = []

    def add(self, segment_id: str, *elements: object) -> None:
        self.body.append(segment(segment_id, *elements))

    def _isa(self, now: datetime) -> str:
        env = self.envelope
        sender = format_element(env.sender_id).ljust(15)[:15]
        receiver = format_element(env.receiver_id).ljust(15)[:15]
        return ELEMENT_SEPARATOR.join(
            [
                "ISA",
                "00",
                " " * 10,
                "00",
                " " * 10,
                "ZZ",
                sender,
                "ZZ",
                receiver,
                now.strftime("%y%m%d"),
                now.strftime("%H%M"),
                "U",
                "00401",
                f"{env.interchange_control_number:09d}",
                "0",
                env.usage_indicator,
                SUBELEMENT_SEPARATOR,
            ]
        ) + SEGMENT_TERMINATOR

    def render(self) -> str:
        env = self.envelope
        now = env.timestamp or datetime.now()
        control = env.transaction_control_number
        segments = [
            self._isa(now),
            segment(
                "GS",
                FUNCTIONAL_IDS[self.transaction_set],
                env.sender_id,
                env.receiver_id,
                now.strftime("%Y%m%d"),
                now.strftime("%H%M"),
                env.group_control_number,
                "X",
                "004010",
            ),
            segment("ST", self.transaction_set.value, control),
            *self.body,
            # ST + body + SE
            segment("SE", len(self.body) + 2, control),
            segment("GE", 1, env.group_control_number),
            segment("IEA", 1, f"{env.interchange_control_number:09d}"),
        ]
        return env.segment_separator.join(segments)


def edi850_to_x12(doc: EDI850Document, envelope: X12Envelope | None = None) -> str:
    """Serialize a purchase order.

    Args:
        doc: Purchase order document.
        envelope: Envelope values; defaults give control number 000000001.

    Returns:
        X12 850 interchange text.
    """
    w = _TransactionWriter(TransactionSet.PURCHASE_ORDER, envelope)
    w.add("BEG", "00", "SA", doc.purchase_order_number, compact_date(doc.purchase_order_date))
    w.add("N1", "BY", doc.buyer.name)
    w.add("N3", doc.buyer.address)
    w.add("N4", doc.buyer.city, doc.buyer.state, doc.buyer.zip)
    w.add("N1", "SE", doc.seller.name)
    for item in doc.line_items:
        w.add(
            "PO1",
            item.line_number,
            item.quantity,
            item.unit_of_measure,
            item.unit_price,
            "",
            "BP",
            item.sku,
        )
        w.add("PID", "F", "", "", "", item.product_description)
    w.add("CTT", len(doc.line_items))
    return w.render()


def edi810_to_x12(doc: EDI810Document, envelope: X12Envelope | None = None) -> str:
    """Serialize an invoice. TDS carries the total in integer cents."""
    w = _TransactionWriter(TransactionSet.INVOICE, envelope)
    w.add(
        "BIG",
        compact_date(doc.invoice_date),
        doc.invoice_number,
        "",
        doc.purchase_order_number,
    )
    w.add("N1", "BT", doc.buyer.name)
    w.add("N1", "SE", doc.seller.name)
    for item in doc.line_items:
        w.add("IT1", item.line_number, item.quantity, "EA", item.unit_price, "", "BP", item.sku)
        w.add("PID", "F", "", "", "", item.product_description)
    w.add("TDS", to_cents(doc.total_amount))
    w.add("CAD", "", "", "", "", doc.payment_terms)
    return w.render()


def edi856_to_x12(doc: EDI856Document, envelope: X12Envelope | None = None) -> str:
    """Serialize an advance ship notice.

    The HL hierarchy is shipment (1), then one pack level per package
    (2..n+1, parent 1), then one item level per line item whose parent is
    the pack level of its package.
    """
    w = _TransactionWriter(TransactionSet.SHIP_NOTICE, envelope)
    now = w.envelope.timestamp or datetime.now()
    w.envelope = replace(w.envelope, timestamp=now)

    w.add("BSN", "00", doc.shipment_id, compact_date(doc.ship_date), now.strftime("%H%M"))
    w.add("DTM", "011", compact_date(doc.ship_date))
    w.add("DTM", "017", compact_date(doc.estimated_delivery_date))

    w.add("HL", 1, "", "S")
    w.add("TD5", "", "", "", "", doc.carrier.scac)
    w.add("REF", "CN", doc.carrier.tracking_number)
    w.add("N1", "SF", doc.ship_from.name)
    w.add("N3", doc.ship_from.address)
    w.add("N4", doc.ship_from.city, doc.ship_from.state, doc.ship_from.zip)
    w.add("N1", "ST", doc.ship_to.name)
    w.add("N3", doc.ship_to.address)
    w.add("N4", doc.ship_to.city, doc.ship_to.state, doc.ship_to.zip)

    pack_hl: dict[str, int] = {}
    for index, pkg in enumerate(doc.packages):
        pack_hl.setdefault(pkg.package_number, index + 2)
        w.add("HL", index + 2, 1, "P")
        w.add("MAN", "GM", pkg.tracking_number)
        w.add("TD1", "CTN", 1, pkg.weight, pkg.weight_unit)
        dims = pkg.dimensions
        w.add("TD3", "", "", "L", dims.length, "W", dims.width, "H", dims.height, dims.unit)

    for index, item in enumerate(doc.line_items):
        # Unknown package numbers hang off the first pack, or the shipment if none.
        parent = pack_hl.get(item.package_number, 2 if doc.packages else 1)
        w.add("HL", len(doc.packages) + index + 2, parent, "I")
        w.add("LIN", item.line_number, "BP", item.sku)
        w.add("SN1", "", item.quantity_shipped, item.unit_of_measure)
        w.add("PID", "F", "", "", "", item.product_description)

    w.add("CTT", len(doc.line_items))
    return w.render()


def edi997_to_x12(ack: EDI997Acknowledgment, envelope: X12Envelope | None = None) -> str:
    """Serialize a functional acknowledgment.

    ``envelope`` describes the interchange being acknowledged; the 997 goes
    back the other way, so sender and receiver are swapped. AK1 echoes the
    acknowledged group number when the record carries one, otherwise the
    envelope's group number.
    """
    inbound = envelope or X12Envelope()
    w = _TransactionWriter(TransactionSet.FUNCTIONAL_ACK, inbound.swapped())
    acknowledged = TransactionSet(ack.acknowledged_transaction_set)
    code = "A" if ack.accepted else "R"
    group = ack.group_control_number or inbound.group_control_number
    w.add("AK1", FUNCTIONAL_IDS[acknowledged], group)
    w.add("AK2", acknowledged.value, ack.transaction_set_id)
    w.add("AK5", code)
    w.add("AK9", code, 1, 1, 1 if ack.accepted else 0)
    return w.render()
