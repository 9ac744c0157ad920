"""EDI document builders.

Turn storefront order, invoice and shipment payloads into immutable EDI
documents. Builders do no I/O; the only ambient input is today's date,
which every builder accepts as ``today`` so derived dates can be pinned.

Example:
    doc = generate_edi_850({"orderNumber": "WEB-123", ...})
    x12 = edi850_to_x12(doc)
"""

import logging
import math
from datetime import date, timedelta
from typing import Any

from src.edi.carriers import resolve_carrier, scac_for
from src.edi.inputs import (
    AcknowledgmentInput,
    InvoiceInput,
    OrderInput,
    ShipmentInput,
)
from src.edi.models import (
    CarrierInfo,
    EDI810Document,
    EDI810LineItem,
    EDI850Document,
    EDI850LineItem,
    EDI856Document,
    EDI856LineItem,
    EDI856Package,
    EDI997Acknowledgment,
    PackageDimensions,
    PartyName,
    PostalAddress,
)
from src.edi.validation import check_totals_810, check_totals_850, enforce_totals
from src.edi.x12 import X12Envelope, edi997_to_x12
from src.errors import FloorLinkError

logger = logging.getLogger(__name__)

DEFAULT_SELLER = PostalAddress(
    name="Nationwide Floorcovering",
    address="123 Flooring Street",
    city="New York",
    state="NY",
    zip="10001",
)

PO_UNIT_OF_MEASURE = "SQ FT"
REQUESTED_DELIVERY_DAYS = 14
INVOICE_DUE_DAYS = 30
TRANSIT_DAYS = 6


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, float):
        return math.isnan(value)
    return False


def _require(missing: list[str], path: str, value: Any) -> None:
    if _is_missing(value):
        missing.append(path)


def _raise_missing(transaction_set: str, missing: list[str]) -> None:
    if missing:
        raise FloorLinkError.from_code(
            "E-1001",
            transaction_set=transaction_set,
            fields=missing,
        )


def _parse_date(field: str, value: str) -> date:
    """Parse a YYYY-MM-DD date, tolerating a trailing time part."""
    text = value.strip().split(" ")[0].split("T")[0]
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise FloorLinkError.from_code("E-1003", field=field, value=value) from None


def _address_line(address: PostalAddress) -> str:
    return f"{address.address}, {address.city}, {address.state} {address.zip}"


def generate_edi_850(
    order: OrderInput | dict,
    seller: PostalAddress = DEFAULT_SELLER,
    today: date | None = None,
    strict: bool = False,
) -> EDI850Document:
    """Build an 850 Purchase Order from a customer order.

    The customer block is used for both buyer and ship-to. Line numbers
    follow item order starting at 1.

    Args:
        order: Order payload (model or camelCase dict).
        seller: Selling party, defaults to the storefront.
        today: Reference date for defaults and the requested delivery date.
        strict: Raise E-2002 instead of warning when totals do not reconcile.

    Returns:
        Immutable EDI850Document.

    Raises:
        FloorLinkError: E-1001 for missing fields, E-1002 for no items,
            E-1003 for a malformed date, E-2002 on strict totals mismatch.
    """
    if isinstance(order, dict):
        order = OrderInput.model_validate(order)
    today = today or date.today()

    missing: list[str] = []
    _require(missing, "order_number", order.order_number)
    _require(missing, "total", order.total)
    for i, item in enumerate(order.items):
        _require(missing, f"items[{i}].sku", item.sku)
        _require(missing, f"items[{i}].quantity", item.quantity)
        _require(missing, f"items[{i}].unit_price", item.unit_price)
    _raise_missing("850", missing)
    if not order.items:
        raise FloorLinkError.from_code("E-1002", transaction_set="850")

    po_date = _parse_date("order_date", order.order_date) if order.order_date else today

    customer = PostalAddress(
        name=order.customer_name,
        address=order.customer_address,
        city=order.customer_city,
        state=order.customer_state,
        zip=order.customer_zip,
    )

    doc = EDI850Document(
        purchase_order_number=order.order_number,
        purchase_order_date=po_date.isoformat(),
        buyer=customer,
        seller=seller,
        ship_to=customer,
        line_items=[
            EDI850LineItem(
                line_number=i + 1,
                sku=item.sku,
                quantity=item.quantity,
                unit_of_measure=PO_UNIT_OF_MEASURE,
                unit_price=item.unit_price,
                product_description=item.name,
            )
            for i, item in enumerate(order.items)
        ],
        total_amount=order.total,
        requested_delivery_date=(today + timedelta(days=REQUESTED_DELIVERY_DAYS)).isoformat(),
    )

    enforce_totals("850", check_totals_850(doc), strict=strict)
    logger.info(
        "Built EDI 850 for PO %s with %d line(s)",
        doc.purchase_order_number,
        len(doc.line_items),
    )
    return doc


def generate_edi_810(
    invoice: InvoiceInput | dict,
    seller: PostalAddress = DEFAULT_SELLER,
    today: date | None = None,
    strict: bool = False,
) -> EDI810Document:
    """Build an 810 Invoice.

    Each line's extended price is the item total as submitted. The due
    date is ``today`` plus 30 days (Net 30).

    Args:
        invoice: Invoice payload (model or camelCase dict).
        seller: Invoicing party; its address is flattened to one line.
        today: Reference date for the due date.
        strict: Raise E-2002 instead of warning when totals do not reconcile.

    Returns:
        Immutable EDI810Document.
    """
    if isinstance(invoice, dict):
        invoice = InvoiceInput.model_validate(invoice)
    today = today or date.today()

    missing: list[str] = []
    _require(missing, "invoice_number", invoice.invoice_number)
    _require(missing, "invoice_date", invoice.invoice_date)
    _require(missing, "purchase_order_number", invoice.purchase_order_number)
    _require(missing, "subtotal", invoice.subtotal)
    _require(missing, "tax", invoice.tax)
    _require(missing, "total", invoice.total)
    for i, item in enumerate(invoice.items):
        _require(missing, f"items[{i}].sku", item.sku)
        _require(missing, f"items[{i}].quantity", item.quantity)
        _require(missing, f"items[{i}].unit_price", item.unit_price)
        _require(missing, f"items[{i}].total", item.total)
    _raise_missing("810", missing)
    if not invoice.items:
        raise FloorLinkError.from_code("E-1002", transaction_set="810")

    invoice_date = _parse_date("invoice_date", invoice.invoice_date)

    doc = EDI810Document(
        invoice_number=invoice.invoice_number,
        invoice_date=invoice_date.isoformat(),
        purchase_order_number=invoice.purchase_order_number,
        buyer=PartyName(name=invoice.customer_name, address=invoice.customer_address),
        seller=PartyName(name=seller.name, address=_address_line(seller)),
        line_items=[
            EDI810LineItem(
                line_number=i + 1,
                sku=item.sku,
                quantity=item.quantity,
                unit_price=item.unit_price,
                extended_price=item.total,
                product_description=item.name,
            )
            for i, item in enumerate(invoice.items)
        ],
        subtotal=invoice.subtotal,
        tax_amount=invoice.tax,
        total_amount=invoice.total,
        due_date=(today + timedelta(days=INVOICE_DUE_DAYS)).isoformat(),
    )

    enforce_totals("810", check_totals_810(doc), strict=strict)
    logger.info("Built EDI 810 invoice %s for PO %s", doc.invoice_number, doc.purchase_order_number)
    return doc


def generate_edi_856(
    shipment: ShipmentInput | dict,
    seller: PostalAddress = DEFAULT_SELLER,
    today: date | None = None,
) -> EDI856Document:
    """Build an 856 Advance Ship Notice.

    Packages without a number become ``PKG-<n>``. Items without a package
    are assigned to the first package. Estimated delivery is ship date
    plus six days.

    Args:
        shipment: Shipment payload (model or camelCase dict).
        seller: Ship-from party used when the shipment has none.
        today: Ship date used when the shipment has none.

    Returns:
        Immutable EDI856Document.

    Raises:
        FloorLinkError: E-1001 for missing fields, E-1003 for a malformed
            ship date, E-2001 for a carrier without a SCAC.
    """
    if isinstance(shipment, dict):
        shipment = ShipmentInput.model_validate(shipment)
    today = today or date.today()

    missing: list[str] = []
    _require(missing, "shipment_id", shipment.shipment_id)
    _require(missing, "purchase_order_number", shipment.purchase_order_number)
    _require(missing, "carrier", shipment.carrier)
    _require(missing, "tracking_number", shipment.tracking_number)
    _require(missing, "ship_to", shipment.ship_to)
    for i, pkg in enumerate(shipment.packages):
        _require(missing, f"packages[{i}].tracking_number", pkg.tracking_number)
        _require(missing, f"packages[{i}].weight", pkg.weight)
        _require(missing, f"packages[{i}].dimensions", pkg.dimensions)
    for i, item in enumerate(shipment.items):
        _require(missing, f"items[{i}].sku", item.sku)
        _require(missing, f"items[{i}].quantity", item.quantity)
    _raise_missing("856", missing)

    carrier = resolve_carrier(shipment.carrier)
    ship_date = _parse_date("ship_date", shipment.ship_date) if shipment.ship_date else today

    packages = [
        EDI856Package(
            package_number=pkg.package_number or f"PKG-{i + 1}",
            tracking_number=pkg.tracking_number,
            weight=pkg.weight,
            weight_unit="LB",
            dimensions=PackageDimensions(
                length=pkg.dimensions.length,
                width=pkg.dimensions.width,
                height=pkg.dimensions.height,
                unit="IN",
            ),
            carrier=carrier.value,
            service_level=shipment.service_level,
        )
        for i, pkg in enumerate(shipment.packages)
    ]
    first_package = packages[0].package_number if packages else None

    line_items = [
        EDI856LineItem(
            line_number=i + 1,
            sku=item.sku,
            quantity=item.quantity,
            quantity_shipped=item.quantity,
            unit_of_measure="EA",
            product_description=item.name,
            package_number=item.package_number or first_package,
        )
        for i, item in enumerate(shipment.items)
    ]

    doc = EDI856Document(
        shipment_id=shipment.shipment_id,
        purchase_order_number=shipment.purchase_order_number,
        invoice_number=shipment.invoice_number or f"INV-{shipment.purchase_order_number}",
        ship_date=ship_date.isoformat(),
        estimated_delivery_date=(ship_date + timedelta(days=TRANSIT_DAYS)).isoformat(),
        carrier=CarrierInfo(
            scac=scac_for(carrier),
            name=carrier.value,
            tracking_number=shipment.tracking_number,
        ),
        ship_from=shipment.ship_from or seller,
        ship_to=shipment.ship_to,
        packages=packages,
        line_items=line_items,
        total_weight=sum(p.weight for p in packages),
        total_packages=len(packages),
    )

    logger.info(
        "Built EDI 856 for shipment %s: %d package(s), %d item(s) via %s",
        doc.shipment_id,
        doc.total_packages,
        len(doc.line_items),
        doc.carrier.scac,
    )
    return doc


def build_acknowledgment(ack: AcknowledgmentInput | dict) -> EDI997Acknowledgment:
    """Build the 997 record for an inbound transaction set."""
    if isinstance(ack, dict):
        ack = AcknowledgmentInput.model_validate(ack)
    return EDI997Acknowledgment(
        transaction_set_id=ack.transaction_set_id,
        acknowledged_transaction_set=ack.acknowledged_transaction_set,
        status=ack.status,
        errors=ack.errors,
        group_control_number=ack.group_control_number,
    )


def generate_edi_997(
    ack: AcknowledgmentInput | dict,
    envelope: X12Envelope | None = None,
) -> str:
    """Build a 997 Functional Acknowledgment and return its X12 text.

    Args:
        ack: Acknowledgment payload.
        envelope: Interchange envelope of the document being acknowledged.

    Returns:
        X12 997 interchange.
    """
    record = build_acknowledgment(ack)
    if record.errors:
        logger.info(
            "Acknowledging %s %s as %s: %s",
            record.acknowledged_transaction_set.value,
            record.transaction_set_id,
            record.status,
            "; ".join(record.errors),
        )
    return edi997_to_x12(record, envelope)
