"""Generate EDI documents from Odoo ERP records.

Reads sale orders, partners, order lines, stock pickings, stock moves and
products over JSON-RPC, maps them onto builder inputs, and returns X12.

Odoo many2one fields arrive as ``[id, "Display Name"]`` (or ``False``);
unset char fields arrive as ``False``.
"""

import logging
from datetime import date
from typing import Any

from pydantic import Field

from src.edi.builders import (
    DEFAULT_SELLER,
    generate_edi_810,
    generate_edi_850,
    generate_edi_856,
)
from src.edi.control_numbers import ControlNumberGenerator
from src.edi.inputs import (
    CheckoutOrderInput,
    CustomerInput,
    InvoiceInput,
    OrderInput,
    ShipmentInput,
)
from src.edi.models import EDI810Document, EDI850Document, EDIModel, PostalAddress
from src.edi.x12 import X12Envelope, edi810_to_x12, edi850_to_x12, edi856_to_x12
from src.errors import FloorLinkError, NotFoundError
from src.odoo.client import OdooClient
from src.odoo.provider import get_odoo_client

logger = logging.getLogger(__name__)

# Demo sales tax applied at checkout
CHECKOUT_TAX_RATE = 0.08

DEFAULT_PACKAGE_WEIGHT = 100
DEFAULT_PACKAGE_DIMENSIONS = {"length": 48, "width": 12, "height": 6}

ORDER_FIELDS_850 = ["name", "partner_id", "date_order", "order_line", "amount_total"]
ORDER_FIELDS_810 = ORDER_FIELDS_850 + ["amount_tax", "amount_untaxed"]
PARTNER_FIELDS = ["name", "email", "phone", "street", "city", "state_id", "zip", "country_id"]
PICKING_FIELDS = [
    "name",
    "origin",
    "partner_id",
    "scheduled_date",
    "move_ids_without_package",
    "carrier_tracking_ref",
]


class OrderEDIResult(EDIModel):
    """850 and 810 generated for one order, as documents and X12."""

    order_number: str
    edi850: EDI850Document
    edi850_x12: str
    edi810: EDI810Document
    edi810_x12: str


class OdooOrderEDIResult(EDIModel):
    """Odoo order created from a checkout, with its 850 and 810 X12."""

    odoo_order_id: int
    edi850: str = Field(..., description="X12 850")
    edi810: str = Field(..., description="X12 810")


def _m2o_id(value: Any) -> int | None:
    return value[0] if isinstance(value, (list, tuple)) and value else None


def _m2o_name(value: Any) -> str:
    return value[1] if isinstance(value, (list, tuple)) and len(value) > 1 else ""


def _text(record: dict, field: str) -> str:
    value = record.get(field)
    return value if isinstance(value, str) else ""


def _date_part(value: Any) -> str | None:
    """'2026-01-15 10:30:00' -> '2026-01-15'."""
    return value.split(" ")[0] if isinstance(value, str) and value else None


def _envelope(control_numbers: ControlNumberGenerator | None) -> X12Envelope | None:
    return control_numbers.next_envelope() if control_numbers else None


async def _client(client: OdooClient | None) -> OdooClient:
    return client or await get_odoo_client()


async def _read_one(client: OdooClient, model: str, record_id: int, fields: list[str], label: str) -> dict:
    records = await client.search_read(model, [["id", "=", record_id]], fields)
    if not records:
        raise NotFoundError(label, record_id)
    return records[0]


async def _read_products(client: OdooClient, product_ids: list[int], fields: list[str]) -> dict[int, dict]:
    if not product_ids:
        return {}
    products = await client.search_read(
        "product.product",
        [["id", "in", product_ids]],
        fields,
        limit=len(product_ids),
    )
    return {p["id"]: p for p in products}


def _sku(product: dict | None, product_id: int | None, use_barcode: bool = False) -> str:
    """Product SKU: internal reference, then barcode if allowed, then PROD-<id>."""
    product = product or {}
    if _text(product, "default_code"):
        return product["default_code"]
    if use_barcode and _text(product, "barcode"):
        return product["barcode"]
    return f"PROD-{product_id}"


async def _load_order(client: OdooClient, order_id: int, fields: list[str]) -> tuple[dict, dict, list[dict]]:
    """Read a sale order, its partner and its lines."""
    order = await _read_one(client, "sale.order", order_id, fields, "Order")
    partner_id = _m2o_id(order.get("partner_id"))
    partner = await _read_one(client, "res.partner", partner_id, PARTNER_FIELDS, "Customer")
    line_ids = order.get("order_line") or []
    lines = await client.search_read(
        "sale.order.line",
        [["id", "in", line_ids]],
        ["product_id", "product_uom_qty", "price_unit", "price_subtotal", "name"],
        limit=max(len(line_ids), 1),
    )
    return order, partner, lines


async def generate_edi_850_from_odoo(
    order_id: int,
    client: OdooClient | None = None,
    control_numbers: ControlNumberGenerator | None = None,
    seller: PostalAddress = DEFAULT_SELLER,
    strict: bool = False,
) -> str:
    """Read a sale.order from Odoo and return its X12 850.

    Args:
        order_id: Odoo sale.order id.
        client: Odoo client; defaults to the shared client.
        control_numbers: Envelope source; defaults to fixed control numbers.
        seller: Selling party for the N1*SE block.
        strict: Raise E-2002 when the order total does not reconcile.

    Returns:
        X12 850 interchange.

    Raises:
        NotFoundError: If the order or its customer does not exist.
    """
    client = await _client(client)
    order, partner, lines = await _load_order(client, order_id, ORDER_FIELDS_850)
    product_ids = [_m2o_id(line.get("product_id")) for line in lines]
    products = await _read_products(
        client, [p for p in product_ids if p], ["id", "default_code", "name", "barcode"]
    )

    doc = generate_edi_850(
        OrderInput(
            order_number=order["name"],
            order_date=_date_part(order.get("date_order")),
            customer_name=partner.get("name") or "",
            customer_address=_text(partner, "street"),
            customer_city=_text(partner, "city"),
            customer_state=_m2o_name(partner.get("state_id")),
            customer_zip=_text(partner, "zip"),
            items=[
                {
                    "sku": _sku(products.get(pid), pid, use_barcode=True),
                    "name": _text(line, "name"),
                    "quantity": line.get("product_uom_qty"),
                    "unit_price": line.get("price_unit"),
                }
                for line, pid in zip(lines, product_ids)
            ],
            total=order.get("amount_total"),
        ),
        seller=seller,
        strict=strict,
    )
    logger.info("Generated EDI 850 from Odoo order %s (%s)", order_id, order["name"])
    return edi850_to_x12(doc, _envelope(control_numbers))


async def generate_edi_810_from_odoo(
    order_id: int,
    client: OdooClient | None = None,
    control_numbers: ControlNumberGenerator | None = None,
    seller: PostalAddress = DEFAULT_SELLER,
    strict: bool = False,
) -> str:
    """Read a sale.order from Odoo and return its X12 810.

    The invoice number is ``INV-<order name>`` and each line's extended
    price is the Odoo line subtotal.

    Raises:
        NotFoundError: If the order or its customer does not exist.
    """
    client = await _client(client)
    order, partner, lines = await _load_order(client, order_id, ORDER_FIELDS_810)
    product_ids = [_m2o_id(line.get("product_id")) for line in lines]
    products = await _read_products(client, [p for p in product_ids if p], ["id", "default_code", "name"])

    address = PostalAddress(
        name=partner.get("name") or "",
        address=_text(partner, "street"),
        city=_text(partner, "city"),
        state=_m2o_name(partner.get("state_id")),
        zip=_text(partner, "zip"),
    )
    doc = generate_edi_810(
        InvoiceInput(
            invoice_number=f"INV-{order['name']}",
            invoice_date=_date_part(order.get("date_order")),
            purchase_order_number=order["name"],
            customer_name=partner.get("name") or "",
            customer_address=f"{address.address}, {address.city}, {address.state} {address.zip}",
            items=[
                {
                    "sku": _sku(products.get(pid), pid),
                    "name": _text(line, "name"),
                    "quantity": line.get("product_uom_qty"),
                    "unit_price": line.get("price_unit"),
                    "total": line.get("price_subtotal"),
                }
                for line, pid in zip(lines, product_ids)
            ],
            subtotal=order.get("amount_untaxed"),
            tax=order.get("amount_tax"),
            total=order.get("amount_total"),
        ),
        seller=seller,
        strict=strict,
    )
    logger.info("Generated EDI 810 from Odoo order %s (%s)", order_id, order["name"])
    return edi810_to_x12(doc, _envelope(control_numbers))


async def generate_edi_856_from_odoo(
    picking_id: int,
    tracking_number: str,
    carrier: str,
    client: OdooClient | None = None,
    control_numbers: ControlNumberGenerator | None = None,
    seller: PostalAddress = DEFAULT_SELLER,
) -> str:
    """Read a delivery (stock.picking) from Odoo and return its X12 856.

    The shipment goes out as one package whose weight is the sum of the
    product weights (100 LB if none are set). A tracking number already
    stored on the picking wins over ``tracking_number``.

    Args:
        picking_id: Odoo stock.picking id.
        tracking_number: Carrier tracking number.
        carrier: Carrier name (UPS, FEDEX, USPS, DHL).
        client: Odoo client; defaults to the shared client.
        control_numbers: Envelope source; defaults to fixed control numbers.
        seller: Ship-from party.

    Returns:
        X12 856 interchange.

    Raises:
        NotFoundError: If the delivery or its partner does not exist.
        FloorLinkError: E-2001 if the carrier has no SCAC.
    """
    client = await _client(client)
    picking = await _read_one(client, "stock.picking", picking_id, PICKING_FIELDS, "Delivery")
    partner = await _read_one(
        client,
        "res.partner",
        _m2o_id(picking.get("partner_id")),
        ["name", "street", "city", "state_id", "zip"],
        "Partner",
    )

    move_ids = picking.get("move_ids_without_package") or []
    moves = await client.search_read(
        "stock.move",
        [["id", "in", move_ids]],
        ["product_id", "product_uom_qty", "name"],
        limit=max(len(move_ids), 1),
    )
    product_ids = [_m2o_id(move.get("product_id")) for move in moves]
    products = await _read_products(
        client, [p for p in product_ids if p], ["id", "default_code", "name", "weight"]
    )
    total_weight = sum(p.get("weight") or 0 for p in products.values())

    reference = _text(picking, "origin") or picking["name"]
    tracking = _text(picking, "carrier_tracking_ref") or tracking_number
    state = _m2o_name(partner.get("state_id"))

    doc = generate_edi_856(
        ShipmentInput(
            shipment_id=picking["name"],
            purchase_order_number=reference,
            invoice_number=f"INV-{reference}",
            ship_date=_date_part(picking.get("scheduled_date")) or date.today().isoformat(),
            carrier=carrier,
            tracking_number=tracking,
            service_level="Ground",
            ship_from=seller,
            ship_to=PostalAddress(
                name=partner.get("name") or "",
                address=_text(partner, "street"),
                city=_text(partner, "city"),
                state=state.split(" ")[0] if state else "",
                zip=_text(partner, "zip"),
            ),
            packages=[
                {
                    "package_number": "PKG-001",
                    "tracking_number": tracking,
                    "weight": total_weight or DEFAULT_PACKAGE_WEIGHT,
                    "dimensions": DEFAULT_PACKAGE_DIMENSIONS,
                }
            ],
            items=[
                {
                    "sku": _sku(products.get(pid), pid),
                    "name": _text(move, "name"),
                    "quantity": move.get("product_uom_qty"),
                }
                for move, pid in zip(moves, product_ids)
            ],
        )
    )
    logger.info("Generated EDI 856 from Odoo delivery %s (%s)", picking_id, picking["name"])
    return edi856_to_x12(doc, _envelope(control_numbers))


async def update_odoo_with_tracking_and_generate_edi_856(
    order_id: int,
    tracking_number: str,
    carrier: str,
    client: OdooClient | None = None,
    control_numbers: ControlNumberGenerator | None = None,
    seller: PostalAddress = DEFAULT_SELLER,
) -> str:
    """Store tracking on an order's delivery, then generate its 856.

    The delivery is the stock.picking whose origin is ``SO<order_id>``.
    The tracking write is committed before the 856 is generated; a
    failure while generating does not roll it back.

    Raises:
        NotFoundError: If the order has no delivery.
    """
    client = await _client(client)
    pickings = await client.search_read(
        "stock.picking",
        [["origin", "=", f"SO{order_id}"]],
        ["id", "name"],
        limit=1,
    )
    if not pickings:
        raise NotFoundError("Delivery for order", order_id)

    picking_id = pickings[0]["id"]
    await client.write("stock.picking", [picking_id], {"carrier_tracking_ref": tracking_number})
    logger.info("Stored tracking %s on delivery %s", tracking_number, pickings[0]["name"])

    return await generate_edi_856_from_odoo(
        picking_id,
        tracking_number,
        carrier,
        client=client,
        control_numbers=control_numbers,
        seller=seller,
    )


async def _find_or_create_partner(client: OdooClient, customer: CustomerInput) -> int:
    if customer.email:
        existing = await client.search_read(
            "res.partner", [["email", "=", customer.email]], ["id"], limit=1
        )
        if existing:
            return existing[0]["id"]
    return await client.create(
        "res.partner",
        {
            "name": customer.name,
            "email": customer.email,
            "phone": customer.phone,
            "street": customer.address,
            "city": customer.city,
            "zip": customer.zip,
        },
    )


async def generate_all_edi_from_odoo(
    order: CheckoutOrderInput | dict,
    client: OdooClient | None = None,
    control_numbers: ControlNumberGenerator | None = None,
    seller: PostalAddress = DEFAULT_SELLER,
    strict: bool = False,
) -> OdooOrderEDIResult:
    """Create a checkout order in Odoo and generate its 850 and 810.

    The customer is matched by email or created. Each cart item must carry
    the Odoo product id it was sold from.

    Raises:
        FloorLinkError: E-1001 if a customer name or item product id is missing.
    """
    if isinstance(order, dict):
        order = CheckoutOrderInput.model_validate(order)

    missing = [] if order.customer.name else ["customer.name"]
    missing += [f"items[{i}].odoo_id" for i, item in enumerate(order.items) if item.odoo_id is None]
    if missing:
        raise FloorLinkError.from_code("E-1001", transaction_set="850", fields=missing)

    client = await _client(client)
    partner_id = await _find_or_create_partner(client, order.customer)
    odoo_order_id = await client.create(
        "sale.order",
        {
            "partner_id": partner_id,
            "order_line": [
                (
                    0,
                    0,
                    {
                        "product_id": item.odoo_id,
                        "product_uom_qty": item.quantity,
                        "price_unit": item.unit_price,
                    },
                )
                for item in order.items
            ],
        },
    )
    logger.info("Created Odoo sale order %s for partner %s", odoo_order_id, partner_id)

    edi850 = await generate_edi_850_from_odoo(
        odoo_order_id, client, control_numbers, seller=seller, strict=strict
    )
    edi810 = await generate_edi_810_from_odoo(
        odoo_order_id, client, control_numbers, seller=seller, strict=strict
    )
    return OdooOrderEDIResult(odoo_order_id=odoo_order_id, edi850=edi850, edi810=edi810)


def generate_edi_from_order(
    order: CheckoutOrderInput | dict,
    today: date | None = None,
    control_numbers: ControlNumberGenerator | None = None,
    seller: PostalAddress = DEFAULT_SELLER,
    strict: bool = False,
) -> OrderEDIResult:
    """Generate the 850 and 810 for a storefront checkout.

    The invoice subtotal is the sum of line totals, tax is 8% of it, and
    the invoice number is ``INV-<order number>``.

    Args:
        order: Checkout payload; needs an order number.
        today: PO and invoice date.
        control_numbers: Envelope source; defaults to fixed control numbers.
        seller: Selling party on both documents.
        strict: Raise E-2002 instead of warning on a totals mismatch.

    Returns:
        Both documents and their X12 text.
    """
    if isinstance(order, dict):
        order = CheckoutOrderInput.model_validate(order)
    today = today or date.today()
    customer = order.customer

    edi850 = generate_edi_850(
        OrderInput(
            order_number=order.order_number,
            order_date=today.isoformat(),
            customer_name=customer.name or "",
            customer_address=customer.address,
            customer_city=customer.city,
            customer_state=customer.state,
            customer_zip=customer.zip,
            items=[
                {"sku": i.sku, "name": i.name, "quantity": i.quantity, "unit_price": i.unit_price}
                for i in order.items
            ],
            total=order.total,
        ),
        seller=seller,
        today=today,
        strict=strict,
    )

    line_totals = [item.line_total() for item in order.items]
    subtotal = round(sum(t for t in line_totals if t is not None), 2)
    tax = round(subtotal * CHECKOUT_TAX_RATE, 2)

    edi810 = generate_edi_810(
        InvoiceInput(
            invoice_number=f"INV-{order.order_number}",
            invoice_date=today.isoformat(),
            purchase_order_number=order.order_number,
            customer_name=customer.name or "",
            customer_address=f"{customer.address}, {customer.city}, {customer.state} {customer.zip}",
            items=[
                {
                    "sku": item.sku,
                    "name": item.name,
                    "quantity": item.quantity,
                    "unit_price": item.unit_price,
                    "total": total,
                }
                for item, total in zip(order.items, line_totals)
            ],
            subtotal=subtotal,
            tax=tax,
            total=round(subtotal + tax, 2),
        ),
        seller=seller,
        today=today,
        strict=strict,
    )

    return OrderEDIResult(
        order_number=edi850.purchase_order_number,
        edi850=edi850,
        edi850_x12=edi850_to_x12(edi850, _envelope(control_numbers)),
        edi810=edi810,
        edi810_x12=edi810_to_x12(edi810, _envelope(control_numbers)),
    )
