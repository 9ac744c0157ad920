"""Store generated EDI documents in Odoo.

Interchanges are saved as ``ir.attachment`` records on the sale order,
invoice or delivery they belong to, so they can be opened from the Odoo
UI. Transmission outcomes are posted to the order's chatter.
"""

import base64
import logging
from datetime import UTC, datetime

from pydantic import BaseModel

from src.errors import NotFoundError
from src.odoo.client import OdooClient
from src.odoo.provider import get_odoo_client

logger = logging.getLogger(__name__)

ATTACHMENT_DESCRIPTION = "EDI Document - X12 Format"
# mail.message subtype for internal notes
NOTE_SUBTYPE_ID = 2


class EDIAttachment(BaseModel):
    """EDI attachment read back from Odoo."""

    id: int
    name: str
    content: str
    create_date: str | None = None


class StoredOrderEDI(BaseModel):
    """Attachment ids of an order's stored 850 and 810."""

    edi850_attachment_id: int
    edi810_attachment_id: int


async def store_edi_in_odoo(
    content: str,
    file_name: str,
    model: str,
    record_id: int,
    client: OdooClient | None = None,
) -> int:
    """Attach an EDI document to an Odoo record.

    Args:
        content: X12 text.
        file_name: Attachment name, e.g. "EDI-850-PO-S00042.txt".
        model: Odoo model of the owning record, e.g. "sale.order".
        record_id: Id of the owning record.
        client: Odoo client; defaults to the shared client.

    Returns:
        The ir.attachment id.
    """
    client = client or await get_odoo_client()
    attachment_id = await client.create(
        "ir.attachment",
        {
            "name": file_name,
            "datas": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "res_model": model,
            "res_id": record_id,
            "mimetype": "text/plain",
            "description": ATTACHMENT_DESCRIPTION,
        },
    )
    logger.info("Stored %s on %s %s as attachment %s", file_name, model, record_id, attachment_id)
    return attachment_id


async def store_edi_850_in_odoo(
    edi850_x12: str, order_number: str, order_id: int, client: OdooClient | None = None
) -> int:
    return await store_edi_in_odoo(
        edi850_x12, f"EDI-850-PO-{order_number}.txt", "sale.order", order_id, client
    )


async def store_edi_810_in_odoo(
    edi810_x12: str, invoice_number: str, invoice_id: int, client: OdooClient | None = None
) -> int:
    return await store_edi_in_odoo(
        edi810_x12, f"EDI-810-INV-{invoice_number}.txt", "account.move", invoice_id, client
    )


async def store_edi_856_in_odoo(
    edi856_x12: str, shipment_id: str, picking_id: int, client: OdooClient | None = None
) -> int:
    return await store_edi_in_odoo(
        edi856_x12, f"EDI-856-ASN-{shipment_id}.txt", "stock.picking", picking_id, client
    )


async def get_edi_from_odoo(
    model: str, record_id: int, client: OdooClient | None = None
) -> list[EDIAttachment]:
    """List the EDI attachments of a record with decoded content.

    Attachments whose content is not UTF-8 text are skipped.
    """
    client = client or await get_odoo_client()
    records = await client.search_read(
        "ir.attachment",
        [
            ["res_model", "=", model],
            ["res_id", "=", record_id],
            ["name", "ilike", "EDI-"],
        ],
        ["id", "name", "datas", "create_date"],
    )
    attachments = []
    for r in records:
        try:
            content = base64.b64decode(r.get("datas") or "").decode("utf-8")
        except UnicodeDecodeError:
            logger.warning("Skipping attachment %s (%s): not UTF-8 text", r["id"], r["name"])
            continue
        attachments.append(
            EDIAttachment(
                id=r["id"],
                name=r["name"],
                content=content,
                create_date=r.get("create_date") or None,
            )
        )
    return attachments


async def generate_and_store_edi(
    order_id: int,
    edi850_x12: str,
    edi810_x12: str,
    client: OdooClient | None = None,
) -> StoredOrderEDI:
    """Attach an order's 850 and 810 to the sale order.

    The 810 is attached with model ``account.move`` but the sale order's
    id, since the invoice record may not exist yet.

    Raises:
        NotFoundError: If the sale order does not exist.
    """
    client = client or await get_odoo_client()
    orders = await client.search_read("sale.order", [["id", "=", order_id]], ["name"])
    if not orders:
        raise NotFoundError("Order", order_id)
    order_number = orders[0]["name"]

    edi850_id = await store_edi_850_in_odoo(edi850_x12, order_number, order_id, client)
    # TODO: attach to the posted account.move once invoices are created from orders
    edi810_id = await store_edi_810_in_odoo(edi810_x12, f"INV-{order_number}", order_id, client)
    return StoredOrderEDI(edi850_attachment_id=edi850_id, edi810_attachment_id=edi810_id)


async def log_edi_transmission(
    order_id: int,
    edi_type: str,
    status: str,
    details: str,
    client: OdooClient | None = None,
) -> int:
    """Post a note about an EDI transmission on a sale order.

    Args:
        order_id: Odoo sale.order id.
        edi_type: Transaction set, "850", "810" or "856".
        status: "sent" or "failed".
        details: Free text, e.g. the transmission message.

    Returns:
        The mail.message id.
    """
    client = client or await get_odoo_client()
    body = "\n".join(
        [
            f"EDI {edi_type} Transmission: {status.upper()}",
            f"Time: {datetime.now(UTC).isoformat()}",
            details,
        ]
    ).strip()
    message_id = await client.create(
        "mail.message",
        {
            "body": body,
            "model": "sale.order",
            "res_id": order_id,
            "message_type": "notification",
            "subtype_id": NOTE_SUBTYPE_ID,
        },
    )
    logger.info("Logged EDI %s transmission (%s) on order %s", edi_type, status, order_id)
    return message_id
