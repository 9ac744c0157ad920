"""API routes for EDI generated from Odoo records.

All endpoints use the /api/v1/odoo prefix. Missing records map to 404;
errors from the Odoo server itself are rendered as 502 by the app-level
OdooError handler.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from src.api.deps import get_control_numbers, get_odoo, get_settings
from src.api.schemas import (
    EDIAttachmentListResponse,
    EDIAttachmentResponse,
    ErrorResponse,
    OdooEDIResponse,
    OdooOrderCreatedResponse,
    OdooShipmentRequest,
)
from src.cli.config import FloorLinkConfig
from src.edi.control_numbers import ControlNumberGenerator
from src.edi.inputs import CheckoutOrderInput
from src.errors.domain import NotFoundError
from src.odoo.attachments import generate_and_store_edi, get_edi_from_odoo
from src.odoo.client import OdooClient
from src.odoo.edi_adapter import (
    generate_all_edi_from_odoo,
    generate_edi_810_from_odoo,
    generate_edi_850_from_odoo,
    generate_edi_856_from_odoo,
    update_odoo_with_tracking_and_generate_edi_856,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/odoo",
    tags=["odoo"],
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)

ATTACHMENT_MODELS = ("sale.order", "account.move", "stock.picking")


@router.get("/orders/{order_id}/edi/850", response_model=OdooEDIResponse)
async def get_order_850(
    order_id: int,
    client: OdooClient = Depends(get_odoo),
    control_numbers: ControlNumberGenerator = Depends(get_control_numbers),
    settings: FloorLinkConfig = Depends(get_settings),
) -> OdooEDIResponse:
    """Generate the 850 for an Odoo sale order.

    Raises:
        HTTPException: 404 if the order or its customer is missing.
    """
    try:
        x12 = await generate_edi_850_from_odoo(
            order_id,
            client,
            control_numbers,
            seller=settings.edi.seller,
            strict=settings.edi.strict_totals,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from None
    return OdooEDIResponse(record_id=order_id, transaction_set="850", x12=x12)


@router.get("/orders/{order_id}/edi/810", response_model=OdooEDIResponse)
async def get_order_810(
    order_id: int,
    client: OdooClient = Depends(get_odoo),
    control_numbers: ControlNumberGenerator = Depends(get_control_numbers),
    settings: FloorLinkConfig = Depends(get_settings),
) -> OdooEDIResponse:
    """Generate the 810 for an Odoo sale order.

    Raises:
        HTTPException: 404 if the order or its customer is missing.
    """
    try:
        x12 = await generate_edi_810_from_odoo(
            order_id,
            client,
            control_numbers,
            seller=settings.edi.seller,
            strict=settings.edi.strict_totals,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from None
    return OdooEDIResponse(record_id=order_id, transaction_set="810", x12=x12)


@router.post("/pickings/{picking_id}/edi/856", response_model=OdooEDIResponse)
async def create_picking_856(
    picking_id: int,
    body: OdooShipmentRequest,
    client: OdooClient = Depends(get_odoo),
    control_numbers: ControlNumberGenerator = Depends(get_control_numbers),
    settings: FloorLinkConfig = Depends(get_settings),
) -> OdooEDIResponse:
    """Generate the 856 for an Odoo delivery.

    Raises:
        HTTPException: 404 if the delivery or its partner is missing.
    """
    try:
        x12 = await generate_edi_856_from_odoo(
            picking_id,
            body.tracking_number,
            body.carrier,
            client,
            control_numbers,
            seller=settings.edi.seller,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from None
    return OdooEDIResponse(record_id=picking_id, transaction_set="856", x12=x12)


@router.post("/orders/{order_id}/tracking", response_model=OdooEDIResponse)
async def add_order_tracking(
    order_id: int,
    body: OdooShipmentRequest,
    client: OdooClient = Depends(get_odoo),
    control_numbers: ControlNumberGenerator = Depends(get_control_numbers),
    settings: FloorLinkConfig = Depends(get_settings),
) -> OdooEDIResponse:
    """Store tracking on an order's delivery and return the 856.

    Raises:
        HTTPException: 404 if the order has no delivery.
    """
    try:
        x12 = await update_odoo_with_tracking_and_generate_edi_856(
            order_id,
            body.tracking_number,
            body.carrier,
            client,
            control_numbers,
            seller=settings.edi.seller,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from None
    return OdooEDIResponse(record_id=order_id, transaction_set="856", x12=x12)


@router.post("/orders", response_model=OdooOrderCreatedResponse, status_code=201)
async def create_order(
    order: CheckoutOrderInput,
    store: bool = False,
    client: OdooClient = Depends(get_odoo),
    control_numbers: ControlNumberGenerator = Depends(get_control_numbers),
    settings: FloorLinkConfig = Depends(get_settings),
) -> OdooOrderCreatedResponse:
    """Create a checkout order in Odoo and generate its 850 and 810.

    Args:
        order: Checkout payload; every item needs ``odooId``.
        store: Also attach both interchanges to the new sale order.
        client: Odoo client (injected).
        control_numbers: Envelope source (injected).
        settings: Seller and totals policy (injected).

    Returns:
        New order id, both interchanges and, with ``store``, attachment ids.
    """
    result = await generate_all_edi_from_odoo(
        order,
        client,
        control_numbers,
        seller=settings.edi.seller,
        strict=settings.edi.strict_totals,
    )
    response = OdooOrderCreatedResponse(
        odoo_order_id=result.odoo_order_id,
        edi850=result.edi850,
        edi810=result.edi810,
    )
    if store:
        try:
            stored = await generate_and_store_edi(
                result.odoo_order_id, result.edi850, result.edi810, client
            )
        except NotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e)) from None
        response.edi850_attachment_id = stored.edi850_attachment_id
        response.edi810_attachment_id = stored.edi810_attachment_id
    return response


@router.get("/{model}/{record_id}/edi-attachments", response_model=EDIAttachmentListResponse)
async def list_edi_attachments(
    model: str,
    record_id: int,
    client: OdooClient = Depends(get_odoo),
) -> EDIAttachmentListResponse:
    """List EDI attachments stored on an Odoo record.

    Raises:
        HTTPException: 400 for a model that never carries EDI attachments.
    """
    if model not in ATTACHMENT_MODELS:
        raise HTTPException(
            status_code=400,
            detail=f"Model must be one of: {', '.join(ATTACHMENT_MODELS)}",
        )
    attachments = await get_edi_from_odoo(model, record_id, client)
    return EDIAttachmentListResponse(
        attachments=[EDIAttachmentResponse.model_validate(a.model_dump()) for a in attachments],
        count=len(attachments),
    )
