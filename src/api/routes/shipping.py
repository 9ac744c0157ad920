"""API routes for shipment notification.

POST /api/v1/shipping/notify builds an 856 for a shipped order and,
when a recipient is given or configured, transmits it.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from src.api.deps import get_control_numbers, get_settings, get_transmission_dispatcher
from src.api.schemas import (
    ErrorResponse,
    ShipmentNotifyData,
    ShipmentNotifyRequest,
    ShipmentNotifyResponse,
)
from src.cli.config import FloorLinkConfig
from src.edi.builders import generate_edi_856
from src.edi.control_numbers import ControlNumberGenerator
from src.edi.inputs import ShipmentInput
from src.edi.x12 import edi856_to_x12
from src.transmission.dispatcher import TransmissionDispatcher

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/shipping", tags=["shipping"], responses={400: {"model": ErrorResponse}})

REQUIRED_SHIPMENT_FIELDS = ("shipment_id", "purchase_order_number", "carrier", "tracking_number")


@router.post("/notify", response_model=ShipmentNotifyResponse)
async def notify_shipment(
    request: ShipmentNotifyRequest,
    settings: FloorLinkConfig = Depends(get_settings),
    control_numbers: ControlNumberGenerator = Depends(get_control_numbers),
    dispatcher: TransmissionDispatcher = Depends(get_transmission_dispatcher),
) -> ShipmentNotifyResponse:
    """Generate an 856 and optionally send it.

    The request recipient wins over ``transmission.default_recipient``.
    A failed transmission is reported in ``data.transmission``; the 856
    is still returned.

    Args:
        request: Shipment payload with an optional recipient.
        settings: FloorLink config (injected).
        control_numbers: Envelope source (injected).
        dispatcher: Transmission dispatcher (injected).

    Returns:
        The 856 document, its X12 text and the transmission result.

    Raises:
        HTTPException: 400 if shipment id, PO number, carrier or tracking
            number is missing.
    """
    if any(not getattr(request, name) for name in REQUIRED_SHIPMENT_FIELDS):
        raise HTTPException(status_code=400, detail="Missing required shipment fields")

    shipment = ShipmentInput.model_validate(request.model_dump(exclude={"recipient"}))
    doc = generate_edi_856(shipment, seller=settings.edi.seller)
    x12 = edi856_to_x12(doc, control_numbers.next_envelope())

    recipient = request.recipient or settings.transmission.default_recipient
    transmission = None
    if recipient is not None:
        transmission = await dispatcher.send(x12, recipient)
        if not transmission.success:
            logger.warning(
                "856 for shipment %s not delivered: %s", doc.shipment_id, transmission.message
            )

    return ShipmentNotifyResponse(
        data=ShipmentNotifyData(edi856=doc, edi856_x12=x12, transmission=transmission)
    )
