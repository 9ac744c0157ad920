"""API routes for EDI document generation.

Checkout and single-document endpoints under /api/v1/edi. Builder
errors (missing fields, unknown carriers, strict totals) surface as
FloorLinkError and are rendered by the app-level handler.
"""

import logging
import time

from fastapi import APIRouter, Depends

from src.api.deps import get_control_numbers, get_settings
from src.api.schemas import (
    EDI810Response,
    EDI850Response,
    EDI856Response,
    EDI997Response,
    ErrorResponse,
    OrderEDIData,
    OrderEDIPayload,
    OrderEDIResponse,
)
from src.cli.config import FloorLinkConfig
from src.edi.builders import generate_edi_810, generate_edi_850, generate_edi_856, generate_edi_997
from src.edi.control_numbers import ControlNumberGenerator
from src.edi.inputs import (
    AcknowledgmentInput,
    CheckoutOrderInput,
    InvoiceInput,
    OrderInput,
    ShipmentInput,
)
from src.edi.x12 import edi810_to_x12, edi850_to_x12, edi856_to_x12
from src.odoo.edi_adapter import generate_edi_from_order

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/edi", tags=["edi"], responses={400: {"model": ErrorResponse}})


@router.post("/orders", response_model=OrderEDIResponse)
def submit_order(
    order: CheckoutOrderInput,
    settings: FloorLinkConfig = Depends(get_settings),
    control_numbers: ControlNumberGenerator = Depends(get_control_numbers),
) -> OrderEDIResponse:
    """Generate the 850 and 810 for a storefront checkout.

    Orders without a number are assigned ``WEB-<epoch ms>``.

    Args:
        order: Checkout payload.
        settings: Seller and totals policy (injected).
        control_numbers: Envelope source (injected).

    Returns:
        Order number with both documents and their X12 text.
    """
    if not order.order_number:
        order = order.model_copy(update={"order_number": f"WEB-{int(time.time() * 1000)}"})

    result = generate_edi_from_order(
        order,
        control_numbers=control_numbers,
        seller=settings.edi.seller,
        strict=settings.edi.strict_totals,
    )
    logger.info("Generated checkout EDI for order %s", result.order_number)
    return OrderEDIResponse(
        data=OrderEDIData(
            order_number=result.order_number,
            edi=OrderEDIPayload(
                edi850=result.edi850,
                edi850_x12=result.edi850_x12,
                edi810=result.edi810,
                edi810_x12=result.edi810_x12,
            ),
        )
    )


@router.post("/850", response_model=EDI850Response)
def create_850(
    order: OrderInput,
    settings: FloorLinkConfig = Depends(get_settings),
    control_numbers: ControlNumberGenerator = Depends(get_control_numbers),
) -> EDI850Response:
    """Build and serialize an 850 Purchase Order."""
    doc = generate_edi_850(order, seller=settings.edi.seller, strict=settings.edi.strict_totals)
    return EDI850Response(document=doc, x12=edi850_to_x12(doc, control_numbers.next_envelope()))


@router.post("/810", response_model=EDI810Response)
def create_810(
    invoice: InvoiceInput,
    settings: FloorLinkConfig = Depends(get_settings),
    control_numbers: ControlNumberGenerator = Depends(get_control_numbers),
) -> EDI810Response:
    """Build and serialize an 810 Invoice."""
    doc = generate_edi_810(invoice, seller=settings.edi.seller, strict=settings.edi.strict_totals)
    return EDI810Response(document=doc, x12=edi810_to_x12(doc, control_numbers.next_envelope()))


@router.post("/856", response_model=EDI856Response)
def create_856(
    shipment: ShipmentInput,
    settings: FloorLinkConfig = Depends(get_settings),
    control_numbers: ControlNumberGenerator = Depends(get_control_numbers),
) -> EDI856Response:
    """Build and serialize an 856 Advance Ship Notice."""
    doc = generate_edi_856(shipment, seller=settings.edi.seller)
    return EDI856Response(document=doc, x12=edi856_to_x12(doc, control_numbers.next_envelope()))


@router.post("/997", response_model=EDI997Response)
def create_997(
    ack: AcknowledgmentInput,
    control_numbers: ControlNumberGenerator = Depends(get_control_numbers),
) -> EDI997Response:
    """Acknowledge an inbound transaction set.

    The envelope is the inbound one with sender and receiver swapped, so
    the configured parties are given in the inbound direction. The 997
    carries fresh control numbers; AK1 echoes ``groupControlNumber`` from
    the request, or the 997's own group number when it is omitted.
    """
    return EDI997Response(x12=generate_edi_997(ack, control_numbers.next_envelope()))
