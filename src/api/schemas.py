"""Pydantic schemas for API request/response validation.

This module defines the data contracts for the FloorLink REST API.
JSON keys are camelCase to match the storefront; snake_case is also
accepted on input.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.edi.inputs import ShipmentInput
from src.edi.models import EDI810Document, EDI850Document, EDI856Document
from src.transmission.models import Recipient, TransmissionResult


class APIModel(BaseModel):
    """Base schema with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Error response schema


class ErrorResponse(BaseModel):
    """Standard error response."""

    error_code: str
    message: str
    remediation: str | None = None
    details: dict | None = None
    fields: list[str] | None = None


# Checkout schemas


class OrderEDIPayload(APIModel):
    """850 and 810 for one order."""

    edi850: EDI850Document
    edi850_x12: str
    edi810: EDI810Document
    edi810_x12: str


class OrderEDIData(APIModel):
    order_number: str
    edi: OrderEDIPayload


class OrderEDIResponse(APIModel):
    """Response for checkout EDI generation."""

    success: bool = True
    message: str = "EDI documents generated successfully"
    data: OrderEDIData


# Single-document schemas


class EDI850Response(APIModel):
    success: bool = True
    document: EDI850Document
    x12: str


class EDI810Response(APIModel):
    success: bool = True
    document: EDI810Document
    x12: str


class EDI856Response(APIModel):
    success: bool = True
    document: EDI856Document
    x12: str


class EDI997Response(APIModel):
    success: bool = True
    x12: str


# Shipping schemas


class ShipmentNotifyRequest(ShipmentInput):
    """Shipment plus an optional partner to send the 856 to."""

    recipient: Recipient | None = None


class ShipmentNotifyData(APIModel):
    edi856: EDI856Document
    edi856_x12: str
    transmission: TransmissionResult | None = None


class ShipmentNotifyResponse(APIModel):
    """Response for 856 generation and optional transmission."""

    success: bool = True
    message: str = "EDI 856 generated successfully"
    data: ShipmentNotifyData


# Odoo schemas


class OdooEDIResponse(APIModel):
    """X12 generated from an Odoo record."""

    success: bool = True
    record_id: int
    transaction_set: Literal["850", "810", "856"]
    x12: str


class OdooShipmentRequest(APIModel):
    """Tracking details for an Odoo delivery's 856."""

    tracking_number: str = Field(..., min_length=1)
    carrier: str = Field(..., min_length=1)


class OdooOrderCreatedResponse(APIModel):
    """Checkout order created in Odoo with its EDI."""

    success: bool = True
    odoo_order_id: int
    edi850: str
    edi810: str
    edi850_attachment_id: int | None = None
    edi810_attachment_id: int | None = None


class EDIAttachmentResponse(APIModel):
    id: int
    name: str
    content: str
    create_date: str | None = None


class EDIAttachmentListResponse(APIModel):
    attachments: list[EDIAttachmentResponse]
    count: int
