"""EDI document models for X12 generation.

Supports:
- 850: Purchase Order
- 810: Invoice
- 856: Advance Ship Notice
- 997: Functional Acknowledgment

Documents are immutable once a builder returns them. Python attributes
are snake_case; JSON output uses camelCase aliases so API responses keep
the storefront's ``purchaseOrderNumber`` / ``lineItems`` shape.
"""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class TransactionSet(str, Enum):
    """Supported X12 transaction sets."""

    PURCHASE_ORDER = "850"
    INVOICE = "810"
    SHIP_NOTICE = "856"
    FUNCTIONAL_ACK = "997"


class EDIModel(BaseModel):
    """Base for frozen EDI document records."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class PostalAddress(EDIModel):
    """Name plus street/city/state/zip block (N1/N3/N4 loop)."""

    name: str
    address: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""


class PartyName(EDIModel):
    """Name with a single-line address, as carried on invoices."""

    name: str
    address: str = ""


# === 850 Purchase Order ===


class EDI850LineItem(EDIModel):
    """PO1 line of a purchase order."""

    line_number: int = Field(..., ge=1, description="1-based line sequence")
    sku: str
    quantity: float
    unit_of_measure: str = "SQ FT"
    unit_price: float
    product_description: str = ""


class EDI850Document(EDIModel):
    """Purchase order transaction set."""

    transaction_set: Literal["850"] = "850"
    purchase_order_number: str
    purchase_order_date: str = Field(..., description="YYYY-MM-DD")
    buyer: PostalAddress
    seller: PostalAddress
    ship_to: PostalAddress
    line_items: list[EDI850LineItem] = Field(default_factory=list)
    total_amount: float
    currency: str = "USD"
    payment_terms: str = "Net 30"
    requested_delivery_date: str | None = None


# === 810 Invoice ===


class EDI810LineItem(EDIModel):
    """IT1 line of an invoice."""

    line_number: int = Field(..., ge=1)
    sku: str
    quantity: float
    unit_price: float
    extended_price: float
    product_description: str = ""


class EDI810Document(EDIModel):
    """Invoice transaction set."""

    transaction_set: Literal["810"] = "810"
    invoice_number: str
    invoice_date: str
    purchase_order_number: str
    buyer: PartyName
    seller: PartyName
    line_items: list[EDI810LineItem] = Field(default_factory=list)
    subtotal: float
    tax_amount: float
    total_amount: float
    currency: str = "USD"
    payment_terms: str = "Net 30"
    due_date: str


# === 856 Advance Ship Notice ===


class PackageDimensions(EDIModel):
    """Outer carton dimensions."""

    length: float
    width: float
    height: float
    unit: Literal["IN", "CM"] = "IN"


class EDI856Package(EDIModel):
    """Package (pack-level HL) within a shipment."""

    package_number: str
    tracking_number: str
    weight: float
    weight_unit: Literal["LB", "KG"] = "LB"
    dimensions: PackageDimensions
    carrier: str
    service_level: str


class EDI856LineItem(EDIModel):
    """Item-level HL within a shipment."""

    line_number: int = Field(..., ge=1)
    sku: str
    quantity: float
    quantity_shipped: float
    unit_of_measure: str = "EA"
    product_description: str = ""
    package_number: str | None = None


class CarrierInfo(EDIModel):
    """Carrier block: SCAC, display name and master tracking number."""

    scac: str
    name: str
    tracking_number: str


class EDI856Document(EDIModel):
    """Advance ship notice transaction set."""

    transaction_set: Literal["856"] = "856"
    shipment_id: str
    purchase_order_number: str
    invoice_number: str
    ship_date: str
    estimated_delivery_date: str
    carrier: CarrierInfo
    ship_from: PostalAddress
    ship_to: PostalAddress
    packages: list[EDI856Package] = Field(default_factory=list)
    line_items: list[EDI856LineItem] = Field(default_factory=list)
    total_weight: float
    total_packages: int


# === 997 Functional Acknowledgment ===


class EDI997Acknowledgment(EDIModel):
    """Acknowledgment of a received transaction set."""

    transaction_set: Literal["997"] = "997"
    transaction_set_id: str = Field(..., description="ST02 control number being acknowledged")
    acknowledged_transaction_set: TransactionSet = TransactionSet.PURCHASE_ORDER
    status: Literal["accepted", "rejected"]
    errors: list[str] = Field(default_factory=list)
    group_control_number: int | None = Field(default=None, description="GS06 being acknowledged")

    @property
    def accepted(self) -> bool:
        return self.status == "accepted"

