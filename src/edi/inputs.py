"""Input payloads accepted by the EDI builders.

These mirror the storefront's checkout and shipping payloads. Fields the
builders require are still Optional here so that a payload missing several
of them produces one E-1001 error listing all of them.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.edi.models import PostalAddress


class InputModel(BaseModel):
    """Base for builder inputs. Accepts camelCase or snake_case keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OrderItemInput(InputModel):
    """Cart line as submitted at checkout."""

    sku: str | None = None
    name: str = ""
    quantity: float | None = None
    unit_price: float | None = None


class OrderInput(InputModel):
    """Customer order used to build an 850."""

    order_number: str | None = None
    order_date: str | None = Field(default=None, description="YYYY-MM-DD, defaults to today")
    customer_name: str = ""
    customer_address: str = ""
    customer_city: str = ""
    customer_state: str = ""
    customer_zip: str = ""
    items: list[OrderItemInput] = Field(default_factory=list)
    total: float | None = None


class InvoiceItemInput(InputModel):
    """Invoice line with its extended total."""

    sku: str | None = None
    name: str = ""
    quantity: float | None = None
    unit_price: float | None = None
    total: float | None = None


class InvoiceInput(InputModel):
    """Invoice data used to build an 810."""

    invoice_number: str | None = None
    invoice_date: str | None = None
    purchase_order_number: str | None = None
    customer_name: str = ""
    customer_address: str = ""
    items: list[InvoiceItemInput] = Field(default_factory=list)
    subtotal: float | None = None
    tax: float | None = None
    total: float | None = None


class DimensionsInput(InputModel):
    """Carton dimensions in inches."""

    length: float
    width: float
    height: float


class ShipmentPackageInput(InputModel):
    """Physical package in a shipment."""

    package_number: str | None = None
    tracking_number: str | None = None
    weight: float | None = None
    dimensions: DimensionsInput | None = None


class ShipmentItemInput(InputModel):
    """Item shipped, optionally assigned to a package."""

    sku: str | None = None
    name: str = ""
    quantity: float | None = None
    package_number: str | None = None


class ShipmentInput(InputModel):
    """Shipment data used to build an 856."""

    shipment_id: str | None = None
    purchase_order_number: str | None = None
    invoice_number: str = ""
    ship_date: str | None = None
    carrier: str | None = None
    tracking_number: str | None = None
    service_level: str = "Ground"
    ship_from: PostalAddress | None = None
    ship_to: PostalAddress | None = None
    packages: list[ShipmentPackageInput] = Field(default_factory=list)
    items: list[ShipmentItemInput] = Field(default_factory=list)


class AcknowledgmentInput(InputModel):
    """Receipt status of an inbound transaction set."""

    transaction_set_id: str
    status: Literal["accepted", "rejected"] = "accepted"
    acknowledged_transaction_set: Literal["850", "810", "856"] = "850"
    errors: list[str] = Field(default_factory=list)
    group_control_number: int | None = Field(
        default=None, ge=1, description="GS06 of the acknowledged functional group"
    )


class CustomerInput(InputModel):
    """Checkout customer block."""

    name: str | None = None
    email: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""


class CheckoutItemInput(InputModel):
    """Cart line at checkout. ``odoo_id`` is the Odoo product.product id."""

    sku: str | None = None
    name: str = ""
    quantity: float | None = None
    unit_price: float | None = None
    total: float | None = None
    odoo_id: int | None = None

    def line_total(self) -> float | None:
        """Submitted line total, or quantity times unit price."""
        if self.total is not None:
            return self.total
        if self.quantity is None or self.unit_price is None:
            return None
        return round(self.quantity * self.unit_price, 2)


class CheckoutOrderInput(InputModel):
    """Order submitted from the storefront checkout."""

    order_number: str | None = None
    customer: CustomerInput
    items: list[CheckoutItemInput] = Field(default_factory=list)
    total: float | None = None
