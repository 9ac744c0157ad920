"""Root-level pytest fixtures for all tests.

Provides shared storefront payloads, a fixed envelope so X12 output
is deterministic, and InMemoryOdoo, which stands in for OdooClient at
the method level and evaluates the simple domains the adapters send.
"""

import copy
from datetime import date, datetime

import pytest

from src.edi.models import PostalAddress
from src.edi.x12 import X12Envelope

FIXED_TODAY = date(2024, 3, 1)
FIXED_TIMESTAMP = datetime(2024, 3, 1, 9, 30)


@pytest.fixture
def today() -> date:
    return FIXED_TODAY


@pytest.fixture
def envelope() -> X12Envelope:
    """Envelope with a pinned timestamp."""
    return X12Envelope(timestamp=FIXED_TIMESTAMP)


@pytest.fixture
def sample_order() -> dict:
    """Checkout order as the storefront posts it (camelCase)."""
    return {
        "orderNumber": "WEB-123",
        "orderDate": "2024-03-01",
        "customerName": "Jane Smith",
        "customerAddress": "42 Oak Lane",
        "customerCity": "Austin",
        "customerState": "TX",
        "customerZip": "78701",
        "items": [
            {"sku": "A1", "name": "Oak Plank", "quantity": 2, "unitPrice": 10.0},
        ],
        "total": 20.0,
    }


@pytest.fixture
def sample_invoice() -> dict:
    return {
        "invoiceNumber": "INV-WEB-123",
        "invoiceDate": "2024-03-01",
        "purchaseOrderNumber": "WEB-123",
        "customerName": "Jane Smith",
        "customerAddress": "42 Oak Lane, Austin, TX 78701",
        "items": [
            {"sku": "A1", "name": "Oak Plank", "quantity": 2, "unitPrice": 10.0, "total": 20.0},
            {"sku": "B2", "name": "Underlayment", "quantity": 1, "unitPrice": 94.3, "total": 94.3},
        ],
        "subtotal": 114.3,
        "tax": 9.15,
        "total": 123.45,
    }


@pytest.fixture
def ship_to() -> PostalAddress:
    return PostalAddress(
        name="Jane Smith", address="42 Oak Lane", city="Austin", state="TX", zip="78701"
    )


@pytest.fixture
def sample_shipment() -> dict:
    """Two-package shipment notice payload."""
    return {
        "shipmentId": "SHP-1",
        "purchaseOrderNumber": "WEB-123",
        "shipDate": "2024-03-01",
        "carrier": "FedEx",
        "trackingNumber": "1Z999",
        "shipTo": {
            "name": "Jane Smith",
            "address": "42 Oak Lane",
            "city": "Austin",
            "state": "TX",
            "zip": "78701",
        },
        "packages": [
            {
                "packageNumber": "P1",
                "trackingNumber": "1Z999-1",
                "weight": 10,
                "dimensions": {"length": 48, "width": 12, "height": 6},
            },
            {
                "trackingNumber": "1Z999-2",
                "weight": 20,
                "dimensions": {"length": 48, "width": 12, "height": 6},
            },
        ],
        "items": [
            {"sku": "A1", "name": "Oak Plank", "quantity": 2},
            {"sku": "B2", "name": "Underlayment", "quantity": 1, "packageNumber": "PKG-2"},
        ],
    }


def _matches(record: dict, domain: list) -> bool:
    for field, op, value in domain:
        actual = record.get(field)
        if op == "=" and actual != value:
            return False
        if op == "in" and actual not in value:
            return False
        if op == "ilike" and str(value).lower() not in str(actual or "").lower():
            return False
    return True


class InMemoryOdoo:
    """Records keyed by model; create/write are recorded and applied."""

    def __init__(self, records: dict[str, list[dict]]):
        self.records = copy.deepcopy(records)
        self.created: list[tuple[str, dict]] = []
        self.written: list[tuple[str, list[int], dict]] = []
        self._next_id = 1000

    async def search_read(self, model, domain=None, fields=None, limit=80, **kwargs):
        rows = [r for r in self.records.get(model, []) if _matches(r, domain or [])]
        return [dict(r) for r in rows[:limit]]

    async def create(self, model, values, context=None):
        self._next_id += 1
        self.created.append((model, values))
        record = {"id": self._next_id, **values}
        if model == "sale.order":
            record.setdefault("name", f"S{self._next_id:05d}")
        self.records.setdefault(model, []).append(record)
        return self._next_id

    async def write(self, model, ids, values, context=None):
        self.written.append((model, ids, values))
        for record in self.records.get(model, []):
            if record["id"] in ids:
                record.update(values)
        return True


ODOO_RECORDS = {
    "sale.order": [
        {
            "id": 7,
            "name": "S00007",
            "partner_id": [3, "Jane Smith"],
            "date_order": "2024-03-01 10:15:00",
            "order_line": [11, 12],
            "amount_untaxed": 114.3,
            "amount_tax": 9.15,
            "amount_total": 123.45,
        }
    ],
    "res.partner": [
        {
            "id": 3,
            "name": "Jane Smith",
            "email": "jane@example.com",
            "phone": False,
            "street": "42 Oak Lane",
            "city": "Austin",
            "state_id": [44, "Texas (US)"],
            "zip": "78701",
            "country_id": [233, "United States"],
        }
    ],
    "sale.order.line": [
        {
            "id": 11,
            "product_id": [21, "Oak Plank"],
            "name": "Oak Plank",
            "product_uom_qty": 2.0,
            "price_unit": 10.0,
            "price_subtotal": 20.0,
        },
        {
            "id": 12,
            "product_id": [22, "Underlayment"],
            "name": "Underlayment",
            "product_uom_qty": 1.0,
            "price_unit": 94.3,
            "price_subtotal": 94.3,
        },
    ],
    "product.product": [
        {"id": 21, "name": "Oak Plank", "default_code": "A1", "barcode": False, "weight": 40.0},
        {"id": 22, "name": "Underlayment", "default_code": False, "barcode": "0123456789", "weight": 0.0},
    ],
    "stock.picking": [
        {
            "id": 30,
            "name": "WH/OUT/00005",
            "origin": "SO7",
            "partner_id": [3, "Jane Smith"],
            "scheduled_date": "2024-03-02 08:00:00",
            "move_ids_without_package": [41],
            "carrier_tracking_ref": False,
        }
    ],
    "stock.move": [
        {"id": 41, "product_id": [21, "Oak Plank"], "name": "Oak Plank", "product_uom_qty": 2.0},
    ],
}


@pytest.fixture
def odoo() -> InMemoryOdoo:
    return InMemoryOdoo(ODOO_RECORDS)
