"""Tests for src/odoo/edi_adapter.py."""

from datetime import date
from unittest.mock import AsyncMock, patch

import pytest

from src.edi.control_numbers import ControlNumberGenerator
from src.edi.x12 import split_segments
from src.errors import FloorLinkError, NotFoundError
from src.odoo import edi_adapter
from src.odoo.edi_adapter import (
    generate_all_edi_from_odoo,
    generate_edi_810_from_odoo,
    generate_edi_850_from_odoo,
    generate_edi_856_from_odoo,
    generate_edi_from_order,
    update_odoo_with_tracking_and_generate_edi_856,
)


def _find(x12: str, segment_id: str) -> list[list[str]]:
    return [s.split("*") for s in split_segments(x12) if s.split("*")[0] == segment_id]


class TestEDI850FromOdoo:
    @pytest.mark.asyncio
    async def test_maps_order_partner_and_lines(self, odoo):
        x12 = await generate_edi_850_from_odoo(7, client=odoo)

        assert _find(x12, "BEG")[0] == ["BEG", "00", "SA", "S00007", "20240301"]
        assert ["N1", "BY", "Jane Smith"] in _find(x12, "N1")
        assert _find(x12, "N4")[0] == ["N4", "Austin", "Texas (US)", "78701"]
        assert _find(x12, "CTT")[0] == ["CTT", "2"]

    @pytest.mark.asyncio
    async def test_sku_fallbacks(self, odoo):
        x12 = await generate_edi_850_from_odoo(7, client=odoo)
        skus = [seg[-1] for seg in _find(x12, "PO1")]
        # default_code, then barcode
        assert skus == ["A1", "0123456789"]

    @pytest.mark.asyncio
    async def test_synthetic_sku_when_product_has_no_codes(self, odoo):
        odoo.records["product.product"][1]["barcode"] = False
        x12 = await generate_edi_850_from_odoo(7, client=odoo)
        assert _find(x12, "PO1")[1][-1] == "PROD-22"

    @pytest.mark.asyncio
    async def test_unknown_order(self, odoo):
        with pytest.raises(NotFoundError) as exc_info:
            await generate_edi_850_from_odoo(404, client=odoo)
        assert str(exc_info.value) == "Order 404 not found in Odoo"

    @pytest.mark.asyncio
    async def test_missing_customer(self, odoo):
        odoo.records["res.partner"] = []
        with pytest.raises(NotFoundError, match="Customer 3"):
            await generate_edi_850_from_odoo(7, client=odoo)

    @pytest.mark.asyncio
    async def test_uses_control_numbers(self, odoo):
        gen = ControlNumberGenerator(start=9)
        x12 = await generate_edi_850_from_odoo(7, client=odoo, control_numbers=gen)
        assert _find(x12, "IEA")[0] == ["IEA", "1", "000000010"]


class TestEDI810FromOdoo:
    @pytest.mark.asyncio
    async def test_invoice_from_order(self, odoo):
        x12 = await generate_edi_810_from_odoo(7, client=odoo)

        assert _find(x12, "BIG")[0] == ["BIG", "20240301", "INV-S00007", "", "S00007"]
        assert _find(x12, "TDS")[0] == ["TDS", "12345"]
        # no barcode fallback on invoices
        assert [seg[-1] for seg in _find(x12, "IT1")] == ["A1", "PROD-22"]


class TestEDI856FromOdoo:
    @pytest.mark.asyncio
    async def test_single_package_from_delivery(self, odoo):
        x12 = await generate_edi_856_from_odoo(30, "1Z999", "UPS", client=odoo)

        assert _find(x12, "BSN")[0][2:4] == ["WH/OUT/00005", "20240302"]
        assert _find(x12, "TD5")[0][-1] == "UPGF"
        assert _find(x12, "REF")[0] == ["REF", "CN", "1Z999"]
        assert _find(x12, "MAN")[0] == ["MAN", "GM", "1Z999"]
        assert _find(x12, "TD1")[0] == ["TD1", "CTN", "1", "40", "LB"]
        assert _find(x12, "TD3")[0] == ["TD3", "", "", "L", "48", "W", "12", "H", "6", "IN"]
        assert _find(x12, "N4")[1] == ["N4", "Austin", "Texas", "78701"]
        assert _find(x12, "LIN")[0] == ["LIN", "1", "BP", "A1"]

    @pytest.mark.asyncio
    async def test_weight_falls_back_to_default(self, odoo):
        odoo.records["product.product"][0]["weight"] = 0.0
        x12 = await generate_edi_856_from_odoo(30, "1Z999", "UPS", client=odoo)
        assert _find(x12, "TD1")[0][3] == "100"

    @pytest.mark.asyncio
    async def test_stored_tracking_wins(self, odoo):
        odoo.records["stock.picking"][0]["carrier_tracking_ref"] = "STORED-1"
        x12 = await generate_edi_856_from_odoo(30, "1Z999", "UPS", client=odoo)
        assert _find(x12, "REF")[0] == ["REF", "CN", "STORED-1"]

    @pytest.mark.asyncio
    async def test_unknown_carrier(self, odoo):
        with pytest.raises(FloorLinkError) as exc_info:
            await generate_edi_856_from_odoo(30, "1Z999", "Pigeon", client=odoo)
        assert exc_info.value.code == "E-2001"

    @pytest.mark.asyncio
    async def test_unknown_delivery(self, odoo):
        with pytest.raises(NotFoundError, match="Delivery 31"):
            await generate_edi_856_from_odoo(31, "1Z999", "UPS", client=odoo)


class TestTrackingUpdate:
    @pytest.mark.asyncio
    async def test_writes_tracking_then_generates(self, odoo):
        x12 = await update_odoo_with_tracking_and_generate_edi_856(
            7, "1Z777", "FEDEX", client=odoo
        )

        assert odoo.written == [("stock.picking", [30], {"carrier_tracking_ref": "1Z777"})]
        assert _find(x12, "REF")[0] == ["REF", "CN", "1Z777"]
        assert _find(x12, "TD5")[0][-1] == "FDEG"

    @pytest.mark.asyncio
    async def test_order_without_delivery(self, odoo):
        with pytest.raises(NotFoundError, match="Delivery for order 8"):
            await update_odoo_with_tracking_and_generate_edi_856(8, "1Z", "UPS", client=odoo)
        assert odoo.written == []

    @pytest.mark.asyncio
    async def test_write_is_kept_when_generation_fails(self, odoo):
        with pytest.raises(FloorLinkError):
            await update_odoo_with_tracking_and_generate_edi_856(7, "1Z777", "Pigeon", client=odoo)
        assert odoo.records["stock.picking"][0]["carrier_tracking_ref"] == "1Z777"


class TestGenerateAllFromOdoo:
    @pytest.fixture
    def checkout(self) -> dict:
        return {
            "customer": {"name": "Jane Smith", "email": "jane@example.com"},
            "items": [
                {"sku": "A1", "name": "Oak Plank", "quantity": 2, "unitPrice": 10, "odooId": 21},
            ],
            "total": 20,
        }

    @pytest.mark.asyncio
    async def test_reuses_partner_and_creates_order(self, odoo, checkout):
        with (
            patch.object(edi_adapter, "generate_edi_850_from_odoo", AsyncMock(return_value="X850")),
            patch.object(edi_adapter, "generate_edi_810_from_odoo", AsyncMock(return_value="X810")),
        ):
            result = await generate_all_edi_from_odoo(checkout, client=odoo)

        assert result.edi850 == "X850"
        assert result.edi810 == "X810"
        assert [model for model, _ in odoo.created] == ["sale.order"]
        values = odoo.created[0][1]
        assert values["partner_id"] == 3
        assert values["order_line"] == [
            (0, 0, {"product_id": 21, "product_uom_qty": 2.0, "price_unit": 10.0})
        ]
        assert result.odoo_order_id == 1001

    @pytest.mark.asyncio
    async def test_creates_partner_for_new_email(self, odoo, checkout):
        checkout["customer"]["email"] = "new@example.com"
        with (
            patch.object(edi_adapter, "generate_edi_850_from_odoo", AsyncMock(return_value="X850")),
            patch.object(edi_adapter, "generate_edi_810_from_odoo", AsyncMock(return_value="X810")),
        ):
            await generate_all_edi_from_odoo(checkout, client=odoo)

        assert [model for model, _ in odoo.created] == ["res.partner", "sale.order"]
        assert odoo.created[0][1]["name"] == "Jane Smith"

    @pytest.mark.asyncio
    async def test_requires_product_ids(self, odoo, checkout):
        del checkout["items"][0]["odooId"]
        with pytest.raises(FloorLinkError) as exc_info:
            await generate_all_edi_from_odoo(checkout, client=odoo)
        assert exc_info.value.fields == ["items[0].odoo_id"]
        assert odoo.created == []


class TestGenerateEDIFromOrder:
    @pytest.fixture
    def checkout(self) -> dict:
        return {
            "orderNumber": "WEB-123",
            "customer": {
                "name": "Jane Smith",
                "address": "42 Oak Lane",
                "city": "Austin",
                "state": "TX",
                "zip": "78701",
            },
            "items": [
                {"sku": "A1", "name": "Oak Plank", "quantity": 2, "unitPrice": 10},
                {"sku": "B2", "name": "Trim", "quantity": 3, "unitPrice": 1.5, "total": 4.5},
            ],
            "total": 24.5,
        }

    def test_builds_both_documents(self, checkout):
        result = generate_edi_from_order(checkout, today=date(2024, 3, 1))

        assert result.order_number == "WEB-123"
        assert result.edi850.total_amount == 24.5
        assert result.edi810.invoice_number == "INV-WEB-123"
        assert result.edi810.subtotal == 24.5
        assert result.edi810.tax_amount == 1.96
        assert result.edi810.total_amount == 26.46
        assert result.edi810.buyer.address == "42 Oak Lane, Austin, TX 78701"
        assert result.edi850_x12.startswith("ISA*")
        assert _find(result.edi810_x12, "TDS")[0] == ["TDS", "2646"]

    def test_line_totals_default_to_quantity_times_price(self, checkout):
        result = generate_edi_from_order(checkout, today=date(2024, 3, 1))
        assert [i.extended_price for i in result.edi810.line_items] == [20.0, 4.5]

    def test_control_numbers_advance_per_document(self, checkout):
        gen = ControlNumberGenerator()
        result = generate_edi_from_order(checkout, today=date(2024, 3, 1), control_numbers=gen)

        assert _find(result.edi850_x12, "IEA")[0][2] == "000000001"
        assert _find(result.edi810_x12, "IEA")[0][2] == "000000002"

    def test_missing_price_raises(self, checkout):
        del checkout["items"][0]["unitPrice"]
        with pytest.raises(FloorLinkError) as exc_info:
            generate_edi_from_order(checkout, today=date(2024, 3, 1))
        assert exc_info.value.code == "E-1001"
