"""Tests for src/odoo/attachments.py."""

import base64

import pytest

from src.errors import NotFoundError
from src.odoo.attachments import (
    ATTACHMENT_DESCRIPTION,
    generate_and_store_edi,
    get_edi_from_odoo,
    log_edi_transmission,
    store_edi_810_in_odoo,
    store_edi_850_in_odoo,
    store_edi_856_in_odoo,
)

X12 = "ISA*00~\nIEA*1*000000001~"


class TestStoreEDI:
    @pytest.mark.asyncio
    async def test_850_attachment(self, odoo):
        attachment_id = await store_edi_850_in_odoo(X12, "S00007", 7, client=odoo)

        model, values = odoo.created[0]
        assert attachment_id == 1001
        assert model == "ir.attachment"
        assert values["name"] == "EDI-850-PO-S00007.txt"
        assert values["res_model"] == "sale.order"
        assert values["res_id"] == 7
        assert values["mimetype"] == "text/plain"
        assert values["description"] == ATTACHMENT_DESCRIPTION
        assert base64.b64decode(values["datas"]).decode() == X12

    @pytest.mark.asyncio
    async def test_810_and_856_names(self, odoo):
        await store_edi_810_in_odoo(X12, "INV-S00007", 9, client=odoo)
        await store_edi_856_in_odoo(X12, "WH/OUT/00005", 30, client=odoo)

        first, second = (values for _, values in odoo.created)
        assert (first["name"], first["res_model"]) == ("EDI-810-INV-INV-S00007.txt", "account.move")
        assert (second["name"], second["res_model"]) == ("EDI-856-ASN-WH/OUT/00005.txt", "stock.picking")


class TestGetEDI:
    @pytest.mark.asyncio
    async def test_decodes_only_matching_records(self, odoo):
        await store_edi_850_in_odoo(X12, "S00007", 7, client=odoo)
        await store_edi_856_in_odoo(X12, "WH/OUT/00005", 30, client=odoo)
        odoo.records["ir.attachment"].append(
            {"id": 2000, "name": "photo.png", "res_model": "sale.order", "res_id": 7, "datas": ""}
        )

        attachments = await get_edi_from_odoo("sale.order", 7, client=odoo)

        assert [a.name for a in attachments] == ["EDI-850-PO-S00007.txt"]
        assert attachments[0].content == X12
        assert attachments[0].create_date is None

    @pytest.mark.asyncio
    async def test_skips_binary_content(self, odoo, caplog):
        await store_edi_850_in_odoo(X12, "S00007", 7, client=odoo)
        odoo.records["ir.attachment"].append(
            {
                "id": 2001,
                "name": "EDI-scan.pdf",
                "res_model": "sale.order",
                "res_id": 7,
                "datas": base64.b64encode(b"\xff\xfe%PDF").decode(),
            }
        )

        attachments = await get_edi_from_odoo("sale.order", 7, client=odoo)

        assert [a.id for a in attachments] == [1001]
        assert "Skipping attachment 2001" in caplog.text

    @pytest.mark.asyncio
    async def test_no_attachments(self, odoo):
        assert await get_edi_from_odoo("stock.picking", 30, client=odoo) == []


class TestGenerateAndStore:
    @pytest.mark.asyncio
    async def test_stores_both_on_sale_order(self, odoo):
        stored = await generate_and_store_edi(7, "X850", "X810", client=odoo)

        assert stored.edi850_attachment_id == 1001
        assert stored.edi810_attachment_id == 1002
        names = [values["name"] for _, values in odoo.created]
        assert names == ["EDI-850-PO-S00007.txt", "EDI-810-INV-INV-S00007.txt"]
        assert all(values["res_id"] == 7 for _, values in odoo.created)

    @pytest.mark.asyncio
    async def test_unknown_order(self, odoo):
        with pytest.raises(NotFoundError):
            await generate_and_store_edi(99, "X850", "X810", client=odoo)
        assert odoo.created == []


class TestLogTransmission:
    @pytest.mark.asyncio
    async def test_posts_note(self, odoo):
        message_id = await log_edi_transmission(7, "856", "sent", "VAN-123", client=odoo)

        model, values = odoo.created[0]
        assert message_id == 1001
        assert model == "mail.message"
        assert values["body"].startswith("EDI 856 Transmission: SENT\nTime: ")
        assert values["body"].endswith("VAN-123")
        assert (values["model"], values["res_id"]) == ("sale.order", 7)
        assert values["message_type"] == "notification"
