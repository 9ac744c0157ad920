"""Odoo ERP integration: JSON-RPC client, EDI adapters and attachment storage."""

from src.odoo.client import OdooClient, OdooConfig, OdooError, OdooSession
from src.odoo.provider import get_odoo_client, reset_odoo_client

__all__ = [
    "OdooClient",
    "OdooConfig",
    "OdooError",
    "OdooSession",
    "get_odoo_client",
    "reset_odoo_client",
]
