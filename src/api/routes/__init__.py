"""API route modules for FloorLink.

Routers:
- edi: checkout and single-document EDI generation
- shipping: 856 shipment notification and transmission
- odoo: EDI generated from, and stored in, Odoo records
"""

from src.api.routes import edi, odoo, shipping

__all__ = ["edi", "odoo", "shipping"]
