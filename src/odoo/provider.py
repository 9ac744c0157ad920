"""Process-wide OdooClient provider.

API routes and CLI commands get the shared client from HERE. This module
owns its lifecycle; do not construct long-lived OdooClient instances
elsewhere.
"""

import asyncio
import logging

from src.odoo.client import OdooClient, OdooConfig

logger = logging.getLogger(__name__)

_client: OdooClient | None = None
_client_lock = asyncio.Lock()


async def get_odoo_client(config: OdooConfig | None = None) -> OdooClient:
    """Get or create the process-global OdooClient.

    Double-checked locking so concurrent first callers create one client.

    Args:
        config: Settings used only when the client is first created.
            Defaults to ODOO_* environment variables.

    Returns:
        The shared OdooClient.
    """
    global _client
    if _client is not None:
        return _client
    async with _client_lock:
        if _client is None:
            _client = OdooClient(config or OdooConfig.from_env())
            logger.info("OdooClient singleton initialized for %s", _client.config.url)
    return _client


async def reset_odoo_client() -> None:
    """Close and forget the shared client."""
    global _client
    async with _client_lock:
        if _client is not None:
            await _client.close()
            _client = None
            logger.info("OdooClient singleton closed")
