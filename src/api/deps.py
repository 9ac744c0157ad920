"""FastAPI dependency providers.

Routes receive configuration, control numbers, the transmission
dispatcher and the Odoo client through ``Depends`` so tests can swap
them with ``app.dependency_overrides``.
"""

import logging
import os
from functools import lru_cache

from src.cli.config import FloorLinkConfig, get_config
from src.edi.control_numbers import ControlNumberGenerator
from src.odoo.client import OdooClient
from src.odoo.provider import get_odoo_client
from src.transmission.dispatcher import TransmissionDispatcher, get_dispatcher
from src.transmission.transports import ApiTransport

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_settings() -> FloorLinkConfig:
    """Configuration from FLOORLINK_CONFIG_PATH or the standard locations."""
    return get_config(os.environ.get("FLOORLINK_CONFIG_PATH") or None)


@lru_cache(maxsize=1)
def get_control_numbers() -> ControlNumberGenerator:
    """Process-wide control number source."""
    generator = get_settings().edi.control_numbers()
    logger.info("Control numbers resume after %d", generator.last)
    return generator


@lru_cache(maxsize=1)
def get_transmission_dispatcher() -> TransmissionDispatcher:
    """Shared dispatcher with the API transport timeout from config."""
    dispatcher = get_dispatcher()
    dispatcher.register(ApiTransport(timeout=get_settings().transmission.api_timeout))
    return dispatcher


async def get_odoo() -> OdooClient:
    """Shared Odoo client built from the ``odoo`` config section."""
    return await get_odoo_client(get_settings().odoo)
