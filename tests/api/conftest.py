"""Pytest fixtures for API tests.

The app runs against default config, an in-memory control number source,
stub transports and the in-memory Odoo fake.
"""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from src.api.deps import (
    get_control_numbers,
    get_odoo,
    get_settings,
    get_transmission_dispatcher,
)
from src.api.main import app
from src.cli.config import EDIConfig, FloorLinkConfig
from src.edi.control_numbers import ControlNumberGenerator
from src.transmission import TransmissionDispatcher


@pytest.fixture
def settings() -> FloorLinkConfig:
    return FloorLinkConfig(edi=EDIConfig(control_number_file=None))


@pytest.fixture
def control_numbers() -> ControlNumberGenerator:
    return ControlNumberGenerator()


@pytest.fixture
def dispatcher() -> TransmissionDispatcher:
    return TransmissionDispatcher()


@pytest.fixture
def client(settings, control_numbers, dispatcher, odoo) -> Generator[TestClient, None, None]:
    """TestClient with every external dependency overridden.

    Yields:
        TestClient configured for testing.
    """
    async def override_get_odoo():
        return odoo

    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_control_numbers] = lambda: control_numbers
    app.dependency_overrides[get_transmission_dispatcher] = lambda: dispatcher
    app.dependency_overrides[get_odoo] = override_get_odoo
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
