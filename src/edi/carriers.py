"""Carrier name to SCAC resolution for 856 TD5 segments."""

from enum import Enum

from src.errors import FloorLinkError


class Carrier(str, Enum):
    """Carriers the storefront ships with."""

    UPS = "UPS"
    FEDEX = "FEDEX"
    USPS = "USPS"
    DHL = "DHL"


CARRIER_SCAC: dict[Carrier, str] = {
    Carrier.UPS: "UPGF",
    Carrier.FEDEX: "FDEG",
    Carrier.USPS: "USPS",
    Carrier.DHL: "DHLE",
}


def resolve_carrier(name: str | Carrier) -> Carrier:
    """Resolve a carrier name to a Carrier.

    Args:
        name: Carrier name, case-insensitive (e.g. "ups", "FedEx").

    Returns:
        The matching Carrier.

    Raises:
        FloorLinkError: E-2001 if the carrier has no SCAC mapping.
    """
    if isinstance(name, Carrier):
        return name
    try:
        return Carrier(str(name).strip().upper())
    except ValueError:
        raise FloorLinkError.from_code(
            "E-2001",
            carrier=name,
            supported=", ".join(c.value for c in Carrier),
        ) from None


def scac_for(carrier: str | Carrier) -> str:
    """Return the 4-character SCAC for a carrier name."""
    return CARRIER_SCAC[resolve_carrier(carrier)]
