"""EDI document generation and X12 serialization.

Builders turn storefront payloads into immutable documents; serializers
render documents as X12 interchanges.
"""

from src.edi.builders import (
    DEFAULT_SELLER,
    build_acknowledgment,
    generate_edi_810,
    generate_edi_850,
    generate_edi_856,
    generate_edi_997,
)
from src.edi.carriers import CARRIER_SCAC, Carrier, resolve_carrier, scac_for
from src.edi.control_numbers import ControlNumberGenerator
from src.edi.models import (
    CarrierInfo,
    EDI810Document,
    EDI810LineItem,
    EDI850Document,
    EDI850LineItem,
    EDI856Document,
    EDI856LineItem,
    EDI856Package,
    EDI997Acknowledgment,
    PackageDimensions,
    PartyName,
    PostalAddress,
    TransactionSet,
)
from src.edi.x12 import (
    X12Envelope,
    edi810_to_x12,
    edi850_to_x12,
    edi856_to_x12,
    edi997_to_x12,
    split_segments,
)

__all__ = [
    # Builders
    "DEFAULT_SELLER",
    "build_acknowledgment",
    "generate_edi_850",
    "generate_edi_810",
    "generate_edi_856",
    "generate_edi_997",
    # Carriers
    "Carrier",
    "CARRIER_SCAC",
    "resolve_carrier",
    "scac_for",
    # Models
    "TransactionSet",
    "PostalAddress",
    "PartyName",
    "EDI850LineItem",
    "EDI850Document",
    "EDI810LineItem",
    "EDI810Document",
    "PackageDimensions",
    "EDI856Package",
    "EDI856LineItem",
    "CarrierInfo",
    "EDI856Document",
    "EDI997Acknowledgment",
    # X12
    "X12Envelope",
    "ControlNumberGenerator",
    "edi850_to_x12",
    "edi810_to_x12",
    "edi856_to_x12",
    "edi997_to_x12",
    "split_segments",
]
