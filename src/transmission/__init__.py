"""EDI transmission to trading partners over VAN, AS2, SFTP or HTTPS."""

from src.transmission.base import EDITransport
from src.transmission.dispatcher import (
    TransmissionDispatcher,
    get_dispatcher,
    send_edi_856_to_carrier,
)
from src.transmission.models import (
    Recipient,
    RecipientCredentials,
    TransmissionMethod,
    TransmissionResult,
)
from src.transmission.transports import (
    ApiTransport,
    AS2Transport,
    SFTPTransport,
    VanTransport,
)

__all__ = [
    "EDITransport",
    "TransmissionDispatcher",
    "get_dispatcher",
    "send_edi_856_to_carrier",
    "Recipient",
    "RecipientCredentials",
    "TransmissionMethod",
    "TransmissionResult",
    "ApiTransport",
    "AS2Transport",
    "SFTPTransport",
    "VanTransport",
]
