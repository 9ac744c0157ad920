"""Route EDI interchanges to the transport for a recipient's method."""

import logging

from src.errors import FloorLinkError
from src.transmission.base import EDITransport
from src.transmission.models import Recipient, TransmissionResult
from src.transmission.transports import (
    ApiTransport,
    AS2Transport,
    SFTPTransport,
    VanTransport,
)
from src.utils.redaction import redact_for_logging, sanitize_error_message

logger = logging.getLogger(__name__)


class TransmissionDispatcher:
    """Registry of transports keyed by method.

    Example:
        dispatcher = TransmissionDispatcher()
        dispatcher.register(MyFTPTransport())
        result = await dispatcher.send(x12, Recipient(method="FTP", endpoint="..."))
    """

    def __init__(self, transports: list[EDITransport] | None = None) -> None:
        self._transports: dict[str, EDITransport] = {}
        for transport in transports if transports is not None else default_transports():
            self.register(transport)

    def register(self, transport: EDITransport) -> None:
        """Add or replace the transport for ``transport.method``."""
        self._transports[transport.method.upper()] = transport
        logger.debug("Registered %s transport", transport.method)

    @property
    def methods(self) -> list[str]:
        return sorted(self._transports)

    def transport_for(self, method: str) -> EDITransport:
        """Return the transport for a method.

        Raises:
            FloorLinkError: E-2004 if no transport is registered.
        """
        transport = self._transports.get(method.upper())
        if transport is None:
            raise FloorLinkError.from_code("E-2004", method=method)
        return transport

    async def send(self, content: str, recipient: Recipient | dict) -> TransmissionResult:
        """Deliver an interchange.

        Args:
            content: X12 interchange text.
            recipient: Partner endpoint; camelCase dicts are accepted.

        Returns:
            TransmissionResult. Transport exceptions become failures.

        Raises:
            FloorLinkError: E-2004 for an unsupported method, before any I/O.
        """
        if isinstance(recipient, dict):
            recipient = Recipient.model_validate(recipient)
        transport = self.transport_for(recipient.method)

        logger.info(
            "Sending EDI via %s: %s",
            recipient.method,
            redact_for_logging(recipient.model_dump()),
        )
        try:
            result = await transport.send(content, recipient)
        except Exception as e:
            logger.exception("%s transport raised while sending to %s", recipient.method, recipient.endpoint)
            return TransmissionResult(
                success=False,
                message=sanitize_error_message(str(e)) or f"{recipient.method} transmission failed",
            )

        logger.info(
            "EDI %s via %s: %s (%s)",
            "sent" if result.success else "not sent",
            recipient.method,
            result.message,
            result.transaction_id,
        )
        return result


def default_transports() -> list[EDITransport]:
    return [VanTransport(), AS2Transport(), SFTPTransport(), ApiTransport()]


_default_dispatcher: TransmissionDispatcher | None = None


def get_dispatcher() -> TransmissionDispatcher:
    """Return the process-wide dispatcher with the built-in transports."""
    global _default_dispatcher
    if _default_dispatcher is None:
        _default_dispatcher = TransmissionDispatcher()
    return _default_dispatcher


async def send_edi_856_to_carrier(content: str, recipient: Recipient | dict) -> TransmissionResult:
    """Send an 856 interchange to a carrier or trading partner."""
    return await get_dispatcher().send(content, recipient)
