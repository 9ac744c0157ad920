"""Abstract base class for EDI transports.

Each delivery channel (VAN, AS2, SFTP, API) implements this interface.
New channels plug in by registering an instance with the dispatcher.
"""

import time
from abc import ABC, abstractmethod

from src.transmission.models import Recipient, TransmissionResult


def transaction_id(prefix: str) -> str:
    """Local transaction id, ``<prefix>-<epoch milliseconds>``."""
    return f"{prefix}-{int(time.time() * 1000)}"


class EDITransport(ABC):
    """Delivers an X12 interchange to a trading partner.

    Example implementation:
        class FTPTransport(EDITransport):
            @property
            def method(self) -> str:
                return "FTP"

            async def send(self, content, recipient):
                ...
    """

    @property
    @abstractmethod
    def method(self) -> str:
        """Return the channel identifier, e.g. 'VAN'."""
        ...

    @abstractmethod
    async def send(self, content: str, recipient: Recipient) -> TransmissionResult:
        """Deliver ``content`` to ``recipient``.

        Args:
            content: X12 interchange text.
            recipient: Endpoint and credentials.

        Returns:
            TransmissionResult. Delivery failures are reported with
            ``success=False`` rather than raised.
        """
        ...
