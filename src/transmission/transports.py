"""Built-in EDI transports.

VAN, AS2 and SFTP are accepted-and-logged placeholders until real
provider integrations exist. API posts the interchange over HTTPS.
"""

import logging

import httpx

from src.errors import FloorLinkError
from src.transmission.base import EDITransport, transaction_id
from src.transmission.models import Recipient, TransmissionMethod, TransmissionResult
from src.utils.redaction import sanitize_error_message

logger = logging.getLogger(__name__)

EDI_CONTENT_TYPE = "application/edi-x12"


class VanTransport(EDITransport):
    """Value-added network delivery (SPS Commerce, TrueCommerce, ...)."""

    @property
    def method(self) -> str:
        return TransmissionMethod.VAN.value

    async def send(self, content: str, recipient: Recipient) -> TransmissionResult:
        logger.info("Sending %d bytes to VAN %s", len(content), recipient.endpoint)
        return TransmissionResult(
            success=True,
            message="EDI 856 sent to VAN successfully",
            transaction_id=transaction_id("VAN"),
        )


class AS2Transport(EDITransport):
    """AS2 point-to-point delivery."""

    @property
    def method(self) -> str:
        return TransmissionMethod.AS2.value

    async def send(self, content: str, recipient: Recipient) -> TransmissionResult:
        logger.info("Sending %d bytes via AS2 to %s", len(content), recipient.endpoint)
        return TransmissionResult(
            success=True,
            message="EDI 856 sent via AS2 successfully",
            transaction_id=transaction_id("AS2"),
        )


class SFTPTransport(EDITransport):
    """Upload to a trading partner's SFTP drop directory."""

    @property
    def method(self) -> str:
        return TransmissionMethod.SFTP.value

    async def send(self, content: str, recipient: Recipient) -> TransmissionResult:
        logger.info("Uploading %d bytes to SFTP %s", len(content), recipient.endpoint)
        return TransmissionResult(
            success=True,
            message="EDI 856 uploaded to SFTP successfully",
            transaction_id=transaction_id("SFTP"),
        )


class ApiTransport(EDITransport):
    """POST the interchange to a partner REST endpoint.

    The body is the raw X12 text. A bearer token is sent when the
    recipient carries an API key. The partner's ``transactionId`` is used
    when its JSON response has one.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._transport = transport

    @property
    def method(self) -> str:
        return TransmissionMethod.API.value

    def _headers(self, recipient: Recipient) -> dict[str, str]:
        headers = {"Content-Type": EDI_CONTENT_TYPE}
        api_key = recipient.credentials.api_key if recipient.credentials else None
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        return headers

    async def send(self, content: str, recipient: Recipient) -> TransmissionResult:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(
                    recipient.endpoint,
                    content=content.encode("utf-8"),
                    headers=self._headers(recipient),
                )
        except httpx.HTTPError as e:
            error = FloorLinkError.from_code(
                "E-6002", endpoint=recipient.endpoint, detail=str(e) or type(e).__name__
            )
            logger.warning("EDI API transmission failed: %s", error)
            return TransmissionResult(success=False, message=sanitize_error_message(error.message))

        if not response.is_success:
            error = FloorLinkError.from_code(
                "E-6001", status_code=response.status_code, reason=response.reason_phrase
            )
            logger.warning(
                "Partner endpoint %s rejected EDI: %s", recipient.endpoint, error.message
            )
            return TransmissionResult(success=False, message=error.message)

        partner_id = None
        try:
            data = response.json()
            if isinstance(data, dict):
                partner_id = data.get("transactionId")
        except ValueError:
            logger.debug("Partner response from %s is not JSON", recipient.endpoint)

        return TransmissionResult(
            success=True,
            message="EDI 856 sent via API successfully",
            transaction_id=str(partner_id) if partner_id else transaction_id("API"),
        )
