"""Transmission request and result models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class TransmissionMethod(str, Enum):
    """Built-in EDI delivery channels."""

    VAN = "VAN"
    AS2 = "AS2"
    SFTP = "SFTP"
    API = "API"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RecipientCredentials(_CamelModel):
    """Credentials for a trading partner endpoint."""

    username: str | None = None
    password: str | None = None
    api_key: str | None = None


class Recipient(_CamelModel):
    """Trading partner endpoint an interchange is delivered to.

    ``method`` is kept as a string so that channels registered at runtime
    (and unknown ones, which the dispatcher rejects) pass validation.
    """

    method: str = Field(..., description="VAN, AS2, SFTP, API or a registered channel")
    endpoint: str
    credentials: RecipientCredentials | None = None

    @field_validator("method")
    @classmethod
    def normalize_method(cls, v: str) -> str:
        return v.strip().upper()


class TransmissionResult(_CamelModel):
    """Outcome of one delivery attempt."""

    success: bool
    message: str
    transaction_id: str | None = None
