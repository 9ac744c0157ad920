"""Async JSON-RPC client for Odoo.

Talks to the two Odoo endpoints the EDI adapters need:

- ``/web/session/authenticate`` to obtain a uid and session cookie
- ``/jsonrpc`` with ``service=object, method=execute_kw`` for model calls

Example usage:
    async with OdooClient(OdooConfig.from_env()) as client:
        orders = await client.search_read(
            "sale.order", [["state", "=", "sale"]], ["name", "amount_total"], limit=10
        )
"""

import asyncio
import logging
import os
import random
import time
from dataclasses import dataclass, field
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.errors import FloorLinkError
from src.utils.redaction import redact_for_logging

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_LIMIT = 80


class OdooError(FloorLinkError):
    """Error returned by, or while talking to, an Odoo server."""


class OdooConfig(BaseModel):
    """Connection settings for an Odoo instance."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    url: str = Field(default="http://localhost:8069", description="Odoo base URL")
    db: str = Field(default="odoo", description="Database name")
    username: str = Field(default="admin", description="Login")
    password: str = Field(default="admin", description="Password, also used for execute_kw")
    api_key: str | None = Field(default=None, description="Optional API key")
    timeout: float = Field(default=30.0, gt=0)
    session_ttl_seconds: int = Field(
        default=3600, ge=0, description="Re-authenticate after this many seconds (0 = never)"
    )

    @field_validator("url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @classmethod
    def from_env(cls) -> "OdooConfig":
        """Build config from ODOO_URL, ODOO_DB, ODOO_USERNAME, ODOO_PASSWORD, ODOO_API_KEY."""
        return cls(
            url=os.environ.get("ODOO_URL", "http://localhost:8069"),
            db=os.environ.get("ODOO_DB", "odoo"),
            username=os.environ.get("ODOO_USERNAME", "admin"),
            password=os.environ.get("ODOO_PASSWORD", "admin"),
            api_key=os.environ.get("ODOO_API_KEY") or None,
        )


@dataclass
class OdooSession:
    """Authenticated Odoo session."""

    uid: int
    session_id: str | None = None
    established_at: float = field(default_factory=time.monotonic)

    def is_expired(self, ttl_seconds: int) -> bool:
        """Return True if the session is older than ``ttl_seconds`` (0 disables expiry)."""
        if ttl_seconds <= 0:
            return False
        return time.monotonic() - self.established_at >= ttl_seconds


class OdooClient:
    """Odoo JSON-RPC client.

    Authentication happens lazily on the first model call. Concurrent
    callers share one login: the session is checked, then re-checked
    under an asyncio.Lock before authenticating.

    Session cookies returned by Odoo are kept by the underlying
    httpx.AsyncClient and sent on every following request.
    """

    def __init__(
        self,
        config: OdooConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or OdooConfig.from_env()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._session: OdooSession | None = None
        self._auth_lock = asyncio.Lock()

    def _create_client(self) -> httpx.AsyncClient:
        """Create configured httpx async client."""
        return httpx.AsyncClient(
            base_url=self.config.url,
            headers={"Content-Type": "application/json", "Accept": "application/json"},
            timeout=self.config.timeout,
            transport=self._transport,
        )

    @property
    def http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = self._create_client()
        return self._client

    @property
    def session(self) -> OdooSession | None:
        return self._session

    @property
    def uid(self) -> int | None:
        return self._session.uid if self._session else None

    def _session_valid(self) -> bool:
        return self._session is not None and not self._session.is_expired(
            self.config.session_ttl_seconds
        )

    async def _post(self, path: str, params: dict[str, Any]) -> Any:
        """POST a JSON-RPC call and return its ``result``.

        Raises:
            OdooError: E-3001 if unreachable, E-3003 for non-JSON responses,
                E-3002 for JSON-RPC errors.
        """
        payload = {
            "jsonrpc": "2.0",
            "method": "call",
            "params": params,
            "id": random.randint(0, 999_999),
        }
        try:
            response = await self.http.post(path, json=payload)
        except httpx.HTTPError as e:
            raise OdooError.from_code("E-3001", url=self.config.url, detail=str(e)) from e

        content_type = response.headers.get("content-type", "")
        if "application/json" not in content_type:
            raise OdooError.from_code(
                "E-3003",
                content_type=content_type or "no content type",
                snippet=response.text[:200],
            )

        data = response.json()
        if data.get("error"):
            error = data["error"]
            message = (error.get("data") or {}).get("message") or error.get("message")
            raise OdooError.from_code("E-3002", detail=message)
        return data.get("result")

    async def authenticate(self) -> int:
        """Log in and store the session.

        Returns:
            The authenticated user id.

        Raises:
            OdooError: E-5001 if Odoo returns no uid.
        """
        logger.info(
            "Authenticating with Odoo: %s",
            redact_for_logging(
                {"url": self.config.url, "db": self.config.db, "login": self.config.username}
            ),
        )
        result = await self._post(
            "/web/session/authenticate",
            {
                "db": self.config.db,
                "login": self.config.username,
                "password": self.config.password,
            },
        )
        uid = (result or {}).get("uid")
        if not uid:
            raise OdooError.from_code("E-5001", detail="No UID returned")

        self._session = OdooSession(uid=uid, session_id=result.get("session_id"))
        logger.info("Authenticated with Odoo as uid %d", uid)
        return uid

    async def ensure_authenticated(self) -> int:
        """Authenticate unless a live session exists. Safe to call concurrently."""
        if self._session_valid():
            return self._session.uid
        async with self._auth_lock:
            if not self._session_valid():
                await self.authenticate()
        return self._session.uid

    async def execute_kw(
        self,
        model: str,
        method: str,
        args: list[Any],
        kwargs: dict[str, Any] | None = None,
    ) -> Any:
        """Call a model method through ``/jsonrpc``.

        Args:
            model: Odoo model name, e.g. "sale.order".
            method: Model method, e.g. "search", "read", "write".
            args: Positional arguments for the method.
            kwargs: Keyword arguments for the method.

        Returns:
            The JSON-RPC ``result`` value.
        """
        uid = await self.ensure_authenticated()
        call_args: list[Any] = [self.config.db, uid, self.config.password, model, method, args]
        if kwargs is not None:
            call_args.append(kwargs)
        return await self._post(
            "/jsonrpc",
            {"service": "object", "method": "execute_kw", "args": call_args},
        )

    async def search(
        self,
        model: str,
        domain: list | None = None,
        limit: int = DEFAULT_SEARCH_LIMIT,
        offset: int = 0,
        order: str = "",
        context: dict | None = None,
    ) -> list[int]:
        """Return ids of records matching ``domain``."""
        ids = await self.execute_kw(
            model,
            "search",
            [domain or []],
            {"limit": limit, "offset": offset, "order": order, "context": context or {}},
        )
        return ids or []

    async def read(self, model: str, ids: list[int], fields: list[str] | None = None) -> list[dict]:
        """Read ``fields`` of the given record ids."""
        if not ids:
            return []
        records = await self.execute_kw(model, "read", [ids], {"fields": fields or []})
        return records or []

    async def search_read(
        self,
        model: str,
        domain: list | None = None,
        fields: list[str] | None = None,
        limit: int = DEFAULT_SEARCH_LIMIT,
        offset: int = 0,
        order: str = "",
        context: dict | None = None,
    ) -> list[dict]:
        """Search then read matching records.

        Args:
            model: Odoo model name.
            domain: Odoo domain, e.g. ``[["id", "=", 7]]``.
            fields: Fields to read; empty reads all fields.
            limit: Maximum records (Odoo's default page size is 80).
            offset: Records to skip.
            order: Sort expression, e.g. "date_order desc".
            context: Odoo context dictionary.

        Returns:
            Records as dictionaries, empty if nothing matched.
        """
        ids = await self.search(model, domain, limit=limit, offset=offset, order=order, context=context)
        if not ids:
            return []
        records = await self.read(model, ids, fields)
        logger.debug("search_read %s returned %d record(s)", model, len(records))
        return records

    async def create(self, model: str, values: dict[str, Any], context: dict | None = None) -> int:
        """Create a record and return its id."""
        record_id = await self.execute_kw(model, "create", [values], {"context": context or {}})
        logger.info("Created %s %s", model, record_id)
        return record_id

    async def write(
        self,
        model: str,
        ids: list[int],
        values: dict[str, Any],
        context: dict | None = None,
    ) -> bool:
        """Update records with ``values``."""
        result = await self.execute_kw(model, "write", [ids, values], {"context": context or {}})
        logger.info("Updated %s %s: %s", model, ids, sorted(values))
        return bool(result)

    async def unlink(self, model: str, ids: list[int]) -> bool:
        """Delete records."""
        result = await self.execute_kw(model, "unlink", [ids])
        logger.info("Deleted %s %s", model, ids)
        return bool(result)

    async def test_connection(self) -> bool:
        """Return True if Odoo accepts our credentials."""
        try:
            await self.authenticate()
            return True
        except FloorLinkError as e:
            logger.error("Odoo connection test failed: %s", e)
            return False

    async def close(self) -> None:
        """Close the HTTP client and drop the session."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        self._session = None

    async def __aenter__(self) -> "OdooClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
