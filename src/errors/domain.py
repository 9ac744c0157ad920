"""Typed domain exceptions for API error mapping.

These exceptions give routes a stronger contract than string matching on
error messages. Routes catch specific exception types to return the
matching HTTP status code.

Usage:
    # In an adapter
    raise NotFoundError("Order", order_id)

    # In a route handler
    try:
        x12 = await generate_edi_850_from_odoo(order_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
"""


class DomainError(Exception):
    """Base exception for all domain errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class NotFoundError(DomainError):
    """Resource was not found. Maps to HTTP 404."""

    def __init__(self, resource_type: str, identifier: str | int, source: str = "Odoo") -> None:
        super().__init__(f"{resource_type} {identifier} not found in {source}")
        self.resource_type = resource_type
        self.identifier = identifier
        self.source = source
