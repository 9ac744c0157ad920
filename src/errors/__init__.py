"""Error handling framework for FloorLink.

This package provides:
- Error code registry with E-XXXX format codes
- FloorLinkError and its display formatting
- Typed domain errors for HTTP status mapping

Error categories:
- E-1xxx: Document data errors
- E-2xxx: Validation errors
- E-3xxx: Odoo ERP errors
- E-4xxx: System/internal errors
- E-5xxx: Authentication errors
- E-6xxx: Transmission errors
"""

from src.errors.domain import DomainError, NotFoundError
from src.errors.formatter import FloorLinkError, format_error
from src.errors.registry import (
    ERROR_REGISTRY,
    ErrorCategory,
    ErrorCode,
    get_error,
    get_errors_by_category,
)

__all__ = [
    # Registry
    "ErrorCode",
    "ErrorCategory",
    "ERROR_REGISTRY",
    "get_error",
    "get_errors_by_category",
    # Formatter
    "FloorLinkError",
    "format_error",
    # Domain
    "DomainError",
    "NotFoundError",
]
