"""Error code registry with E-XXXX format codes.

This module defines the error code system for FloorLink, organizing errors
into categories:
- E-1xxx: Document data errors
- E-2xxx: Validation errors
- E-3xxx: Odoo ERP errors
- E-4xxx: System/internal errors
- E-5xxx: Authentication errors
- E-6xxx: Transmission errors

Each error includes a code, title, message template, and remediation steps.
"""

from dataclasses import dataclass
from enum import Enum


class ErrorCategory(str, Enum):
    """Categories for error codes."""

    DATA = "data"  # E-1xxx: Document data errors
    VALIDATION = "validation"  # E-2xxx: Validation errors
    ERP = "erp"  # E-3xxx: Odoo ERP errors
    SYSTEM = "system"  # E-4xxx: System/internal errors
    AUTH = "auth"  # E-5xxx: Authentication errors
    TRANSMISSION = "transmission"  # E-6xxx: Transmission errors


@dataclass
class ErrorCode:
    """Definition of an error code with metadata.

    Attributes:
        code: Error code in E-XXXX format.
        category: Error category for grouping.
        title: Short title for display.
        message_template: Message with {placeholders} for context.
        remediation: Action user should take to resolve.
        is_retryable: Whether the operation can be retried without user action.
    """

    code: str
    category: ErrorCategory
    title: str
    message_template: str
    remediation: str
    is_retryable: bool = False


ERROR_REGISTRY: dict[str, ErrorCode] = {
    # Data errors (E-1xxx)
    "E-1001": ErrorCode(
        code="E-1001",
        category=ErrorCategory.DATA,
        title="Missing Required Field",
        message_template="EDI {transaction_set} is missing required field(s): {fields}.",
        remediation="Supply the missing values on the order, invoice, or shipment and retry.",
    ),
    "E-1002": ErrorCode(
        code="E-1002",
        category=ErrorCategory.DATA,
        title="Empty Document",
        message_template="EDI {transaction_set} has no line items.",
        remediation="Add at least one line item before generating the document.",
    ),
    "E-1003": ErrorCode(
        code="E-1003",
        category=ErrorCategory.DATA,
        title="Invalid Date",
        message_template="Field '{field}' has invalid date '{value}'. Expected YYYY-MM-DD.",
        remediation="Format the date as YYYY-MM-DD and retry.",
    ),
    # Validation errors (E-2xxx)
    "E-2001": ErrorCode(
        code="E-2001",
        category=ErrorCategory.VALIDATION,
        title="Unsupported Carrier",
        message_template="Carrier '{carrier}' has no SCAC mapping. Supported: {supported}.",
        remediation="Use one of the supported carriers or add its SCAC code.",
    ),
    "E-2002": ErrorCode(
        code="E-2002",
        category=ErrorCategory.VALIDATION,
        title="Totals Mismatch",
        message_template="EDI {transaction_set} totals do not reconcile: {issues}",
        remediation="Recalculate line totals, subtotal, and tax so they sum to the document total.",
    ),
    "E-2003": ErrorCode(
        code="E-2003",
        category=ErrorCategory.VALIDATION,
        title="Unsupported Transaction Set",
        message_template="Transaction set '{transaction_set}' is not supported. Supported: {supported}.",
        remediation="Generate one of the supported transaction sets.",
    ),
    "E-2004": ErrorCode(
        code="E-2004",
        category=ErrorCategory.VALIDATION,
        title="Unsupported Transmission Method",
        message_template="Unsupported transmission method: {method}",
        remediation="Use VAN, AS2, SFTP, or API, or register a transport for this method.",
    ),
    # ERP errors (E-3xxx)
    "E-3001": ErrorCode(
        code="E-3001",
        category=ErrorCategory.ERP,
        title="Odoo Unavailable",
        message_template="Could not reach Odoo at {url}: {detail}",
        remediation="Check ODOO_URL and that the Odoo server is running, then retry.",
        is_retryable=True,
    ),
    "E-3002": ErrorCode(
        code="E-3002",
        category=ErrorCategory.ERP,
        title="Odoo API Error",
        message_template="Odoo API Error: {detail}",
        remediation="Check the model, fields, and domain sent to Odoo.",
    ),
    "E-3003": ErrorCode(
        code="E-3003",
        category=ErrorCategory.ERP,
        title="Unexpected Odoo Response",
        message_template="Expected JSON response but got {content_type}. Response: {snippet}",
        remediation="The Odoo URL or database name is probably wrong. Verify ODOO_URL and ODOO_DB.",
    ),
    # System errors (E-4xxx)
    "E-4001": ErrorCode(
        code="E-4001",
        category=ErrorCategory.SYSTEM,
        title="File System Error",
        message_template="Could not {operation} file: {path}",
        remediation="Check disk space and permissions. Retry the operation.",
        is_retryable=True,
    ),
    "E-4002": ErrorCode(
        code="E-4002",
        category=ErrorCategory.SYSTEM,
        title="Control Number Store Error",
        message_template="Control number store {path} is unreadable: {detail}",
        remediation="Fix or delete the control number file. Numbering restarts at 1 if deleted.",
    ),
    # Auth errors (E-5xxx)
    "E-5001": ErrorCode(
        code="E-5001",
        category=ErrorCategory.AUTH,
        title="Odoo Authentication Failed",
        message_template="Authentication failed: {detail}",
        remediation="Check ODOO_USERNAME, ODOO_PASSWORD, and ODOO_DB.",
    ),
    # Transmission errors (E-6xxx)
    "E-6001": ErrorCode(
        code="E-6001",
        category=ErrorCategory.TRANSMISSION,
        title="Partner Endpoint Rejected",
        message_template="API error: {status_code} {reason}",
        remediation="Check the partner endpoint URL and API key.",
    ),
    "E-6002": ErrorCode(
        code="E-6002",
        category=ErrorCategory.TRANSMISSION,
        title="Partner Endpoint Unreachable",
        message_template="Could not reach {endpoint}: {detail}",
        remediation="Check network connectivity to the trading partner and retry.",
        is_retryable=True,
    ),
}


def get_error(code: str) -> ErrorCode | None:
    """Get error definition by code.

    Args:
        code: Error code in E-XXXX format.

    Returns:
        ErrorCode if found, None otherwise.
    """
    return ERROR_REGISTRY.get(code)


def get_errors_by_category(category: ErrorCategory) -> list[ErrorCode]:
    """Get all errors in a category.

    Args:
        category: The error category to filter by.

    Returns:
        List of ErrorCode objects in the specified category.
    """
    return [e for e in ERROR_REGISTRY.values() if e.category == category]
