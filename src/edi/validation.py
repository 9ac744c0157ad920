"""Totals reconciliation for 850 and 810 documents.

Builders call these after assembling a document. Discrepancies are logged
as warnings, or raised as E-2002 when strict totals are enabled.
"""

import logging

from src.edi.models import EDI810Document, EDI850Document
from src.errors import FloorLinkError

logger = logging.getLogger(__name__)

# One cent, to absorb float rounding in storefront totals
TOLERANCE = 0.01


def _close(a: float, b: float) -> bool:
    return abs(a - b) <= TOLERANCE + 1e-9


def check_totals_850(doc: EDI850Document) -> list[str]:
    """Compare the PO total with the sum of its line extended prices.

    Args:
        doc: Purchase order to check.

    Returns:
        Discrepancy messages, empty when the totals reconcile.
    """
    line_sum = round(sum(i.quantity * i.unit_price for i in doc.line_items), 2)
    if not _close(line_sum, doc.total_amount):
        return [f"total {doc.total_amount:.2f} != sum of lines {line_sum:.2f}"]
    return []


def check_totals_810(doc: EDI810Document) -> list[str]:
    """Check an invoice's subtotal and total.

    Args:
        doc: Invoice to check.

    Returns:
        Discrepancy messages, empty when the totals reconcile.
    """
    issues: list[str] = []
    line_sum = round(sum(i.extended_price for i in doc.line_items), 2)
    if not _close(line_sum, doc.subtotal):
        issues.append(f"subtotal {doc.subtotal:.2f} != sum of lines {line_sum:.2f}")
    expected_total = round(doc.subtotal + doc.tax_amount, 2)
    if not _close(expected_total, doc.total_amount):
        issues.append(
            f"total {doc.total_amount:.2f} != subtotal + tax {expected_total:.2f}"
        )
    return issues


def enforce_totals(transaction_set: str, issues: list[str], strict: bool = False) -> None:
    """Warn about or reject totals discrepancies.

    Raises:
        FloorLinkError: E-2002 when strict and issues were found.
    """
    if not issues:
        return
    if strict:
        raise FloorLinkError.from_code(
            "E-2002",
            transaction_set=transaction_set,
            issues="; ".join(issues),
        )
    for issue in issues:
        logger.warning("EDI %s totals mismatch: %s", transaction_set, issue)
