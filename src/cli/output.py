"""CLI output formatters for Rich tables and JSON.

X12 text itself is written to stdout untouched so it can be piped; these
helpers render the human-readable summaries around it.
"""

import json

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from src.edi.x12 import ELEMENT_SEPARATOR, split_segments
from src.transmission.models import TransmissionResult

console = Console()

# Envelope segments are dimmed so the transaction body stands out.
ENVELOPE_SEGMENTS = {"ISA", "GS", "ST", "SE", "GE", "IEA"}


def format_segments_table(x12: str, title: str = "X12 Segments") -> Table:
    """Format an interchange as a table of segments and elements.

    Args:
        x12: X12 interchange text.
        title: Table title.

    Returns:
        Rich Table with one row per segment.
    """
    table = Table(title=title)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Segment", style="cyan")
    table.add_column("Elements")
    for i, seg in enumerate(split_segments(x12), start=1):
        seg_id, _, rest = seg.partition(ELEMENT_SEPARATOR)
        style = "dim" if seg_id in ENVELOPE_SEGMENTS else None
        table.add_row(str(i), seg_id, rest.replace(ELEMENT_SEPARATOR, " | "), style=style)
    return table


def format_transmission_result(result: TransmissionResult, as_json: bool = False) -> str | Panel:
    """Format a transmission outcome as a Rich panel or JSON.

    Args:
        result: Transport result.
        as_json: If True, return a JSON string instead of a panel.
    """
    if as_json:
        return json.dumps(result.model_dump(by_alias=True), indent=2)
    color = "green" if result.success else "red"
    lines = [result.message]
    if result.transaction_id:
        lines.append(f"Transaction: {result.transaction_id}")
    return Panel(
        "\n".join(lines),
        title="Sent" if result.success else "Failed",
        border_style=color,
    )


def mask_secret(value: str | None) -> str:
    """Show only the last four characters of a secret."""
    if not value:
        return "—"
    return "***" + value[-4:] if len(value) > 4 else "***"
