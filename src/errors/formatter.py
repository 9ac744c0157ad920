"""Application error type and its formatting.

This module provides:
- FloorLinkError exception class for application errors
- Error formatting for CLI display
"""

from dataclasses import dataclass, field

from src.errors.registry import get_error


@dataclass
class FloorLinkError(Exception):
    """Application error with code, message, and context.

    Attributes:
        code: Error code in E-XXXX format.
        message: Human-readable error message.
        remediation: Action user should take to resolve.
        fields: Document field paths involved (e.g. ``items[0].unit_price``).
        is_retryable: Whether the operation can be retried without user action.
        details: Additional context dictionary.
    """

    code: str
    message: str
    remediation: str
    fields: list[str] = field(default_factory=list)
    is_retryable: bool = False
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        """Return string representation of the error."""
        return f"{self.code}: {self.message}"

    @classmethod
    def from_code(cls, code: str, **kwargs: object) -> "FloorLinkError":
        """Create error from registry code with context substitution.

        Args:
            code: Error code in E-XXXX format.
            **kwargs: Context values for message template substitution.
                Special keys 'fields' and 'details' populate the
                FloorLinkError attributes instead of the message.

        Returns:
            FloorLinkError instance with formatted message.
        """
        fields = kwargs.get("fields", [])
        if not isinstance(fields, list):
            fields = []
        details = kwargs.get("details", {})
        if not isinstance(details, dict):
            details = {}

        error_def = get_error(code)
        if not error_def:
            return cls(
                code=code,
                message=f"Unknown error: {code}",
                remediation="Contact support.",
                fields=fields,
                details=details,
            )

        template_kwargs = {k: v for k, v in kwargs.items() if k != "details"}
        if "fields" in template_kwargs:
            template_kwargs["fields"] = ", ".join(str(f) for f in fields)
        try:
            message = error_def.message_template.format(**template_kwargs)
        except KeyError:
            # Keep template if some placeholders are missing
            message = error_def.message_template

        return cls(
            code=error_def.code,
            message=message,
            remediation=error_def.remediation,
            fields=fields,
            is_retryable=error_def.is_retryable,
            details=details,
        )


def format_error(error: FloorLinkError, include_remediation: bool = True) -> str:
    """Format error for display to user.

    Args:
        error: The FloorLinkError to format.
        include_remediation: Whether to include remediation steps.

    Returns:
        Multi-line formatted string suitable for user display.
    """
    lines = [f"{error.code}: {error.message}"]

    if error.fields:
        if len(error.fields) == 1:
            lines.append(f"  Field: {error.fields[0]}")
        else:
            fields_str = ", ".join(error.fields[:10])
            if len(error.fields) > 10:
                fields_str += f" (and {len(error.fields) - 10} more)"
            lines.append(f"  Affected fields: {fields_str}")

    if include_remediation:
        lines.append(f"  Action: {error.remediation}")

    return "\n".join(lines)

