"""Structured exception hierarchy for provisioning file generation.

Provides specific exception types for the failure modes of a save,
with enough context for the form to show a single readable message.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

__all__ = [
    "ProvisioningError",
    "ShapeError",
    "DestinationError",
    "UnknownTagError",
]


class ProvisioningError(Exception):
    """Base exception for all provisioning errors.

    Provides structured error information for debugging.
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        self.message = message
        self.field = field
        self.details = details or {}
        self.suggestion = suggestion

        # Build full message; the first line is always the headline
        parts = [self.headline]

        if details:
            detail_lines = [f"  {k}: {v}" for k, v in details.items()]
            parts.append("\nDetails:")
            parts.extend(detail_lines)

        if suggestion:
            parts.append(f"\nSuggestion: {suggestion}")

        super().__init__("\n".join(parts))

    @property
    def headline(self) -> str:
        """Single-line summary suitable for a status bar."""
        if self.field:
            return f"[{self.field}] {self.message}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for structured logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "field": self.field,
            "details": self.details,
            "suggestion": self.suggestion,
        }


class ShapeError(ProvisioningError):
    """Identity value does not have the required shape.

    Raised when the device identity does not normalize to exactly
    twelve hexadecimal characters. Nothing is written.
    """

    def __init__(
        self,
        message: str,
        *,
        raw: Optional[str] = None,
        normalized: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        self.raw = raw
        self.normalized = normalized

        details = kwargs.pop("details", {})
        if raw is not None:
            details["raw"] = raw
        if normalized is not None:
            details["normalized"] = normalized
            details["length"] = len(normalized)

        suggestion = kwargs.pop("suggestion", None)
        if not suggestion:
            suggestion = (
                "Enter the 12-character MAC address printed on the back of the "
                "phone. Separators such as ':' or '-' are stripped automatically."
            )

        kwargs.setdefault("field", "device")
        super().__init__(message, details=details, suggestion=suggestion, **kwargs)


class DestinationError(ProvisioningError):
    """Error opening or writing the output document.

    Raised when the destination file cannot be opened for writing.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Optional[str] = None,
        cause: Optional[Exception] = None,
        **kwargs: Any,
    ) -> None:
        self.path = path
        self.cause = cause

        details = kwargs.pop("details", {})
        if path:
            details["path"] = path
        if cause:
            details["cause"] = str(cause)
            details["cause_type"] = type(cause).__name__

        suggestion = kwargs.pop("suggestion", None)
        if not suggestion:
            suggestion = (
                "Check that the output directory exists and is writable, "
                "or choose another directory with --output-dir."
            )

        super().__init__(message, details=details, suggestion=suggestion, **kwargs)


class UnknownTagError(ProvisioningError):
    """A lookup by tag found no field.

    This is a mismatch between the form schema and the code addressing it
    (visibility rules, emission tables), not an operator error.
    """

    def __init__(self, tag: str, **kwargs: Any) -> None:
        self.tag = tag
        super().__init__(f"No field is declared with tag {tag!r}", **kwargs)
