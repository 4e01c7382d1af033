"""Client-side checks applied to a draft before any write request."""

from __future__ import annotations

from dataclasses import dataclass

from .models import FormDraft

REQUIRED_FIELDS_MESSAGE = "⚠️ All fields are required."
INVALID_EMAIL_MESSAGE = "📧 Please enter a valid email address."


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    message: str = ""


def validate_draft(draft: FormDraft) -> ValidationResult:
    """Return the first failing rule for ``draft``, or a passing result.

    The checks are syntactic only: every field must be non-empty and the
    email must contain an ``@``.
    """

    if not draft.name or not draft.email or not draft.major:
        return ValidationResult(ok=False, message=REQUIRED_FIELDS_MESSAGE)
    if "@" not in draft.email:
        return ValidationResult(ok=False, message=INVALID_EMAIL_MESSAGE)
    return ValidationResult(ok=True)


__all__ = [
    "INVALID_EMAIL_MESSAGE",
    "REQUIRED_FIELDS_MESSAGE",
    "ValidationResult",
    "validate_draft",
]
