"""Errors raised by the verification domain."""

from __future__ import annotations


class VerificationError(RuntimeError):
    """Base class for verification domain errors."""


class UnsupportedCategoryError(VerificationError):
    """Raised when a category has no registered specification."""

    def __init__(self, category: object) -> None:
        super().__init__(f"Unsupported verification category: {category}")
        self.category = category


class MissingProofError(VerificationError):
    """Raised when a proof record carries no cryptographic presentation."""


class IssuanceError(VerificationError):
    """Raised when a verification record cannot be issued to the store."""
