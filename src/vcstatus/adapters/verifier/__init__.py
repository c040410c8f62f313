"""Verifier agent adapter."""

from .client import VerifierAPIError, VerifierClient

__all__ = ["VerifierAPIError", "VerifierClient"]
