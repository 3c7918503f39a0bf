"""
Custom exceptions for the Junto DAO API.

Provides a hierarchy of exceptions carrying HTTP status codes so the
app-level handler can render every failure as ``{"error": message}``
with the right status.
"""
from typing import Optional


class JuntoError(Exception):
    """Base exception for all Junto DAO API errors."""

    def __init__(self, message: str, code: int = 500):
        super().__init__(message)
        self.message = message
        self.code = code

    def to_dict(self) -> dict:
        """Convert to the JSON body returned by the API."""
        return {"error": self.message}


# ============================================
# 4xx Client Errors
# ============================================

class ValidationError(JuntoError):
    """400 Bad Request - Missing or malformed request fields."""

    def __init__(self, message: str = "Missing required fields"):
        super().__init__(message, code=400)


class IdentityParseError(JuntoError):
    """400 Bad Request - A string is not a valid base58 public key."""

    def __init__(self, message: str, value: Optional[str] = None):
        super().__init__(message, code=400)
        self.value = value


class SignerUnavailableError(JuntoError):
    """403 Forbidden - No local keypair is held for the acting identity."""

    def __init__(self, identity: str = ""):
        message = (
            f"No signing key available for identity '{identity}'"
            if identity else "No signing key available"
        )
        super().__init__(message, code=403)
        self.identity = identity


class AccountNotFoundError(JuntoError):
    """404 Not Found - The requested on-chain account does not exist."""

    def __init__(self, message: str = "Account not found"):
        super().__init__(message, code=404)


# ============================================
# 5xx Server Errors
# ============================================

class LedgerReadError(JuntoError):
    """500 - Reading account state from the ledger failed."""

    def __init__(self, message: str):
        super().__init__(message, code=500)


class LedgerSubmitError(JuntoError):
    """500 - Submitting or confirming a transaction failed."""

    def __init__(self, message: str):
        super().__init__(message, code=500)


class InternalError(JuntoError):
    """500 Internal Server Error - Untyped downstream failure."""

    def __init__(self, message: str = "An unexpected error occurred."):
        super().__init__(message, code=500)


class ServiceUnavailableError(JuntoError):
    """503 Service Unavailable - The DAO service has not been initialised."""

    def __init__(self, message: str = "Service temporarily unavailable."):
        super().__init__(message, code=503)


# ============================================
# Startup / tooling
# ============================================

class ConfigurationError(JuntoError):
    """Invalid or incomplete settings detected at startup or deploy time."""

    def __init__(self, message: str):
        super().__init__(message, code=500)
