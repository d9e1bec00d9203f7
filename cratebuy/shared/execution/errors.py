"""
Crate Purchase Errors
=====================
Standardized error codes and the exception hierarchy for the purchase
pipeline.

Request-level errors propagate to the HTTP boundary and become a JSON
error envelope. Per-asset errors (quote / swap build) never leave the
fan-out phases: they are converted into QuoteFailure values.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(Enum):
    """Standardized error codes for purchase failures."""

    # Request-level
    VALIDATION_ERROR = "VALIDATION_ERROR"
    BASKET_NOT_FOUND = "BASKET_NOT_FOUND"
    COLLABORATOR_UNAVAILABLE = "COLLABORATOR_UNAVAILABLE"
    NO_SUPPORTED_ASSETS = "NO_SUPPORTED_ASSETS"
    PHASE_TIMEOUT = "PHASE_TIMEOUT"
    UNEXPECTED_ERROR = "UNEXPECTED_ERROR"

    # Per-asset
    UNKNOWN_MINT = "UNKNOWN_MINT"
    AMOUNT_TOO_SMALL = "AMOUNT_TOO_SMALL"
    QUOTE_UNAVAILABLE = "QUOTE_UNAVAILABLE"
    TRANSACTION_BUILD_FAILED = "TRANSACTION_BUILD_FAILED"


class CrateError(Exception):
    """Base class for every error raised by the purchase pipeline."""

    code = ErrorCode.UNEXPECTED_ERROR
    status_code = 500
    public_message = "Failed to prepare crate purchase"

    def __init__(self, message: Optional[str] = None, details: Optional[str] = None):
        super().__init__(message or self.public_message)
        self.message = message or self.public_message
        self.details = details
        self.stage: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """JSON error envelope returned to action clients."""
        body: Dict[str, Any] = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(CrateError):
    code = ErrorCode.VALIDATION_ERROR
    status_code = 400
    public_message = "Invalid request"


class CollaboratorUnavailable(CrateError):
    """Basket service unreachable or answered non-2xx."""

    code = ErrorCode.COLLABORATOR_UNAVAILABLE
    status_code = 502
    public_message = "Crate service unavailable"


class BasketNotFound(CollaboratorUnavailable):
    code = ErrorCode.BASKET_NOT_FOUND
    status_code = 404
    public_message = "Crate not found"


class AssetQuoteUnavailable(CrateError):
    """Per-asset: Jupiter returned no route / an error for one allocation."""

    code = ErrorCode.QUOTE_UNAVAILABLE
    public_message = "Unable to quote"


class TransactionBuildFailure(CrateError):
    """Per-asset: Jupiter could not build the swap for a quote."""

    code = ErrorCode.TRANSACTION_BUILD_FAILED
    public_message = "Unable to build swap transaction"


class NoSupportedAssets(CrateError):
    code = ErrorCode.NO_SUPPORTED_ASSETS
    status_code = 422
    public_message = "No supported assets in crate"


class PhaseTimeout(CrateError):
    code = ErrorCode.PHASE_TIMEOUT
    status_code = 504
    public_message = "Timed out preparing crate purchase"


class UnexpectedError(CrateError):
    code = ErrorCode.UNEXPECTED_ERROR
    status_code = 500
    public_message = "Failed to prepare crate purchase"
