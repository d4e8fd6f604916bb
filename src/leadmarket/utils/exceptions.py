"""
Custom exception classes
"""
from fastapi import HTTPException, status


class LeadMarketError(HTTPException):
    """Base marketplace error. The detail carries a stable code next to the message."""
    code = "error"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, status_code: int = None):
        self.message = message
        super().__init__(
            status_code=status_code or self.status_code,
            detail={"code": self.code, "message": message},
        )


class NotFound(LeadMarketError):
    """Requested lead, role or user does not exist (or is not visible)"""
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class PurchaseError(LeadMarketError):
    """Base class for purchase workflow failures"""
    code = "purchase_failed"


class PurchaseLimitReached(PurchaseError):
    code = "purchase_limit_reached"
    status_code = status.HTTP_409_CONFLICT


class AlreadyPurchased(PurchaseError):
    code = "already_purchased"
    status_code = status.HTTP_409_CONFLICT


class InsufficientCredits(PurchaseError):
    code = "insufficient_credits"
    status_code = status.HTTP_402_PAYMENT_REQUIRED


class StoreWriteFailed(LeadMarketError):
    """A store mutation failed after its preconditions passed; the transaction was rolled back"""
    code = "store_write_failed"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class AlreadyPublished(LeadMarketError):
    code = "already_published"
    status_code = status.HTTP_409_CONFLICT


class LeadNotPublished(LeadMarketError):
    code = "lead_not_published"
    status_code = status.HTTP_409_CONFLICT


class InvalidStatusTransition(LeadMarketError):
    code = "invalid_status_transition"
    status_code = status.HTTP_409_CONFLICT


class NotAuthenticated(LeadMarketError):
    code = "not_authenticated"
    status_code = status.HTTP_401_UNAUTHORIZED


class SessionClosed(LeadMarketError):
    code = "session_closed"
    status_code = status.HTTP_401_UNAUTHORIZED


class AdminRequired(LeadMarketError):
    code = "admin_required"
    status_code = status.HTTP_403_FORBIDDEN


class UnknownPackage(LeadMarketError):
    code = "unknown_package"
    status_code = status.HTTP_404_NOT_FOUND


class BillingAPIError(LeadMarketError):
    """Exception raised when a hosted billing function call fails"""
    code = "billing_unavailable"
    status_code = status.HTTP_502_BAD_GATEWAY


class ValidationError(LeadMarketError):
    """Exception raised for validation errors"""
    code = "validation_error"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
