"""
Pydantic schemas for request/response validation
"""
from leadmarket.schemas.base import (
    BaseSchema,
    TimestampSchema,
    IDSchema,
    BaseResponseSchema,
    ErrorDetail,
    ErrorResponse,
)
from leadmarket.schemas.leads import (
    LeadCreate,
    LeadSummary,
    LeadDetail,
    LeadListResponse,
    PublishRequest,
    StatusUpdate,
    CallStatusUpdate,
    PurchaseResponse,
    QuoteReceipt,
)
from leadmarket.schemas.credits import (
    BalanceResponse,
    CreditPackage,
    CheckoutRequest,
    CheckoutResponse,
    CreditTransactionSchema,
    TransactionListResponse,
    Invoice,
    InvoiceListResponse,
)
from leadmarket.schemas.admin import (
    LeadMatchingSettings,
    RoleCreate,
    RoleSchema,
)

__all__ = [
    # Base schemas
    "BaseSchema",
    "TimestampSchema",
    "IDSchema",
    "BaseResponseSchema",
    "ErrorDetail",
    "ErrorResponse",
    # Lead schemas
    "LeadCreate",
    "LeadSummary",
    "LeadDetail",
    "LeadListResponse",
    "PublishRequest",
    "StatusUpdate",
    "CallStatusUpdate",
    "PurchaseResponse",
    "QuoteReceipt",
    # Credit schemas
    "BalanceResponse",
    "CreditPackage",
    "CheckoutRequest",
    "CheckoutResponse",
    "CreditTransactionSchema",
    "TransactionListResponse",
    "Invoice",
    "InvoiceListResponse",
    # Admin schemas
    "LeadMatchingSettings",
    "RoleCreate",
    "RoleSchema",
]
