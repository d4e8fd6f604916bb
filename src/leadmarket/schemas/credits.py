"""
Credit, checkout and invoice schemas
"""
from typing import Optional, List, Literal
from datetime import datetime
from leadmarket.schemas.base import BaseSchema

TransactionType = Literal["lead_purchase", "subscription", "refund"]
TransactionStatus = Literal["completed", "pending", "failed"]


class BalanceResponse(BaseSchema):
    user_id: str
    credits: int
    low_balance: bool = False


class CreditPackage(BaseSchema):
    id: str
    credits: int
    price: float


class CheckoutRequest(BaseSchema):
    package_id: str


class CheckoutResponse(BaseSchema):
    package_id: str
    url: str


class CreditTransactionSchema(BaseSchema):
    id: str
    lead_id: Optional[str] = None
    amount: int
    type: TransactionType
    status: TransactionStatus
    description: Optional[str] = None
    created_at: datetime


class TransactionListResponse(BaseSchema):
    total: int
    transactions: List[CreditTransactionSchema]


class Invoice(BaseSchema):
    """Invoice as returned by the billing provider"""
    id: str
    number: Optional[str] = None
    amount: float
    status: Literal["paid", "pending", "failed"]
    created_at: datetime
    pdf_url: Optional[str] = None


class InvoiceListResponse(BaseSchema):
    invoices: List[Invoice]
