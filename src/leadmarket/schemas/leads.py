"""
Lead API request and response schemas
"""
from typing import Optional, List, Literal
from datetime import datetime
from pydantic import Field
from leadmarket.schemas.base import BaseSchema, BaseResponseSchema, IDSchema

LeadStatus = Literal["pending", "approved", "rejected"]
ModerationStatus = Literal["approved", "rejected"]
CallStatus = Literal["not_called", "called", "unreachable"]


class LeadBase(BaseSchema):
    """Prospect fields shared by intake and responses"""
    company_name: Optional[str] = None
    budget_range: Optional[str] = None
    timeline: Optional[str] = None
    location: Optional[str] = None
    project_description: Optional[str] = None


class LeadCreate(LeadBase):
    """Lead intake form"""
    contact_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class LeadSummary(LeadBase, BaseResponseSchema):
    """Marketplace row without contact details"""
    price: Optional[int] = None
    status: LeadStatus
    published: bool
    published_at: Optional[datetime] = None
    call_status: CallStatus
    current_purchases: int


class LeadDetail(LeadSummary):
    """
    Single lead. Contact fields are only filled in for administrators and
    for marketers who purchased the lead.
    """
    contact_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    purchasers: Optional[List[str]] = None
    purchased: bool = False


class LeadListResponse(BaseSchema):
    """Response schema for lead list endpoint"""
    total: int
    skip: int
    limit: int
    leads: List[LeadSummary]


class PublishRequest(BaseSchema):
    price: int = Field(..., gt=0, le=2_147_483_647, description="Price in credits")


class StatusUpdate(BaseSchema):
    status: ModerationStatus


class CallStatusUpdate(BaseSchema):
    call_status: CallStatus


class PurchaseResponse(BaseSchema):
    """Outcome of a successful lead purchase"""
    lead_id: str
    credits_remaining: int
    transaction_id: str
    low_balance: bool = False


class QuoteReceipt(IDSchema):
    """Acknowledgement returned to a prospect after submitting the quote form"""
    status: LeadStatus
    created_at: datetime
