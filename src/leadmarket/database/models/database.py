"""
Database models for the marketplace tables.
"""
from sqlalchemy import (
    Column,
    String,
    Text,
    Boolean,
    DateTime,
    Integer,
    ForeignKey,
    UniqueConstraint,
    CheckConstraint,
    JSON,
)
from sqlalchemy.orm import relationship

from leadmarket.database.models.base import BaseModel


class User(BaseModel):
    """
    Marketplace account. The id is the one issued by the authentication
    provider; role and balance live here.
    """
    __tablename__ = "users"

    email = Column(String(255), unique=True, nullable=True, index=True)
    role = Column(String(20), nullable=False, default="marketer")
    credits = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("credits >= 0", name="ck_users_credits_non_negative"),
    )


class Lead(BaseModel):
    """
    Sales prospect offered to marketers.
    Maps to the 'leads' table.
    """
    __tablename__ = "leads"

    # Prospect
    company_name = Column(String(200), nullable=True)
    contact_name = Column(String(200), nullable=True)
    email = Column(String(255), nullable=True, index=True)
    phone = Column(String(50), nullable=True)
    project_description = Column(Text, nullable=True)
    budget_range = Column(String(100), nullable=True, index=True)
    timeline = Column(String(100), nullable=True, index=True)
    location = Column(String(200), nullable=True)

    # Moderation
    price = Column(Integer, nullable=True)  # credits, set on publication
    status = Column(String(20), nullable=False, default="pending", index=True)
    published = Column(Boolean, nullable=False, default=False, index=True)
    published_at = Column(DateTime, nullable=True)
    call_status = Column(String(20), nullable=False, default="not_called")

    # Purchases
    current_purchases = Column(Integer, nullable=False, default=0)

    purchases = relationship(
        "LeadPurchase",
        back_populates="lead",
        order_by="LeadPurchase.created_at",
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint("current_purchases >= 0", name="ck_leads_current_purchases_non_negative"),
    )

    @property
    def purchasers(self):
        """User ids that bought this lead, in purchase order"""
        return [purchase.marketer_id for purchase in self.purchases]


class LeadPurchase(BaseModel):
    """One marketer's purchase of one lead"""
    __tablename__ = "lead_purchases"

    lead_id = Column(String(36), ForeignKey("leads.id"), nullable=False, index=True)
    marketer_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    credits_spent = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, default="active")

    lead = relationship("Lead", back_populates="purchases")

    __table_args__ = (
        UniqueConstraint("lead_id", "marketer_id", name="uq_lead_purchases_lead_marketer"),
    )


class CreditTransaction(BaseModel):
    """Append-only credit ledger entry"""
    __tablename__ = "credit_transactions"

    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    lead_id = Column(String(36), ForeignKey("leads.id"), nullable=True)
    amount = Column(Integer, nullable=False)  # signed: purchases are negative
    type = Column(String(20), nullable=False)  # lead_purchase, subscription, refund
    status = Column(String(20), nullable=False, default="completed")
    description = Column(String(255), nullable=True)


class AdminSetting(BaseModel):
    """Keyed JSON settings record (e.g. 'lead_matching')"""
    __tablename__ = "admin_settings"

    key = Column(String(100), unique=True, nullable=False, index=True)
    value = Column(JSON, nullable=False)
    description = Column(String(255), nullable=True)


class Role(BaseModel):
    __tablename__ = "roles"

    name = Column(String(100), unique=True, nullable=False)
