"""
Database models module
"""
from leadmarket.database.models.base import Base, BaseModel
from leadmarket.database.models.database import (
    User,
    Lead,
    LeadPurchase,
    CreditTransaction,
    AdminSetting,
    Role,
)

__all__ = [
    "Base",
    "BaseModel",
    "User",
    "Lead",
    "LeadPurchase",
    "CreditTransaction",
    "AdminSetting",
    "Role",
]
