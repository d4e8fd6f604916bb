"""
Lead and lead purchase data access
"""
from datetime import datetime
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from leadmarket.database.models import Lead, LeadPurchase
from leadmarket.repositories.base_repository import BaseRepository


class LeadRepository(BaseRepository[Lead]):
    """Queries and conditional mutations on the leads table"""

    def __init__(self, db: Session):
        super().__init__(db, Lead)

    def search(
        self,
        published_only: bool = False,
        search: Optional[str] = None,
        budget_range: Optional[str] = None,
        timeline: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Lead]:
        """Newest leads first, optionally filtered like the marketplace filter bar"""
        query = self.db.query(Lead)

        if published_only:
            query = query.filter(Lead.published.is_(True))
        if search:
            pattern = f"%{search.lower()}%"
            query = query.filter(
                or_(
                    Lead.company_name.ilike(pattern),
                    Lead.project_description.ilike(pattern),
                )
            )
        if budget_range:
            query = query.filter(Lead.budget_range == budget_range)
        if timeline:
            query = query.filter(Lead.timeline == timeline)

        return (
            query.order_by(Lead.created_at.desc(), Lead.id)
            .offset(skip)
            .limit(limit)
            .all()
        )

    def find_purchased_by(self, user_id: str) -> List[Lead]:
        return (
            self.db.query(Lead)
            .join(LeadPurchase, LeadPurchase.lead_id == Lead.id)
            .filter(LeadPurchase.marketer_id == user_id)
            .order_by(LeadPurchase.created_at.desc())
            .all()
        )

    def has_purchaser(self, lead_id: str, user_id: str) -> bool:
        return (
            self.db.query(LeadPurchase.id)
            .filter(LeadPurchase.lead_id == lead_id, LeadPurchase.marketer_id == user_id)
            .first()
            is not None
        )

    def increment_purchases(self, lead_id: str, purchase_limit: int) -> int:
        """
        Claim one purchase slot. Matches only a published lead still under the limit.

        Returns:
            Number of rows updated (0 or 1)
        """
        return self.update_where(
            [
                Lead.id == lead_id,
                Lead.published.is_(True),
                Lead.current_purchases < purchase_limit,
            ],
            {
                Lead.current_purchases: Lead.current_purchases + 1,
                Lead.updated_at: datetime.utcnow(),
            },
        )

    def add_purchaser(self, lead_id: str, user_id: str, credits_spent: int) -> LeadPurchase:
        purchase = LeadPurchase(
            lead_id=lead_id,
            marketer_id=user_id,
            credits_spent=credits_spent,
            status="active",
        )
        self.db.add(purchase)
        self.db.flush()
        return purchase

    def publish(self, lead_id: str, price: int, published_at: datetime) -> int:
        """Publish an unpublished lead at a price. Returns rows updated."""
        return self.update_where(
            [Lead.id == lead_id, Lead.published.is_(False)],
            {
                Lead.published: True,
                Lead.published_at: published_at,
                Lead.price: price,
                Lead.updated_at: datetime.utcnow(),
            },
        )

    def transition_status(self, lead_id: str, status: str) -> int:
        """Move a published, pending lead to a final status. Returns rows updated."""
        return self.update_where(
            [Lead.id == lead_id, Lead.published.is_(True), Lead.status == "pending"],
            {Lead.status: status, Lead.updated_at: datetime.utcnow()},
        )
