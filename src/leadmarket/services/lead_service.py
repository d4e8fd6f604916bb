"""
Lead service for intake, browsing, publication and moderation
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from leadmarket.core.session import UserSession
from leadmarket.database.models import Lead
from leadmarket.repositories.lead_repository import LeadRepository
from leadmarket.utils.exceptions import (
    AlreadyPublished,
    InvalidStatusTransition,
    LeadNotPublished,
    NotFound,
    StoreWriteFailed,
    ValidationError,
)
from leadmarket.utils.logging import get_logger, app_logger

logger = get_logger(__name__)

MODERATION_STATUSES = ("approved", "rejected")
CALL_STATUSES = ("not_called", "called", "unreachable")
CONTACT_FIELDS = ("contact_name", "email", "phone")
MAX_PRICE = 2_147_483_647  # upper bound of the INTEGER price column


class LeadService:
    """Service for managing leads in the marketplace"""

    def __init__(self, db: Session):
        self.db = db
        self.leads = LeadRepository(db)

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"[red]❌ Failed to {action}:[/red] {e}")
            raise StoreWriteFailed(f"Failed to {action}")

    def _conditional_update(self, action: str, update, *args) -> int:
        try:
            return update(*args)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"[red]❌ Failed to {action}:[/red] {e}")
            raise StoreWriteFailed(f"Failed to {action}")

    def create_lead(self, data: Dict[str, Any]) -> Lead:
        """
        Create a lead from the intake form. New leads are pending and unpublished.

        Args:
            data: Prospect fields

        Returns:
            Created Lead
        """
        lead = self.leads.add(
            **data,
            status="pending",
            published=False,
            call_status="not_called",
            current_purchases=0,
        )
        lead_id = lead.id
        self._commit("create lead")
        logger.info(f"[green]✅ Lead created:[/green] [cyan]{lead_id}[/cyan] - {data.get('company_name') or 'N/A'}")
        return self.leads.find_by_id(lead_id)

    def list_leads(
        self,
        session: UserSession,
        search: Optional[str] = None,
        budget_range: Optional[str] = None,
        timeline: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Lead]:
        """
        Leads visible to the caller, newest first.
        Marketers only see published leads.
        """
        return self.leads.search(
            published_only=not session.is_admin,
            search=search,
            budget_range=budget_range,
            timeline=timeline,
            skip=skip,
            limit=limit,
        )

    def list_purchased_leads(self, session: UserSession) -> List[Lead]:
        return self.leads.find_purchased_by(session.user_id)

    def get_lead(self, session: UserSession, lead_id: str) -> Lead:
        lead = self.leads.find_by_id(lead_id)
        if lead is None or (not lead.published and not session.is_admin):
            raise NotFound(f"Lead with ID '{lead_id}' not found")
        return lead

    def lead_view(self, session: UserSession, lead: Lead) -> Dict[str, Any]:
        """
        Serialize a lead for the caller. Contact fields and the purchaser list
        are withheld from marketers who have not bought the lead.
        """
        purchased = session.user_id in lead.purchasers
        view = {
            column.name: getattr(lead, column.name)
            for column in Lead.__table__.columns
        }
        view["purchased"] = purchased
        view["purchasers"] = lead.purchasers if session.is_admin else None
        if not (session.is_admin or purchased):
            for field in CONTACT_FIELDS:
                view[field] = None
        return view

    def publish_lead(self, lead_id: str, price: int) -> Lead:
        """
        Publish a lead at a price in credits. Published leads keep their price.

        Raises:
            ValidationError: price is not a positive integer
            NotFound: unknown lead
            AlreadyPublished: lead is already published
        """
        if not isinstance(price, int) or isinstance(price, bool) or not 0 < price <= MAX_PRICE:
            raise ValidationError(f"Price must be a whole number of credits between 1 and {MAX_PRICE}")

        updated = self._conditional_update("publish lead", self.leads.publish, lead_id, price, datetime.utcnow())
        if updated != 1:
            self.db.rollback()
            if self.leads.find_by_id(lead_id) is None:
                raise NotFound(f"Lead with ID '{lead_id}' not found")
            raise AlreadyPublished("Lead is already published")

        self._commit("publish lead")
        app_logger.info(f"[green]✅ Lead {lead_id} published[/green] [dim]at {price} credits[/dim]")
        return self.leads.find_by_id(lead_id)

    def set_status(self, lead_id: str, status: str) -> Lead:
        """
        Approve or reject a published, pending lead.

        Raises:
            ValidationError, NotFound, LeadNotPublished, InvalidStatusTransition
        """
        if status not in MODERATION_STATUSES:
            raise ValidationError(f"Status must be one of {', '.join(MODERATION_STATUSES)}")

        updated = self._conditional_update("update lead status", self.leads.transition_status, lead_id, status)
        if updated != 1:
            self.db.rollback()
            lead = self.leads.find_by_id(lead_id)
            if lead is None:
                raise NotFound(f"Lead with ID '{lead_id}' not found")
            if not lead.published:
                raise LeadNotPublished("Publish the lead before changing its status")
            raise InvalidStatusTransition(f"Lead is already {lead.status}")

        self._commit("update lead status")
        logger.info(f"[cyan]Lead {lead_id} status:[/cyan] {status}")
        return self.leads.find_by_id(lead_id)

    def set_call_status(self, lead_id: str, call_status: str) -> Lead:
        if call_status not in CALL_STATUSES:
            raise ValidationError(f"Call status must be one of {', '.join(CALL_STATUSES)}")

        lead = self.leads.find_by_id(lead_id)
        if lead is None:
            raise NotFound(f"Lead with ID '{lead_id}' not found")

        lead.call_status = call_status
        self._commit("update call status")
        logger.info(f"[cyan]Lead {lead_id} call status:[/cyan] {call_status}")
        return self.leads.find_by_id(lead_id)
