"""
Credit-based lead purchase workflow
"""
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from leadmarket.core.config import settings
from leadmarket.core.session import UserSession
from leadmarket.database.models import Lead
from leadmarket.repositories.credit_repository import CreditRepository
from leadmarket.repositories.lead_repository import LeadRepository
from leadmarket.services.credit_service import is_low_balance
from leadmarket.utils.exceptions import (
    AlreadyPurchased,
    InsufficientCredits,
    LeadMarketError,
    NotFound,
    PurchaseLimitReached,
    StoreWriteFailed,
)
from leadmarket.utils.logging import get_logger, app_logger

logger = get_logger(__name__)


@dataclass
class PurchaseRecord:
    lead_id: str
    credits_remaining: int
    transaction_id: str
    low_balance: bool = False


class PurchaseService:
    """
    Buys a lead for the session's user.

    Preconditions are checked in order (lead exists and is published, under the
    purchase limit, not already bought by the user, balance covers the price).
    The slot claim, purchaser record, balance debit and ledger entry are then
    written in a single transaction. Each write is conditional, so a purchase
    racing another one fails cleanly instead of overshooting the limit or the
    balance; nothing is left half-applied.
    """

    def __init__(self, db: Session, purchase_limit: Optional[int] = None):
        self.db = db
        self.leads = LeadRepository(db)
        self.credits = CreditRepository(db)
        self.purchase_limit = purchase_limit or settings.marketplace.purchase_limit

    def _check_preconditions(self, lead: Optional[Lead], user_id: str, balance: int) -> None:
        if lead is None or not lead.published:
            raise NotFound("Lead not found")
        if lead.current_purchases >= self.purchase_limit:
            raise PurchaseLimitReached("This lead has reached its purchase limit")
        if self.leads.has_purchaser(lead.id, user_id):
            raise AlreadyPurchased("You already purchased this lead")
        if balance < (lead.price or 0):
            raise InsufficientCredits("Not enough credits, buy more credits to purchase this lead")

    def _raise_for_lost_race(self, lead_id: str, user_id: str) -> None:
        """Re-read after a conditional write matched nothing and report why."""
        self.db.rollback()
        lead = self.leads.find_by_id(lead_id)
        balance = self.credits.get_balance(user_id) or 0
        self._check_preconditions(lead, user_id, balance)
        raise StoreWriteFailed("Lead purchase could not be recorded")

    def purchase_lead(self, session: UserSession, lead_id: str) -> PurchaseRecord:
        """
        Purchase a lead with the session user's credits.

        Args:
            session: Caller session
            lead_id: Lead to buy

        Returns:
            PurchaseRecord with the remaining balance

        Raises:
            NotFound, PurchaseLimitReached, AlreadyPurchased,
            InsufficientCredits, StoreWriteFailed
        """
        user_id = session.user_id

        balance = self.credits.get_balance(user_id)
        if balance is None:
            raise NotFound(f"User '{user_id}' not found")

        lead = self.leads.find_by_id(lead_id)
        self._check_preconditions(lead, user_id, balance)
        price = lead.price or 0

        logger.info(
            f"[cyan]Purchasing lead {lead_id}[/cyan] for [yellow]{user_id}[/yellow] "
            f"[dim]({price} credits, balance {balance})[/dim]"
        )

        try:
            if self.leads.increment_purchases(lead_id, self.purchase_limit) != 1:
                self._raise_for_lost_race(lead_id, user_id)

            try:
                self.leads.add_purchaser(lead_id, user_id, price)
            except IntegrityError:
                self._raise_for_lost_race(lead_id, user_id)

            if self.credits.debit(user_id, price) != 1:
                self._raise_for_lost_race(lead_id, user_id)

            transaction = self.credits.add_transaction(
                user_id=user_id,
                amount=-price,
                type="lead_purchase",
                status="completed",
                lead_id=lead_id,
                description=f"Lead purchase: {lead.company_name or lead_id}",
            )
            transaction_id = transaction.id
            self.db.commit()
        except LeadMarketError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"[red]❌ Failed to record purchase of lead {lead_id} by {user_id}:[/red] {e}")
            raise StoreWriteFailed("Lead purchase could not be recorded")

        remaining = self.credits.get_balance(user_id)
        low_balance = is_low_balance(remaining)
        if low_balance:
            logger.warning(f"[yellow]⚠️  Low credit balance for {user_id}:[/yellow] {remaining}")

        app_logger.info(
            f"[green]✅ Lead {lead_id} purchased by {user_id}[/green] "
            f"[dim]({remaining} credits left)[/dim]"
        )

        return PurchaseRecord(
            lead_id=lead_id,
            credits_remaining=remaining,
            transaction_id=transaction_id,
            low_balance=low_balance,
        )
