"""
Credit balances, ledger history, checkout and invoices
"""
from typing import List, Optional
from sqlalchemy.orm import Session

from leadmarket.core.config import settings, CreditPackageConfig
from leadmarket.core.session import UserSession
from leadmarket.database.models import CreditTransaction
from leadmarket.external.billing.client import BillingClient
from leadmarket.repositories.credit_repository import CreditRepository
from leadmarket.schemas.credits import Invoice
from leadmarket.utils.exceptions import NotFound, UnknownPackage
from leadmarket.utils.logging import get_logger

logger = get_logger(__name__)


def is_low_balance(balance: int) -> bool:
    """Balance under the configured low-credit threshold"""
    return balance < settings.marketplace.low_credit_threshold


class CreditService:
    """
    Read side of the credit ledger plus the hand-off to external checkout.
    Balances are only decremented by the purchase workflow; top-ups are
    credited by the billing provider and show up on the next balance read.
    """

    def __init__(self, db: Session, billing_client: Optional[BillingClient] = None):
        self.db = db
        self.credits = CreditRepository(db)
        self.billing_client = billing_client or BillingClient()

    def get_balance(self, user_id: str) -> int:
        balance = self.credits.get_balance(user_id)
        if balance is None:
            raise NotFound(f"User '{user_id}' not found")
        return balance

    def is_low_balance(self, balance: int) -> bool:
        return is_low_balance(balance)

    def list_transactions(self, session: UserSession, skip: int = 0, limit: int = 100) -> List[CreditTransaction]:
        return self.credits.list_transactions(session.user_id, skip=skip, limit=limit)

    def list_packages(self) -> List[CreditPackageConfig]:
        return list(settings.credit_packages)

    def get_package(self, package_id: str) -> CreditPackageConfig:
        for package in settings.credit_packages:
            if package.id == package_id:
                return package
        raise UnknownPackage(f"Unknown credit package '{package_id}'")

    async def start_checkout(self, session: UserSession, package_id: str) -> str:
        """
        Create an external checkout session for a credit package.

        Returns:
            Redirect URL of the payment page
        """
        package = self.get_package(package_id)
        logger.info(
            f"[cyan]Starting checkout:[/cyan] {package.id} "
            f"[dim]({package.credits} credits, €{package.price})[/dim] for {session.user_id}"
        )
        return await self.billing_client.create_checkout_session(
            package_id=package.id,
            user_id=session.user_id,
            credits=package.credits,
        )

    async def list_invoices(self, session: UserSession) -> List[Invoice]:
        return await self.billing_client.get_invoices(session.user_id)
