"""
Credit balance and ledger data access
"""
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from leadmarket.database.models import CreditTransaction, User
from leadmarket.repositories.base_repository import BaseRepository


class CreditRepository(BaseRepository[User]):
    """Balances on the users table and entries in credit_transactions"""

    def __init__(self, db: Session):
        super().__init__(db, User)

    def get_balance(self, user_id: str) -> Optional[int]:
        row = self.db.query(User.credits).filter(User.id == user_id).first()
        return row[0] if row else None

    def debit(self, user_id: str, amount: int) -> int:
        """
        Subtract credits only when the balance covers the amount.

        Returns:
            Number of rows updated (0 or 1)
        """
        return self.update_where(
            [User.id == user_id, User.credits >= amount],
            {User.credits: User.credits - amount, User.updated_at: datetime.utcnow()},
        )

    def add_transaction(
        self,
        user_id: str,
        amount: int,
        type: str,
        status: str = "completed",
        lead_id: Optional[str] = None,
        description: Optional[str] = None,
    ) -> CreditTransaction:
        transaction = CreditTransaction(
            user_id=user_id,
            lead_id=lead_id,
            amount=amount,
            type=type,
            status=status,
            description=description,
        )
        self.db.add(transaction)
        self.db.flush()
        return transaction

    def list_transactions(self, user_id: str, skip: int = 0, limit: int = 100) -> List[CreditTransaction]:
        return (
            self.db.query(CreditTransaction)
            .filter(CreditTransaction.user_id == user_id)
            .order_by(CreditTransaction.created_at.desc(), CreditTransaction.id)
            .offset(skip)
            .limit(limit)
            .all()
        )
