"""Tests for leadmarket.services.purchase_service -- the lead purchase workflow."""
import pytest
from unittest.mock import patch
from sqlalchemy.exc import OperationalError

from leadmarket.core.config import settings
from leadmarket.core.session import UserSession
from leadmarket.database.models import CreditTransaction, Lead, LeadPurchase, User
from leadmarket.services.credit_service import CreditService
from leadmarket.services.purchase_service import PurchaseService
from leadmarket.utils.exceptions import (
    AlreadyPurchased,
    InsufficientCredits,
    NotFound,
    PurchaseLimitReached,
    SessionClosed,
    StoreWriteFailed,
)


def _snapshot(db_session, lead_id, user_id):
    db_session.expire_all()
    lead = db_session.get(Lead, lead_id)
    user = db_session.get(User, user_id)
    return (
        lead.current_purchases,
        sorted(lead.purchasers),
        user.credits,
        db_session.query(CreditTransaction).count(),
    )


class TestSuccessfulPurchase:
    """A purchase debits the price, records the purchaser and logs a transaction."""

    def test_balance_decremented_by_price(self, db_session, make_lead, marketer, marketer_session):
        lead = make_lead(price=30)
        record = PurchaseService(db_session).purchase_lead(marketer_session, lead.id)
        db_session.expire_all()
        assert record.credits_remaining == 20
        assert db_session.get(User, marketer.id).credits == 20

    def test_purchaser_recorded_once(self, db_session, make_lead, marketer, marketer_session):
        lead = make_lead(price=30)
        PurchaseService(db_session).purchase_lead(marketer_session, lead.id)
        db_session.expire_all()
        lead = db_session.get(Lead, lead.id)
        assert lead.purchasers.count(marketer.id) == 1
        assert lead.current_purchases == 1
        assert lead.current_purchases == len(lead.purchasers)

    def test_transaction_written(self, db_session, make_lead, marketer, marketer_session):
        lead = make_lead(price=30)
        record = PurchaseService(db_session).purchase_lead(marketer_session, lead.id)
        transaction = db_session.get(CreditTransaction, record.transaction_id)
        assert transaction.amount == -30
        assert transaction.type == 'lead_purchase'
        assert transaction.status == 'completed'
        assert transaction.user_id == marketer.id
        assert transaction.lead_id == lead.id

    def test_purchase_record_keeps_credits_spent(self, db_session, make_lead, marketer, marketer_session):
        lead = make_lead(price=30)
        PurchaseService(db_session).purchase_lead(marketer_session, lead.id)
        purchase = db_session.query(LeadPurchase).filter_by(lead_id=lead.id).one()
        assert purchase.credits_spent == 30
        assert purchase.status == 'active'

    def test_exact_balance_is_enough(self, db_session, make_lead, make_user):
        user = make_user(credits=30)
        lead = make_lead(price=30)
        record = PurchaseService(db_session).purchase_lead(UserSession(user.id, 'marketer'), lead.id)
        assert record.credits_remaining == 0

    def test_low_balance_flag(self, db_session, make_lead, make_user):
        user = make_user(credits=33)
        lead = make_lead(price=30)
        record = PurchaseService(db_session).purchase_lead(UserSession(user.id, 'marketer'), lead.id)
        assert record.low_balance is True

    def test_no_low_balance_flag_above_threshold(self, db_session, make_lead, marketer_session):
        lead = make_lead(price=30)
        record = PurchaseService(db_session).purchase_lead(marketer_session, lead.id)
        assert record.low_balance is False

    def test_low_balance_follows_configured_threshold(self, db_session, make_lead, marketer_session, monkeypatch):
        monkeypatch.setattr(settings.marketplace, 'low_credit_threshold', 25)
        lead = make_lead(price=30)
        record = PurchaseService(db_session).purchase_lead(marketer_session, lead.id)
        assert record.credits_remaining == 20
        assert record.low_balance is True
        assert record.low_balance == CreditService(db_session).is_low_balance(record.credits_remaining)


class TestLimitScenario:
    """Fifth purchaser fills the lead; the sixth is turned away."""

    def test_fifth_purchase_then_limit(self, db_session, make_lead, make_user):
        existing = [make_user(credits=0).id for _ in range(4)]
        lead = make_lead(price=30, purchasers=existing)
        u5 = make_user(credits=50)
        u6 = make_user(credits=50)
        service = PurchaseService(db_session)

        record = service.purchase_lead(UserSession(u5.id, 'marketer'), lead.id)

        db_session.expire_all()
        lead = db_session.get(Lead, lead.id)
        assert lead.current_purchases == 5
        assert u5.id in lead.purchasers
        assert record.credits_remaining == 20
        assert db_session.query(CreditTransaction).filter_by(user_id=u5.id, amount=-30).count() == 1

        with pytest.raises(PurchaseLimitReached):
            service.purchase_lead(UserSession(u6.id, 'marketer'), lead.id)


class TestPreconditions:
    """Failed preconditions leave both balance and lead untouched."""

    def test_unknown_lead(self, db_session, marketer_session):
        with pytest.raises(NotFound):
            PurchaseService(db_session).purchase_lead(marketer_session, 'missing')

    def test_unpublished_lead_not_found(self, db_session, make_lead, marketer, marketer_session):
        lead = make_lead(published=False)
        before = _snapshot(db_session, lead.id, marketer.id)
        with pytest.raises(NotFound):
            PurchaseService(db_session).purchase_lead(marketer_session, lead.id)
        assert _snapshot(db_session, lead.id, marketer.id) == before

    def test_limit_reached(self, db_session, make_lead, make_user, marketer, marketer_session):
        lead = make_lead(purchasers=[make_user().id for _ in range(5)])
        before = _snapshot(db_session, lead.id, marketer.id)
        with pytest.raises(PurchaseLimitReached) as exc:
            PurchaseService(db_session).purchase_lead(marketer_session, lead.id)
        assert exc.value.status_code == 409
        assert _snapshot(db_session, lead.id, marketer.id) == before

    def test_already_purchased(self, db_session, make_lead, marketer, marketer_session):
        lead = make_lead(purchasers=[marketer.id])
        before = _snapshot(db_session, lead.id, marketer.id)
        with pytest.raises(AlreadyPurchased):
            PurchaseService(db_session).purchase_lead(marketer_session, lead.id)
        assert _snapshot(db_session, lead.id, marketer.id) == before

    def test_insufficient_credits(self, db_session, make_lead, make_user):
        user = make_user(credits=10)
        lead = make_lead(price=30)
        before = _snapshot(db_session, lead.id, user.id)
        with pytest.raises(InsufficientCredits) as exc:
            PurchaseService(db_session).purchase_lead(UserSession(user.id, 'marketer'), lead.id)
        assert exc.value.status_code == 402
        assert _snapshot(db_session, lead.id, user.id) == before

    def test_limit_checked_before_duplicate(self, db_session, make_lead, make_user, marketer, marketer_session):
        purchasers = [marketer.id] + [make_user().id for _ in range(4)]
        lead = make_lead(purchasers=purchasers)
        with pytest.raises(PurchaseLimitReached):
            PurchaseService(db_session).purchase_lead(marketer_session, lead.id)

    def test_duplicate_checked_before_credits(self, db_session, make_lead, make_user):
        user = make_user(credits=0)
        lead = make_lead(price=30, purchasers=[user.id])
        with pytest.raises(AlreadyPurchased):
            PurchaseService(db_session).purchase_lead(UserSession(user.id, 'marketer'), lead.id)

    def test_closed_session_rejected(self, db_session, make_lead, marketer_session):
        lead = make_lead()
        marketer_session.close()
        with pytest.raises(SessionClosed):
            PurchaseService(db_session).purchase_lead(marketer_session, lead.id)


class TestAtomicity:
    """Conditional writes and rollback keep the store consistent."""

    def test_lost_race_on_limit_reports_limit(self, db_session, make_lead, make_user, marketer, marketer_session):
        lead = make_lead(purchasers=[make_user().id for _ in range(4)])
        service = PurchaseService(db_session)

        # Another purchaser takes the last slot between the read and the write
        real_increment = service.leads.increment_purchases

        def _steal_slot(lead_id, limit):
            db_session.query(Lead).filter(Lead.id == lead_id).update(
                {Lead.current_purchases: 5}, synchronize_session=False
            )
            db_session.commit()
            return real_increment(lead_id, limit)

        with patch.object(service.leads, 'increment_purchases', side_effect=_steal_slot):
            with pytest.raises(PurchaseLimitReached):
                service.purchase_lead(marketer_session, lead.id)

        db_session.expire_all()
        assert db_session.get(User, marketer.id).credits == 50
        assert marketer.id not in db_session.get(Lead, lead.id).purchasers

    def test_debit_failure_rolls_back_lead_update(self, db_session, make_lead, marketer, marketer_session):
        lead = make_lead(price=30)
        before = _snapshot(db_session, lead.id, marketer.id)
        service = PurchaseService(db_session)

        with patch.object(service.credits, 'debit', side_effect=OperationalError('UPDATE', {}, Exception('down'))):
            with pytest.raises(StoreWriteFailed) as exc:
                service.purchase_lead(marketer_session, lead.id)

        assert exc.value.status_code == 500
        assert _snapshot(db_session, lead.id, marketer.id) == before

    def test_ledger_failure_rolls_back_debit(self, db_session, make_lead, marketer, marketer_session):
        lead = make_lead(price=30)
        before = _snapshot(db_session, lead.id, marketer.id)
        service = PurchaseService(db_session)

        with patch.object(service.credits, 'add_transaction', side_effect=OperationalError('INSERT', {}, Exception('down'))):
            with pytest.raises(StoreWriteFailed):
                service.purchase_lead(marketer_session, lead.id)

        assert _snapshot(db_session, lead.id, marketer.id) == before

    def test_unexplained_write_miss_is_store_failure(self, db_session, make_lead, marketer, marketer_session):
        lead = make_lead(price=30)
        before = _snapshot(db_session, lead.id, marketer.id)
        service = PurchaseService(db_session)

        with patch.object(service.credits, 'debit', return_value=0):
            with pytest.raises(StoreWriteFailed):
                service.purchase_lead(marketer_session, lead.id)

        assert _snapshot(db_session, lead.id, marketer.id) == before
