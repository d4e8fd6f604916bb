"""Tests for leadmarket.services.lead_service -- intake, browsing, publication, moderation."""
import pytest
from datetime import datetime
from unittest.mock import patch
from sqlalchemy.exc import OperationalError

from leadmarket.database.models import Lead
from leadmarket.services.lead_service import MAX_PRICE, LeadService
from leadmarket.utils.exceptions import (
    AlreadyPublished,
    InvalidStatusTransition,
    LeadNotPublished,
    NotFound,
    StoreWriteFailed,
    ValidationError,
)


# ---------------------------------------------------------------------------
# create_lead
# ---------------------------------------------------------------------------

class TestCreateLead:

    def test_new_lead_is_pending_and_unpublished(self, db_session):
        lead = LeadService(db_session).create_lead({
            'company_name': 'Bakkerij de Vries',
            'contact_name': 'Els de Vries',
            'budget_range': 'low',
        })
        assert lead.id
        assert lead.status == 'pending'
        assert lead.published is False
        assert lead.published_at is None
        assert lead.price is None
        assert lead.current_purchases == 0
        assert lead.purchasers == []
        assert lead.call_status == 'not_called'


# ---------------------------------------------------------------------------
# publish_lead
# ---------------------------------------------------------------------------

class TestPublishLead:

    def test_sets_price_and_published(self, db_session, make_lead):
        lead = make_lead(published=False)
        published = LeadService(db_session).publish_lead(lead.id, 100)
        assert published.published is True
        assert published.price == 100
        assert isinstance(published.published_at, datetime)

    def test_enables_status_changes(self, db_session, make_lead):
        lead = make_lead(published=False)
        service = LeadService(db_session)

        with pytest.raises(LeadNotPublished):
            service.set_status(lead.id, 'approved')

        service.publish_lead(lead.id, 100)
        assert service.set_status(lead.id, 'approved').status == 'approved'

    def test_republish_rejected_and_price_kept(self, db_session, make_lead):
        lead = make_lead(published=True, price=40)
        with pytest.raises(AlreadyPublished):
            LeadService(db_session).publish_lead(lead.id, 100)
        db_session.expire_all()
        assert db_session.get(Lead, lead.id).price == 40

    @pytest.mark.parametrize('price', [0, -5, True, 2.5])
    def test_price_must_be_positive_integer(self, db_session, make_lead, price):
        lead = make_lead(published=False)
        with pytest.raises(ValidationError):
            LeadService(db_session).publish_lead(lead.id, price)

    def test_unknown_lead(self, db_session):
        with pytest.raises(NotFound):
            LeadService(db_session).publish_lead('missing', 10)

    def test_price_above_column_range(self, db_session, make_lead):
        lead = make_lead(published=False)
        with pytest.raises(ValidationError):
            LeadService(db_session).publish_lead(lead.id, MAX_PRICE + 1)
        db_session.expire_all()
        assert db_session.get(Lead, lead.id).published is False

    def test_store_failure_is_structured_and_rolled_back(self, db_session, make_lead):
        lead = make_lead(published=False)
        service = LeadService(db_session)

        with patch.object(service.leads, 'publish', side_effect=OperationalError('UPDATE', {}, Exception('down'))):
            with pytest.raises(StoreWriteFailed) as exc:
                service.publish_lead(lead.id, 100)

        assert exc.value.status_code == 500
        assert exc.value.detail['code'] == 'store_write_failed'
        db_session.expire_all()
        assert db_session.get(Lead, lead.id).published is False


# ---------------------------------------------------------------------------
# set_status / set_call_status
# ---------------------------------------------------------------------------

class TestSetStatus:

    @pytest.mark.parametrize('status', ['approved', 'rejected'])
    def test_pending_to_final(self, db_session, make_lead, status):
        lead = make_lead()
        assert LeadService(db_session).set_status(lead.id, status).status == status

    def test_final_status_is_final(self, db_session, make_lead):
        lead = make_lead(status='approved')
        with pytest.raises(InvalidStatusTransition):
            LeadService(db_session).set_status(lead.id, 'rejected')

    def test_pending_is_not_a_target(self, db_session, make_lead):
        lead = make_lead()
        with pytest.raises(ValidationError):
            LeadService(db_session).set_status(lead.id, 'pending')

    def test_unknown_lead(self, db_session):
        with pytest.raises(NotFound):
            LeadService(db_session).set_status('missing', 'approved')

    def test_store_failure_is_structured(self, db_session, make_lead):
        lead = make_lead()
        service = LeadService(db_session)

        with patch.object(service.leads, 'transition_status', side_effect=OperationalError('UPDATE', {}, Exception('down'))):
            with pytest.raises(StoreWriteFailed):
                service.set_status(lead.id, 'approved')

        db_session.expire_all()
        assert db_session.get(Lead, lead.id).status == 'pending'


class TestSetCallStatus:

    @pytest.mark.parametrize('call_status', ['called', 'unreachable', 'not_called'])
    def test_updates_single_field(self, db_session, make_lead, call_status):
        lead = make_lead()
        updated = LeadService(db_session).set_call_status(lead.id, call_status)
        assert updated.call_status == call_status
        assert updated.status == 'pending'

    def test_call_status_allowed_before_publication(self, db_session, make_lead):
        lead = make_lead(published=False)
        assert LeadService(db_session).set_call_status(lead.id, 'called').call_status == 'called'

    def test_rejects_unknown_value(self, db_session, make_lead):
        lead = make_lead()
        with pytest.raises(ValidationError):
            LeadService(db_session).set_call_status(lead.id, 'voicemail')

    def test_unknown_lead(self, db_session):
        with pytest.raises(NotFound):
            LeadService(db_session).set_call_status('missing', 'called')


# ---------------------------------------------------------------------------
# list_leads / get_lead / lead_view
# ---------------------------------------------------------------------------

class TestListLeads:

    def test_marketer_sees_only_published(self, db_session, make_lead, marketer_session):
        visible = make_lead(published=True)
        make_lead(published=False)
        leads = LeadService(db_session).list_leads(marketer_session)
        assert [lead.id for lead in leads] == [visible.id]

    def test_admin_sees_all(self, db_session, make_lead, admin_session):
        make_lead(published=True)
        make_lead(published=False)
        assert len(LeadService(db_session).list_leads(admin_session)) == 2

    def test_newest_first(self, db_session, make_lead, marketer_session):
        old = make_lead(created_at=datetime(2024, 1, 1))
        new = make_lead(created_at=datetime(2024, 6, 1))
        leads = LeadService(db_session).list_leads(marketer_session)
        assert [lead.id for lead in leads] == [new.id, old.id]

    def test_search_matches_company_or_description(self, db_session, make_lead, marketer_session):
        by_company = make_lead(company_name='Webshop Wonders', project_description='x')
        by_description = make_lead(company_name='Acme', project_description='Needs a WEBSHOP')
        make_lead(company_name='Other', project_description='Mobile app')
        leads = LeadService(db_session).list_leads(marketer_session, search='webshop')
        assert {lead.id for lead in leads} == {by_company.id, by_description.id}

    def test_budget_and_timeline_filters(self, db_session, make_lead, marketer_session):
        match = make_lead(budget_range='high', timeline='1 month')
        make_lead(budget_range='high', timeline='6 months')
        make_lead(budget_range='low', timeline='1 month')
        leads = LeadService(db_session).list_leads(marketer_session, budget_range='high', timeline='1 month')
        assert [lead.id for lead in leads] == [match.id]


class TestPurchasedLeads:

    def test_lists_only_own_purchases(self, db_session, make_lead, marketer, marketer_session):
        mine = make_lead(purchasers=[marketer.id])
        make_lead(purchasers=['someone-else'])
        leads = LeadService(db_session).list_purchased_leads(marketer_session)
        assert [lead.id for lead in leads] == [mine.id]


class TestLeadView:

    def test_marketer_without_purchase_gets_no_contact(self, db_session, make_lead, marketer_session):
        lead = make_lead()
        service = LeadService(db_session)
        view = service.lead_view(marketer_session, service.get_lead(marketer_session, lead.id))
        assert view['purchased'] is False
        assert view['email'] is None
        assert view['phone'] is None
        assert view['contact_name'] is None
        assert view['purchasers'] is None
        assert view['company_name'] == 'Acme Bouw'

    def test_purchaser_gets_contact(self, db_session, make_lead, marketer, marketer_session):
        lead = make_lead(purchasers=[marketer.id])
        service = LeadService(db_session)
        view = service.lead_view(marketer_session, service.get_lead(marketer_session, lead.id))
        assert view['purchased'] is True
        assert view['email'] == 'jan@acme.example'

    def test_admin_sees_contact_and_purchasers(self, db_session, make_lead, marketer, admin_session):
        lead = make_lead(purchasers=[marketer.id])
        service = LeadService(db_session)
        view = service.lead_view(admin_session, service.get_lead(admin_session, lead.id))
        assert view['email'] == 'jan@acme.example'
        assert view['purchasers'] == [marketer.id]

    def test_unpublished_hidden_from_marketer(self, db_session, make_lead, marketer_session, admin_session):
        lead = make_lead(published=False)
        service = LeadService(db_session)
        with pytest.raises(NotFound):
            service.get_lead(marketer_session, lead.id)
        assert service.get_lead(admin_session, lead.id).id == lead.id
