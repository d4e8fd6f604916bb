"""Shared test fixtures."""
import pytest
from unittest.mock import AsyncMock, MagicMock
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from leadmarket.core.session import UserSession
from leadmarket.database.models import Base, Lead, LeadPurchase, User


@pytest.fixture
def db_engine():
    """In-memory SQLite engine with schema created, shared across threads."""
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    """SQLAlchemy session bound to in-memory SQLite."""
    Session = sessionmaker(bind=db_engine, autoflush=False)
    session = Session()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def make_user(db_session):
    """Factory fixture: inserts a user and returns it."""
    counter = {'n': 0}

    def _make(role='marketer', credits=0, id=None):
        counter['n'] += 1
        user = User(
            id=id or f'user-{counter["n"]}',
            email=f'user{counter["n"]}@example.com',
            role=role,
            credits=credits,
        )
        db_session.add(user)
        db_session.commit()
        return user
    return _make


@pytest.fixture
def make_lead(db_session):
    """Factory fixture: inserts a lead, optionally published and with purchasers."""
    def _make(published=True, price=30, purchasers=(), **overrides):
        fields = dict(
            company_name='Acme Bouw',
            contact_name='Jan Jansen',
            email='jan@acme.example',
            phone='+31 6 12345678',
            project_description='New webshop for a construction company',
            budget_range='medium',
            timeline='3 months',
            location='Utrecht',
            status='pending',
            published=published,
            price=price if published else None,
            call_status='not_called',
            current_purchases=len(purchasers),
        )
        fields.update(overrides)
        lead = Lead(**fields)
        db_session.add(lead)
        db_session.flush()
        for user_id in purchasers:
            db_session.add(LeadPurchase(
                lead_id=lead.id,
                marketer_id=user_id,
                credits_spent=price or 0,
            ))
        db_session.commit()
        return lead
    return _make


@pytest.fixture
def marketer(make_user):
    return make_user(role='marketer', credits=50, id='marketer-1')


@pytest.fixture
def admin(make_user):
    return make_user(role='admin', credits=0, id='admin-1')


@pytest.fixture
def marketer_session(marketer):
    return UserSession(user_id=marketer.id, role='marketer')


@pytest.fixture
def admin_session(admin):
    return UserSession(user_id=admin.id, role='admin')


@pytest.fixture
def billing_client():
    """Billing client double with async function calls."""
    client = MagicMock()
    client.create_checkout_session = AsyncMock(return_value='https://pay.example/checkout/abc')
    client.get_invoices = AsyncMock(return_value=[])
    return client


@pytest.fixture
def client(db_session, billing_client):
    """FastAPI test client with the store and billing client overridden.

    The lifespan hook is not run, so no real database pool is created.
    """
    from leadmarket.main import app
    from leadmarket.core.dependencies import get_db
    from leadmarket.api.v1.endpoints.credits import get_credit_service
    from leadmarket.services.credit_service import CreditService

    def _get_db():
        yield db_session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_credit_service] = lambda: CreditService(db_session, billing_client=billing_client)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth():
    """Builds request headers identifying a user to the API."""
    def _headers(user):
        return {'X-User-Id': user.id}
    return _headers
