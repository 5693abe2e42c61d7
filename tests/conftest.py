import os

# Settings are read once on first import; point them at SQLite before anything loads
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("PUBLIC_WRITE_RATE_LIMIT_PER_MINUTE", "0")
os.environ.setdefault("CELERY_TASK_ALWAYS_EAGER", "true")

from datetime import date, datetime, timezone
from decimal import Decimal
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from slotbook.models import (
    Base,
    Booking,
    Business,
    Service,
    AvailabilityRule,
    TeamMember,
    TeamMemberService,
    TeamMemberAvailability
)
from slotbook.services.notification import booking_notifier
from slotbook.utils.clock import FixedClock

# Monday 2030-01-07 08:00 UTC
NOW = datetime(2030, 1, 7, 8, 0, tzinfo=timezone.utc)
TODAY = date(2030, 1, 7)
TUESDAY = date(2030, 1, 8)
SATURDAY = date(2030, 1, 12)
SUNDAY = date(2030, 1, 13)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture(autouse=True)
def email_tasks(monkeypatch):
    """Replace the Celery tasks the notifier enqueues with recorders"""
    tasks = {
        "confirmation": Mock(),
        "modification": Mock(),
        "cancellation": Mock(),
    }
    monkeypatch.setattr(booking_notifier, "send_booking_confirmation_email", tasks["confirmation"])
    monkeypatch.setattr(booking_notifier, "send_modification_request_email", tasks["modification"])
    monkeypatch.setattr(booking_notifier, "send_cancellation_notice_email", tasks["cancellation"])
    return tasks


def open_weekdays(db, business, start="09:00", end="17:00", slot_duration=30, capacity=1):
    """Open Monday to Friday, closed at weekends"""
    for weekday in range(7):
        db.add(AvailabilityRule(
            business_id=business.id,
            day_of_week=weekday,
            start_time=start,
            end_time=end,
            is_open=1 <= weekday <= 5,
            slot_duration=slot_duration,
            max_bookings_per_slot=capacity,
        ))
    db.commit()


def add_booking(db, business, service, booking_date, start, end, status="confirmed", team_member_id=None):
    booking = Booking(
        business_id=business.id,
        service_id=service.id,
        team_member_id=team_member_id,
        customer_name="Existing",
        customer_email="existing@example.com",
        booking_date=booking_date,
        start_time=start,
        end_time=end,
        status=status,
        customer_action_token=Booking.generate_token(),
    )
    db.add(booking)
    db.commit()
    return booking


@pytest.fixture
def business(db):
    business = Business(
        owner_id="owner-1",
        name="Studio North",
        slug="studio-north",
        email="hello@studio-north.test",
        timezone="UTC",
        subscription_tier="starter",
    )
    db.add(business)
    db.commit()
    open_weekdays(db, business)
    db.refresh(business)
    return business


@pytest.fixture
def service(db, business):
    service = Service(
        business_id=business.id,
        name="Consultation",
        duration=45,
        price=Decimal("50.00"),
        is_active=True,
        requires_confirmation=False,
    )
    db.add(service)
    db.commit()
    db.refresh(service)
    return service


@pytest.fixture
def short_service(db, business):
    service = Service(
        business_id=business.id,
        name="Quick check",
        duration=30,
        price=Decimal("20.00"),
        is_active=True,
        requires_confirmation=False,
    )
    db.add(service)
    db.commit()
    db.refresh(service)
    return service


@pytest.fixture
def team_member(db, business, service):
    """Works Monday 10:00-18:00 (clipped to business hours) and performs `service`"""
    business.subscription_tier = "teams"
    member = TeamMember(business_id=business.id, name="Alex", role="stylist", is_active=True)
    db.add(member)
    db.commit()
    db.add(TeamMemberService(team_member_id=member.id, service_id=service.id))
    db.add(TeamMemberAvailability(
        team_member_id=member.id, day_of_week=1, start_time="10:00", end_time="18:00", is_available=True
    ))
    db.add(TeamMemberAvailability(
        team_member_id=member.id, day_of_week=2, start_time="10:00", end_time="18:00", is_available=True
    ))
    db.commit()
    db.refresh(member)
    return member


@pytest.fixture
def client(session_factory, clock):
    from slotbook.api.dependencies import get_clock
    from slotbook.config.database import get_db
    from slotbook.main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(business):
    from slotbook.api.dependencies import create_access_token

    token = create_access_token({"sub": business.owner_id, "business_id": str(business.id)})
    return {"Authorization": f"Bearer {token}"}
