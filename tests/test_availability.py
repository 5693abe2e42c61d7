from types import SimpleNamespace
from uuid import uuid4

import pytest

from slotbook.models import AvailabilityRule, Business
from slotbook.schemas.availability import AvailabilityRuleUpsert, TeamMemberAvailabilityUpsert
from slotbook.services.availability.availability_service import AvailabilityService, resolve_day_window
from slotbook.services.booking.exceptions import ValidationError

from tests.conftest import SATURDAY, TODAY, TUESDAY


def rule(day, start="09:00", end="17:00", is_open=True, slot_duration=30, capacity=1):
    return SimpleNamespace(
        id=uuid4(), day_of_week=day, start_time=start, end_time=end,
        is_active_day=is_open, slot_duration=slot_duration, max_bookings_per_slot=capacity,
    )


def test_resolve_picks_rule_for_weekday():
    window = resolve_day_window([rule(0), rule(1, "08:00", "12:00", slot_duration=15, capacity=3)], TODAY)
    assert window.start_time == "08:00"
    assert window.end_time == "12:00"
    assert window.slot_duration == 15
    assert window.max_bookings_per_slot == 3


def test_resolve_returns_none_when_closed_missing_or_malformed():
    assert resolve_day_window([rule(1, is_open=False)], TODAY) is None
    assert resolve_day_window([rule(2)], TODAY) is None
    assert resolve_day_window([rule(1, "17:00", "09:00")], TODAY) is None
    assert resolve_day_window([rule(1, "09:00", "09:00")], TODAY) is None


def test_unconfigured_business_is_closed_and_gets_default_rows(db):
    business = Business(owner_id="o", name="New", slug="new-biz")
    db.add(business)
    db.commit()

    assert AvailabilityService.get_business_window(db, business.id, TODAY) is None

    rules = AvailabilityService.list_business_rules(db, business.id)
    assert len(rules) == 7
    assert all(not r.is_open for r in rules)
    assert {(r.start_time, r.end_time, r.slot_duration) for r in rules} == {("09:00", "17:00", 30)}

    # Second read does not add more rows
    assert len(AvailabilityService.list_business_rules(db, business.id)) == 7
    assert AvailabilityService.get_business_window(db, business.id, TODAY) is None


def test_upsert_business_rule_updates_existing_day(db, business):
    AvailabilityService.upsert_business_rule(db, business.id, AvailabilityRuleUpsert(
        day_of_week=6, start_time="10:00", end_time="14:00", is_open=True,
        slot_duration=60, max_bookings_per_slot=2,
    ))

    window = AvailabilityService.get_business_window(db, business.id, SATURDAY)
    assert (window.start_time, window.end_time, window.slot_duration, window.max_bookings_per_slot) == (
        "10:00", "14:00", 60, 2
    )
    count = db.query(AvailabilityRule).filter(AvailabilityRule.business_id == business.id).count()
    assert count == 7


def test_upsert_rejects_inverted_open_hours(db, business):
    with pytest.raises(ValidationError) as exc_info:
        AvailabilityService.upsert_business_rule(db, business.id, AvailabilityRuleUpsert(
            day_of_week=1, start_time="17:00", end_time="09:00", is_open=True,
        ))
    assert exc_info.value.field == "end_time"


def test_upsert_rejects_bad_time_format(db, business):
    with pytest.raises(ValidationError):
        AvailabilityService.upsert_business_rule(db, business.id, AvailabilityRuleUpsert(
            day_of_week=1, start_time="9am", end_time="17:00",
        ))


def test_replace_business_rules_is_all_or_nothing(db, business):
    with pytest.raises(ValidationError):
        AvailabilityService.replace_business_rules(db, business.id, [
            AvailabilityRuleUpsert(day_of_week=0, start_time="10:00", end_time="12:00"),
            AvailabilityRuleUpsert(day_of_week=1, start_time="12:00", end_time="10:00"),
        ])

    sunday = next(r for r in AvailabilityService.get_business_rules(db, business.id) if r.day_of_week == 0)
    assert sunday.is_open is False


def test_team_member_window_is_clipped_to_business_hours(db, team_member):
    window = AvailabilityService.get_team_member_window(db, team_member.id, TODAY)
    assert window.start_time == "10:00"
    assert window.end_time == "17:00"
    assert window.slot_duration == 30
    assert window.max_bookings_per_slot == 1


def test_team_member_closed_when_business_closed(db, business, team_member):
    AvailabilityService.upsert_business_rule(db, business.id, AvailabilityRuleUpsert(
        day_of_week=2, start_time="09:00", end_time="17:00", is_open=False,
    ))
    assert AvailabilityService.get_team_member_window(db, team_member.id, TUESDAY) is None


def test_team_member_without_rule_for_day_is_unavailable(db, team_member):
    assert AvailabilityService.get_team_member_window(db, team_member.id, SATURDAY) is None


def test_upsert_team_member_rule(db, team_member):
    AvailabilityService.upsert_team_member_rule(db, team_member, TeamMemberAvailabilityUpsert(
        day_of_week=1, start_time="13:00", end_time="15:00", is_available=True,
    ))
    window = AvailabilityService.get_team_member_window(db, team_member.id, TODAY)
    assert (window.start_time, window.end_time) == ("13:00", "15:00")
    assert len(AvailabilityService.list_team_member_rules(db, team_member.id)) == 2
