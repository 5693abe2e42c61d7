from datetime import timedelta

from slotbook.api.dependencies import create_access_token
from slotbook.models import BlockedTime, Booking, Service

from tests.conftest import TUESDAY, add_booking


def test_dashboard_requires_token(client, business):
    assert client.get("/api/v1/dashboard/bookings").status_code in (401, 403)

    bad = client.get("/api/v1/dashboard/bookings", headers={"Authorization": "Bearer not-a-jwt"})
    assert bad.status_code == 401


def test_token_for_someone_elses_business(client, business):
    token = create_access_token({"sub": "intruder", "business_id": str(business.id)})
    response = client.get("/api/v1/dashboard/bookings", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 404


def test_expired_token_rejected(client, business):
    token = create_access_token(
        {"sub": business.owner_id, "business_id": str(business.id)},
        expires_delta=timedelta(minutes=-5)
    )
    response = client.get("/api/v1/dashboard/bookings", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_business_hours_roundtrip(client, auth_headers):
    response = client.get("/api/v1/dashboard/availability", headers=auth_headers)
    assert response.status_code == 200
    assert len(response.json()) == 7

    saturday = {"day_of_week": 6, "start_time": "10:00", "end_time": "14:00", "is_open": True}
    response = client.put("/api/v1/dashboard/availability/6", json=saturday, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["slot_duration"] == 30

    mismatch = client.put("/api/v1/dashboard/availability/5", json=saturday, headers=auth_headers)
    assert mismatch.status_code == 400


def test_service_crud_with_soft_delete(client, db, business, auth_headers):
    created = client.post("/api/v1/dashboard/services", json={
        "name": "Deep tissue", "duration": 90, "price": "80.00",
    }, headers=auth_headers)
    assert created.status_code == 201
    assert created.json()["formatted_duration"] == "1h 30m"
    service_id = created.json()["id"]

    patched = client.patch(f"/api/v1/dashboard/services/{service_id}", json={"price": "85.00"}, headers=auth_headers)
    assert patched.status_code == 200
    assert patched.json()["price"] == "85.00"

    service = db.query(Service).filter(Service.name == "Deep tissue").one()
    add_booking(db, business, service, TUESDAY, "10:00", "11:30")

    deleted = client.delete(f"/api/v1/dashboard/services/{service_id}", headers=auth_headers)
    assert deleted.json() == {"status": "deactivated", "service_id": service_id}

    fresh = client.post("/api/v1/dashboard/services", json={
        "name": "Trial", "duration": 15, "price": "0",
    }, headers=auth_headers).json()
    deleted = client.delete(f"/api/v1/dashboard/services/{fresh['id']}", headers=auth_headers)
    assert deleted.json()["status"] == "deleted"

    listed = client.get("/api/v1/dashboard/services", headers=auth_headers).json()
    assert [(s["name"], s["is_active"]) for s in listed] == [("Deep tissue", False)]


def test_manual_booking_and_status_changes(client, db, service, auth_headers, email_tasks):
    created = client.post("/api/v1/dashboard/bookings", json={
        "service_id": str(service.id),
        "booking_date": "2030-01-13",
        "start_time": "20:00",
        "customer_name": "Walk-in",
        "customer_email": "walkin@example.com",
    }, headers=auth_headers)
    assert created.status_code == 201
    assert created.json()["status"] == "confirmed"
    booking_id = created.json()["id"]

    noted = client.patch(f"/api/v1/dashboard/bookings/{booking_id}", json={"internal_notes": "Pays cash"},
                         headers=auth_headers)
    assert noted.json()["internal_notes"] == "Pays cash"

    sneaky = client.patch(f"/api/v1/dashboard/bookings/{booking_id}", json={"status": "modification_pending"},
                          headers=auth_headers)
    assert sneaky.status_code == 400

    cancelled = client.post(f"/api/v1/dashboard/bookings/{booking_id}/cancel", json={"reason": "Closed"},
                            headers=auth_headers)
    assert cancelled.status_code == 200
    assert cancelled.json()["status"] == "cancelled"
    assert cancelled.json()["cancellation_reason"] == "Closed"

    again = client.post(f"/api/v1/dashboard/bookings/{booking_id}/cancel", headers=auth_headers)
    assert again.status_code == 400


def test_list_bookings_filters(client, db, business, service, auth_headers):
    add_booking(db, business, service, TUESDAY, "10:00", "10:45")
    add_booking(db, business, service, TUESDAY, "12:00", "12:45", status="pending")

    everything = client.get("/api/v1/dashboard/bookings", headers=auth_headers)
    assert len(everything.json()) == 2

    pending = client.get("/api/v1/dashboard/bookings", params={"status": "pending"}, headers=auth_headers)
    assert [b["start_time"] for b in pending.json()] == ["12:00"]


def test_unknown_booking_is_404(client, business, auth_headers):
    response = client.get("/api/v1/dashboard/bookings/00000000-0000-0000-0000-000000000000", headers=auth_headers)
    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


def test_single_day_block_on_starter(client, db, auth_headers):
    response = client.post("/api/v1/dashboard/blocked-times", json={
        "start_datetime": "2030-01-08T12:00:00",
        "end_datetime": "2030-01-09T00:00:00",
        "reason": "Afternoon off",
    }, headers=auth_headers)
    assert response.status_code == 201

    listed = client.get("/api/v1/dashboard/blocked-times", headers=auth_headers).json()
    assert len(listed) == 1

    deleted = client.delete(f"/api/v1/dashboard/blocked-times/{listed[0]['id']}", headers=auth_headers)
    assert deleted.status_code == 204
    assert db.query(BlockedTime).count() == 0


def test_multi_day_block_needs_pro(client, db, business, auth_headers):
    vacation = {"start_datetime": "2030-02-01T00:00:00", "end_datetime": "2030-02-08T00:00:00"}

    response = client.post("/api/v1/dashboard/blocked-times", json=vacation, headers=auth_headers)
    assert response.status_code == 403
    assert response.json()["error"] == "upgrade_required"

    business.subscription_tier = "pro"
    db.commit()
    assert client.post("/api/v1/dashboard/blocked-times", json=vacation, headers=auth_headers).status_code == 201


def test_inverted_block_rejected(client, auth_headers):
    response = client.post("/api/v1/dashboard/blocked-times", json={
        "start_datetime": "2030-01-08T12:00:00", "end_datetime": "2030-01-08T11:00:00",
    }, headers=auth_headers)
    assert response.status_code == 400


def test_team_routes_need_teams_plan(client, db, business, auth_headers):
    assert client.get("/api/v1/dashboard/team-members", headers=auth_headers).status_code == 403

    business.subscription_tier = "teams"
    db.commit()
    assert client.get("/api/v1/dashboard/team-members", headers=auth_headers).status_code == 200


def test_team_member_management(client, db, service, team_member, auth_headers):
    created = client.post("/api/v1/dashboard/team-members", json={"name": "Sam", "role": "therapist"},
                          headers=auth_headers)
    assert created.status_code == 201
    member_id = created.json()["id"]

    linked = client.put(f"/api/v1/dashboard/team-members/{member_id}/services",
                        json={"service_ids": [str(service.id)]}, headers=auth_headers)
    assert linked.json()["service_ids"] == [str(service.id)]

    schedule = client.put(f"/api/v1/dashboard/team-members/{member_id}/availability", json={
        "day_of_week": 3, "start_time": "09:00", "end_time": "12:00",
    }, headers=auth_headers)
    assert schedule.status_code == 200
    assert schedule.json()["is_available"] is True

    removed = client.delete(f"/api/v1/dashboard/team-members/{member_id}", headers=auth_headers)
    assert removed.status_code == 204

    members = client.get("/api/v1/dashboard/team-members", headers=auth_headers).json()
    assert {m["name"]: m["is_active"] for m in members} == {"Alex": True, "Sam": False}


def test_request_modification_rejects_conflict(client, db, business, service, auth_headers, email_tasks):
    booking = add_booking(db, business, service, TUESDAY, "10:00", "10:45")
    add_booking(db, business, service, TUESDAY, "14:00", "14:45")

    response = client.post(f"/api/v1/dashboard/bookings/{booking.id}/request-modification", json={
        "proposed_booking_date": TUESDAY.isoformat(), "proposed_start_time": "14:15",
    }, headers=auth_headers)

    assert response.status_code == 409
    email_tasks["modification"].delay.assert_not_called()
    db.expire_all()
    assert db.get(Booking, booking.id).status == "confirmed"
