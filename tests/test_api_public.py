from slotbook.models import Booking

from tests.conftest import SUNDAY, TUESDAY, add_booking

BASE = "/api/v1/public/businesses/studio-north"


def booking_payload(service, **overrides):
    payload = {
        "service_id": str(service.id),
        "booking_date": TUESDAY.isoformat(),
        "start_time": "10:00",
        "customer_name": "Jamie Rivera",
        "customer_email": "jamie@example.com",
    }
    payload.update(overrides)
    return payload


def test_business_page_hides_tier(client, business):
    response = client.get(BASE)
    assert response.status_code == 200
    body = response.json()
    assert body["slug"] == "studio-north"
    assert "subscription_tier" not in body


def test_unknown_business_is_404(client, business):
    response = client.get("/api/v1/public/businesses/nobody/services")
    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


def test_services_list_only_active(client, db, service, short_service):
    short_service.is_active = False
    db.commit()

    response = client.get(f"{BASE}/services")
    assert response.status_code == 200
    assert [s["name"] for s in response.json()] == ["Consultation"]
    assert response.json()[0]["formatted_duration"]


def test_slots_endpoint(client, service):
    response = client.get(f"{BASE}/slots", params={"service_id": str(service.id), "date": TUESDAY.isoformat()})

    assert response.status_code == 200
    body = response.json()
    assert body["is_open"] is True
    assert body["slots"][0] == {"time": "09:00", "end_time": "09:45", "available": True, "capacity_remaining": 1}
    assert body["slots"][-1]["time"] == "16:00"


def test_slots_on_closed_day(client, service):
    response = client.get(f"{BASE}/slots", params={"service_id": str(service.id), "date": SUNDAY.isoformat()})
    assert response.status_code == 200
    assert response.json()["is_open"] is False
    assert response.json()["slots"] == []


def test_available_dates_endpoint(client, service):
    response = client.get(f"{BASE}/available-dates", params={
        "service_id": str(service.id), "start_date": TUESDAY.isoformat(), "days": 7,
    })
    assert response.status_code == 200
    assert response.json()["dates"] == ["2030-01-08", "2030-01-09", "2030-01-10", "2030-01-11", "2030-01-14"]


def test_create_booking_returns_action_token(client, db, service, email_tasks):
    response = client.post(f"{BASE}/bookings", json=booking_payload(service))

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "confirmed"
    assert body["end_time"] == "10:45"
    assert body["requires_confirmation"] is False
    assert len(body["customer_action_token"]) == 64
    assert db.query(Booking).count() == 1
    email_tasks["confirmation"].delay.assert_called_once()


def test_conflicting_booking_is_409(client, db, business, service):
    add_booking(db, business, service, TUESDAY, "10:30", "11:15")

    response = client.post(f"{BASE}/bookings", json=booking_payload(service))

    assert response.status_code == 409
    body = response.json()
    assert body["error"] == "slot_conflict"
    assert body["detail"] == "Time slot not available"
    assert body["reason"] == "capacity"
    assert db.query(Booking).count() == 1


def test_validation_error_names_field(client, service):
    response = client.post(f"{BASE}/bookings", json=booking_payload(service, start_time="8:00"))
    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"
    assert response.json()["field"] == "start_time"


def test_public_day_bookings_hide_customers(client, db, business, service):
    add_booking(db, business, service, TUESDAY, "10:00", "10:45")

    response = client.get(f"{BASE}/bookings", params={"date": TUESDAY.isoformat()})
    assert response.status_code == 200
    assert response.json()[0]["start_time"] == "10:00"
    assert "customer_name" not in response.json()[0]


def test_team_members_for_service(client, team_member, service):
    response = client.get(f"{BASE}/team-members", params={"service_id": str(service.id)})
    assert response.status_code == 200
    members = response.json()
    assert [m["name"] for m in members] == ["Alex"]
    assert len(members[0]["availability"]) == 2


def test_bad_tokens_get_one_response(client, business):
    for path in ("/api/v1/public/bookings/modification", "/api/v1/public/bookings/customer-action"):
        response = client.get(path, params={"token": "f" * 64})
        assert response.status_code == 404
        assert response.json()["detail"] == "This link is invalid or has already been used"

    response = client.post("/api/v1/public/bookings/confirm-modification", json={"token": "nope"})
    assert response.status_code == 404


def test_customer_cancel_flow(client, db, business, service, email_tasks):
    booking = add_booking(db, business, service, TUESDAY, "10:00", "10:45")
    token = booking.customer_action_token

    view = client.get("/api/v1/public/bookings/customer-action", params={"token": token})
    assert view.status_code == 200
    assert view.json()["service"]["name"] == "Consultation"
    assert view.json()["business"]["slug"] == "studio-north"

    response = client.post("/api/v1/public/bookings/customer-cancel", json={"token": token, "reason": "Travel"})
    assert response.status_code == 200
    assert response.json()["booking"]["status"] == "cancelled"
    email_tasks["cancellation"].delay.assert_called_once()

    again = client.post("/api/v1/public/bookings/customer-cancel", json={"token": token})
    assert again.status_code == 400
    assert again.json()["error"] == "invalid_transition"


def test_customer_modify_flow(client, db, business, service):
    booking = add_booking(db, business, service, TUESDAY, "10:00", "10:45")

    response = client.post("/api/v1/public/bookings/customer-modify", json={
        "token": booking.customer_action_token,
        "new_date": "2030-01-09",
        "new_start_time": "15:00",
    })

    assert response.status_code == 200
    moved = response.json()["booking"]
    assert (moved["booking_date"], moved["start_time"], moved["end_time"]) == ("2030-01-09", "15:00", "15:45")


def test_modification_confirm_and_expiry(client, db, business, service, auth_headers, clock):
    first = add_booking(db, business, service, TUESDAY, "10:00", "10:45")
    second = add_booking(db, business, service, TUESDAY, "13:00", "13:45")

    for booking, start in ((first, "14:00"), (second, "15:00")):
        response = client.post(
            f"/api/v1/dashboard/bookings/{booking.id}/request-modification",
            json={"proposed_booking_date": "2030-01-09", "proposed_start_time": start},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json()["status"] == "modification_pending"

    db.expire_all()
    first_token = db.get(Booking, first.id).modification_token
    second_token = db.get(Booking, second.id).modification_token

    details = client.get("/api/v1/public/bookings/modification", params={"token": first_token})
    assert details.status_code == 200
    assert details.json()["proposed"]["start_time"] == "14:00"

    confirmed = client.post("/api/v1/public/bookings/confirm-modification", json={"token": first_token})
    assert confirmed.status_code == 200
    assert confirmed.json()["booking"]["start_time"] == "14:00"

    clock.advance(hours=49)
    expired = client.post("/api/v1/public/bookings/confirm-modification", json={"token": second_token})
    assert expired.status_code == 410
    assert expired.json()["error"] == "token_expired"


def test_health_endpoint(client):
    response = client.get("/health/")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert "X-Correlation-ID" in response.headers
