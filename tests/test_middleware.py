from fastapi import FastAPI
from fastapi.testclient import TestClient

from slotbook.api.middleware.rate_limit_middleware import PublicWriteRateLimitMiddleware


def test_public_writes_are_rate_limited():
    app = FastAPI()
    app.add_middleware(PublicWriteRateLimitMiddleware, requests_per_minute=2)

    @app.post("/api/v1/public/bookings/customer-cancel")
    def cancel():
        return {"ok": True}

    @app.get("/api/v1/public/businesses/x")
    def page():
        return {"ok": True}

    client = TestClient(app)
    assert client.post("/api/v1/public/bookings/customer-cancel").status_code == 200
    assert client.post("/api/v1/public/bookings/customer-cancel").status_code == 200

    limited = client.post("/api/v1/public/bookings/customer-cancel")
    assert limited.status_code == 429
    assert limited.json()["error"] == "rate_limited"
    assert limited.headers["Retry-After"] == "60"

    assert client.get("/api/v1/public/businesses/x").status_code == 200
