"""HTTP routes end to end over the in-memory store."""

import json

import pytest
from httpx import ASGITransport, AsyncClient

from conftest import ADMIN_HEADERS, NOW, booking_request, stripe_signature, trip_data
from shuttle.core.config import Settings, get_settings
from shuttle.main import create_app
from shuttle.services.booking_service import BookingService
from shuttle.services.store import MemoryStore, StoreUnavailableError


def booking_payload(trip_id: int, property_id: int, seats: int = 2, **overrides) -> dict:
    payload = booking_request(trip_id, property_id, seats).model_dump()
    payload.update(overrides)
    return payload


@pytest.fixture
def app(service):
    return create_app(booking_service=service)


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


async def test_health_and_root(client):
    assert (await client.get("/health")).json()["status"] == "healthy"
    assert (await client.get("/")).status_code == 200


# Public routes

async def test_property_pages(client, prop, trip):
    listing = await client.get("/v1/properties")
    assert [p["slug"] for p in listing.json()] == ["greenacres"]

    page = await client.get("/v1/properties/greenacres")
    assert page.json()["meeting_point"] == "Green Acres Community Center"

    trips = await client.get("/v1/properties/greenacres/trips")
    assert trips.status_code == 200
    [listed] = trips.json()
    assert listed["id"] == trip.id
    assert listed["seats_available"] == 30
    assert listed["booking_open"] is True

    assert (await client.get("/v1/properties/nowhere")).status_code == 404
    assert (await client.get("/v1/properties/nowhere/trips")).status_code == 404


async def test_get_trip(client, trip):
    response = await client.get(f"/v1/trips/{trip.id}")

    assert response.status_code == 200
    assert response.json()["seats_available"] == 30
    assert (await client.get("/v1/trips/999")).status_code == 404


async def test_create_and_get_booking(client, trip, prop):
    response = await client.post("/v1/bookings", json=booking_payload(trip.id, prop.id, seats=2))

    assert response.status_code == 201
    booking = response.json()
    assert booking["booking_status"] == "reserved"
    assert booking["payment_status"] == "pending"
    assert booking["total_amount"] == 7000

    fetched = await client.get(f"/v1/bookings/{booking['id']}")
    assert fetched.json() == booking
    assert (await client.get("/v1/bookings/999")).status_code == 404
    assert (await client.get(f"/v1/trips/{trip.id}")).json()["seats_available"] == 28


async def test_booking_rejections(client, service, prop):
    small = await service.create_trip(trip_data(max_capacity=1), [prop.id])

    missing_trip = await client.post("/v1/bookings", json=booking_payload(999, prop.id))
    assert missing_trip.status_code == 404
    assert missing_trip.json()["detail"]["reason"] == "trip_not_found"

    missing_prop = await client.post("/v1/bookings", json=booking_payload(small.id, 999))
    assert missing_prop.status_code == 404
    assert missing_prop.json()["detail"]["reason"] == "property_not_found"

    full = await client.post("/v1/bookings", json=booking_payload(small.id, prop.id, seats=2))
    assert full.status_code == 409
    assert full.json()["detail"]["reason"] == "insufficient_seats"
    assert full.json()["detail"]["seats_available"] == 1
    assert await service.ledger.list_by_trip(small.id) == []


@pytest.mark.parametrize(
    "overrides",
    [
        {"number_of_seats": 0},
        {"number_of_seats": 5},
        {"customer_email": "not-an-email"},
        {"customer_name": ""},
    ],
)
async def test_invalid_booking_payloads(client, trip, prop, overrides):
    response = await client.post("/v1/bookings", json=booking_payload(trip.id, prop.id, **overrides))

    assert response.status_code == 422


async def test_payment_intent_then_webhook_confirms(client, trip, prop):
    booking = (await client.post("/v1/bookings", json=booking_payload(trip.id, prop.id))).json()

    intent = await client.post(f"/v1/bookings/{booking['id']}/payment-intent")
    assert intent.status_code == 200
    ref = intent.json()["provider_ref"]
    assert intent.json()["amount"] == 7000

    event = {
        "type": "payment_intent.succeeded",
        "data": {"object": {"id": ref, "metadata": {"booking_id": str(booking["id"])}}},
    }
    for _ in range(2):
        hook = await client.post("/v1/payments/webhook", content=json.dumps(event))
        assert hook.status_code == 200
        assert hook.json()["booking_status"] == "confirmed"

    confirmed = (await client.get(f"/v1/bookings/{booking['id']}")).json()
    assert confirmed["payment_status"] == "paid"
    assert confirmed["payment_ref"] == ref

    again = await client.post(f"/v1/bookings/{booking['id']}/payment-intent")
    assert again.status_code == 409
    assert (await client.post("/v1/bookings/999/payment-intent")).status_code == 404


async def test_webhook_ignores_unrelated_events(client):
    response = await client.post("/v1/payments/webhook", content=json.dumps({"type": "charge.refunded"}))

    assert response.json() == {"received": True}


async def test_webhook_unknown_booking(client):
    event = {
        "type": "payment_intent.succeeded",
        "data": {"object": {"id": "pi_1", "metadata": {"booking_id": "999"}}},
    }

    response = await client.post("/v1/payments/webhook", content=json.dumps(event))

    assert response.status_code == 404


async def test_webhook_signature_enforced_when_secret_set(app, client, trip, prop):
    app.dependency_overrides[get_settings] = lambda: Settings(
        debug=True, admin_api_key="test-admin-key", stripe_webhook_secret="whsec_test"
    )
    booking = (await client.post("/v1/bookings", json=booking_payload(trip.id, prop.id))).json()
    payload = json.dumps({
        "type": "payment_intent.succeeded",
        "data": {"object": {"id": "pi_signed", "metadata": {"booking_id": str(booking["id"])}}},
    }).encode()

    unsigned = await client.post("/v1/payments/webhook", content=payload)
    assert unsigned.status_code == 400

    signed = await client.post(
        "/v1/payments/webhook",
        content=payload,
        headers={"Stripe-Signature": stripe_signature(payload, "whsec_test")},
    )
    assert signed.status_code == 200
    assert signed.json()["booking_status"] == "confirmed"


# Admin routes

async def test_admin_requires_key(client):
    assert (await client.get("/v1/admin/trips")).status_code == 401
    assert (await client.get("/v1/admin/trips", headers={"X-Admin-Key": "wrong"})).status_code == 403
    assert (await client.get("/v1/admin/trips", headers=ADMIN_HEADERS)).status_code == 200


async def test_admin_trip_management(client, prop):
    payload = json.loads(trip_data().model_dump_json())
    payload["property_ids"] = [prop.id]

    created = await client.post("/v1/admin/trips", json=payload, headers=ADMIN_HEADERS)
    assert created.status_code == 201
    trip_id = created.json()["id"]

    listed = (await client.get("/v1/properties/greenacres/trips")).json()
    assert [t["id"] for t in listed] == [trip_id]

    updated = await client.put(
        f"/v1/admin/trips/{trip_id}",
        json={"max_capacity": 12, "is_active": False},
        headers=ADMIN_HEADERS,
    )
    assert updated.json()["max_capacity"] == 12
    assert (await client.get("/v1/properties/greenacres/trips")).json() == []

    missing = await client.put("/v1/admin/trips/999", json={"max_capacity": 3}, headers=ADMIN_HEADERS)
    assert missing.status_code == 404

    invalid = await client.put(f"/v1/admin/trips/{trip_id}", json={"max_capacity": 0}, headers=ADMIN_HEADERS)
    assert invalid.status_code == 422


async def test_admin_trip_with_utc_offsets(client, prop):
    payload = json.loads(trip_data().model_dump_json())
    payload.update(
        departure_date="2026-06-08T09:00:00Z",
        return_date="2026-06-08T19:00:00+02:00",
        property_ids=[prop.id],
    )

    created = await client.post("/v1/admin/trips", json=payload, headers=ADMIN_HEADERS)
    assert created.status_code == 201
    trip_id = created.json()["id"]
    assert created.json()["departure_date"] == "2026-06-08T09:00:00"
    assert created.json()["return_date"] == "2026-06-08T17:00:00"

    [listed] = (await client.get("/v1/properties/greenacres/trips")).json()
    assert listed["id"] == trip_id
    assert listed["booking_open"] is True

    fetched = await client.get(f"/v1/trips/{trip_id}")
    assert fetched.status_code == 200
    assert fetched.json()["seats_available"] == 30

    moved = await client.put(
        f"/v1/admin/trips/{trip_id}",
        json={"departure_date": "2026-06-09T10:00:00-04:00"},
        headers=ADMIN_HEADERS,
    )
    assert moved.json()["departure_date"] == "2026-06-09T14:00:00"
    assert (await client.get(f"/v1/trips/{trip_id}")).status_code == 200


@pytest.mark.parametrize("field", ["max_capacity", "price_per_seat", "departure_date", "is_active"])
async def test_admin_trip_update_rejects_null(client, trip, prop, field):
    response = await client.put(f"/v1/admin/trips/{trip.id}", json={field: None}, headers=ADMIN_HEADERS)

    assert response.status_code == 422
    stored = (await client.get(f"/v1/trips/{trip.id}")).json()
    assert stored[field] is not None
    booked = await client.post("/v1/bookings", json=booking_payload(trip.id, prop.id))
    assert booked.status_code == 201


async def test_admin_properties_and_assignment(client, service):
    trip = await service.create_trip(trip_data())
    body = {
        "name": "Sunnydale Retirement Community",
        "slug": "sunnydale",
        "address": "456 Sunny Way",
        "city": "Savannah",
        "state": "GA",
        "zip_code": "31401",
        "meeting_point": "Sunnydale Main Lobby",
    }

    created = await client.post("/v1/admin/properties", json=body, headers=ADMIN_HEADERS)
    assert created.status_code == 201
    duplicate = await client.post("/v1/admin/properties", json=body, headers=ADMIN_HEADERS)
    assert duplicate.status_code == 409

    link = await client.post(
        f"/v1/admin/trips/{trip.id}/properties",
        json={"property_id": created.json()["id"]},
        headers=ADMIN_HEADERS,
    )
    assert link.status_code == 201
    assert link.json()["trip_id"] == trip.id

    missing = await client.post(
        "/v1/admin/trips/999/properties",
        json={"property_id": created.json()["id"]},
        headers=ADMIN_HEADERS,
    )
    assert missing.status_code == 404


async def test_admin_manifest_cancel_and_dashboard(client, service, trip, prop):
    kept = (await service.submit_booking(booking_request(trip.id, prop.id, seats=2))).booking
    dropped = (await service.submit_booking(booking_request(trip.id, prop.id, seats=3))).booking

    outcome = await client.post(
        f"/v1/admin/bookings/{kept.id}/payment-outcome",
        json={"provider_ref": "pi_cash", "succeeded": True},
        headers=ADMIN_HEADERS,
    )
    assert outcome.json()["booking_status"] == "confirmed"

    cancelled = await client.post(f"/v1/admin/bookings/{dropped.id}/cancel", headers=ADMIN_HEADERS)
    assert cancelled.json()["booking_status"] == "cancelled"

    not_cancellable = await client.post(f"/v1/admin/bookings/{kept.id}/cancel", headers=ADMIN_HEADERS)
    assert not_cancellable.status_code == 409
    assert (await client.post("/v1/admin/bookings/999/cancel", headers=ADMIN_HEADERS)).status_code == 404

    manifest = (await client.get(f"/v1/admin/trips/{trip.id}/manifest", headers=ADMIN_HEADERS)).json()
    assert [row["booking_id"] for row in manifest] == [kept.id]
    assert manifest[0]["seats"] == 2
    assert manifest[0]["property_name"] == "Green Acres Community"
    assert (await client.get("/v1/admin/trips/999/manifest", headers=ADMIN_HEADERS)).json() == []

    bookings = (await client.get(f"/v1/admin/trips/{trip.id}/bookings", headers=ADMIN_HEADERS)).json()
    assert [b["id"] for b in bookings] == [kept.id, dropped.id]
    assert (await client.get("/v1/admin/trips/999/bookings", headers=ADMIN_HEADERS)).status_code == 404

    dashboard = (await client.get("/v1/admin/dashboard", headers=ADMIN_HEADERS)).json()
    assert dashboard["bookings_by_status"]["confirmed"] == 1
    assert dashboard["bookings_by_status"]["cancelled"] == 1
    assert dashboard["seats_sold"] == 2
    assert dashboard["upcoming_trips"][0]["seats_available"] == 28


class BrokenStore(MemoryStore):
    async def get_trip(self, trip_id):
        raise StoreUnavailableError("connection refused")


async def test_store_outage_maps_to_503():
    app = create_app(booking_service=BookingService(BrokenStore(), clock=lambda: NOW))
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/v1/trips/1")

    assert response.status_code == 503
