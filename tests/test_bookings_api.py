from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from app.main import app
from app.services.booking_service import BookingService, get_booking_service


def booking_body(phone="555-1000", name="Alice", items=None, **overrides):
    body = {
        "customer": {"phone": phone, "name": name},
        "court_number": 2,
        "booking_date": "2024-05-10",
        "start_time": "18:00:00",
        "end_time": "19:30:00",
        "court_price": 20.00,
        "discount_amount": 0,
        "items": items or [],
    }
    body.update(overrides)
    return body


@pytest.mark.asyncio
async def test_create_booking(client, inventory):
    response = await client.post(
        "/bookings",
        json=booking_body(items=[{"item_id": inventory["racket"], "quantity": 2}]),
    )

    assert response.status_code == 201
    data = response.json()
    assert Decimal(data["items_total"]) == Decimal("10.00")
    assert Decimal(data["final_total"]) == Decimal("30.00")
    assert data["payment_status"] == "PENDING"
    assert data["booking_date"] == "2024-05-10"
    assert data["customer"]["phone"] == "555-1000"
    assert data["customer"]["loyalty_points"] == 0
    assert len(data["items"]) == 1
    item = data["items"][0]
    assert Decimal(item["price_at_booking"]) == Decimal("5.00")
    assert item["quantity"] == 2
    assert item["inventory_details"]["name"] == "Racket"
    assert item["inventory_details"]["type"] == "rental"


@pytest.mark.asyncio
async def test_create_booking_reuses_customer(client):
    first = await client.post("/bookings", json=booking_body())
    second = await client.post(
        "/bookings", json=booking_body(name="Alicia", start_time="20:00", end_time="21:00")
    )

    assert second.status_code == 201
    assert second.json()["customer_id"] == first.json()["customer_id"]
    assert second.json()["customer"]["name"] == "Alice"


@pytest.mark.asyncio
async def test_create_booking_invalid_body(client):
    response = await client.post(
        "/bookings", content="{not json", headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid input"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [
        {"customer": {"phone": "", "name": "Alice"}},
        {"customer": {"phone": "   ", "name": "Alice"}},
        {"court_number": 0},
        {"booking_date": "10/05/2024"},
        {"start_time": "25:00"},
        {"items": [{"item_id": 1, "quantity": 0}]},
    ],
)
async def test_create_booking_rejects_bad_fields(client, overrides):
    response = await client.post("/bookings", json=booking_body(**overrides))

    assert response.status_code == 400
    assert "detail" in response.json()


@pytest.mark.asyncio
async def test_list_requires_date(client):
    response = await client.get("/bookings")

    assert response.status_code == 400
    assert response.json()["detail"] == "Please provide a booking_date parameter"


@pytest.mark.asyncio
async def test_list_bookings_by_date(client, inventory):
    await client.post(
        "/bookings",
        json=booking_body(items=[{"item_id": inventory["water"], "quantity": 1}]),
    )
    await client.post("/bookings", json=booking_body(phone="555-2000", booking_date="2024-05-11"))

    response = await client.get("/bookings", params={"booking_date": "2024-05-10"})

    assert response.status_code == 200
    data = response.json()
    assert len(data) == 1
    assert data[0]["customer"]["name"] == "Alice"
    assert data[0]["items"][0]["inventory_details"]["name"] == "Water"

    empty = await client.get("/bookings", params={"booking_date": "2024-06-01"})
    assert empty.json() == []


@pytest.mark.asyncio
async def test_get_booking(client):
    created = (await client.post("/bookings", json=booking_body())).json()

    response = await client.get(f"/bookings/{created['id']}")
    assert response.status_code == 200
    assert response.json()["id"] == created["id"]

    missing = await client.get("/bookings/999")
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_patch_booking(client):
    created = (await client.post("/bookings", json=booking_body())).json()

    response = await client.patch(
        f"/bookings/{created['id']}",
        json={"payment_status": "PAID", "end_time": "20:00"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["payment_status"] == "PAID"
    assert data["end_time"] == "20:00"
    assert data["start_time"] == "18:00:00"
    assert Decimal(data["final_total"]) == Decimal("20.00")


@pytest.mark.asyncio
async def test_patch_court_price_recomputes_total(client):
    created = (await client.post("/bookings", json=booking_body(discount_amount=5))).json()

    response = await client.patch(f"/bookings/{created['id']}", json={"court_price": 30})

    assert response.status_code == 200
    assert Decimal(response.json()["final_total"]) == Decimal("25.00")


@pytest.mark.asyncio
async def test_patch_missing_booking(client):
    response = await client.patch("/bookings/999", json={"payment_status": "PAID"})

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_patch_invalid_body(client):
    created = (await client.post("/bookings", json=booking_body())).json()

    response = await client.patch(f"/bookings/{created['id']}", json={"court_price": "abc"})

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_delete_booking(client, inventory):
    created = (
        await client.post(
            "/bookings",
            json=booking_body(items=[{"item_id": inventory["racket"], "quantity": 1}]),
        )
    ).json()

    response = await client.delete(f"/bookings/{created['id']}")
    assert response.status_code == 200
    assert response.json() == {"message": "Booking deleted successfully"}

    listed = await client.get("/bookings", params={"booking_date": "2024-05-10"})
    assert listed.json() == []

    again = await client.delete(f"/bookings/{created['id']}")
    assert again.status_code == 404


@pytest.mark.asyncio
async def test_delete_missing_booking(client):
    response = await client.delete("/bookings/999")

    assert response.status_code == 404
    assert response.json()["detail"] == "Booking not found"


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


async def unavailable(self, *args, **kwargs):
    raise OperationalError("COMMIT", {}, Exception("database is unavailable"))


@pytest.mark.asyncio
async def test_create_booking_store_failure(client, monkeypatch):
    monkeypatch.setattr(AsyncSession, "commit", unavailable)

    response = await client.post("/bookings", json=booking_body())

    assert response.status_code == 500
    assert response.json() == {"detail": "Could not save booking"}

    monkeypatch.undo()
    listed = await client.get("/bookings", params={"booking_date": "2024-05-10"})
    assert listed.json() == []


@pytest.mark.asyncio
async def test_list_bookings_store_failure(client, monkeypatch):
    monkeypatch.setattr(AsyncSession, "execute", unavailable)

    response = await client.get("/bookings", params={"booking_date": "2024-05-10"})

    assert response.status_code == 500
    assert response.json() == {"detail": "Could not fetch bookings"}


@pytest.mark.asyncio
async def test_patch_booking_store_failure(client, monkeypatch):
    created = (await client.post("/bookings", json=booking_body())).json()
    monkeypatch.setattr(AsyncSession, "commit", unavailable)

    response = await client.patch(f"/bookings/{created['id']}", json={"payment_status": "PAID"})

    assert response.status_code == 500
    assert response.json() == {"detail": "Could not update booking"}

    monkeypatch.undo()
    current = await client.get(f"/bookings/{created['id']}")
    assert current.json()["payment_status"] == "PENDING"


@pytest.mark.asyncio
async def test_delete_booking_store_failure(client, monkeypatch):
    created = (await client.post("/bookings", json=booking_body())).json()
    monkeypatch.setattr(AsyncSession, "commit", unavailable)

    response = await client.delete(f"/bookings/{created['id']}")

    assert response.status_code == 500
    assert response.json() == {"detail": "Could not delete booking"}

    monkeypatch.undo()
    current = await client.get(f"/bookings/{created['id']}")
    assert current.status_code == 200


@pytest.mark.asyncio
async def test_create_booking_conflict(client):
    await client.post("/bookings", json=booking_body())

    class StaleLookupService(BookingService):
        async def _get_customer_by_phone(self, db, phone):
            return None

    app.dependency_overrides[get_booking_service] = StaleLookupService

    response = await client.post("/bookings", json=booking_body(start_time="20:00"))

    assert response.status_code == 409
    assert "555-1000" in response.json()["detail"]
