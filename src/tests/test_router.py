from decimal import Decimal
import pytest
from httpx import AsyncClient, ASGITransport
from library_reservations.deps import get_session
from library_reservations.main import app

pytestmark = pytest.mark.asyncio

@pytest.fixture
def client(session):
    async def _override():
        yield session
    app.dependency_overrides[get_session] = _override
    try:
        yield AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
    finally:
        app.dependency_overrides.clear()

async def _create(client, user_id, book_external_id=258027, rental_days=7, start_date="2025-03-01"):
    return await client.post("/reservations", json={
        "user_id": user_id,
        "book_external_id": book_external_id,
        "rental_days": rental_days,
        "start_date": start_date,
    })

async def test_create_and_get(client, user, book):
    async with client as c:
        resp = await _create(c, user.id)
        assert resp.status_code == 201
        body = resp.json()
        assert body["status"] == "ACTIVE"
        assert body["expected_return_date"] == "2025-03-08"
        assert Decimal(body["total_fee"]) == Decimal("111.93")
        assert body["late_fee"] is None
        assert body["user_name"] == "Juan Pérez"
        assert body["book_title"] == "The Lord of the Rings"
        got = await c.get(f"/reservations/{body['id']}")
        assert got.status_code == 200
        assert got.json()["id"] == body["id"]
        assert got.json()["user_name"] == "Juan Pérez"
        assert got.json()["book_title"] == "The Lord of the Rings"

async def test_create_errors(client, user, book):
    async with client as c:
        assert (await _create(c, user.id + 50)).status_code == 404
        assert (await _create(c, user.id, book_external_id=1)).status_code == 404
        assert (await _create(c, user.id, rental_days=0)).status_code == 422
        too_long = await _create(c, user.id, rental_days=4_000_000)
        assert too_long.status_code == 400

async def test_return_flow(client, user, book):
    async with client as c:
        rid = (await _create(c, user.id)).json()["id"]
        resp = await c.post(f"/reservations/{rid}/return", json={"return_date": "2025-03-11"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "OVERDUE"
        assert Decimal(body["late_fee"]) == Decimal("7.20")
        assert body["book_title"] == "The Lord of the Rings"
        again = await c.post(f"/reservations/{rid}/return", json={"return_date": "2025-03-12"})
        assert again.status_code == 409
        missing = await c.post("/reservations/999/return", json={"return_date": "2025-03-12"})
        assert missing.status_code == 404

async def test_list_endpoints(client, user, book):
    async with client as c:
        r1 = (await _create(c, user.id, rental_days=3)).json()["id"]
        r2 = (await _create(c, user.id, rental_days=20)).json()["id"]
        listed = (await c.get("/reservations")).json()
        assert [r["id"] for r in listed] == [r1, r2]
        assert {r["user_name"] for r in listed} == {"Juan Pérez"}
        assert [r["id"] for r in (await c.get("/reservations/active")).json()] == [r1, r2]
        assert [r["id"] for r in (await c.get(f"/reservations/user/{user.id}")).json()] == [r1, r2]
        overdue = await c.get("/reservations/overdue", params={"as_of": "2025-03-10"})
        assert [r["id"] for r in overdue.json()] == [r1]
        assert (await c.get("/reservations/999")).status_code == 404
