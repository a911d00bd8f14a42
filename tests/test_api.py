import pytest
from httpx import AsyncClient

SANDTON_ROOM = {
    "id": "L1",
    "title": "Sunny room",
    "price": 4500,
    "location": "Sandton",
    "amenities": ["WiFi"]
}


@pytest.mark.asyncio
async def test_root_and_health(client: AsyncClient):
    response = await client.get("/")
    assert response.status_code == 200
    assert "version" in response.json()

    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["checks"]["storage"]["backend"] == "memory"


@pytest.mark.asyncio
async def test_health_degraded_when_storage_disabled(client: AsyncClient, backend):
    backend.enabled = False

    response = await client.get("/health")

    assert response.json()["status"] == "degraded"


@pytest.mark.asyncio
async def test_metrics_endpoint(client: AsyncClient):
    await client.get("/api/v1/compare")

    response = await client.get("/metrics")

    assert response.status_code == 200
    assert "http_requests_total" in response.text


# ============ SAVED SEARCHES ============

@pytest.mark.asyncio
async def test_saved_search_lifecycle(client: AsyncClient):
    """Test create, list, fetch and delete of a saved search"""
    response = await client.post(
        "/api/v1/saved-searches",
        json={"location": "Sandton", "price_range": [0, 5000]}
    )
    assert response.status_code == 201
    search_id = response.json()["id"]
    assert response.json()["price_max"] == 5000

    response = await client.get("/api/v1/saved-searches")
    assert [s["id"] for s in response.json()] == [search_id]

    response = await client.get(f"/api/v1/saved-searches/{search_id}")
    assert response.json()["location"] == "Sandton"

    response = await client.delete(f"/api/v1/saved-searches/{search_id}")
    assert response.status_code == 204

    response = await client.get(f"/api/v1/saved-searches/{search_id}")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "SAVED_SEARCH_NOT_FOUND"


@pytest.mark.asyncio
async def test_saved_search_validation_error(client: AsyncClient):
    response = await client.post(
        "/api/v1/saved-searches",
        json={"price_range": [5000, 1000]}
    )

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_saved_search_storage_full(client: AsyncClient, backend):
    backend.quota_bytes = 10

    response = await client.post("/api/v1/saved-searches", json={"location": "Sandton"})

    assert response.status_code == 507
    assert response.json()["error"]["code"] == "STORAGE_WRITE_FAILED"


# ============ CLIENT PROFILES ============

@pytest.mark.asyncio
async def test_client_profiles_are_isolated(client: AsyncClient):
    await client.post("/api/v1/favorites/L1/toggle", headers={"X-Client-Id": "alice"})

    alice = await client.get("/api/v1/favorites", headers={"X-Client-Id": "alice"})
    bob = await client.get("/api/v1/favorites", headers={"X-Client-Id": "bob"})

    assert alice.json() == ["L1"]
    assert bob.json() == []


@pytest.mark.asyncio
async def test_invalid_client_id_rejected(client: AsyncClient):
    response = await client.get("/api/v1/favorites", headers={"X-Client-Id": "bad id!"})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "HTTP_400"


# ============ NOTIFICATIONS ============

@pytest.mark.asyncio
async def test_notification_check_and_inbox(client: AsyncClient):
    """Test that checking listings fills the inbox exactly once per listing"""
    await client.post("/api/v1/saved-searches", json={"location": "sandton", "price_max": 5000})

    response = await client.post("/api/v1/notifications/check", json={"listings": [SANDTON_ROOM]})
    assert response.status_code == 200
    created = response.json()
    assert len(created) == 1
    assert created[0]["type"] == "new-listing"
    assert created[0]["read"] is False

    response = await client.post("/api/v1/notifications/check", json={"listings": [SANDTON_ROOM]})
    assert response.json() == []

    response = await client.get("/api/v1/notifications/unread-count")
    assert response.json() == {"unread": 1, "total": 1}

    notification_id = created[0]["id"]
    response = await client.post(f"/api/v1/notifications/{notification_id}/read")
    assert response.status_code == 200

    response = await client.get("/api/v1/notifications")
    assert response.json()[0]["read"] is True


@pytest.mark.asyncio
async def test_price_drop_via_check(client: AsyncClient):
    payload = {"listings": [SANDTON_ROOM], "favorite_ids": ["L1"], "user_id": "u1"}
    await client.post("/api/v1/notifications/check", json=payload)

    payload["listings"] = [{**SANDTON_ROOM, "price": 4000}]
    response = await client.post("/api/v1/notifications/check", json=payload)

    drops = [n for n in response.json() if n["type"] == "price-drop"]
    assert len(drops) == 1
    assert drops[0]["body"] == '"Sunny room" dropped by R500 to R4000/month'


@pytest.mark.asyncio
async def test_notification_not_found(client: AsyncClient):
    response = await client.post("/api/v1/notifications/missing/read")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOTIFICATION_NOT_FOUND"

    response = await client.delete("/api/v1/notifications/missing")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_mark_all_read_and_clear(client: AsyncClient):
    await client.post("/api/v1/saved-searches", json={})
    await client.post(
        "/api/v1/notifications/check",
        json={"listings": [SANDTON_ROOM, {**SANDTON_ROOM, "id": "L2"}]}
    )

    response = await client.post("/api/v1/notifications/read-all")
    assert response.json()["message"] == "Marked 2 notifications as read"

    response = await client.delete("/api/v1/notifications")
    assert response.status_code == 204

    response = await client.get("/api/v1/notifications")
    assert response.json() == []


# ============ LISTINGS ============

@pytest.mark.asyncio
async def test_listing_views(client: AsyncClient):
    await client.post("/api/v1/listings/L1/views", json={"user_id": "u1"})
    await client.post("/api/v1/listings/L1/views", json={"user_id": "u1"})
    response = await client.post("/api/v1/listings/L1/views")

    assert response.json() == {"listing_id": "L1", "count": 2}

    response = await client.get("/api/v1/listings/L1/views")
    assert response.json()["count"] == 2


@pytest.mark.asyncio
async def test_reviews_and_reports(client: AsyncClient):
    response = await client.post("/api/v1/listings/L1/reviews", json={"rating": 5, "comment": "Lovely"})
    assert response.status_code == 201

    await client.post("/api/v1/listings/L1/reviews", json={"rating": 2})
    response = await client.get("/api/v1/listings/L1/reviews/summary")
    assert response.json() == {"listing_id": "L1", "average_rating": 3.5, "review_count": 2}

    response = await client.post("/api/v1/listings/L1/reviews", json={"rating": 9})
    assert response.status_code == 422

    response = await client.post("/api/v1/listings/L1/reports", json={"reason": "Safety Concern"})
    assert response.status_code == 201
    assert response.json()["reason"] == "Safety Concern"

    response = await client.post("/api/v1/listings/L1/reports", json={"reason": "Boring"})
    assert response.status_code == 422


# ============ COMPARE ============

@pytest.mark.asyncio
async def test_compare_list(client: AsyncClient):
    for listing_id in ["L1", "L2", "L3", "L4"]:
        response = await client.post(f"/api/v1/compare/{listing_id}")
        assert response.json()["success"] is True

    response = await client.post("/api/v1/compare/L5")
    assert response.status_code == 200
    assert response.json()["success"] is False

    response = await client.delete("/api/v1/compare/L1")
    assert response.json() == ["L2", "L3", "L4"]

    response = await client.delete("/api/v1/compare")
    assert response.status_code == 204


# ============ LANDLORDS ============

@pytest.mark.asyncio
async def test_landlord_badge_and_quick_replies(client: AsyncClient):
    response = await client.get("/api/v1/landlords/LL1/response-badge")
    assert response.json() is None

    await client.post("/api/v1/landlords/LL1/contact-clicks")
    response = await client.get("/api/v1/landlords/LL1/response-badge")
    assert response.json() == {"text": "Responds within hours", "color": "green"}

    response = await client.get("/api/v1/landlords/LL1/quick-replies")
    assert len(response.json()) == 5

    response = await client.put("/api/v1/landlords/LL1/quick-replies", json={"replies": ["Still available"]})
    assert response.json() == ["Still available"]

    response = await client.put("/api/v1/landlords/LL1/quick-replies", json={"replies": ["  "]})
    assert response.status_code == 422


# ============ PROFILE DATA ============

@pytest.mark.asyncio
async def test_recent_searches(client: AsyncClient):
    await client.post("/api/v1/recent-searches", json={"location": "Sandton"})
    response = await client.post("/api/v1/recent-searches", json={"location": "Rosebank"})

    assert response.json() == ["Rosebank", "Sandton"]


@pytest.mark.asyncio
async def test_area_subscriptions(client: AsyncClient):
    response = await client.post("/api/v1/subscriptions/u1", json={"area": "Sandton"})
    assert response.json()["success"] is True

    response = await client.post("/api/v1/subscriptions/u1", json={"area": "sandton"})
    assert response.json()["success"] is False

    response = await client.delete("/api/v1/subscriptions/u1/Sandton")
    assert response.json() == []


@pytest.mark.asyncio
async def test_roommate_profiles(client: AsyncClient):
    response = await client.get("/api/v1/roommates/u1")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "PROFILE_NOT_FOUND"

    response = await client.put("/api/v1/roommates/u1", json={"display_name": "Thandi"})
    assert response.status_code == 200
    assert response.json()["user_id"] == "u1"

    response = await client.get("/api/v1/roommates")
    assert len(response.json()) == 1

    response = await client.delete("/api/v1/roommates/u1")
    assert response.status_code == 204


@pytest.mark.asyncio
async def test_check_accepts_listings_with_null_fields(client: AsyncClient):
    await client.post("/api/v1/saved-searches", json={})

    response = await client.post(
        "/api/v1/notifications/check",
        json={"listings": [{"id": "L3", "price": 2800, "location": None, "amenities": None}]}
    )

    assert response.status_code == 200
    assert len(response.json()) == 1


@pytest.mark.asyncio
async def test_check_uses_favorites_toggled_over_http(client: AsyncClient):
    await client.post("/api/v1/favorites/L1/toggle")
    await client.post("/api/v1/notifications/check", json={"listings": [SANDTON_ROOM]})

    response = await client.post(
        "/api/v1/notifications/check",
        json={"listings": [{**SANDTON_ROOM, "price": 4200}]}
    )

    assert [n["type"] for n in response.json()] == ["price-drop"]
