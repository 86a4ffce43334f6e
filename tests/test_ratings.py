"""Tests for rating submission and the store aggregate it maintains."""

from httpx import AsyncClient
import pytest
from sqlalchemy import func, select

from ratings_api.models import Rating, Role
from ratings_api.stores.postgres import get_session


async def _rating_rows(store_id: int) -> int:
    async with get_session() as session:
        result = await session.execute(select(func.count(Rating.id)).where(Rating.store_id == store_id))
        return result.scalar()


@pytest.mark.asyncio
async def test_rate_update_and_owner_view(client: AsyncClient, make_user, make_store, auth_headers):
    owner = await make_user(Role.STORE_OWNER, name="Owner A of the Corner Store")
    bob = await make_user(name="Bob the Regular Customer")
    store = await make_store(owner, name="Corner Store")

    created = await client.post(
        f"/api/user/stores/{store.id}/rating",
        json={"rating_value": 4},
        headers=auth_headers(bob),
    )
    assert created.status_code == 201
    assert created.json()["message"] == "Rating created successfully"
    assert created.json()["rating"]["rating_value"] == 4

    mine = await client.get("/api/owner/stores", headers=auth_headers(owner))
    [row] = mine.json()["stores"]
    assert row["average_rating"] == 4.0
    assert row["ratings_count"] == 1

    updated = await client.put(
        f"/api/user/stores/{store.id}/rating",
        json={"rating_value": 2},
        headers=auth_headers(bob),
    )
    assert updated.status_code == 200
    assert updated.json()["message"] == "Rating updated successfully"

    ratings = await client.get(f"/api/owner/stores/{store.id}/ratings", headers=auth_headers(owner))
    assert ratings.status_code == 200
    body = ratings.json()
    assert body["store"]["average_rating"] == 2.0
    assert body["store"]["ratings_count"] == 1
    [entry] = body["ratings"]
    assert entry["rating_value"] == 2
    assert entry["user"]["id"] == bob.id
    assert entry["user"]["name"] == "Bob the Regular Customer"


@pytest.mark.asyncio
async def test_second_rating_is_rejected(client: AsyncClient, make_user, make_store, auth_headers):
    owner = await make_user(Role.STORE_OWNER)
    user = await make_user()
    store = await make_store(owner)

    first = await client.post(
        f"/api/user/stores/{store.id}/rating", json={"rating_value": 5}, headers=auth_headers(user)
    )
    assert first.status_code == 201

    second = await client.post(
        f"/api/user/stores/{store.id}/rating", json={"rating_value": 1}, headers=auth_headers(user)
    )
    assert second.status_code == 400
    assert second.json() == {"message": "Rating already exists. Use update instead."}
    assert await _rating_rows(store.id) == 1

    listing = await client.get("/api/user/stores", headers=auth_headers(user))
    [row] = listing.json()["data"]
    assert row["average_rating"] == 5.0
    assert row["ratings_count"] == 1


@pytest.mark.asyncio
async def test_average_over_many_users(client: AsyncClient, make_user, make_store, auth_headers):
    owner = await make_user(Role.STORE_OWNER)
    store = await make_store(owner)

    for value in (5, 4, 4):
        rater = await make_user()
        response = await client.post(
            f"/api/user/stores/{store.id}/rating",
            json={"rating_value": value},
            headers=auth_headers(rater),
        )
        assert response.status_code == 201

    response = await client.get("/api/owner/stores", headers=auth_headers(owner))
    [row] = response.json()["stores"]
    assert row["average_rating"] == 4.33
    assert row["ratings_count"] == 3


@pytest.mark.asyncio
async def test_update_without_rating_is_404(client: AsyncClient, make_user, make_store, auth_headers):
    owner = await make_user(Role.STORE_OWNER)
    user = await make_user()
    store = await make_store(owner)

    response = await client.put(
        f"/api/user/stores/{store.id}/rating", json={"rating_value": 3}, headers=auth_headers(user)
    )
    assert response.status_code == 404
    assert response.json() == {"message": "Rating not found"}


@pytest.mark.asyncio
async def test_rating_missing_store_is_404(client: AsyncClient, make_user, auth_headers):
    user = await make_user()
    response = await client.post(
        "/api/user/stores/9999/rating", json={"rating_value": 3}, headers=auth_headers(user)
    )
    assert response.status_code == 404
    assert response.json() == {"message": "Store not found"}


@pytest.mark.asyncio
@pytest.mark.parametrize("value", [0, 6, -1, "4", 4.5, None])
async def test_invalid_rating_values(client: AsyncClient, make_user, make_store, auth_headers, value):
    owner = await make_user(Role.STORE_OWNER)
    user = await make_user()
    store = await make_store(owner)

    response = await client.post(
        f"/api/user/stores/{store.id}/rating", json={"rating_value": value}, headers=auth_headers(user)
    )
    assert response.status_code == 400
    assert response.json()["message"].startswith("rating_value")
    assert await _rating_rows(store.id) == 0


@pytest.mark.asyncio
async def test_my_rating_before_and_after(client: AsyncClient, make_user, make_store, auth_headers):
    owner = await make_user(Role.STORE_OWNER)
    user = await make_user()
    store = await make_store(owner)

    before = await client.get(f"/api/user/stores/{store.id}/rating/me", headers=auth_headers(user))
    assert before.status_code == 200
    assert before.json() == {"rating": None}

    await client.post(
        f"/api/user/stores/{store.id}/rating",
        json={"rating_value": 3, "comment": "Friendly staff"},
        headers=auth_headers(user),
    )

    after = await client.get(f"/api/user/stores/{store.id}/rating/me", headers=auth_headers(user))
    rating = after.json()["rating"]
    assert rating["rating_value"] == 3
    assert rating["comment"] == "Friendly staff"
    assert rating["store_id"] == store.id
    assert rating["user_id"] == user.id


@pytest.mark.asyncio
async def test_listing_carries_my_rating(client: AsyncClient, make_user, make_store, auth_headers):
    owner = await make_user(Role.STORE_OWNER)
    me = await make_user()
    someone = await make_user()
    rated = await make_store(owner, name="Alpha Bakery")
    await make_store(owner, name="Beta Books")

    await client.post(
        f"/api/user/stores/{rated.id}/rating", json={"rating_value": 5}, headers=auth_headers(me)
    )
    await client.post(
        f"/api/user/stores/{rated.id}/rating", json={"rating_value": 1}, headers=auth_headers(someone)
    )

    response = await client.get("/api/user/stores", headers=auth_headers(me))
    assert response.status_code == 200
    alpha, beta = response.json()["data"]
    assert alpha["name"] == "Alpha Bakery"
    assert alpha["myRating"]["rating_value"] == 5
    assert alpha["average_rating"] == 3.0
    assert alpha["ratings_count"] == 2
    assert beta["myRating"] is None
    assert "owner_id" not in beta


@pytest.mark.asyncio
async def test_update_comment_only_and_clear(client: AsyncClient, make_user, make_store, auth_headers):
    owner = await make_user(Role.STORE_OWNER)
    user = await make_user()
    store = await make_store(owner)

    await client.post(
        f"/api/user/stores/{store.id}/rating",
        json={"rating_value": 4, "comment": "Good coffee"},
        headers=auth_headers(user),
    )

    comment_only = await client.put(
        f"/api/user/stores/{store.id}/rating",
        json={"comment": "Great coffee"},
        headers=auth_headers(user),
    )
    assert comment_only.json()["rating"]["rating_value"] == 4
    assert comment_only.json()["rating"]["comment"] == "Great coffee"

    cleared = await client.put(
        f"/api/user/stores/{store.id}/rating",
        json={"comment": None},
        headers=auth_headers(user),
    )
    assert cleared.json()["rating"]["rating_value"] == 4
    assert cleared.json()["rating"]["comment"] is None


@pytest.mark.asyncio
async def test_user_store_search_and_sort(client: AsyncClient, make_user, make_store, auth_headers):
    owner = await make_user(Role.STORE_OWNER)
    user = await make_user()
    await make_store(owner, name="Green Grocer", address="5 Elm Street")
    await make_store(owner, name="Grey Hardware", address="9 Oak Avenue")
    await make_store(owner, name="Blue Books", address="12 Elm Street")

    by_address = await client.get(
        "/api/user/stores",
        params={"address": "elm", "sortBy": "name", "sortOrder": "DESC"},
        headers=auth_headers(user),
    )
    names = [row["name"] for row in by_address.json()["data"]]
    assert names == ["Green Grocer", "Blue Books"]

    by_name = await client.get("/api/user/stores", params={"name": "GRE"}, headers=auth_headers(user))
    assert [row["name"] for row in by_name.json()["data"]] == ["Green Grocer", "Grey Hardware"]
    assert by_name.json()["pagination"] == {"total": 2, "page": 1, "limit": 10, "totalPages": 1}
