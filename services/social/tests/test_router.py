import uuid

import pytest
from httpx import AsyncClient

from app.models.enums import AccountRole, Visibility

API = "/api/v1"


@pytest.mark.asyncio
async def test_health(async_client: AsyncClient) -> None:
    response = await async_client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["service"] == "social"


@pytest.mark.asyncio
async def test_missing_token_is_unauthenticated(async_client: AsyncClient) -> None:
    response = await async_client.get(f"{API}/accounts/me", headers={"X-Request-ID": "req-1"})

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"
    assert response.headers["X-Request-ID"] == "req-1"
    body = response.json()
    assert body["error"]["code"] == "unauthenticated"
    assert body["request_id"] == "req-1"


@pytest.mark.asyncio
async def test_unprovisioned_identity_is_unauthenticated(
    async_client: AsyncClient, auth_headers
) -> None:
    class _Ghost:
        id = uuid.uuid4()

    response = await async_client.get(f"{API}/accounts/me", headers=auth_headers(_Ghost))
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_register_then_fetch_profile(async_client: AsyncClient, auth_headers) -> None:
    class _Identity:
        id = uuid.uuid4()

    headers = auth_headers(_Identity)
    created = await async_client.post(
        f"{API}/accounts",
        json={"username": "alice", "display_name": "Alice"},
        headers=headers,
    )
    assert created.status_code == 201
    assert created.json()["id"] == str(_Identity.id)

    again = await async_client.post(
        f"{API}/accounts",
        json={"username": "alice2", "display_name": "Alice"},
        headers=headers,
    )
    assert again.status_code == 409
    assert again.json()["error"]["code"] == "conflict"

    me = await async_client.get(f"{API}/accounts/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["username"] == "alice"


@pytest.mark.asyncio
async def test_private_post_requires_follow(
    async_client: AsyncClient, db_session, make_account, auth_headers
) -> None:
    author = await make_account("author")
    reader = await make_account("reader")
    await db_session.commit()

    created = await async_client.post(
        f"{API}/posts",
        json={"content": "followers only", "visibility": "PRIVATE"},
        headers=auth_headers(author),
    )
    assert created.status_code == 201
    post_id = created.json()["post_id"]

    denied = await async_client.get(f"{API}/posts/{post_id}", headers=auth_headers(reader))
    assert denied.status_code == 403
    assert denied.json()["error"]["code"] == "visibility_denied"

    followed = await async_client.post(
        f"{API}/accounts/{author.id}/follow", headers=auth_headers(reader)
    )
    assert followed.status_code == 201

    allowed = await async_client.get(f"{API}/posts/{post_id}", headers=auth_headers(reader))
    assert allowed.status_code == 200
    assert allowed.json()["content"] == "followers only"


@pytest.mark.asyncio
async def test_follow_self_and_twice(
    async_client: AsyncClient, db_session, make_account, auth_headers
) -> None:
    alice = await make_account("alice")
    bob = await make_account("bob")
    await db_session.commit()

    own = await async_client.post(f"{API}/accounts/{alice.id}/follow", headers=auth_headers(alice))
    assert own.status_code == 422
    assert own.json()["error"]["code"] == "invalid_operation"

    first = await async_client.post(f"{API}/accounts/{bob.id}/follow", headers=auth_headers(alice))
    assert first.status_code == 201
    second = await async_client.post(f"{API}/accounts/{bob.id}/follow", headers=auth_headers(alice))
    assert second.status_code == 409

    stats = await async_client.get(
        f"{API}/accounts/{bob.id}/follow-stats", headers=auth_headers(alice)
    )
    assert stats.json()["followers"] == 1


@pytest.mark.asyncio
async def test_reaction_toggle_over_http(
    async_client: AsyncClient, db_session, make_account, make_post, auth_headers
) -> None:
    author = await make_account("author")
    fan = await make_account("fan")
    post = await make_post(author)
    await db_session.commit()
    url = f"{API}/posts/{post.post_id}/reactions"

    first = await async_client.post(url, json={"kind": "LIKE"}, headers=auth_headers(fan))
    second = await async_client.post(url, json={"kind": "LIKE"}, headers=auth_headers(fan))

    assert first.status_code == 200
    assert first.json()["outcome"] == "CREATED"
    assert second.json()["outcome"] == "REMOVED"


@pytest.mark.asyncio
async def test_report_review_flow(
    async_client: AsyncClient, db_session, make_account, make_post, auth_headers
) -> None:
    author = await make_account("author")
    reporter = await make_account("reporter")
    admin = await make_account("admin", role=AccountRole.ADMIN)
    post = await make_post(author)
    await db_session.commit()

    filed = await async_client.post(
        f"{API}/posts/{post.post_id}/reports",
        json={"reason": "this is spam"},
        headers=auth_headers(reporter),
    )
    assert filed.status_code == 201
    report_id = filed.json()["report_id"]

    mine = await async_client.get(f"{API}/reports/me", headers=auth_headers(reporter))
    assert mine.status_code == 200
    assert (mine.json()["total"], mine.json()["pages"]) == (1, 1)
    assert mine.json()["items"][0]["report_id"] == report_id

    review_url = f"{API}/admin/reports/{report_id}/review"
    by_user = await async_client.patch(
        review_url, json={"decision": "RESOLVED"}, headers=auth_headers(reporter)
    )
    assert by_user.status_code == 403
    assert by_user.json()["error"]["code"] == "forbidden"

    resolved = await async_client.patch(
        review_url, json={"decision": "RESOLVED"}, headers=auth_headers(admin)
    )
    assert resolved.status_code == 200
    assert resolved.json()["post_removed"] is True
    assert resolved.json()["report"]["status"] == "RESOLVED"

    again = await async_client.patch(
        review_url, json={"decision": "REJECTED"}, headers=auth_headers(admin)
    )
    assert again.status_code == 409
    assert again.json()["error"]["code"] == "invalid_state"

    gone = await async_client.get(f"{API}/posts/{post.post_id}", headers=auth_headers(author))
    assert gone.status_code == 404

    inbox = await async_client.get(f"{API}/notifications", headers=auth_headers(author))
    assert inbox.status_code == 200
    assert any(item["type"] == "ADMIN_ACTION" for item in inbox.json()["items"])


@pytest.mark.asyncio
async def test_admin_home_feed_is_empty_over_http(
    async_client: AsyncClient, db_session, make_account, make_post, auth_headers
) -> None:
    admin = await make_account("admin", role=AccountRole.ADMIN)
    await make_post(admin)
    await db_session.commit()

    response = await async_client.get(f"{API}/feed/home", headers=auth_headers(admin))

    assert response.status_code == 200
    assert response.json() == {"items": [], "next_cursor": None, "has_more": False}


@pytest.mark.asyncio
async def test_unusable_request_id_is_replaced(async_client: AsyncClient) -> None:
    oversized = "x" * 500
    response = await async_client.get("/health", headers={"X-Request-ID": oversized})

    echoed = response.headers["X-Request-ID"]
    assert echoed != oversized
    assert uuid.UUID(echoed)


@pytest.mark.asyncio
async def test_account_search_and_admin_dashboard(
    async_client: AsyncClient, db_session, make_account, auth_headers
) -> None:
    admin = await make_account("admin", role=AccountRole.ADMIN)
    alice = await make_account("alice")
    await make_account("alicia", visibility=Visibility.PRIVATE)
    await db_session.commit()

    found = await async_client.get(
        f"{API}/accounts/search", params={"q": "ali"}, headers=auth_headers(alice)
    )
    assert found.status_code == 200
    assert [item["username"] for item in found.json()["items"]] == ["alice"]
    assert found.json()["pages"] == 1

    listed = await async_client.get(f"{API}/admin/accounts", headers=auth_headers(admin))
    assert listed.json()["total"] == 3

    denied = await async_client.get(f"{API}/admin/dashboard", headers=auth_headers(alice))
    assert denied.status_code == 403

    stats = await async_client.get(f"{API}/admin/dashboard", headers=auth_headers(admin))
    assert stats.status_code == 200
    assert stats.json()["total_accounts"] == 3
    assert stats.json()["pending_reports"] == 0
