import uuid

import pytest
import sqlalchemy as sa

from app.exceptions import AccountNotFound, AlreadyFollowing, CannotFollowSelf, NotFollowing
from app.follows import service as follows_service
from app.follows.service import (
    FollowStats,
    exists,
    follow,
    following_ids,
    get_stats,
    list_followers,
    list_following,
    unfollow,
)
from app.models.enums import NotificationType
from app.models.notification import Notification


@pytest.mark.asyncio
async def test_follow_creates_directed_edge(db_session, make_account) -> None:
    alice = await make_account("alice")
    bob = await make_account("bob")

    await follow(db_session, alice.id, bob.id)

    assert await exists(db_session, alice.id, bob.id)
    assert not await exists(db_session, bob.id, alice.id)
    assert await following_ids(db_session, alice.id) == [bob.id]


@pytest.mark.asyncio
async def test_follow_notifies_target(db_session, make_account) -> None:
    alice = await make_account("alice")
    bob = await make_account("bob")

    await follow(db_session, alice.id, bob.id)

    notes = (
        await db_session.execute(sa.select(Notification).where(Notification.recipient_id == bob.id))
    ).scalars().all()
    assert len(notes) == 1
    assert notes[0].type == NotificationType.FOLLOW
    assert notes[0].reference_id == alice.id
    assert "alice" in notes[0].body


@pytest.mark.asyncio
async def test_cannot_follow_self(db_session, make_account) -> None:
    alice = await make_account("alice")
    with pytest.raises(CannotFollowSelf):
        await follow(db_session, alice.id, alice.id)


@pytest.mark.asyncio
async def test_duplicate_follow_conflicts(db_session, make_account) -> None:
    alice = await make_account("alice")
    bob = await make_account("bob")
    await follow(db_session, alice.id, bob.id)

    with pytest.raises(AlreadyFollowing):
        await follow(db_session, alice.id, bob.id)


@pytest.mark.asyncio
async def test_unique_pair_catches_follow_that_slipped_past_check(
    db_session, make_account, monkeypatch
) -> None:
    alice = await make_account("alice")
    bob = await make_account("bob")
    await follow(db_session, alice.id, bob.id)

    async def _not_yet(session, follower_id, following_id) -> bool:
        return False

    monkeypatch.setattr(follows_service, "exists", _not_yet)

    with pytest.raises(AlreadyFollowing):
        await follow(db_session, alice.id, bob.id)
    monkeypatch.undo()
    assert await get_stats(db_session, alice.id, bob.id) == FollowStats(
        followers=1, following=0, follows=True, follows_you=False
    )


@pytest.mark.asyncio
async def test_follow_missing_or_inactive_target(db_session, make_account) -> None:
    alice = await make_account("alice")
    ghost = await make_account("ghost", is_active=False)

    with pytest.raises(AccountNotFound):
        await follow(db_session, alice.id, uuid.uuid4())
    with pytest.raises(AccountNotFound):
        await follow(db_session, alice.id, ghost.id)


@pytest.mark.asyncio
async def test_unfollow_removes_edge(db_session, make_account) -> None:
    alice = await make_account("alice")
    bob = await make_account("bob")
    await follow(db_session, alice.id, bob.id)

    await unfollow(db_session, alice.id, bob.id)

    assert not await exists(db_session, alice.id, bob.id)
    with pytest.raises(NotFollowing):
        await unfollow(db_session, alice.id, bob.id)


@pytest.mark.asyncio
async def test_follow_again_after_unfollow(db_session, make_account) -> None:
    alice = await make_account("alice")
    bob = await make_account("bob")
    await follow(db_session, alice.id, bob.id)
    await unfollow(db_session, alice.id, bob.id)

    edge = await follow(db_session, alice.id, bob.id)

    assert edge.follower_id == alice.id
    assert await exists(db_session, alice.id, bob.id)


@pytest.mark.asyncio
async def test_stats_and_lists(db_session, make_account) -> None:
    alice = await make_account("alice")
    bob = await make_account("bob")
    carol = await make_account("carol")
    await follow(db_session, alice.id, bob.id)
    await follow(db_session, carol.id, bob.id)
    await follow(db_session, bob.id, alice.id)

    stats = await get_stats(db_session, viewer_id=alice.id, account_id=bob.id)
    assert stats.followers == 2
    assert stats.following == 1
    assert stats.follows
    assert stats.follows_you

    followers, total = await list_followers(
        db_session, bob.id, viewer_id=alice.id, page=1, size=10
    )
    assert total == 2
    assert {account.username for _, account, _ in followers} == {"alice", "carol"}
    # alice does not follow herself or carol
    assert all(followed is False for _, _, followed in followers)

    following, total = await list_following(
        db_session, alice.id, viewer_id=carol.id, page=1, size=10
    )
    assert total == 1
    assert following[0][1].id == bob.id
    assert following[0][2] is True
