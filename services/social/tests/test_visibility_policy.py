import uuid

import pytest

from app.exceptions import VisibilityDenied
from app.follows.service import follow
from app.models.enums import AccountRole, Visibility
from app.visibility.policy import (
    Actor,
    Decision,
    can_interact,
    can_see_private_posts_of,
    can_view,
    decide,
    ensure_can_interact,
    ensure_can_view,
    needs_follow_edge,
)

AUTHOR = uuid.uuid4()


def test_author_sees_own_private_post() -> None:
    actor = Actor(id=AUTHOR)
    assert decide(AUTHOR, Visibility.PRIVATE, actor, follows_author=False) == Decision.ALLOW


def test_admin_sees_private_post_without_following() -> None:
    admin = Actor(id=uuid.uuid4(), role=AccountRole.ADMIN)
    assert decide(AUTHOR, Visibility.PRIVATE, admin, follows_author=False) == Decision.ALLOW


def test_anyone_sees_public_post() -> None:
    stranger = Actor(id=uuid.uuid4())
    assert decide(AUTHOR, Visibility.PUBLIC, stranger, follows_author=False) == Decision.ALLOW


def test_follower_sees_private_post() -> None:
    follower = Actor(id=uuid.uuid4())
    assert decide(AUTHOR, Visibility.PRIVATE, follower, follows_author=True) == Decision.ALLOW


def test_stranger_denied_private_post() -> None:
    stranger = Actor(id=uuid.uuid4())
    assert decide(AUTHOR, Visibility.PRIVATE, stranger, follows_author=False) == Decision.DENY


def test_follow_edge_only_consulted_for_private_posts_of_others() -> None:
    stranger = Actor(id=uuid.uuid4())
    assert needs_follow_edge(AUTHOR, Visibility.PRIVATE, stranger) is True
    assert needs_follow_edge(AUTHOR, Visibility.PUBLIC, stranger) is False
    assert needs_follow_edge(AUTHOR, Visibility.PRIVATE, Actor(id=AUTHOR)) is False
    admin = Actor(id=uuid.uuid4(), role=AccountRole.ADMIN)
    assert needs_follow_edge(AUTHOR, Visibility.PRIVATE, admin) is False


@pytest.mark.asyncio
async def test_private_post_visible_only_after_following(
    db_session, make_account, make_post
) -> None:
    author = await make_account("alice")
    viewer = await make_account("bob")
    post = await make_post(author, visibility=Visibility.PRIVATE)
    actor = Actor(id=viewer.id)

    assert await can_view(db_session, post, actor) is False
    assert await can_interact(db_session, post, actor) is False

    await follow(db_session, viewer.id, author.id)

    assert await can_view(db_session, post, actor) is True
    assert await can_interact(db_session, post, actor) is True


@pytest.mark.asyncio
async def test_author_following_viewer_does_not_grant_access(
    db_session, make_account, make_post
) -> None:
    author = await make_account("alice")
    viewer = await make_account("bob")
    post = await make_post(author, visibility=Visibility.PRIVATE)
    await follow(db_session, author.id, viewer.id)

    assert await can_view(db_session, post, Actor(id=viewer.id)) is False


@pytest.mark.asyncio
async def test_public_post_of_private_account_is_viewable(
    db_session, make_account, make_post
) -> None:
    author = await make_account("alice", visibility=Visibility.PRIVATE)
    stranger = await make_account("bob")
    post = await make_post(author, visibility=Visibility.PUBLIC)

    assert await can_view(db_session, post, Actor(id=stranger.id)) is True


@pytest.mark.asyncio
async def test_ensure_helpers_raise_visibility_denied(db_session, make_account, make_post) -> None:
    author = await make_account("alice")
    stranger = await make_account("bob")
    post = await make_post(author, visibility=Visibility.PRIVATE)
    actor = Actor(id=stranger.id)

    with pytest.raises(VisibilityDenied):
        await ensure_can_view(db_session, post, actor)
    with pytest.raises(VisibilityDenied):
        await ensure_can_interact(db_session, post, actor)


@pytest.mark.asyncio
async def test_can_see_private_posts_of(db_session, make_account) -> None:
    author = await make_account("alice")
    follower = await make_account("bob")
    stranger = await make_account("carol")
    await follow(db_session, follower.id, author.id)

    assert await can_see_private_posts_of(db_session, author.id, Actor(id=author.id))
    assert await can_see_private_posts_of(db_session, author.id, Actor(id=follower.id))
    assert not await can_see_private_posts_of(db_session, author.id, Actor(id=stranger.id))
