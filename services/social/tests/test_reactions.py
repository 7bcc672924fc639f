import uuid

import pytest
import sqlalchemy as sa

from app.exceptions import PostNotFound, ReactionNotFound, ReactionRace, VisibilityDenied
from app.models.enums import NotificationType, ReactionKind, Visibility
from app.models.notification import Notification
from app.models.reaction import Reaction
from app.reactions import service as reactions_service
from app.reactions.service import (
    ReactionOutcome,
    my_reaction,
    react,
    remove_reaction,
    summary,
)
from app.visibility.policy import Actor


async def _reaction_rows(db_session, post_id) -> list[Reaction]:
    result = await db_session.execute(sa.select(Reaction).where(Reaction.post_id == post_id))
    return list(result.scalars().all())


async def _notifications_for(db_session, account_id) -> list[Notification]:
    result = await db_session.execute(
        sa.select(Notification).where(Notification.recipient_id == account_id)
    )
    return list(result.scalars().all())


@pytest.mark.asyncio
async def test_first_reaction_is_created_and_notifies_author(
    db_session, make_account, make_post
) -> None:
    author = await make_account("alice")
    reactor = await make_account("bob")
    post = await make_post(author)

    result = await react(db_session, Actor(id=reactor.id), post.post_id, ReactionKind.LIKE)

    assert result.outcome == ReactionOutcome.CREATED
    assert result.reaction.kind == ReactionKind.LIKE
    notes = await _notifications_for(db_session, author.id)
    assert [n.type for n in notes] == [NotificationType.REACTION]


@pytest.mark.asyncio
async def test_same_kind_twice_nets_to_no_reaction(db_session, make_account, make_post) -> None:
    author = await make_account("alice")
    reactor = await make_account("bob")
    post = await make_post(author)
    actor = Actor(id=reactor.id)

    await react(db_session, actor, post.post_id, ReactionKind.LOVE)
    result = await react(db_session, actor, post.post_id, ReactionKind.LOVE)

    assert result.outcome == ReactionOutcome.REMOVED
    assert result.reaction is None
    assert await _reaction_rows(db_session, post.post_id) == []
    # Removal sends nothing further
    assert len(await _notifications_for(db_session, author.id)) == 1


@pytest.mark.asyncio
async def test_unique_pair_catches_concurrent_first_reaction(
    db_session, make_account, make_post, monkeypatch
) -> None:
    author = await make_account("alice")
    reactor = await make_account("bob")
    post = await make_post(author)
    actor = Actor(id=reactor.id)
    await react(db_session, actor, post.post_id, ReactionKind.LIKE)

    async def _none_yet(session, account_id, post_id):
        return None

    monkeypatch.setattr(reactions_service, "_find", _none_yet)

    with pytest.raises(ReactionRace):
        await react(db_session, actor, post.post_id, ReactionKind.SAD)
    rows = await _reaction_rows(db_session, post.post_id)
    assert [r.kind for r in rows] == [ReactionKind.LIKE]


@pytest.mark.asyncio
async def test_other_kind_replaces_in_place(db_session, make_account, make_post) -> None:
    author = await make_account("alice")
    reactor = await make_account("bob")
    post = await make_post(author)
    actor = Actor(id=reactor.id)

    first = await react(db_session, actor, post.post_id, ReactionKind.LIKE)
    second = await react(db_session, actor, post.post_id, ReactionKind.WOW)

    assert second.outcome == ReactionOutcome.REPLACED
    assert second.reaction.reaction_id == first.reaction.reaction_id
    rows = await _reaction_rows(db_session, post.post_id)
    assert len(rows) == 1
    assert rows[0].kind == ReactionKind.WOW
    assert len(await _notifications_for(db_session, author.id)) == 1


@pytest.mark.asyncio
async def test_reacting_to_own_post_does_not_notify(db_session, make_account, make_post) -> None:
    author = await make_account("alice")
    post = await make_post(author)

    result = await react(db_session, Actor(id=author.id), post.post_id, ReactionKind.HAHA)

    assert result.outcome == ReactionOutcome.CREATED
    assert await _notifications_for(db_session, author.id) == []


@pytest.mark.asyncio
async def test_cannot_react_to_hidden_post(db_session, make_account, make_post) -> None:
    author = await make_account("alice")
    stranger = await make_account("bob")
    post = await make_post(author, visibility=Visibility.PRIVATE)

    with pytest.raises(VisibilityDenied):
        await react(db_session, Actor(id=stranger.id), post.post_id, ReactionKind.LIKE)
    assert await _reaction_rows(db_session, post.post_id) == []


@pytest.mark.asyncio
async def test_react_to_missing_post(db_session, make_account) -> None:
    reactor = await make_account("bob")
    with pytest.raises(PostNotFound):
        await react(db_session, Actor(id=reactor.id), uuid.uuid4(), ReactionKind.LIKE)


@pytest.mark.asyncio
async def test_remove_and_summary(db_session, make_account, make_post) -> None:
    author = await make_account("alice")
    bob = await make_account("bob")
    carol = await make_account("carol")
    post = await make_post(author)

    await react(db_session, Actor(id=bob.id), post.post_id, ReactionKind.LIKE)
    await react(db_session, Actor(id=carol.id), post.post_id, ReactionKind.LIKE)

    counts = await summary(db_session, Actor(id=author.id), post.post_id)
    assert counts[ReactionKind.LIKE] == 2
    assert counts[ReactionKind.SAD] == 0
    assert set(counts) == set(ReactionKind)

    await remove_reaction(db_session, Actor(id=bob.id), post.post_id)
    assert await my_reaction(db_session, Actor(id=bob.id), post.post_id) is None
    with pytest.raises(ReactionNotFound):
        await remove_reaction(db_session, Actor(id=bob.id), post.post_id)
