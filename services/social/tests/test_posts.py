import pytest
import sqlalchemy as sa

from app.comments.service import create_comment, delete_comment, list_comments, update_comment
from app.exceptions import NotCommentAuthor, NotPostAuthor, PostNotFound, VisibilityDenied
from app.follows.service import follow
from app.models.audit import AuditEntry
from app.models.enums import AccountRole, ActionType, NotificationType, ReactionKind, Visibility
from app.models.notification import Notification
from app.posts.service import (
    counts_for_posts,
    create_post,
    delete_post,
    get_post,
    list_account_posts,
    update_content,
    update_visibility,
)
from app.reactions.service import react
from app.visibility.policy import Actor


def _actor(account) -> Actor:
    return Actor(id=account.id, role=account.role)


async def _notification_types(db_session, account) -> list[NotificationType]:
    result = await db_session.execute(
        sa.select(Notification.type).where(Notification.recipient_id == account.id)
    )
    return list(result.scalars().all())


# ── Posts ──────────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_only_author_edits_post(db_session, make_account) -> None:
    alice = await make_account("alice")
    bob = await make_account("bob")
    post = await create_post(db_session, alice.id, "draft")

    with pytest.raises(NotPostAuthor):
        await update_content(db_session, _actor(bob), post.post_id, "hijacked")
    with pytest.raises(NotPostAuthor):
        await update_visibility(db_session, _actor(bob), post.post_id, Visibility.PRIVATE)

    edited = await update_content(db_session, _actor(alice), post.post_id, "final")
    assert edited.content == "final"
    hidden = await update_visibility(db_session, _actor(alice), post.post_id, Visibility.PRIVATE)
    assert hidden.visibility == Visibility.PRIVATE
    with pytest.raises(VisibilityDenied):
        await get_post(db_session, _actor(bob), post.post_id)


@pytest.mark.asyncio
async def test_author_delete_is_not_audited(db_session, make_account) -> None:
    alice = await make_account("alice")
    post = await create_post(db_session, alice.id, "bye")

    await delete_post(db_session, _actor(alice), post.post_id)

    with pytest.raises(PostNotFound):
        await get_post(db_session, _actor(alice), post.post_id)
    assert (await db_session.execute(sa.select(AuditEntry))).scalars().all() == []


@pytest.mark.asyncio
async def test_admin_delete_is_audited_and_author_notified(db_session, make_account) -> None:
    alice = await make_account("alice")
    admin = await make_account("admin", role=AccountRole.ADMIN)
    bob = await make_account("bob")
    post = await create_post(db_session, alice.id, "rule breaking")

    with pytest.raises(NotPostAuthor):
        await delete_post(db_session, _actor(bob), post.post_id)

    await delete_post(db_session, _actor(admin), post.post_id)

    entries = (await db_session.execute(sa.select(AuditEntry))).scalars().all()
    assert [e.action for e in entries] == [ActionType.DELETE_POST]
    assert entries[0].affected_account_id == alice.id
    assert await _notification_types(db_session, alice) == [NotificationType.ADMIN_ACTION]


@pytest.mark.asyncio
async def test_account_posts_hide_private_from_strangers(db_session, make_account) -> None:
    alice = await make_account("alice")
    follower = await make_account("follower")
    stranger = await make_account("stranger")
    await follow(db_session, follower.id, alice.id)
    await create_post(db_session, alice.id, "public")
    await create_post(db_session, alice.id, "private", Visibility.PRIVATE)

    _, follower_total = await list_account_posts(
        db_session, _actor(follower), alice.id, limit=10, offset=0
    )
    stranger_posts, stranger_total = await list_account_posts(
        db_session, _actor(stranger), alice.id, limit=10, offset=0
    )

    assert follower_total == 2
    assert stranger_total == 1
    assert stranger_posts[0].content == "public"


@pytest.mark.asyncio
async def test_counts_for_posts(db_session, make_account) -> None:
    alice = await make_account("alice")
    bob = await make_account("bob")
    busy = await create_post(db_session, alice.id, "busy")
    quiet = await create_post(db_session, alice.id, "quiet")
    await create_comment(db_session, _actor(bob), busy.post_id, "one")
    await create_comment(db_session, _actor(bob), busy.post_id, "two")
    await react(db_session, _actor(bob), busy.post_id, ReactionKind.LOVE)

    counts = await counts_for_posts(db_session, [busy.post_id, quiet.post_id])

    assert (counts[busy.post_id].comments, counts[busy.post_id].reactions) == (2, 1)
    assert (counts[quiet.post_id].comments, counts[quiet.post_id].reactions) == (0, 0)


# ── Comments ───────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_comment_notifies_author_unless_self(db_session, make_account) -> None:
    alice = await make_account("alice")
    bob = await make_account("bob")
    post = await create_post(db_session, alice.id, "hello")

    await create_comment(db_session, _actor(alice), post.post_id, "first!")
    assert await _notification_types(db_session, alice) == []

    await create_comment(db_session, _actor(bob), post.post_id, "hi alice")
    assert await _notification_types(db_session, alice) == [NotificationType.COMMENT]

    comments, total = await list_comments(db_session, _actor(bob), post.post_id, limit=10, offset=0)
    assert total == 2
    assert {c.body for c in comments} == {"first!", "hi alice"}


@pytest.mark.asyncio
async def test_cannot_comment_on_hidden_post(db_session, make_account) -> None:
    alice = await make_account("alice")
    stranger = await make_account("stranger")
    post = await create_post(db_session, alice.id, "secret", Visibility.PRIVATE)

    with pytest.raises(VisibilityDenied):
        await create_comment(db_session, _actor(stranger), post.post_id, "let me in")
    with pytest.raises(VisibilityDenied):
        await list_comments(db_session, _actor(stranger), post.post_id, limit=10, offset=0)


@pytest.mark.asyncio
async def test_comment_edit_and_delete_permissions(db_session, make_account) -> None:
    alice = await make_account("alice")
    bob = await make_account("bob")
    admin = await make_account("admin", role=AccountRole.ADMIN)
    post = await create_post(db_session, alice.id, "hello")
    comment = await create_comment(db_session, _actor(bob), post.post_id, "typo")

    with pytest.raises(NotCommentAuthor):
        await update_comment(db_session, _actor(alice), comment.comment_id, "not mine")
    with pytest.raises(NotCommentAuthor):
        await delete_comment(db_session, _actor(alice), comment.comment_id)

    fixed = await update_comment(db_session, _actor(bob), comment.comment_id, "fixed")
    assert fixed.body == "fixed"
    await delete_comment(db_session, _actor(admin), comment.comment_id)
    _, total = await list_comments(db_session, _actor(bob), post.post_id, limit=10, offset=0)
    assert total == 0
