import uuid

import pytest
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from app.accounts.service import (
    DashboardStats,
    active_admins_for_update,
    change_role,
    dashboard_stats,
    delete_account,
    get_profile,
    list_accounts,
    register_account,
    search_accounts,
    set_active,
    update_visibility,
)
from app.exceptions import (
    AccountAlreadyExists,
    AccountNotFound,
    AdminMustStayPrivate,
    AdminRequired,
    CannotDeactivateAdmin,
    Forbidden,
    LastAdminDeletion,
    LastAdminDemotion,
    UsernameTaken,
)
from app.follows.service import follow
from app.models.account import Account
from app.models.audit import AuditEntry
from app.models.comment import Comment
from app.models.enums import AccountRole, ActionType, ReactionKind, Visibility
from app.models.post import Post
from app.moderation.service import create_report
from app.reactions.service import react
from app.visibility.policy import Actor


def _actor(account) -> Actor:
    return Actor(id=account.id, role=account.role)


async def _audit_actions(db_session) -> list[ActionType]:
    entries = (
        await db_session.execute(sa.select(AuditEntry).order_by(AuditEntry.created_at))
    ).scalars().all()
    return [e.action for e in entries]


@pytest.mark.asyncio
async def test_register_account(db_session) -> None:
    identity = uuid.uuid4()
    account = await register_account(db_session, identity, "Alice", "Alice A.")

    assert account.id == identity
    assert account.role == AccountRole.USER
    assert account.visibility == Visibility.PUBLIC

    with pytest.raises(AccountAlreadyExists):
        await register_account(db_session, identity, "other", "Other")
    with pytest.raises(UsernameTaken):
        await register_account(db_session, uuid.uuid4(), "alice", "Case clash")


@pytest.mark.asyncio
async def test_inactive_profile_is_hidden(db_session, make_account) -> None:
    ghost = await make_account("ghost", is_active=False)
    with pytest.raises(AccountNotFound):
        await get_profile(db_session, ghost.id)


@pytest.mark.asyncio
async def test_promotion_forces_private_and_is_audited(db_session, make_account) -> None:
    admin = await make_account("root", role=AccountRole.ADMIN)
    user = await make_account("alice", visibility=Visibility.PUBLIC)

    promoted = await change_role(db_session, _actor(admin), user.id, AccountRole.ADMIN)

    assert promoted.role == AccountRole.ADMIN
    assert promoted.visibility == Visibility.PRIVATE
    assert await _audit_actions(db_session) == [ActionType.CREATE_ADMIN]

    with pytest.raises(AdminMustStayPrivate):
        await update_visibility(db_session, promoted, Visibility.PUBLIC)


@pytest.mark.asyncio
async def test_last_admin_cannot_be_demoted_or_deleted(db_session, make_account) -> None:
    admin = await make_account("root", role=AccountRole.ADMIN)

    with pytest.raises(LastAdminDemotion):
        await change_role(db_session, _actor(admin), admin.id, AccountRole.USER)
    with pytest.raises(LastAdminDeletion):
        await delete_account(db_session, _actor(admin), admin.id)


def test_last_admin_guard_locks_the_admin_rows() -> None:
    sql = str(active_admins_for_update().compile(dialect=postgresql.dialect()))
    assert sql.rstrip().endswith("FOR UPDATE")


@pytest.mark.asyncio
async def test_admins_deleting_each_other_leave_one_behind(db_session, make_account) -> None:
    first = await make_account("first", role=AccountRole.ADMIN)
    second = await make_account("second", role=AccountRole.ADMIN)
    first_actor, second_actor = _actor(first), _actor(second)

    await delete_account(db_session, first_actor, second.id)

    with pytest.raises(LastAdminDeletion):
        await delete_account(db_session, second_actor, first.id)
    assert await db_session.get(Account, first.id) is not None


@pytest.mark.asyncio
async def test_demotion_allowed_when_another_admin_remains(db_session, make_account) -> None:
    root = await make_account("root", role=AccountRole.ADMIN)
    other = await make_account("other", role=AccountRole.ADMIN)

    demoted = await change_role(db_session, _actor(root), other.id, AccountRole.USER)

    assert demoted.role == AccountRole.USER
    assert await _audit_actions(db_session) == [ActionType.UPDATE_USER]


@pytest.mark.asyncio
async def test_admin_actions_require_admin(db_session, make_account) -> None:
    alice = await make_account("alice")
    bob = await make_account("bob")

    with pytest.raises(AdminRequired):
        await change_role(db_session, _actor(alice), bob.id, AccountRole.ADMIN)
    with pytest.raises(AdminRequired):
        await set_active(db_session, _actor(alice), bob.id, False)
    with pytest.raises(Forbidden):
        await delete_account(db_session, _actor(alice), bob.id)


@pytest.mark.asyncio
async def test_deactivation(db_session, make_account) -> None:
    root = await make_account("root", role=AccountRole.ADMIN)
    other_admin = await make_account("other", role=AccountRole.ADMIN)
    user = await make_account("alice")

    with pytest.raises(CannotDeactivateAdmin):
        await set_active(db_session, _actor(root), other_admin.id, False)

    updated = await set_active(db_session, _actor(root), user.id, False)
    assert updated.is_active is False
    assert await _audit_actions(db_session) == [ActionType.DEACTIVATE_USER]


@pytest.mark.asyncio
async def test_admin_deletes_account_and_everything_it_owns(
    db_session, make_account, make_post
) -> None:
    root = await make_account("root", role=AccountRole.ADMIN)
    victim = await make_account("victim")
    friend = await make_account("friend")
    victim_post = await make_post(victim)
    friend_post = await make_post(friend)
    db_session.add(Comment(post_id=victim_post.post_id, author_id=friend.id, body="hi"))
    db_session.add(Comment(post_id=friend_post.post_id, author_id=victim.id, body="yo"))
    await db_session.flush()
    await react(db_session, _actor(victim), friend_post.post_id, ReactionKind.LIKE)
    await follow(db_session, victim.id, friend.id)
    await follow(db_session, friend.id, victim.id)

    await delete_account(db_session, _actor(root), victim.id)

    assert await db_session.get(Account, victim.id) is None
    remaining_posts = (await db_session.execute(sa.select(Post.post_id))).scalars().all()
    assert remaining_posts == [friend_post.post_id]
    comments = (await db_session.execute(sa.select(Comment))).scalars().all()
    assert comments == []
    assert await _audit_actions(db_session) == [ActionType.DELETE_USER]


@pytest.mark.asyncio
async def test_self_deletion_is_not_audited(db_session, make_account, make_post) -> None:
    alice = await make_account("alice")
    await make_post(alice)

    await delete_account(db_session, _actor(alice), alice.id)

    assert await db_session.get(Account, alice.id) is None
    assert await _audit_actions(db_session) == []


# ── Discovery and admin listings ───────────────────────────────────────────────

@pytest.mark.asyncio
async def test_search_only_finds_public_active_accounts_for_users(
    db_session, make_account
) -> None:
    await make_account("alice")
    await make_account("alina", visibility=Visibility.PRIVATE)
    await make_account("aldo", is_active=False)
    admin = await make_account("root", role=AccountRole.ADMIN)
    bob = await make_account("bob")
    await register_account(db_session, uuid.uuid4(), "zed", "Al Zed")

    found, total = await search_accounts(db_session, _actor(bob), "AL", page=1, size=10)
    assert total == 2
    assert [a.username for a in found] == ["alice", "zed"]

    everyone, admin_total = await search_accounts(
        db_session, _actor(admin), "al", page=1, size=10
    )
    assert admin_total == 4
    assert [a.username for a in everyone] == ["aldo", "alice", "alina", "zed"]

    _, wildcard_total = await search_accounts(db_session, _actor(admin), "%", page=1, size=10)
    assert wildcard_total == 0


@pytest.mark.asyncio
async def test_list_accounts_filters(db_session, make_account) -> None:
    root = await make_account("root", role=AccountRole.ADMIN)
    alice = await make_account("alice")
    await make_account("ghost", is_active=False)

    with pytest.raises(AdminRequired):
        await list_accounts(db_session, _actor(alice), page=1, size=10)

    _, total = await list_accounts(db_session, _actor(root), page=1, size=10)
    inactive, _ = await list_accounts(db_session, _actor(root), page=1, size=10, is_active=False)
    admins, _ = await list_accounts(
        db_session, _actor(root), page=1, size=10, role=AccountRole.ADMIN
    )
    matched, _ = await list_accounts(db_session, _actor(root), page=1, size=10, search="ali")

    assert total == 3
    assert [a.username for a in inactive] == ["ghost"]
    assert [a.username for a in admins] == ["root"]
    assert [a.username for a in matched] == ["alice"]


@pytest.mark.asyncio
async def test_dashboard_stats(db_session, make_account, make_post) -> None:
    root = await make_account("root", role=AccountRole.ADMIN)
    alice = await make_account("alice")
    bob = await make_account("bob")
    await make_account("ghost", is_active=False)
    reported = await make_post(alice)
    await make_post(alice, content="second")
    await create_report(db_session, _actor(bob), reported.post_id, "spam")

    with pytest.raises(AdminRequired):
        await dashboard_stats(db_session, _actor(alice))

    assert await dashboard_stats(db_session, _actor(root)) == DashboardStats(
        total_accounts=4,
        active_accounts=3,
        inactive_accounts=1,
        total_posts=2,
        pending_reports=1,
        resolved_reports=0,
        rejected_reports=0,
    )
