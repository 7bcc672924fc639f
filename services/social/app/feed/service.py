"""
Feed domain — read-only composition of post lists.

Feeds:
- Home feed      : the viewer's own posts (any visibility) plus PUBLIC posts of
                   accounts the viewer follows; created_at DESC, post_id DESC;
                   keyset-paginated. Administrators get an empty feed.
- Public listing : PUBLIC posts by PUBLIC, active accounts other than the
                   viewer; same order, offset-paginated. Used for discovery.

The post_id tie-break keeps the order total when timestamps collide, so a
cursor never skips or repeats a post.
"""
from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.account import Account
from app.models.enums import Visibility
from app.models.follow import Follow
from app.models.post import Post
from app.visibility.policy import Actor

# Hard cap per page regardless of what the client asks for
MAX_PAGE_SIZE = 50


async def get_home_feed(
    actor: Actor,
    db: AsyncSession,
    limit: int = 20,
    cursor_created_at: datetime | None = None,
    cursor_post_id: UUID | None = None,
) -> tuple[list[Post], bool]:
    """Return (page_posts, has_more)."""
    if actor.is_admin:
        return [], False

    limit = min(limit, MAX_PAGE_SIZE)
    followed = select(Follow.following_id).where(Follow.follower_id == actor.id)
    query = select(Post).where(
        or_(
            Post.author_id == actor.id,
            and_(
                Post.author_id.in_(followed),
                Post.visibility == Visibility.PUBLIC,
            ),
        )
    )
    if cursor_created_at is not None and cursor_post_id is not None:
        query = query.where(
            or_(
                Post.created_at < cursor_created_at,
                and_(
                    Post.created_at == cursor_created_at,
                    Post.post_id < cursor_post_id,
                ),
            )
        )

    # Fetch one extra row to know whether another page exists
    rows = await db.execute(
        query.order_by(Post.created_at.desc(), Post.post_id.desc()).limit(limit + 1)
    )
    posts = list(rows.scalars().all())
    has_more = len(posts) > limit
    return posts[:limit], has_more


async def get_public_posts(
    actor: Actor,
    db: AsyncSession,
    limit: int = 20,
    offset: int = 0,
) -> tuple[list[Post], int]:
    base = (
        select(Post)
        .join(Account, Account.id == Post.author_id)
        .where(
            Post.visibility == Visibility.PUBLIC,
            Account.visibility == Visibility.PUBLIC,
            Account.is_active.is_(True),
            Post.author_id != actor.id,
        )
    )
    total = (await db.execute(select(func.count()).select_from(base.subquery()))).scalar_one()
    rows = await db.execute(
        base.order_by(Post.created_at.desc(), Post.post_id.desc()).offset(offset).limit(limit)
    )
    return list(rows.scalars().all()), total
