import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import BaseModel
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy.exc import InterfaceError, OperationalError

from app.accounts.admin_router import router as accounts_admin_router
from app.accounts.router import router as accounts_router
from app.audit.admin_router import router as audit_admin_router
from app.comments.router import router as comments_router
from app.config import get_settings
from app.database import init_db
from app.exceptions import SocialError, StorageUnavailable
from app.feed.router import router as feed_router
from app.follows.router import router as follows_router
from app.moderation.admin_router import router as moderation_admin_router
from app.moderation.router import router as moderation_router
from app.notifications.router import router as notifications_router
from app.posts.router import router as posts_router
from app.rate_limit import limiter
from app.reactions.router import router as reactions_router
from shared.middleware.error_handler import domain_exception_handler, error_envelope_middleware
from shared.middleware.request_id import request_id_middleware

logger = logging.getLogger(__name__)


# ── OpenAPI metadata ──────────────────────────────────────────────────────────

_DESCRIPTION = """
## Social Core Service

Owns the social graph, posts and their interactions, feeds, and moderation:

* **Visibility** — one rule decides who may see, comment on or react to a post:
  its author, administrators, anyone for PUBLIC posts, and followers of the author
  for PRIVATE posts.
* **Follows** — directed follow edges, unique per pair, never self-referential.
* **Feed** — your posts plus PUBLIC posts of accounts you follow, newest first,
  cursor-paginated. A separate public listing serves discovery.
* **Reactions** — one per account and post; sending the same kind twice removes it.
* **Moderation** — report → review (RESOLVED / REJECTED, once). Resolution removes the
  post with its comments and reactions in a single transaction, audited and notified.

### Authentication
All endpoints require:
```
Authorization: Bearer <access_token>
```
The account is provisioned once with `POST /api/v1/accounts`. Roles are read from
this service's storage; admin endpoints require the `ADMIN` role.

### Error shape
```json
{ "error": { "code": "visibility_denied", "message": "..." }, "request_id": "..." }
```
Codes: `not_found`, `visibility_denied`, `forbidden`, `conflict`, `invalid_operation`,
`invalid_state`, `cascade_failure`, `storage_unavailable`, `unauthenticated`.
"""

_TAGS_METADATA = [
    {"name": "accounts", "description": "Profile provisioning, visibility and deletion."},
    {"name": "follows", "description": "Follow / unfollow, follower lists and stats."},
    {"name": "Posts", "description": "Create, read, edit and delete posts."},
    {"name": "Comments", "description": "Comments on posts. Rate limit: 5/min."},
    {"name": "Reactions", "description": "Reaction toggle and per-kind summaries."},
    {"name": "Feed", "description": "Home feed (cursor) and public discovery listing."},
    {"name": "moderation", "description": "Report posts and follow your reports."},
    {"name": "Notifications", "description": "Inbox, unread counts and read state."},
    {
        "name": "admin-moderation",
        "description": "**Admin only.** Review queue, decisions and report statistics.",
    },
    {"name": "admin-accounts", "description": "**Admin only.** Roles, activation, deletion."},
    {"name": "admin-audit", "description": "**Admin only.** Read the append-only audit log."},
    {"name": "health", "description": "Liveness probe."},
]


# ── Health schema ─────────────────────────────────────────────────────────────

class HealthResponse(BaseModel):
    status: str
    service: str


# ── Error handlers ────────────────────────────────────────────────────────────

async def storage_error_handler(request: Request, exc: Exception) -> Response:
    logger.warning("Storage unavailable: %s", exc)
    return await domain_exception_handler(request, StorageUnavailable())


# ── App factory ───────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    init_db(settings.social_database_url)
    yield


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title="Social Core Service",
        version="1.0.0",
        description=_DESCRIPTION,
        openapi_tags=_TAGS_METADATA,
        docs_url=None if settings.env_name == "production" else "/docs",
        redoc_url=None if settings.env_name == "production" else "/redoc",
        lifespan=lifespan,
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(SocialError, domain_exception_handler)
    app.add_exception_handler(OperationalError, storage_error_handler)
    app.add_exception_handler(InterfaceError, storage_error_handler)

    # Middleware is applied in reverse-registration order (last added = outermost).
    # CORS must be outermost so ALL responses (including 429s) carry CORS headers.
    app.add_middleware(SlowAPIMiddleware)
    app.middleware("http")(request_id_middleware)
    app.middleware("http")(error_envelope_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=600,
    )

    app.include_router(accounts_router, prefix="/api/v1")
    app.include_router(follows_router, prefix="/api/v1")
    app.include_router(posts_router, prefix="/api/v1")
    app.include_router(comments_router, prefix="/api/v1")
    app.include_router(reactions_router, prefix="/api/v1")
    app.include_router(feed_router, prefix="/api/v1")
    app.include_router(moderation_router, prefix="/api/v1")
    app.include_router(notifications_router, prefix="/api/v1")
    app.include_router(moderation_admin_router, prefix="/api/v1")
    app.include_router(accounts_admin_router, prefix="/api/v1")
    app.include_router(audit_admin_router, prefix="/api/v1")

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        """Lightweight liveness probe. Does not hit the database."""
        return HealthResponse(status="ok", service="social")

    return app


app = create_app()
