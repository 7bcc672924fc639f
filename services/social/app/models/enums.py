import enum

import sqlalchemy as sa


class AccountRole(str, enum.Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class Visibility(str, enum.Enum):
    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"


class ReactionKind(str, enum.Enum):
    LIKE = "LIKE"
    LOVE = "LOVE"
    HAHA = "HAHA"
    WOW = "WOW"
    SAD = "SAD"


class ReportStatus(str, enum.Enum):
    PENDING = "PENDING"
    RESOLVED = "RESOLVED"      # Post removed together with its comments and reactions
    REJECTED = "REJECTED"      # No content mutation


class NotificationType(str, enum.Enum):
    COMMENT = "COMMENT"
    REACTION = "REACTION"
    FOLLOW = "FOLLOW"
    REPORT = "REPORT"
    ADMIN_ACTION = "ADMIN_ACTION"


class ActionType(str, enum.Enum):
    ACTIVATE_USER = "ACTIVATE_USER"
    DEACTIVATE_USER = "DEACTIVATE_USER"
    UPDATE_USER = "UPDATE_USER"
    DELETE_USER = "DELETE_USER"
    DELETE_POST = "DELETE_POST"
    RESOLVE_REPORT = "RESOLVE_REPORT"
    REJECT_REPORT = "REJECT_REPORT"
    CREATE_ADMIN = "CREATE_ADMIN"
    DELETE_ADMIN = "DELETE_ADMIN"


def enum_column(enum_cls: type[enum.Enum], name: str) -> sa.Enum:
    """Named SQL enum storing member values (native ENUM on PostgreSQL)."""
    return sa.Enum(
        enum_cls,
        name=name,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )
