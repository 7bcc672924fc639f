from app.models.account import Account
from app.models.audit import AuditEntry
from app.models.comment import Comment
from app.models.follow import Follow
from app.models.notification import Notification
from app.models.post import Post
from app.models.reaction import Reaction
from app.models.report import Report

__all__ = [
    "Account",
    "AuditEntry",
    "Comment",
    "Follow",
    "Notification",
    "Post",
    "Reaction",
    "Report",
]
