"""
Social service — domain-specific HTTP exceptions.

Every business outcome maps to one error family with a preset status, a stable
machine-readable ``code`` and a default message, so callers never specify
these at the call site.  ``domain_exception_handler`` (shared middleware) renders
them into the standard error envelope.
"""
from fastapi import HTTPException, status


class SocialError(HTTPException):
    code: str = "error"
    status_code: int = status.HTTP_400_BAD_REQUEST
    message: str = "Request failed."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            status_code=type(self).status_code,
            detail=message or self.message,
        )


# ── Taxonomy ──────────────────────────────────────────────────────────────────

class NotFound(SocialError):
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND
    message = "Resource not found."


class VisibilityDenied(SocialError):
    """The visibility policy refused access to a piece of content."""

    code = "visibility_denied"
    status_code = status.HTTP_403_FORBIDDEN
    message = "You do not have access to this content."


class Forbidden(SocialError):
    """Role or ownership check failed."""

    code = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN
    message = "You are not allowed to perform this action."


class Conflict(SocialError):
    code = "conflict"
    status_code = status.HTTP_409_CONFLICT
    message = "The resource already exists."


class InvalidOperation(SocialError):
    code = "invalid_operation"
    status_code = 422
    message = "This operation is not allowed."


class InvalidState(SocialError):
    code = "invalid_state"
    status_code = status.HTTP_409_CONFLICT
    message = "The resource is not in a state that allows this operation."


class CascadeFailure(SocialError):
    """Content removal did not verify complete; the transaction is rolled back."""

    code = "cascade_failure"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Content removal could not be completed."


class StorageUnavailable(SocialError):
    code = "storage_unavailable"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    message = "Storage is temporarily unavailable. Please retry."


class Unauthenticated(SocialError):
    code = "unauthenticated"
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Not authenticated."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message)
        self.headers = {"WWW-Authenticate": "Bearer"}


# ── Accounts ──────────────────────────────────────────────────────────────────

class AccountNotFound(NotFound):
    message = "Account not found."


class AccountInactive(Forbidden):
    message = "This account has been deactivated."


class AccountAlreadyExists(Conflict):
    message = "An account already exists for this identity."


class UsernameTaken(Conflict):
    message = "This username is already taken."


class AdminMustStayPrivate(InvalidOperation):
    message = "Administrator accounts must remain private."


class CannotDeactivateAdmin(InvalidOperation):
    message = "Administrator accounts cannot be deactivated."


class LastAdminDemotion(InvalidOperation):
    message = "At least one active administrator must remain."


class LastAdminDeletion(Forbidden):
    message = "The last active administrator cannot be deleted."


class AdminRequired(Forbidden):
    message = "Administrator access required."


# ── Follow graph ──────────────────────────────────────────────────────────────

class CannotFollowSelf(InvalidOperation):
    message = "You cannot follow yourself."


class AlreadyFollowing(Conflict):
    message = "You are already following this account."


class NotFollowing(NotFound):
    message = "You are not following this account."


# ── Content ───────────────────────────────────────────────────────────────────

class PostNotFound(NotFound):
    message = "Post not found."


class CommentNotFound(NotFound):
    message = "Comment not found."


class NotPostAuthor(Forbidden):
    message = "Only the author can modify this post."


class NotCommentAuthor(Forbidden):
    message = "Only the author can modify this comment."


class ReactionNotFound(NotFound):
    message = "You have not reacted to this post."


class ReactionRace(Conflict):
    message = "A reaction for this post was recorded concurrently. Please retry."


# ── Moderation ────────────────────────────────────────────────────────────────

class ReportNotFound(NotFound):
    message = "Report not found."


class CannotReportOwnPost(InvalidOperation):
    message = "You cannot report your own post."


class AlreadyReported(Conflict):
    message = "You have already reported this post."


class ReportAlreadyReviewed(InvalidState):
    message = "This report has already been reviewed."


# ── Notifications ─────────────────────────────────────────────────────────────

class NotificationNotFound(NotFound):
    message = "Notification not found."


class NotNotificationRecipient(Forbidden):
    message = "This notification belongs to another account."
