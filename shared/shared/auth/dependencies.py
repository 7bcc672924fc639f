from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from shared.auth.config import AuthSettings, get_auth_settings
from shared.models.user import CurrentUser

http_bearer = HTTPBearer(auto_error=False)


def decode_token(token: str, settings: AuthSettings) -> CurrentUser:
    """Verify signature, expiry, issuer and audience, then map claims to CurrentUser.

    Raises JWTError for bad tokens and ValueError for malformed claims.
    """
    payload = jwt.decode(
        token,
        settings.secret,
        algorithms=[settings.algorithm],
        issuer=settings.issuer,
        audience=settings.audience,
    )
    subject = payload.get("sub")
    if not subject:
        raise ValueError("Missing sub in token")
    return CurrentUser(
        id=UUID(subject),
        email=payload.get("email") or "",
        roles=[str(r) for r in payload.get("roles") or []],
    )


async def get_current_user_optional(
    credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
    settings: AuthSettings = Depends(get_auth_settings),
) -> CurrentUser | None:
    """Return the token's principal, or None when the token is absent or invalid.

    Services decide what an anonymous caller may do and raise their own error.
    """
    if not credentials or not credentials.credentials:
        return None
    try:
        return decode_token(credentials.credentials, settings)
    except (JWTError, ValueError):
        return None
