from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CurrentUser(BaseModel):
    """Principal decoded from the access token.

    ``roles`` are the issuer's claims and are informational only; services
    authorise against the roles they store themselves.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: UUID
    email: str = ""
    roles: list[str] = Field(default_factory=list)
