from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.models.enums import Visibility


class CreatePostRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    content: str = Field(..., min_length=1, max_length=5000, description="Post body.")
    visibility: Visibility = Field(
        Visibility.PUBLIC,
        description="PRIVATE posts are visible to the author, followers and administrators.",
    )


class UpdatePostRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    content: str = Field(..., min_length=1, max_length=5000)


class UpdatePostVisibilityRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    visibility: Visibility


class PostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    post_id: UUID
    author_id: UUID
    content: str
    visibility: Visibility
    created_at: datetime
    updated_at: datetime
    comment_count: int = Field(0, description="Number of comments on the post.")
    reaction_count: int = Field(0, description="Number of reactions on the post.")
