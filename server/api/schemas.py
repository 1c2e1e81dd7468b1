# server/api/schemas.py

from datetime import datetime
from typing import Annotated
from pydantic import BaseModel, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel
from models.user import USERNAME_MAX_LENGTH


Username = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=USERNAME_MAX_LENGTH)]
Password = Annotated[str, StringConstraints(min_length=1, max_length=128)]


# -------------------------------
# Request bodies
# -------------------------------

class CredentialsRequest(BaseModel):
    username: Username
    password: Password


class LoginRequest(BaseModel):
    # no length rules here: any unknown name must fail as bad credentials
    username: Annotated[str, StringConstraints(strip_whitespace=True)]
    password: str


class ProfileUpdateRequest(BaseModel):
    username: Username


class CommentRequest(BaseModel):
    text: str


# -------------------------------
# Auth responses
# -------------------------------

class PublicUser(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str


class Token(BaseModel):
    token: str
    access_token: str
    token_type: str
    user: PublicUser


class ProfileResponse(BaseModel):
    user: PublicUser


# -------------------------------
# Feed responses (camelCase on the wire)
# -------------------------------

class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class CommentRecord(CamelModel):
    id: int
    image_id: int
    text: str
    author_id: int
    created_at: datetime
    author: PublicUser


class ImageRecord(CamelModel):
    id: int
    filename: str
    original_name: str | None = None
    url: str
    description: str | None = None
    likes: int
    uploader_id: int
    created_at: datetime
    uploader: PublicUser
    comments: list[CommentRecord] = []


class PaginationInfo(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


class FeedResponse(CamelModel):
    data: list[ImageRecord]
    pagination: PaginationInfo
