"""Typed models for the host entities a publication is stored as."""

from typing import Literal

from pydantic import BaseModel, Field


class User(BaseModel):
    """The acting user, credited as creator of everything an import makes."""

    id: int
    username: str


class Collection(BaseModel):
    """A named collection in the host (a category in forum terms)."""

    id: int
    name: str
    owner_id: int
    parent_id: int | None = None
    color: str = "0088CC"
    text_color: str = "FFFFFF"


class PublicationConfig(BaseModel):
    """Configuration stored on a collection that is a publication."""

    enabled: bool = True
    slug: str
    type: str = "book"
    description: str | None = None
    author_ids: list[int] = Field(default_factory=list)
    cover_url: str | None = None


class ChapterConfig(BaseModel):
    """Configuration stored on a collection that is a chapter.

    ``content_thread_id`` is the chapter's single content thread, the
    pinned thread whose first post holds the chapter body.
    """

    enabled: bool = True
    type: str = "chapter"
    number: int
    published: bool = False
    access_level: str = "free"
    word_count: int = 0
    review_status: Literal["approved", "draft"] = "draft"
    content_thread_id: int | None = None


class Thread(BaseModel):
    """A discussion thread under a collection."""

    id: int
    title: str
    collection_id: int
    owner_id: int
    pinned: bool = False


class Post(BaseModel):
    """A message in a thread. ``version`` increases on every revision."""

    id: int
    thread_id: int
    post_number: int
    owner_id: int
    body: str
    version: int = 1
