"""In-memory host store with nested, snapshot-based transactions."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from pydantic import BaseModel, Field

from bookclub_import.exceptions import StoreError
from bookclub_import.models.publication import (
    ChapterConfig,
    Collection,
    Post,
    PublicationConfig,
    Thread,
    User,
)
from bookclub_import.store.ports import CollectionStore, ThreadStore

log = logging.getLogger(__name__)

MAX_COLLECTION_NAME_LENGTH = 50
MAX_THREAD_TITLE_LENGTH = 255


class StoreState(BaseModel):
    """Everything the store holds. Copied whole for each transaction."""

    collections: dict[int, Collection] = Field(default_factory=dict)
    publication_configs: dict[int, PublicationConfig] = Field(default_factory=dict)
    chapter_configs: dict[int, ChapterConfig] = Field(default_factory=dict)
    threads: dict[int, Thread] = Field(default_factory=dict)
    posts: dict[int, Post] = Field(default_factory=dict)
    last_id: int = 0


class InMemoryStore(CollectionStore, ThreadStore):
    """Host store kept in memory.

    Applies the same name rules the forum does, so imports fail here the
    way they would on the host.
    """

    def __init__(self, state: StoreState | None = None):
        self.state = state or StoreState()
        self._depth = 0

    # -- Transactions --------------------------------------------------------

    @contextmanager
    def transaction(self) -> Iterator[None]:
        snapshot = self.state.model_copy(deep=True)
        self._depth += 1
        try:
            yield
        except BaseException:
            self.state = snapshot
            log.debug(f"Rolled back transaction at depth {self._depth}")
            raise
        else:
            if self._depth == 1:
                self._commit()
        finally:
            self._depth -= 1

    def _commit(self) -> None:
        """Called when the outermost transaction succeeds."""

    def _next_id(self) -> int:
        self.state.last_id += 1
        return self.state.last_id

    # -- Collections ---------------------------------------------------------

    def find_collection(self, collection_id: int) -> Collection | None:
        return self.state.collections.get(collection_id)

    def create_collection(
        self,
        name: str,
        owner: User,
        parent: Collection | None = None,
        color: str | None = None,
        text_color: str | None = None,
    ) -> Collection:
        name = name.strip()
        if not name:
            raise StoreError("Name can't be blank")
        if len(name) > MAX_COLLECTION_NAME_LENGTH:
            raise StoreError(
                f"Name is too long (maximum is {MAX_COLLECTION_NAME_LENGTH} characters)"
            )

        parent_id = parent.id if parent else None
        for existing in self.state.collections.values():
            if existing.parent_id == parent_id and existing.name.lower() == name.lower():
                raise StoreError("Name has already been taken")

        style = {}
        if color:
            style["color"] = color
        if text_color:
            style["text_color"] = text_color

        collection = Collection(
            id=self._next_id(),
            name=name,
            owner_id=owner.id,
            parent_id=parent_id,
            **style,
        )
        self.state.collections[collection.id] = collection
        return collection

    def list_children(self, collection: Collection) -> list[Collection]:
        return [
            child
            for child in self.state.collections.values()
            if child.parent_id == collection.id
        ]

    def get_publication_config(self, collection: Collection) -> PublicationConfig | None:
        return self.state.publication_configs.get(collection.id)

    def save_publication_config(
        self, collection: Collection, config: PublicationConfig
    ) -> None:
        self._require_collection(collection)
        self.state.publication_configs[collection.id] = config.model_copy()

    def find_publication_by_slug(self, slug: str) -> Collection | None:
        for collection_id, config in self.state.publication_configs.items():
            if config.slug == slug:
                return self.state.collections.get(collection_id)
        return None

    def list_publications(self) -> list[tuple[Collection, PublicationConfig]]:
        return [
            (self.state.collections[collection_id], config)
            for collection_id, config in self.state.publication_configs.items()
            if collection_id in self.state.collections
        ]

    def get_chapter_config(self, collection: Collection) -> ChapterConfig | None:
        return self.state.chapter_configs.get(collection.id)

    def save_chapter_config(self, collection: Collection, config: ChapterConfig) -> None:
        self._require_collection(collection)
        self.state.chapter_configs[collection.id] = config.model_copy()

    def _require_collection(self, collection: Collection) -> None:
        if collection.id not in self.state.collections:
            raise StoreError(f"Collection {collection.id} does not exist")

    # -- Threads and posts ---------------------------------------------------

    def find_thread(self, thread_id: int) -> Thread | None:
        return self.state.threads.get(thread_id)

    def create_thread(
        self, title: str, owner: User, collection: Collection, pinned: bool = False
    ) -> Thread:
        title = title.strip()
        if not title:
            raise StoreError("Title can't be blank")
        if len(title) > MAX_THREAD_TITLE_LENGTH:
            raise StoreError(
                f"Title is too long (maximum is {MAX_THREAD_TITLE_LENGTH} characters)"
            )
        self._require_collection(collection)

        thread = Thread(
            id=self._next_id(),
            title=title,
            collection_id=collection.id,
            owner_id=owner.id,
            pinned=pinned,
        )
        self.state.threads[thread.id] = thread
        return thread

    def create_first_post(self, thread: Thread, owner: User, body: str) -> Post:
        if thread.id not in self.state.threads:
            raise StoreError(f"Thread {thread.id} does not exist")
        if self.first_post(thread) is not None:
            raise StoreError(f"Thread {thread.id} already has a first post")

        post = Post(
            id=self._next_id(),
            thread_id=thread.id,
            post_number=1,
            owner_id=owner.id,
            body=body,
        )
        self.state.posts[post.id] = post
        return post

    def first_post(self, thread: Thread) -> Post | None:
        posts = [p for p in self.state.posts.values() if p.thread_id == thread.id]
        return min(posts, key=lambda p: p.post_number) if posts else None

    def revise_post(self, post: Post, owner: User, body: str) -> Post:
        current = self.state.posts.get(post.id)
        if current is None:
            raise StoreError(f"Post {post.id} does not exist")
        if current.body == body:
            return current

        revised = current.model_copy(update={"body": body, "version": current.version + 1})
        self.state.posts[post.id] = revised
        return revised
