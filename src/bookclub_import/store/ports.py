"""Capabilities the importer needs from the host platform."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager

from bookclub_import.models.publication import (
    ChapterConfig,
    Collection,
    Post,
    PublicationConfig,
    Thread,
    User,
)


class CollectionStore(ABC):
    """Collections (publications and chapters) and their configuration."""

    @abstractmethod
    def transaction(self) -> AbstractContextManager[None]:
        """Open a transaction. Leaving it with an exception rolls it back.

        Transactions nest; an inner one behaves as a savepoint.
        """
        pass

    @abstractmethod
    def find_collection(self, collection_id: int) -> Collection | None:
        pass

    @abstractmethod
    def create_collection(
        self,
        name: str,
        owner: User,
        parent: Collection | None = None,
        color: str | None = None,
        text_color: str | None = None,
    ) -> Collection:
        """Create a collection.

        Raises:
            StoreError: If the host rejects the collection
        """
        pass

    @abstractmethod
    def list_children(self, collection: Collection) -> list[Collection]:
        """Direct children of a collection, in creation order."""
        pass

    @abstractmethod
    def get_publication_config(self, collection: Collection) -> PublicationConfig | None:
        pass

    @abstractmethod
    def save_publication_config(
        self, collection: Collection, config: PublicationConfig
    ) -> None:
        """Replace a collection's publication configuration in one write."""
        pass

    @abstractmethod
    def find_publication_by_slug(self, slug: str) -> Collection | None:
        pass

    @abstractmethod
    def get_chapter_config(self, collection: Collection) -> ChapterConfig | None:
        pass

    @abstractmethod
    def save_chapter_config(self, collection: Collection, config: ChapterConfig) -> None:
        """Replace a collection's chapter configuration in one write."""
        pass


class ThreadStore(ABC):
    """Discussion threads and their posts."""

    @abstractmethod
    def find_thread(self, thread_id: int) -> Thread | None:
        pass

    @abstractmethod
    def create_thread(
        self, title: str, owner: User, collection: Collection, pinned: bool = False
    ) -> Thread:
        """Create an empty thread.

        Raises:
            StoreError: If the host rejects the thread
        """
        pass

    @abstractmethod
    def create_first_post(self, thread: Thread, owner: User, body: str) -> Post:
        pass

    @abstractmethod
    def first_post(self, thread: Thread) -> Post | None:
        pass

    @abstractmethod
    def revise_post(self, post: Post, owner: User, body: str) -> Post:
        """Replace a post's body, keeping its identity."""
        pass


class AssetUploader(ABC):
    """Uploads binary assets and returns where they can be fetched."""

    @abstractmethod
    def upload_cover(self, publication: Collection, image: bytes) -> str:
        """Upload a publication's cover image and return its URL.

        Raises:
            StoreError: If the upload fails
        """
        pass
