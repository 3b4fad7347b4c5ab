"""Host store ports and reference adapters."""

from bookclub_import.store.json_store import JsonStore
from bookclub_import.store.memory import InMemoryStore, StoreState
from bookclub_import.store.ports import AssetUploader, CollectionStore, ThreadStore

__all__ = [
    "CollectionStore",
    "ThreadStore",
    "AssetUploader",
    "InMemoryStore",
    "StoreState",
    "JsonStore",
]
