"""Host store persisted as a JSON file inside a project directory."""

import logging
from pathlib import Path

from pydantic import ValidationError

from bookclub_import.store.memory import InMemoryStore, StoreState

log = logging.getLogger(__name__)


class JsonStore(InMemoryStore):
    """In-memory store that writes itself to disk on every committed transaction."""

    STORE_DIR = ".bookclub_store"
    STORE_FILE = "store.json"

    def __init__(self, project_dir: Path):
        self.store_root = project_dir / self.STORE_DIR
        self.store_path = self.store_root / self.STORE_FILE
        super().__init__(self._load_state())

    def _load_state(self) -> StoreState:
        """Load saved state, or start empty."""
        if not self.store_path.exists():
            return StoreState()

        try:
            return StoreState.model_validate_json(
                self.store_path.read_text(encoding="utf-8")
            )
        except (ValidationError, UnicodeDecodeError) as e:
            log.warning(f"Store file {self.store_path} is unreadable, starting empty: {e}")
            return StoreState()

    def _commit(self) -> None:
        self.store_root.mkdir(parents=True, exist_ok=True)
        tmp_path = self.store_path.with_suffix(".tmp")
        tmp_path.write_text(self.state.model_dump_json(indent=2), encoding="utf-8")
        tmp_path.replace(self.store_path)
        log.debug(f"Saved store to {self.store_path}")
