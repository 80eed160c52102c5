"""File-backed state repository storing the whole AppState as one JSON document."""

from pathlib import Path

import structlog

from shared.storage import write_text_atomic
from whist.logic.state import AppState
from whist.persistence.codec import export_state, import_state
from whist.persistence.errors import StateImportError, StateStorageError
from whist.persistence.repository import StateRepository

logger = structlog.get_logger()


class FileStateRepository(StateRepository):
    """JSON file repository.

    A missing file loads as the empty state. An existing file that cannot be
    read or parsed raises StateStorageError rather than loading as empty, so
    the next save cannot clobber it. Saves replace the file atomically with
    owner-only permissions.

    Limitation: one writer process per file. Concurrent processes would
    overwrite each other's snapshots.
    """

    def __init__(self, file_path: str | Path) -> None:
        self._file_path = Path(file_path)

    @property
    def file_path(self) -> Path:
        return self._file_path

    def load(self) -> AppState:
        if not self._file_path.exists():
            logger.info("no saved state, starting empty", path=str(self._file_path))
            return AppState()

        try:
            text = self._file_path.read_text(encoding="utf-8")
        except OSError as exc:
            msg = f"Failed to read state from {self._file_path}"
            raise StateStorageError(msg) from exc

        try:
            state = import_state(text)
        except StateImportError as exc:
            msg = f"Failed to parse state from {self._file_path}"
            raise StateStorageError(msg) from exc

        logger.info(
            "loaded state",
            path=str(self._file_path),
            players=len(state.players),
            game_nights=len(state.game_nights),
        )
        return state

    def save(self, state: AppState) -> None:
        write_text_atomic(self._file_path, export_state(state), prefix=".whist_")
