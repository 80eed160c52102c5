"""State persistence: repository interface, JSON file storage and export/import."""

from whist.persistence.codec import export_state, import_state
from whist.persistence.errors import StateImportError, StateStorageError
from whist.persistence.file_repository import FileStateRepository
from whist.persistence.repository import InMemoryStateRepository, StateRepository

__all__ = [
    "FileStateRepository",
    "InMemoryStateRepository",
    "StateImportError",
    "StateRepository",
    "StateStorageError",
    "export_state",
    "import_state",
]
