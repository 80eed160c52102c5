"""Abstract interface for application state persistence."""

from abc import ABC, abstractmethod

from whist.logic.state import AppState


class StateRepository(ABC):
    """Load and save complete AppState snapshots.

    The hosting service calls save after every transition; implementations
    replace the whole stored snapshot.
    """

    @abstractmethod
    def load(self) -> AppState: ...

    @abstractmethod
    def save(self, state: AppState) -> None: ...


class InMemoryStateRepository(StateRepository):
    """Keeps the last saved snapshot in memory (tests, or no data file configured)."""

    def __init__(self, initial: AppState | None = None) -> None:
        self._state = initial if initial is not None else AppState()
        self.save_count = 0

    def load(self) -> AppState:
        return self._state

    def save(self, state: AppState) -> None:
        self._state = state
        self.save_count += 1
