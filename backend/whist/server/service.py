"""Single-writer owner of the live application state."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from collections.abc import Callable

    from whist.logic.state import AppState
    from whist.persistence.repository import StateRepository

logger = structlog.get_logger()


class ScorebookService:
    """Serializes state transitions and persists every new snapshot.

    Each transition runs against the current snapshot under one asyncio.Lock,
    then the result is saved in a worker thread before it becomes current.
    Readers see the previous snapshot until the save completes. If the save
    fails the previous snapshot stays current and the error propagates.
    """

    def __init__(self, repository: StateRepository) -> None:
        self._repository = repository
        self._state = repository.load()
        self._lock = asyncio.Lock()

    @property
    def state(self) -> AppState:
        return self._state

    async def apply(self, transition: Callable[..., AppState], *args: Any, **kwargs: Any) -> AppState:  # noqa: ANN401
        async with self._lock:
            new_state = transition(self._state, *args, **kwargs)
            if new_state is self._state:
                return new_state
            await asyncio.to_thread(self._repository.save, new_state)
            self._state = new_state
            logger.debug("state saved", transition=transition.__name__)
            return new_state

    async def replace(self, state: AppState) -> AppState:
        """Swap in a whole new state, e.g. from an import."""
        async with self._lock:
            await asyncio.to_thread(self._repository.save, state)
            self._state = state
            logger.info("state replaced", players=len(state.players), game_nights=len(state.game_nights))
            return state
