"""JSON export and import of the complete application state."""

import json

from pydantic import ValidationError

from whist.logic.state import AppState
from whist.persistence.errors import StateImportError

# Keys that must be present as arrays, under either their JSON alias or field name.
_REQUIRED_LISTS = (("players", "players"), ("gameNights", "game_nights"))


def export_state(state: AppState) -> str:
    """Serialize state as indented JSON using camelCase keys."""
    return state.model_dump_json(by_alias=True, indent=2)


def import_state(text: str) -> AppState:
    """Parse serialized state, rejecting anything that is not a full AppState document."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise StateImportError(f"Invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise StateImportError("Expected a JSON object at the root")
    for alias, name in _REQUIRED_LISTS:
        value = data.get(alias, data.get(name))
        if not isinstance(value, list):
            raise StateImportError(f"Missing or invalid '{alias}' array")

    try:
        return AppState.model_validate(data)
    except ValidationError as e:
        raise StateImportError(f"Invalid state data: {e}") from e
