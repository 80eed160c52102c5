"""Errors raised while reading, writing or importing stored state."""


class StateStorageError(OSError):
    """Stored state exists but cannot be read or parsed.

    Raised instead of falling back to an empty state, so a later save never
    overwrites data that could not be loaded.
    """


class StateImportError(ValueError):
    """Imported text is not a valid serialized AppState."""
