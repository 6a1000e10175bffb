"""Exception classes for Routinely."""


class RoutinelyError(Exception):
    """Base exception for all Routinely errors."""
    pass


class ValidationError(RoutinelyError, ValueError):
    """Raised when routine data fails validation."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class RoutineNotFoundError(RoutinelyError, KeyError):
    """Raised when a routine id is not in the store."""

    def __init__(self, routine_id: str):
        self.routine_id = routine_id
        super().__init__(routine_id)

    def __str__(self) -> str:
        return f"Routine not found: {self.routine_id}"


class StorageError(RoutinelyError):
    """Raised when workspace files cannot be read or written."""
    pass
