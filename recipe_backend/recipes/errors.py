from __future__ import annotations

from typing import Any


class RecipeBackendError(Exception):
    """Base class for errors raised by the recipe core."""


class NotFoundError(RecipeBackendError, LookupError):
    """An id references a record that is not in the store."""

    def __init__(self, kind: str, entity_id: Any) -> None:
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} {entity_id} not found")


class ValidationError(RecipeBackendError, ValueError):
    """Malformed input to a create/update operation. Raised before any mutation."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        self.errors = errors or []
        super().__init__(message)
