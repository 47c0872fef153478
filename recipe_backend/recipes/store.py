from __future__ import annotations

import itertools
import json
import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, TypeVar

import pydantic
from pydantic import BaseModel

from .errors import ValidationError
from .models import (
    Favorite,
    Recipe,
    RecipeCreate,
    ShoppingList,
    ShoppingListCreate,
    ShoppingListItem,
)

logger = logging.getLogger(__name__)

_ModelT = TypeVar("_ModelT", bound=BaseModel)


def _validate(model: type[_ModelT], data: Any) -> _ModelT:
    """Coerce ``data`` into ``model``, raising our ValidationError on failure."""
    if isinstance(data, model):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump()
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as exc:
        raise ValidationError(
            f"invalid {model.__name__} data",
            errors=exc.errors(include_url=False, include_context=False),
        ) from exc


def _validate_items(items: Iterable[Any]) -> list[ShoppingListItem]:
    if isinstance(items, (str, bytes, Mapping)):
        raise ValidationError("shopping list items must be a sequence")
    return [_validate(ShoppingListItem, item) for item in items]


class RecipeStore(ABC):
    """
    Holder of all recipes, favorites and shopping lists.

    Implementations must give read-your-writes consistency. Lookups return
    ``None`` for missing ids; deletes and updates of missing ids are no-ops.
    """

    # Recipes
    @abstractmethod
    def get_all_recipes(self) -> list[Recipe]: ...

    @abstractmethod
    def get_recipe_by_id(self, recipe_id: int) -> Recipe | None: ...

    @abstractmethod
    def create_recipe(self, data: RecipeCreate | Mapping[str, Any]) -> Recipe: ...

    # Favorites
    @abstractmethod
    def get_user_favorites(self, user_id: str) -> list[Recipe]: ...

    @abstractmethod
    def add_to_favorites(self, user_id: str, recipe_id: int) -> Favorite: ...

    @abstractmethod
    def remove_from_favorites(self, user_id: str, recipe_id: int) -> None: ...

    # Shopping lists
    @abstractmethod
    def get_user_shopping_lists(self, user_id: str) -> list[ShoppingList]: ...

    @abstractmethod
    def get_shopping_list(self, list_id: int) -> ShoppingList | None: ...

    @abstractmethod
    def create_shopping_list(self, data: ShoppingListCreate | Mapping[str, Any]) -> ShoppingList: ...

    @abstractmethod
    def update_shopping_list(self, list_id: int, items: Iterable[Any]) -> None: ...

    @abstractmethod
    def delete_shopping_list(self, list_id: int) -> None: ...


class InMemoryRecipeStore(RecipeStore):
    """Process-lifetime store backed by dicts. Ids start at 1 and are never reused."""

    def __init__(self) -> None:
        self._recipes: dict[int, Recipe] = {}
        self._favorites: dict[int, Favorite] = {}
        self._shopping_lists: dict[int, ShoppingList] = {}
        self._recipe_ids = itertools.count(1)
        self._favorite_ids = itertools.count(1)
        self._list_ids = itertools.count(1)
        self._lock = threading.RLock()

    # ── Recipes ──────────────────────────────────────────────────────────

    def get_all_recipes(self) -> list[Recipe]:
        with self._lock:
            return list(self._recipes.values())

    def get_recipe_by_id(self, recipe_id: int) -> Recipe | None:
        with self._lock:
            return self._recipes.get(recipe_id)

    def create_recipe(self, data: RecipeCreate | Mapping[str, Any]) -> Recipe:
        payload = _validate(RecipeCreate, data)
        with self._lock:
            recipe = Recipe(
                **payload.model_dump(include=set(RecipeCreate.model_fields)),
                id=next(self._recipe_ids),
                rating=0,
                review_count=0,
            )
            self._recipes[recipe.id] = recipe
        logger.info("Created recipe %d (%s)", recipe.id, recipe.title)
        return recipe

    def seed_recipes(self, records: Iterable[Mapping[str, Any]]) -> list[Recipe]:
        """
        Bulk-load sample recipes, keeping their ``rating`` and ``review_count``.

        The whole batch is validated before anything is inserted.
        """
        validated = [
            _validate(Recipe, {"rating": 0, "review_count": 0, **record, "id": 0})
            for record in records
        ]

        seeded: list[Recipe] = []
        with self._lock:
            for draft in validated:
                recipe = draft.model_copy(update={"id": next(self._recipe_ids)})
                self._recipes[recipe.id] = recipe
                seeded.append(recipe)
        logger.info("Seeded %d sample recipes", len(seeded))
        return seeded

    # ── Favorites ────────────────────────────────────────────────────────

    def get_user_favorites(self, user_id: str) -> list[Recipe]:
        with self._lock:
            recipe_ids = [f.recipe_id for f in self._favorites.values() if f.user_id == user_id]
            # Favorites may outlive their recipe; skip dangling ids.
            return [self._recipes[rid] for rid in recipe_ids if rid in self._recipes]

    def add_to_favorites(self, user_id: str, recipe_id: int) -> Favorite:
        with self._lock:
            existing = self._find_favorite(user_id, recipe_id)
            if existing is not None:
                return existing
            favorite = Favorite(id=next(self._favorite_ids), user_id=user_id, recipe_id=recipe_id)
            self._favorites[favorite.id] = favorite
        logger.info("User %s favorited recipe %d", user_id, recipe_id)
        return favorite

    def remove_from_favorites(self, user_id: str, recipe_id: int) -> None:
        with self._lock:
            existing = self._find_favorite(user_id, recipe_id)
            if existing is not None:
                del self._favorites[existing.id]
                logger.info("User %s unfavorited recipe %d", user_id, recipe_id)

    def _find_favorite(self, user_id: str, recipe_id: int) -> Favorite | None:
        for fav in self._favorites.values():
            if fav.user_id == user_id and fav.recipe_id == recipe_id:
                return fav
        return None

    # ── Shopping lists ───────────────────────────────────────────────────

    def get_user_shopping_lists(self, user_id: str) -> list[ShoppingList]:
        with self._lock:
            return [sl for sl in self._shopping_lists.values() if sl.user_id == user_id]

    def get_shopping_list(self, list_id: int) -> ShoppingList | None:
        with self._lock:
            return self._shopping_lists.get(list_id)

    def create_shopping_list(self, data: ShoppingListCreate | Mapping[str, Any]) -> ShoppingList:
        payload = _validate(ShoppingListCreate, data)
        with self._lock:
            shopping_list = ShoppingList(
                **payload.model_dump(include=set(ShoppingListCreate.model_fields)),
                id=next(self._list_ids),
            )
            self._shopping_lists[shopping_list.id] = shopping_list
        logger.info("Created shopping list %d for user %s", shopping_list.id, shopping_list.user_id)
        return shopping_list

    def update_shopping_list(self, list_id: int, items: Iterable[Any]) -> None:
        new_items = _validate_items(items)
        with self._lock:
            current = self._shopping_lists.get(list_id)
            if current is None:
                return
            self._shopping_lists[list_id] = current.model_copy(update={"items": new_items})

    def delete_shopping_list(self, list_id: int) -> None:
        with self._lock:
            if self._shopping_lists.pop(list_id, None) is not None:
                logger.info("Deleted shopping list %d", list_id)


def load_sample_recipes(path: Path) -> list[dict[str, Any]]:
    """Read sample recipe records from a JSON file (a list of objects)."""
    with open(path, "r", encoding="utf-8") as f:
        records = json.load(f)
    if not isinstance(records, list):
        raise ValidationError(f"{path} must contain a JSON list of recipes")
    return records
