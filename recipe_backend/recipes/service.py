from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime, timezone
from typing import Any

from .errors import NotFoundError
from .matching import MatchResult, missing_ingredients, search_recipes, sort_matches
from .models import (
    Favorite,
    Recipe,
    RecipeCreate,
    ShoppingList,
    ShoppingListItem,
    SortOption,
)
from .store import RecipeStore


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class RecipeService:
    """Operations exposed to the HTTP layer, on top of an injected store."""

    def __init__(self, store: RecipeStore) -> None:
        self.store = store

    # ── Recipes ──────────────────────────────────────────────────────────

    def search(
        self,
        ingredients: Sequence[str],
        cuisine: str | None = None,
        diet: str | None = None,
        max_time: str | None = None,
    ) -> list[Recipe]:
        matches = self.search_matches(ingredients, cuisine=cuisine, diet=diet, max_time=max_time)
        return [m.recipe for m in matches]

    def search_matches(
        self,
        ingredients: Sequence[str],
        cuisine: str | None = None,
        diet: str | None = None,
        max_time: str | None = None,
        sort_by: SortOption = SortOption.best_match,
    ) -> list[MatchResult]:
        matches = search_recipes(
            self.store.get_all_recipes(),
            ingredients,
            cuisine=cuisine,
            diet=diet,
            max_time=max_time,
        )
        return sort_matches(matches, sort_by)

    def list_all(self) -> list[Recipe]:
        return self.store.get_all_recipes()

    def get_by_id(self, recipe_id: int) -> Recipe:
        recipe = self.store.get_recipe_by_id(recipe_id)
        if recipe is None:
            raise NotFoundError("Recipe", recipe_id)
        return recipe

    def create_recipe(self, data: RecipeCreate | dict[str, Any]) -> Recipe:
        return self.store.create_recipe(data)

    # ── Favorites ────────────────────────────────────────────────────────

    def list_favorites(self, user_id: str) -> list[Recipe]:
        return self.store.get_user_favorites(user_id)

    def add_favorite(self, user_id: str, recipe_id: int) -> Favorite:
        self.get_by_id(recipe_id)
        return self.store.add_to_favorites(user_id, recipe_id)

    def remove_favorite(self, user_id: str, recipe_id: int) -> None:
        self.store.remove_from_favorites(user_id, recipe_id)

    # ── Shopping lists ───────────────────────────────────────────────────

    def list_shopping_lists(self, user_id: str) -> list[ShoppingList]:
        return self.store.get_user_shopping_lists(user_id)

    def get_shopping_list(self, list_id: int) -> ShoppingList | None:
        return self.store.get_shopping_list(list_id)

    def create_shopping_list(
        self,
        user_id: str,
        name: str,
        items: Iterable[ShoppingListItem | dict[str, Any]],
    ) -> ShoppingList:
        return self.store.create_shopping_list({
            "user_id": user_id,
            "name": name,
            "items": [i.model_dump() if isinstance(i, ShoppingListItem) else i for i in items],
            "created_at": _now_iso(),
        })

    def create_shopping_list_for_recipe(
        self,
        user_id: str,
        recipe_id: int,
        ingredients: Sequence[str],
    ) -> ShoppingList:
        """New list holding the recipe ingredients not covered by ``ingredients``."""
        recipe = self.get_by_id(recipe_id)
        items = [
            ShoppingListItem(ingredient=ing.name, amount=ing.amount, checked=False)
            for ing in missing_ingredients(recipe, ingredients)
        ]
        return self.create_shopping_list(user_id, f"Shopping list for {recipe.title}", items)

    def replace_shopping_list_items(
        self,
        list_id: int,
        items: Iterable[ShoppingListItem | dict[str, Any]],
    ) -> None:
        self.store.update_shopping_list(list_id, items)

    def delete_shopping_list(self, list_id: int) -> None:
        self.store.delete_shopping_list(list_id)
