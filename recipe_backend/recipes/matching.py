"""
Ingredient match engine.

Responsibilities:
- Score every recipe by the fraction of its required ingredients the user has.
- Drop recipes with no overlap and rank the rest by score.
- Apply the cuisine / diet / time hard filters.
- Work out which ingredients are still missing for a given recipe.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from .models import (
    ANY_CUISINE,
    ANY_DIET,
    DIFFICULTY_ORDER,
    TIME_LIMITS,
    Ingredient,
    Recipe,
    SortOption,
    TimeBucket,
    normalize_diet,
)

logger = logging.getLogger(__name__)


@dataclass
class MatchResult:
    recipe: Recipe
    match_score: float
    matched: list[str] = field(default_factory=list)
    required_count: int = 0

    @property
    def matched_count(self) -> int:
        return len(self.matched)


def ingredient_matches(recipe_ingredient: str, user_ingredient: str) -> bool:
    """Case-insensitive substring containment in either direction."""
    ing = recipe_ingredient.lower()
    user = user_ingredient.lower()
    return ing in user or user in ing


def _is_satisfied(ingredient: Ingredient, user_ingredients: Sequence[str]) -> bool:
    return any(ingredient_matches(ingredient.name, u) for u in user_ingredients)


def score_recipe(recipe: Recipe, user_ingredients: Sequence[str]) -> MatchResult:
    """
    Compute the match score of one recipe.

    Only required ingredients count. A recipe without required ingredients
    scores 0 so it never shows up in an ingredient-driven search.
    """
    required = recipe.required_ingredients
    matched = [ing.name for ing in required if _is_satisfied(ing, user_ingredients)]
    score = len(matched) / len(required) if required else 0.0
    return MatchResult(recipe=recipe, match_score=score, matched=matched, required_count=len(required))


def rank_recipes(recipes: Iterable[Recipe], user_ingredients: Sequence[str]) -> list[MatchResult]:
    """
    Score, drop zero-score recipes and sort by score descending.

    Equal scores keep the order ``recipes`` was given in (``sorted`` is stable).
    Blank user entries are ignored; an empty string would otherwise be a
    substring of every ingredient name.
    """
    usable = [u.lower() for u in user_ingredients if u.strip()]
    scored = [score_recipe(r, usable) for r in recipes]
    included = [m for m in scored if m.match_score > 0]
    return sorted(included, key=lambda m: m.match_score, reverse=True)


# ── Hard filters ─────────────────────────────────────────────────────────


def time_limit_for(max_time: str | None) -> int | None:
    """Return the minute cap for a time bucket, or ``None`` when unbounded."""
    if not max_time:
        return None
    limit = TIME_LIMITS.get(max_time)
    if limit is None and max_time not in {b.value for b in TimeBucket}:
        logger.debug("Unrecognized time bucket %r, not filtering on time", max_time)
    return limit


def matches_cuisine(recipe: Recipe, cuisine: str | None) -> bool:
    if not cuisine or cuisine == ANY_CUISINE:
        return True
    return recipe.cuisine == cuisine


def matches_diet(recipe: Recipe, diet: str | None) -> bool:
    if not diet or diet == ANY_DIET:
        return True
    wanted = normalize_diet(diet)
    return any(normalize_diet(tag) == wanted for tag in recipe.dietary_restrictions)


def matches_time(recipe: Recipe, max_time: str | None) -> bool:
    limit = time_limit_for(max_time)
    if limit is None:
        return True
    return recipe.total_time <= limit


def apply_filters(
    matches: Iterable[MatchResult],
    cuisine: str | None = None,
    diet: str | None = None,
    max_time: str | None = None,
) -> list[MatchResult]:
    """Keep only matches passing every filter. Unknown cuisine/diet values match nothing."""
    return [
        m
        for m in matches
        if matches_cuisine(m.recipe, cuisine)
        and matches_diet(m.recipe, diet)
        and matches_time(m.recipe, max_time)
    ]


# ── Entry points ─────────────────────────────────────────────────────────


def search_recipes(
    recipes: Iterable[Recipe],
    user_ingredients: Sequence[str],
    cuisine: str | None = None,
    diet: str | None = None,
    max_time: str | None = None,
) -> list[MatchResult]:
    recipes = list(recipes)
    ranked = rank_recipes(recipes, user_ingredients)
    results = apply_filters(ranked, cuisine=cuisine, diet=diet, max_time=max_time)
    logger.debug(
        "Ingredient search: %d recipes, %d matched, %d after filters",
        len(recipes), len(ranked), len(results),
    )
    return results


def sort_matches(matches: Sequence[MatchResult], sort_by: SortOption = SortOption.best_match) -> list[MatchResult]:
    """Reorder search results for display. Stable, so ties keep match order."""
    if sort_by == SortOption.preparation_time:
        return sorted(matches, key=lambda m: m.recipe.total_time)
    if sort_by == SortOption.rating:
        return sorted(matches, key=lambda m: m.recipe.rating, reverse=True)
    if sort_by == SortOption.difficulty:
        return sorted(matches, key=lambda m: DIFFICULTY_ORDER[m.recipe.difficulty])
    return list(matches)


def missing_ingredients(recipe: Recipe, user_ingredients: Sequence[str]) -> list[Ingredient]:
    """Every recipe ingredient, required or not, that the user does not have."""
    usable = [u for u in user_ingredients if u.strip()]
    return [ing for ing in recipe.ingredients if not _is_satisfied(ing, usable)]
