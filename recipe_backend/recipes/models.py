from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator

ANY_CUISINE = "Any Cuisine"
ANY_DIET = "Any Diet"
ANY_TIME = "Any Time"

CUISINE_OPTIONS = [
    ANY_CUISINE, "Italian", "Mexican", "Asian", "Mediterranean", "American",
    "French", "Indian", "Thai", "Greek", "Spanish", "Chinese", "Japanese",
]

DIET_OPTIONS = [
    ANY_DIET, "Vegetarian", "Vegan", "Gluten-Free", "Dairy-Free", "Keto",
    "Paleo", "Low-Carb", "Low-Fat", "High-Protein",
]

COMMON_INGREDIENTS = [
    "chicken breast", "chicken thighs", "ground beef", "ground turkey", "salmon", "cod",
    "shrimp", "eggs", "milk", "butter", "cheese", "mozzarella", "parmesan", "cheddar",
    "tomatoes", "cherry tomatoes", "onion", "red onion", "garlic", "bell peppers",
    "carrots", "celery", "potatoes", "sweet potatoes", "broccoli", "spinach",
    "mushrooms", "zucchini", "cucumber", "lettuce", "avocado", "lemon", "lime",
    "rice", "pasta", "bread", "flour", "olive oil", "vegetable oil", "salt", "pepper",
    "basil", "oregano", "thyme", "rosemary", "paprika", "cumin", "garlic powder",
    "soy sauce", "vinegar", "balsamic vinegar", "honey", "sugar", "brown sugar",
]


def normalize_diet(value: str) -> str:
    """Lowercase and drop hyphens so "Gluten-Free" and "gluten-free" compare equal."""
    return value.lower().replace("-", "")


_KNOWN_DIET_KEYS = {normalize_diet(d) for d in DIET_OPTIONS if d != ANY_DIET}


def _not_blank(value: str) -> str:
    # Whitespace is a substring of any multi-word entry, so it would match everything.
    if not value.strip():
        raise ValueError("must not be blank")
    return value


class Difficulty(str, Enum):
    very_easy = "Very Easy"
    easy = "Easy"
    medium = "Medium"
    hard = "Hard"


DIFFICULTY_ORDER = {
    Difficulty.very_easy: 1,
    Difficulty.easy: 2,
    Difficulty.medium: 3,
    Difficulty.hard: 4,
}


class TimeBucket(str, Enum):
    any_time = ANY_TIME
    under_15 = "Under 15 min"
    from_15_to_30 = "15-30 min"
    from_30_to_60 = "30-60 min"
    over_1_hour = "Over 1 hour"


# Upper bound on prep + cook minutes. Buckets not listed here are unbounded.
TIME_LIMITS: dict[str, int] = {
    TimeBucket.under_15.value: 15,
    TimeBucket.from_15_to_30.value: 30,
    TimeBucket.from_30_to_60.value: 60,
}


class SortOption(str, Enum):
    best_match = "Best Match"
    preparation_time = "Preparation Time"
    rating = "Rating"
    difficulty = "Difficulty"


# ── Recipes ──────────────────────────────────────────────────────────────


class Ingredient(BaseModel):
    name: str = Field(..., min_length=1)
    amount: str = ""
    required: bool = True

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        return _not_blank(value)


class RecipeCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = ""
    image: str = ""
    prep_time: int = Field(..., ge=0, description="Minutes")
    cook_time: int = Field(..., ge=0, description="Minutes")
    servings: int = Field(..., ge=1)
    difficulty: Difficulty
    cuisine: str = Field(..., min_length=1)
    dietary_restrictions: list[str] = Field(default_factory=list)
    ingredients: list[Ingredient] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)

    @field_validator("dietary_restrictions")
    @classmethod
    def _known_dietary_tags(cls, tags: list[str]) -> list[str]:
        unknown = [t for t in tags if normalize_diet(t) not in _KNOWN_DIET_KEYS]
        if unknown:
            raise ValueError(f"unknown dietary tags: {', '.join(unknown)}")
        return tags


class Recipe(RecipeCreate):
    id: int
    rating: int = Field(default=0, ge=0, le=50, description="Average rating * 10 (42 = 4.2 stars)")
    review_count: int = Field(default=0, ge=0)

    @property
    def total_time(self) -> int:
        return self.prep_time + self.cook_time

    @property
    def required_ingredients(self) -> list[Ingredient]:
        return [ing for ing in self.ingredients if ing.required]


# ── Favorites ────────────────────────────────────────────────────────────


class Favorite(BaseModel):
    id: int
    user_id: str
    recipe_id: int


class FavoriteRequest(BaseModel):
    recipe_id: int


# ── Shopping lists ───────────────────────────────────────────────────────


class ShoppingListItem(BaseModel):
    ingredient: str = Field(..., min_length=1)
    amount: str = ""
    checked: bool = False

    @field_validator("ingredient")
    @classmethod
    def _ingredient_not_blank(cls, value: str) -> str:
        return _not_blank(value)


class ShoppingListCreate(BaseModel):
    user_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    items: list[ShoppingListItem] = Field(default_factory=list)
    created_at: str


class ShoppingList(ShoppingListCreate):
    id: int


class ShoppingListRequest(BaseModel):
    name: str = Field(default="New Shopping List", min_length=1)
    items: list[ShoppingListItem] = Field(default_factory=list)


class ShoppingListItemsUpdate(BaseModel):
    items: list[ShoppingListItem]


class RecipeShoppingListRequest(BaseModel):
    recipe_id: int
    ingredients: list[str] = Field(
        default_factory=list,
        description="Ingredients already on hand; everything else goes on the list",
    )


# ── Search ───────────────────────────────────────────────────────────────


class SearchRequest(BaseModel):
    ingredients: list[str] = Field(default_factory=list)
    cuisine: str | None = None
    diet: str | None = None
    max_time: str | None = None
    sort_by: SortOption = SortOption.best_match


class SearchResultItem(BaseModel):
    recipe: Recipe
    match_score: float
    matched_count: int
    required_count: int
    matched_ingredients: list[str]


class SearchResponse(BaseModel):
    results: list[SearchResultItem]
    total: int
