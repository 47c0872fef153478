from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from .auth.dependencies import require_user, require_user_id
from .auth.models import LoginRequest, RegisterRequest
from .auth.users import UserRegistry
from .config import DEFAULT_APP_CONFIG, AppConfig
from .recipes.errors import NotFoundError, ValidationError
from .recipes.models import (
    COMMON_INGREDIENTS,
    CUISINE_OPTIONS,
    DIET_OPTIONS,
    Favorite,
    FavoriteRequest,
    Recipe,
    RecipeCreate,
    RecipeShoppingListRequest,
    SearchRequest,
    SearchResponse,
    SearchResultItem,
    ShoppingList,
    ShoppingListItemsUpdate,
    ShoppingListRequest,
    SortOption,
    TimeBucket,
)
from .recipes.service import RecipeService
from .recipes.store import InMemoryRecipeStore, load_sample_recipes

logger = logging.getLogger(__name__)


def get_service(request: Request) -> RecipeService:
    return request.app.state.recipe_service


def get_users(request: Request) -> UserRegistry:
    return request.app.state.users


def _check_list_owner(service: RecipeService, list_id: int, user_id: str) -> None:
    """Missing lists pass through (the operation is a no-op); other users' lists are 403."""
    shopping_list = service.get_shopping_list(list_id)
    if shopping_list is not None and shopping_list.user_id != user_id:
        raise HTTPException(status_code=403, detail="Not your shopping list")


def create_app(config: AppConfig = DEFAULT_APP_CONFIG) -> FastAPI:
    logging.basicConfig(level=config.log_level)

    store = InMemoryRecipeStore()
    if config.seed_sample_recipes:
        store.seed_recipes(load_sample_recipes(config.sample_recipes_path))
    users = UserRegistry()
    if config.seed_demo_user:
        users.seed_demo_user()

    app = FastAPI(title="Pantry Recipe Finder API", version="1.0.0")
    app.add_middleware(SessionMiddleware, secret_key=config.session_secret)
    app.state.recipe_service = RecipeService(store)
    app.state.users = users

    @app.exception_handler(NotFoundError)
    def _not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(ValidationError)
    def _invalid(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content=jsonable_encoder({"detail": str(exc), "errors": exc.errors}),
        )

    # ── Public endpoints ─────────────────────────────────────────────────

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/metadata")
    def metadata() -> dict:
        return {
            "cuisines": CUISINE_OPTIONS,
            "diets": DIET_OPTIONS,
            "times": [b.value for b in TimeBucket],
            "sort_options": [s.value for s in SortOption],
            "common_ingredients": COMMON_INGREDIENTS,
        }

    # ── Auth endpoints ───────────────────────────────────────────────────

    @app.post("/auth/register")
    def register(
        body: RegisterRequest,
        request: Request,
        users: UserRegistry = Depends(get_users),
    ) -> dict:
        try:
            user = users.register(body.username, body.email, body.password)
        except ValueError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        request.session["user"] = user
        return {"status": "ok", "user": user}

    @app.post("/auth/login")
    def login(
        body: LoginRequest,
        request: Request,
        users: UserRegistry = Depends(get_users),
    ) -> dict:
        user = users.authenticate(body.username, body.password)
        if not user:
            raise HTTPException(status_code=401, detail="Invalid credentials")
        request.session["user"] = user
        return {"status": "ok", "user": user}

    @app.post("/auth/logout")
    def logout(request: Request) -> dict:
        request.session.clear()
        return {"status": "logged_out"}

    @app.get("/auth/me")
    def auth_me(user: dict = Depends(require_user)) -> dict:
        return user

    # ── Recipes ──────────────────────────────────────────────────────────

    @app.get("/recipes", response_model=list[Recipe])
    def list_recipes(service: RecipeService = Depends(get_service)) -> list[Recipe]:
        return service.list_all()

    @app.get("/recipes/{recipe_id}", response_model=Recipe)
    def get_recipe(recipe_id: int, service: RecipeService = Depends(get_service)) -> Recipe:
        return service.get_by_id(recipe_id)

    @app.post("/recipes", response_model=Recipe)
    def create_recipe(
        body: RecipeCreate,
        user: dict = Depends(require_user),
        service: RecipeService = Depends(get_service),
    ) -> Recipe:
        return service.create_recipe(body)

    @app.post("/recipes/search", response_model=SearchResponse)
    def search_recipes(
        body: SearchRequest,
        service: RecipeService = Depends(get_service),
    ) -> SearchResponse:
        matches = service.search_matches(
            body.ingredients,
            cuisine=body.cuisine,
            diet=body.diet,
            max_time=body.max_time,
            sort_by=body.sort_by,
        )
        items = [
            SearchResultItem(
                recipe=m.recipe,
                match_score=round(m.match_score, 4),
                matched_count=m.matched_count,
                required_count=m.required_count,
                matched_ingredients=m.matched,
            )
            for m in matches
        ]
        return SearchResponse(results=items, total=len(items))

    # ── Favorites ────────────────────────────────────────────────────────

    @app.get("/favorites", response_model=list[Recipe])
    def list_favorites(
        user_id: str = Depends(require_user_id),
        service: RecipeService = Depends(get_service),
    ) -> list[Recipe]:
        return service.list_favorites(user_id)

    @app.post("/favorites", response_model=Favorite)
    def add_favorite(
        body: FavoriteRequest,
        user_id: str = Depends(require_user_id),
        service: RecipeService = Depends(get_service),
    ) -> Favorite:
        return service.add_favorite(user_id, body.recipe_id)

    @app.delete("/favorites/{recipe_id}")
    def remove_favorite(
        recipe_id: int,
        user_id: str = Depends(require_user_id),
        service: RecipeService = Depends(get_service),
    ) -> dict:
        service.remove_favorite(user_id, recipe_id)
        return {"status": "removed"}

    # ── Shopping lists ───────────────────────────────────────────────────

    @app.get("/shopping-lists", response_model=list[ShoppingList])
    def list_shopping_lists(
        user_id: str = Depends(require_user_id),
        service: RecipeService = Depends(get_service),
    ) -> list[ShoppingList]:
        return service.list_shopping_lists(user_id)

    @app.post("/shopping-lists", response_model=ShoppingList)
    def create_shopping_list(
        body: ShoppingListRequest,
        user_id: str = Depends(require_user_id),
        service: RecipeService = Depends(get_service),
    ) -> ShoppingList:
        return service.create_shopping_list(user_id, body.name, body.items)

    @app.post("/shopping-lists/from-recipe", response_model=ShoppingList)
    def create_shopping_list_from_recipe(
        body: RecipeShoppingListRequest,
        user_id: str = Depends(require_user_id),
        service: RecipeService = Depends(get_service),
    ) -> ShoppingList:
        return service.create_shopping_list_for_recipe(user_id, body.recipe_id, body.ingredients)

    @app.put("/shopping-lists/{list_id}")
    def replace_shopping_list_items(
        list_id: int,
        body: ShoppingListItemsUpdate,
        user_id: str = Depends(require_user_id),
        service: RecipeService = Depends(get_service),
    ) -> dict:
        _check_list_owner(service, list_id, user_id)
        service.replace_shopping_list_items(list_id, body.items)
        return {"status": "updated"}

    @app.delete("/shopping-lists/{list_id}")
    def delete_shopping_list(
        list_id: int,
        user_id: str = Depends(require_user_id),
        service: RecipeService = Depends(get_service),
    ) -> dict:
        _check_list_owner(service, list_id, user_id)
        service.delete_shopping_list(list_id)
        return {"status": "deleted"}

    logger.info("Recipe API ready with %d recipes", len(store.get_all_recipes()))
    return app


app = create_app()
