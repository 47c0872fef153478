from __future__ import annotations

from fastapi import HTTPException, Request


def require_user(request: Request) -> dict:
    """Raise 401 if no user is logged in."""
    user = request.session.get("user")
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def require_user_id(request: Request) -> str:
    """The opaque id the recipe core keys favorites and shopping lists by."""
    return require_user(request)["id"]
