"""Shared request dependencies."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import Header, HTTPException, Request, status

if TYPE_CHECKING:
    from meal_planner.containers import AppContainer


def get_container(request: Request) -> AppContainer:
    return request.app.state.container


async def require_user(x_user_id: str | None = Header(default=None)) -> UUID:
    """Resolve the caller from the gateway-supplied X-User-Id header."""
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    try:
        return UUID(x_user_id)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED) from None
