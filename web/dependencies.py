"""
FastAPI dependencies shared by the routers: database session, Redis,
caller identity and cart session.
"""

from typing import AsyncIterator

from fastapi import Depends, Header, Request
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from db import get_db_session
from exceptions.base import AccessDeniedException
from exceptions.cart import MissingCartSessionException
from models.user import UserDTO
from services.cart import CartStore
from services.user import UserService


async def get_session() -> AsyncIterator[AsyncSession]:
    async with get_db_session() as session:
        yield session


def get_redis(request: Request) -> Redis:
    return request.app.state.redis


async def get_current_user(
    x_user_id: str | None = Header(None),
    session: AsyncSession = Depends(get_session),
) -> UserDTO:
    """Identity set by the authentication proxy in X-User-Id."""
    return await UserService.authenticate(x_user_id, session)


async def get_optional_user(
    x_user_id: str | None = Header(None),
    session: AsyncSession = Depends(get_session),
) -> UserDTO | None:
    """Like get_current_user, but anonymous callers get None instead of a 401."""
    if not x_user_id:
        return None
    return await UserService.authenticate(x_user_id, session)


async def require_admin(user: UserDTO = Depends(get_current_user)) -> UserDTO:
    if not user.is_admin:
        raise AccessDeniedException(user.id, "admin")
    return user


def get_cart_session(x_cart_session: str | None = Header(None)) -> str:
    if not x_cart_session or not x_cart_session.strip():
        raise MissingCartSessionException()
    return x_cart_session.strip()


def get_cart_store(redis: Redis = Depends(get_redis)) -> CartStore:
    return CartStore(redis)
