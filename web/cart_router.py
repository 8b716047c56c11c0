"""
Session cart endpoints.

The browsing session is identified by the X-Cart-Session header; no login
is needed to fill a cart.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from services.cart import CartService, CartStore
from web.dependencies import get_cart_session, get_cart_store, get_session
from web.schemas import CartAddRequest, CartQuantityRequest

cart_router = APIRouter(prefix="/api/cart", tags=["cart"])


@cart_router.get("")
async def get_cart(session_id: str = Depends(get_cart_session), store: CartStore = Depends(get_cart_store)):
    cart = await store.load(session_id)
    return CartService.summarize(cart)


@cart_router.post("/items")
async def add_item(
    payload: CartAddRequest,
    session_id: str = Depends(get_cart_session),
    store: CartStore = Depends(get_cart_store),
    session: AsyncSession = Depends(get_session),
):
    cart, message = await CartService.add_part(session_id, payload.part_id, store, session)
    return CartService.summarize(cart, message)


@cart_router.patch("/items/{part_id}")
async def update_item(
    part_id: str,
    payload: CartQuantityRequest,
    session_id: str = Depends(get_cart_session),
    store: CartStore = Depends(get_cart_store),
):
    cart, message = await CartService.update_quantity(session_id, part_id, payload.quantity, store)
    return CartService.summarize(cart, message)


@cart_router.delete("/items/{part_id}")
async def remove_item(
    part_id: str,
    session_id: str = Depends(get_cart_session),
    store: CartStore = Depends(get_cart_store),
):
    cart, message = await CartService.remove_part(session_id, part_id, store)
    return CartService.summarize(cart, message)


@cart_router.delete("")
async def clear_cart(session_id: str = Depends(get_cart_session), store: CartStore = Depends(get_cart_store)):
    cart, message = await CartService.clear(session_id, store)
    return CartService.summarize(cart, message)
