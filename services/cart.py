import json
import logging
from decimal import Decimal
from typing import Callable, TypeVar

from pydantic import ValidationError
from redis.asyncio import Redis
from redis.exceptions import WatchError
from sqlalchemy.ext.asyncio import AsyncSession

import config
from enums.cart_mutation import CartMutation
from enums.message_scope import MessageScope
from exceptions.cart import CartBusyException
from exceptions.part import PartNotFoundException
from models.cartItem import CartItemDTO
from repositories.part import PartRepository
from utils.localizator import Localizator
from utils.money import from_cents

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Cart:
    """
    Shopping cart for one browsing session.

    Lines are kept in insertion order and keyed by part id. Every mutation
    keeps 1 <= quantity <= stock for each line; stock is the value supplied
    when the line was first added and is not revalidated afterwards.
    """

    def __init__(self, items: list[CartItemDTO] | None = None):
        self._items: dict[str, CartItemDTO] = {}
        for item in items or []:
            self._items[item.id] = item

    @property
    def items(self) -> list[CartItemDTO]:
        return list(self._items.values())

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self._items.values())

    @property
    def total_price_cents(self) -> int:
        return sum(item.price_cents * item.quantity for item in self._items.values())

    @property
    def total_price(self) -> Decimal:
        return from_cents(self.total_price_cents)

    def add_item(self, item: CartItemDTO) -> CartMutation:
        """
        Add one unit of a part.

        A new part is inserted with quantity 1 whatever quantity the caller
        passed. A part already in the cart is incremented by one unless the
        line is at its stock, in which case nothing changes.
        """
        existing = self._items.get(item.id)
        if existing is not None:
            if existing.quantity >= existing.stock:
                return CartMutation.STOCK_LIMIT_REACHED
            existing.quantity = min(existing.quantity + 1, existing.stock)
            return CartMutation.QUANTITY_UPDATED

        if item.stock <= 0:
            return CartMutation.STOCK_LIMIT_REACHED
        self._items[item.id] = item.model_copy(update={"quantity": 1})
        return CartMutation.ADDED

    def update_quantity(self, item_id: str, quantity: int) -> int:
        """
        Set the quantity of a line.

        Zero or less removes the line; anything else is clamped to [1, stock].
        Unknown ids are ignored.

        Returns:
            The quantity now stored (0 when the line is gone or never existed)
        """
        existing = self._items.get(item_id)
        if existing is None:
            return 0
        if quantity <= 0:
            self.remove_item(item_id)
            return 0
        existing.quantity = max(1, min(quantity, existing.stock))
        return existing.quantity

    def remove_item(self, item_id: str) -> bool:
        return self._items.pop(item_id, None) is not None

    def clear(self) -> None:
        self._items.clear()

    def is_in_cart(self, item_id: str) -> bool:
        return item_id in self._items

    def get_item(self, item_id: str) -> CartItemDTO | None:
        return self._items.get(item_id)

    def snapshot(self) -> list[dict]:
        """Order-creation payload: [{"partId": ..., "quantity": ...}]."""
        return [{"partId": item.id, "quantity": item.quantity} for item in self._items.values()]

    def to_dict(self) -> dict:
        return {"items": [item.model_dump() for item in self._items.values()]}

    @classmethod
    def from_dict(cls, data: dict) -> "Cart":
        return cls([CartItemDTO.model_validate(raw) for raw in data.get("items", [])])


class CartStore:
    """
    Redis-backed cart persistence keyed by the browsing session id.

    Each save refreshes the TTL, so abandoned carts expire on their own.
    Read-modify-write cycles go through mutate(), which retries under
    WATCH/MULTI so that concurrent requests of one session never overwrite
    each other.
    """

    KEY_PREFIX = "cart"
    MAX_ATTEMPTS = 10

    def __init__(self, redis: Redis, ttl_hours: int | None = None):
        self.redis = redis
        self.ttl_seconds = (ttl_hours if ttl_hours is not None else config.CART_TTL_HOURS) * 3600

    def _key(self, session_id: str) -> str:
        return f"{self.KEY_PREFIX}:{session_id}"

    @staticmethod
    def _decode(session_id: str, raw: str | bytes | None) -> Cart:
        if raw is None:
            return Cart()
        try:
            return Cart.from_dict(json.loads(raw))
        except (json.JSONDecodeError, ValidationError, TypeError, AttributeError) as e:
            # Unreadable snapshot: start over rather than fail every request of this session
            logger.error(f"Failed to load cart for session {session_id}: {e}")
            return Cart()

    async def load(self, session_id: str) -> Cart:
        return self._decode(session_id, await self.redis.get(self._key(session_id)))

    async def save(self, session_id: str, cart: Cart) -> None:
        await self.redis.set(self._key(session_id), json.dumps(cart.to_dict()), ex=self.ttl_seconds)

    async def mutate(self, session_id: str, change: Callable[[Cart], T]) -> tuple[Cart, T]:
        """
        Apply change() to the stored cart and write it back atomically.

        change() may run more than once and must only touch the cart it is
        given. When it leaves the cart untouched (returns None) nothing is
        written.

        Raises:
            CartBusyException: If the snapshot kept changing for MAX_ATTEMPTS tries
        """
        key = self._key(session_id)
        async with self.redis.pipeline(transaction=True) as pipe:
            for _ in range(self.MAX_ATTEMPTS):
                try:
                    await pipe.watch(key)
                    cart = self._decode(session_id, await pipe.get(key))
                    result = change(cart)
                    if result is None:
                        await pipe.unwatch()
                        return cart, result
                    pipe.multi()
                    pipe.set(key, json.dumps(cart.to_dict()), ex=self.ttl_seconds)
                    await pipe.execute()
                    return cart, result
                except WatchError:
                    logger.debug(f"Cart {session_id} changed during update, retrying")
                    continue
        raise CartBusyException(session_id, self.MAX_ATTEMPTS)

    async def discard(self, session_id: str) -> None:
        await self.redis.delete(self._key(session_id))


class CartService:

    @staticmethod
    def summarize(cart: Cart, message: str | None = None) -> dict:
        return {
            "items": [
                {
                    "id": item.id,
                    "partNumber": item.part_number,
                    "name": item.name,
                    "price": float(from_cents(item.price_cents)),
                    "quantity": item.quantity,
                    "stock": item.stock,
                    "image": item.image,
                }
                for item in cart.items
            ],
            "totalItems": cart.total_items,
            "totalPrice": float(cart.total_price),
            "message": message,
        }

    @staticmethod
    async def add_part(session_id: str, part_id: int, store: CartStore, session: AsyncSession) -> tuple[Cart, str]:
        """
        Add one unit of a catalog part to the session cart.

        Price and stock are taken from the catalog at this moment.

        Raises:
            PartNotFoundException: If the part does not exist or is inactive
        """
        part = await PartRepository.get_by_id(part_id, session)
        if part is None or not part.is_active:
            raise PartNotFoundException(part_id)

        line = CartItemDTO(
            id=str(part.id),
            part_number=part.part_number,
            name=part.name,
            price_cents=part.price_cents,
            stock=part.stock,
            image=part.image_url,
        )
        cart, mutation = await store.mutate(session_id, lambda c: c.add_item(line))

        message_keys = {
            CartMutation.ADDED: "cart_item_added",
            CartMutation.QUANTITY_UPDATED: "cart_quantity_updated",
            CartMutation.STOCK_LIMIT_REACHED: "cart_stock_limit_reached",
        }
        logger.info(f"Cart {session_id}: part {part_id} -> {mutation.value}")
        return cart, Localizator.get_text(MessageScope.CUSTOMER, message_keys[mutation])

    @staticmethod
    async def update_quantity(session_id: str, part_id: str, quantity: int,
                              store: CartStore) -> tuple[Cart, str | None]:
        """Ids that are not in the cart leave it unchanged and carry no message."""

        def change(cart: Cart) -> int | None:
            if not cart.is_in_cart(part_id):
                return None
            return cart.update_quantity(part_id, quantity)

        cart, stored = await store.mutate(session_id, change)
        if stored is None:
            return cart, None

        if stored == 0:
            key = "cart_item_removed"
        elif stored != quantity:
            key = "cart_stock_limit_reached"
        else:
            key = "cart_quantity_updated"
        return cart, Localizator.get_text(MessageScope.CUSTOMER, key)

    @staticmethod
    async def remove_part(session_id: str, part_id: str, store: CartStore) -> tuple[Cart, str]:
        cart, _ = await store.mutate(session_id, lambda c: c.remove_item(part_id) or None)
        return cart, Localizator.get_text(MessageScope.CUSTOMER, "cart_item_removed")

    @staticmethod
    async def clear(session_id: str, store: CartStore) -> tuple[Cart, str]:
        await store.discard(session_id)
        return Cart(), Localizator.get_text(MessageScope.CUSTOMER, "cart_cleared")
