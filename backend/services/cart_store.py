# backend/services/cart_store.py
"""Session-keyed cart storage.

``put`` replaces the whole item map; there is no merge and no version check,
so concurrent writers to one session resolve as last-write-wins. Merging is
done by the caller with :mod:`services.cart_lines`.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Optional

from sqlalchemy.orm import Session

from models.cart import Cart
from services.cart_lines import ItemMap, normalize


@dataclass
class StoredCart:
    session_id: str
    user_id: Optional[int]
    items: ItemMap = field(default_factory=dict)


class CartStore(ABC):
    @abstractmethod
    def get(self, session_id: str) -> ItemMap:
        """Item map for the session, ``{}`` when no cart was written yet."""

    @abstractmethod
    def put(self, session_id: str, user_id: Optional[int], items: ItemMap) -> StoredCart:
        """Replace the session's item map, creating the cart on first write."""

    def clear(self, session_id: str, user_id: Optional[int] = None) -> StoredCart:
        return self.put(session_id, user_id, {})


class SqlCartStore(CartStore):
    """Cart rows in the ``carts`` table. Flushes only; the caller commits."""

    def __init__(self, db: Session):
        self.db = db

    def _row(self, session_id: str) -> Optional[Cart]:
        return self.db.query(Cart).filter(Cart.session_id == session_id).first()

    def get(self, session_id: str) -> ItemMap:
        cart = self._row(session_id)
        if cart is None or not cart.items:
            return {}
        return normalize(cart.items)

    def put(self, session_id: str, user_id: Optional[int], items: ItemMap) -> StoredCart:
        cleaned = normalize(items)
        cart = self._row(session_id)
        if cart is None:
            cart = Cart(session_id=session_id, user_id=user_id, items=cleaned)
            self.db.add(cart)
        else:
            # New dict instance so the JSON column is flagged dirty
            cart.items = cleaned
            cart.user_id = user_id
        self.db.flush()
        return StoredCart(session_id=session_id, user_id=user_id, items=cleaned)


class InMemoryCartStore(CartStore):
    """Process-local store, used by tests and single-process demos."""

    def __init__(self):
        self._carts: Dict[str, StoredCart] = {}

    def get(self, session_id: str) -> ItemMap:
        cart = self._carts.get(session_id)
        return normalize(cart.items) if cart else {}

    def put(self, session_id: str, user_id: Optional[int], items: ItemMap) -> StoredCart:
        stored = StoredCart(session_id=session_id, user_id=user_id, items=normalize(items))
        self._carts[session_id] = stored
        return stored
