# backend/services/order_store.py
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from models.order import Order, OrderItem, OrderStatus, PaymentStatus


class OrderStore:
    """Order headers and their line snapshots.

    Every write flushes (so generated ids are available) but never commits:
    the caller decides where the unit of work ends.
    """

    def __init__(self, db: Session):
        self.db = db

    def create(self, **header) -> Order:
        header.setdefault("status", OrderStatus.PENDING)
        header.setdefault("payment_status", PaymentStatus.PENDING)
        order = Order(**header)
        self.db.add(order)
        self.db.flush()
        return order

    def add_item(self, order_id: int, *, product_id: int, name: str, price: float, quantity: int) -> OrderItem:
        item = OrderItem(order_id=order_id, product_id=product_id, name=name, price=price, quantity=quantity)
        self.db.add(item)
        self.db.flush()
        return item

    def update_status(
        self,
        order_id: int,
        status: Optional[OrderStatus] = None,
        payment_status: Optional[PaymentStatus] = None,
    ) -> Optional[Order]:
        order = self.db.get(Order, order_id)
        if order is None:
            return None
        if status is not None:
            order.status = OrderStatus(status)
        if payment_status is not None:
            order.payment_status = PaymentStatus(payment_status)
        self.db.flush()
        return order

    def set_payment_intent(self, order_id: int, payment_intent_id: str) -> Optional[Order]:
        order = self.db.get(Order, order_id)
        if order is None:
            return None
        order.payment_intent_id = payment_intent_id
        self.db.flush()
        return order

    def get(self, order_id: int) -> Optional[Order]:
        return (
            self.db.query(Order)
            .options(selectinload(Order.items))
            .filter(Order.id == order_id)
            .first()
        )

    def find_by_idempotency_key(self, key: str) -> Optional[Order]:
        return (
            self.db.query(Order)
            .options(selectinload(Order.items))
            .filter(Order.idempotency_key == key)
            .first()
        )

    def list_by_user(self, user_id: int) -> List[Order]:
        return (
            self.db.query(Order)
            .filter(Order.user_id == user_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .all()
        )

    def list_all(self) -> List[Order]:
        return self.db.query(Order).order_by(Order.created_at.desc(), Order.id.desc()).all()
