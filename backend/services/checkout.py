# backend/services/checkout.py
"""Turns a session cart into a placed order.

The whole sequence (order header, line snapshots, payment, cart clear) runs
as one unit of work on the request's database session: either all of it is
committed or none of it is. The only partial outcome that is committed on
purpose is a declined payment, which keeps the order as ``pending/failed``
and leaves the cart untouched so the shopper can retry. Its idempotency key is
released, so the retry may reuse it. A key is only replayed for the session or
account that placed the order.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config import settings
from models.order import Order, OrderStatus, PaymentStatus
from services import shipping
from services.cart_store import CartStore
from services.errors import CartEmptyError, IdempotencyConflictError, PaymentDeclinedError
from services.order_store import OrderStore
from services.payments import PaymentProvider

logger = logging.getLogger(__name__)

CASH_ON_DELIVERY = "cod"


@dataclass
class CheckoutDetails:
    customer_name: str
    customer_email: str
    shipping_address: str
    shipping_method: Optional[str]
    payment_method: str
    customer_phone: Optional[str] = None
    idempotency_key: Optional[str] = None


@dataclass
class CheckoutResult:
    order: Order
    payment_intent_id: Optional[str] = None
    replayed: bool = False


class CheckoutService:
    def __init__(self, db: Session, cart_store: CartStore, payment_provider: PaymentProvider,
                 currency: Optional[str] = None):
        self.db = db
        self.carts = cart_store
        self.orders = OrderStore(db)
        self.payments = payment_provider
        self.currency = currency or settings.CURRENCY

    def _replay(self, key: Optional[str], session_id: str, user_id: Optional[int]) -> Optional[CheckoutResult]:
        if not key:
            return None
        existing = self.orders.find_by_idempotency_key(key)
        if existing is None:
            return None
        # Only the session or account that placed the order may replay it
        same_owner = existing.session_id == session_id or (user_id is not None and existing.user_id == user_id)
        if not same_owner:
            logger.warning("Idempotency key %s reused by another session, refusing replay", key)
            raise IdempotencyConflictError("Idempotency key already used")
        logger.info("Checkout replay for idempotency key %s -> order %s", key, existing.id)
        return CheckoutResult(order=existing, payment_intent_id=existing.payment_intent_id, replayed=True)

    async def place_order(self, session_id: str, user_id: Optional[int], details: CheckoutDetails) -> CheckoutResult:
        replay = self._replay(details.idempotency_key, session_id, user_id)
        if replay:
            return replay

        items = self.carts.get(session_id)
        if not items:
            raise CartEmptyError("Cart is empty")

        totals = shipping.quote(self.db, items, details.shipping_method)
        intent_id = None

        try:
            order = self.orders.create(
                user_id=user_id,
                session_id=session_id,
                customer_name=details.customer_name,
                customer_email=details.customer_email,
                customer_phone=details.customer_phone,
                shipping_address=details.shipping_address,
                shipping_method=details.shipping_method,
                shipping_cost=totals["shipping_cost"],
                payment_method=details.payment_method,
                total=totals["total"],
                idempotency_key=details.idempotency_key,
            )
            for line in items.values():
                self.orders.add_item(
                    order.id,
                    product_id=int(line["id"]),
                    name=line["name"],
                    price=float(line["price"]),
                    quantity=int(line["quantity"]),
                )

            if details.payment_method != CASH_ON_DELIVERY:
                intent = await self.payments.create_intent(
                    order.total, order.id, self.currency,
                    customer={
                        "name": details.customer_name,
                        "email": details.customer_email,
                        "phone": details.customer_phone,
                        "address": details.shipping_address,
                    },
                )
                intent_id = intent.id
                self.orders.set_payment_intent(order.id, intent_id)

                confirmation = await self.payments.confirm_intent(intent_id, order.id)
                if not confirmation.paid:
                    self.orders.update_status(order.id, OrderStatus.PENDING, PaymentStatus.FAILED)
                    # Key is released so a retry with it makes a new payment attempt
                    order.idempotency_key = None
                    self.db.commit()
                    logger.warning("Payment declined for order %s: %s", order.id, confirmation.message)
                    raise PaymentDeclinedError(confirmation.message or "Payment was declined", order_id=order.id)

                self.orders.update_status(order.id, OrderStatus.PROCESSING, PaymentStatus.PAID)

            self.carts.clear(session_id, user_id)
            self.db.commit()
        except PaymentDeclinedError:
            raise
        except IntegrityError:
            # Concurrent submission with the same idempotency key won the race
            self.db.rollback()
            replay = self._replay(details.idempotency_key, session_id, user_id)
            if replay:
                return replay
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Checkout failed for session %s, rolled back", session_id)
            raise

        placed = self.orders.get(order.id)
        logger.info("Order %s placed: total=%.2f status=%s/%s",
                    placed.id, placed.total, placed.status.value, placed.payment_status.value)
        return CheckoutResult(order=placed, payment_intent_id=intent_id)
