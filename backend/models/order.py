# backend/models/order.py
import enum
from sqlalchemy import Column, Integer, String, Float, ForeignKey, DateTime, Enum, func
from sqlalchemy.orm import relationship
from database import Base

# Fulfillment lifecycle of an order
class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

# Payment lifecycle, changed independently of OrderStatus
class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"
    FAILED = "failed"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    # Cart session the order was placed from; scopes idempotent replays
    session_id = Column(String(64), nullable=True)

    # Customer details captured at checkout, independent of the account
    customer_name = Column(String, nullable=False)
    customer_email = Column(String, nullable=False, index=True)
    customer_phone = Column(String, nullable=True)
    shipping_address = Column(String, nullable=False)

    shipping_method = Column(String, nullable=True)
    shipping_cost = Column(Float, nullable=False, default=0.0)
    payment_method = Column(String, nullable=True)
    total = Column(Float, nullable=False)

    status = Column(
        Enum(OrderStatus, values_callable=_enum_values, name="order_status"),
        nullable=False, default=OrderStatus.PENDING,
    )
    payment_status = Column(
        Enum(PaymentStatus, values_callable=_enum_values, name="payment_status"),
        nullable=False, default=PaymentStatus.PENDING,
    )

    # Payment integration details
    payment_intent_id = Column(String, nullable=True)
    idempotency_key = Column(String, unique=True, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan", order_by="OrderItem.id")

# Snapshot of a cart line at purchase time, decoupled from the live product
class OrderItem(Base):
    __tablename__ = "order_items"
    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    product_id = Column(Integer, nullable=False)
    name = Column(String, nullable=False)
    price = Column(Float, nullable=False)
    quantity = Column(Integer, nullable=False)

    order = relationship("Order", back_populates="items")

    @property
    def line_total(self):
        return round(self.price * self.quantity, 2)
