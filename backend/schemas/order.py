from pydantic import EmailStr, Field
from typing import List, Optional
from datetime import datetime

from models.order import OrderStatus, PaymentStatus
from schemas.base import CamelModel


# Output schema for an order line snapshot
class OrderItemOut(CamelModel):
    id: int
    order_id: int
    product_id: int
    name: str
    price: float
    quantity: int
    line_total: float


# Output schema for the order header
class OrderOut(CamelModel):
    id: int
    user_id: Optional[int] = None
    customer_name: str
    customer_email: str
    customer_phone: Optional[str] = None
    shipping_address: str
    shipping_method: Optional[str] = None
    shipping_cost: float
    payment_method: Optional[str] = None
    total: float
    status: OrderStatus
    payment_status: PaymentStatus
    payment_intent_id: Optional[str] = None
    created_at: Optional[datetime] = None


class OrderWithItems(OrderOut):
    items: List[OrderItemOut]


# Line submitted with POST /api/orders
class OrderLineIn(CamelModel):
    id: int
    name: str
    price: float = Field(ge=0)
    quantity: int = Field(gt=0)


# Input schema for POST /api/orders; any client-side total is ignored
class OrderCreatePayload(CamelModel):
    customer_name: str = Field(min_length=1)
    customer_email: EmailStr
    customer_phone: Optional[str] = None
    shipping_address: str = Field(min_length=1)
    shipping_method: Optional[str] = None
    payment_method: Optional[str] = None
    items: List[OrderLineIn] = Field(min_length=1)


# Admin status change; payment_status only changes when sent
class OrderStatusUpdate(CamelModel):
    status: OrderStatus
    payment_status: Optional[PaymentStatus] = None


# Public order lookup
class OrderTrackRequest(CamelModel):
    order_id: int
    email: str = Field(min_length=1)
