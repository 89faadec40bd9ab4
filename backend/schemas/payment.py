# backend/schemas/payment.py
from pydantic import Field

from schemas.base import CamelModel
from schemas.order import OrderOut


class PaymentCreateRequest(CamelModel):
    amount: float = Field(gt=0)
    order_id: int


class PaymentIntentOut(CamelModel):
    id: str
    amount: float
    currency: str
    status: str


class PaymentCreateResponse(CamelModel):
    payment_intent: PaymentIntentOut


class PaymentConfirmRequest(CamelModel):
    payment_intent_id: str = Field(min_length=1)
    order_id: int


class PaymentConfirmResponse(CamelModel):
    success: bool
    order: OrderOut
