# backend/schemas/checkout.py
from typing import List, Literal, Optional

from pydantic import EmailStr, Field

from schemas.base import CamelModel
from schemas.order import OrderWithItems


# Entry of the shipping_methods setting
class ShippingMethodOut(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    price: float


# Entry of the payment_methods setting
class PaymentMethodOut(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    enabled: bool = True


class CheckoutQuoteRequest(CamelModel):
    shipping_method: Optional[str] = None


class CheckoutQuote(CamelModel):
    subtotal: float
    shipping_method: Optional[str] = None
    shipping_cost: float
    total: float


# Final checkout submission: shipping step + payment step in one payload
class CheckoutRequest(CamelModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: EmailStr
    phone: Optional[str] = None
    address: str = Field(min_length=1)
    city: str = Field(min_length=1)
    state: Optional[str] = None
    postal_code: str = Field(min_length=1)
    country: str = Field(min_length=1)
    shipping_method: str = "standard"
    payment_method: Literal["paymob", "cod"] = "paymob"
    idempotency_key: Optional[str] = Field(None, min_length=1, max_length=128)

    @property
    def customer_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    # Flattened the same way the storefront always stored addresses
    @property
    def shipping_address(self) -> str:
        parts = [self.address, self.city, self.state, self.postal_code, self.country]
        return ", ".join(p for p in parts if p)


class CheckoutResponse(CamelModel):
    order: OrderWithItems
    payment_intent_id: Optional[str] = None
    replayed: bool = False
