# backend/services/payments.py
"""Payment provider capability used by checkout and the payment routes.

Two variants share one interface: the stub never leaves the process and
always reports the intent as paid, the Paymob variant talks to the real
gateway. The checkout orchestrator only sees ``PaymentProvider``.
"""
import asyncio
import logging
import secrets
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import httpx

from config import settings
from services.errors import PaymentProviderError
from utils.paymob_client import PaymobClient

logger = logging.getLogger(__name__)


@dataclass
class PaymentIntent:
    id: str
    amount: float
    currency: str
    status: str = "pending"
    client_secret: Optional[str] = None


@dataclass
class PaymentConfirmation:
    intent_id: str
    paid: bool
    message: Optional[str] = None


class PaymentProvider(ABC):
    name = "abstract"

    @abstractmethod
    async def create_intent(self, amount: float, order_id: int, currency: str,
                            customer: Optional[dict] = None) -> PaymentIntent:
        ...

    @abstractmethod
    async def confirm_intent(self, intent_id: str, order_id: int) -> PaymentConfirmation:
        ...


class StubPaymentProvider(PaymentProvider):
    """Stand-in gateway: opaque intent ids, a simulated delay, always paid."""

    name = "stub"

    def __init__(self, delay_seconds: float = 0.0):
        self.delay_seconds = delay_seconds

    async def create_intent(self, amount, order_id, currency, customer=None):
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)
        intent = PaymentIntent(id=f"pi_{secrets.token_hex(8)}", amount=amount, currency=currency)
        logger.info("Stub payment intent %s created for order %s (%.2f %s)", intent.id, order_id, amount, currency)
        return intent

    async def confirm_intent(self, intent_id, order_id):
        return PaymentConfirmation(intent_id=intent_id, paid=True)


class PaymobPaymentProvider(PaymentProvider):
    """Paymob accept API: gateway order + payment key, confirmed by transaction inquiry."""

    name = "paymob"

    def __init__(self, client: Optional[PaymobClient] = None):
        self.client = client or PaymobClient()

    async def create_intent(self, amount, order_id, currency, customer=None):
        amount_cents = int(round(amount * 100))
        # Gateway rejects reused merchant ids, suffix with a timestamp
        merchant_order_id = f"{order_id}_{int(time.time())}"
        customer = customer or {}
        first_name, _, last_name = (customer.get("name") or "Guest Customer").partition(" ")
        billing_data = {
            "first_name": first_name or "NA",
            "last_name": last_name or "NA",
            "email": customer.get("email") or "NA",
            "phone_number": customer.get("phone") or "NA",
            "street": customer.get("address") or "NA",
            "city": "NA", "country": "NA", "building": "NA", "floor": "NA", "apartment": "NA",
        }
        try:
            token = await self.client.get_auth_token()
            paymob_order_id = await self.client.register_order(token, amount_cents, currency, merchant_order_id)
            payment_key = await self.client.create_payment_key(token, paymob_order_id, amount_cents, currency, billing_data)
        except (httpx.HTTPError, KeyError) as e:
            raise PaymentProviderError(f"Payment gateway error: {e}") from e
        return PaymentIntent(id=str(paymob_order_id), amount=amount, currency=currency, client_secret=payment_key)

    async def confirm_intent(self, intent_id, order_id):
        try:
            token = await self.client.get_auth_token()
            data = await self.client.transaction_inquiry(token, intent_id)
        except (httpx.HTTPError, KeyError) as e:
            raise PaymentProviderError(f"Payment gateway error: {e}") from e
        paid = bool(data.get("success")) and not data.get("pending", False)
        details = data.get("data")
        message = details.get("message") if isinstance(details, dict) else None
        return PaymentConfirmation(intent_id=intent_id, paid=paid, message=message)


def get_payment_provider() -> PaymentProvider:
    """FastAPI dependency picking the provider from settings."""
    if settings.PAYMENT_PROVIDER.lower() == "paymob":
        return PaymobPaymentProvider()
    return StubPaymentProvider(delay_seconds=settings.PAYMENT_SIMULATED_DELAY_SECONDS)
