# backend/utils/paymob_client.py
import httpx
import logging
from urllib.parse import urljoin
from config import settings

logger = logging.getLogger(__name__)

class PaymobClient:
    def __init__(self, api_url: str = None, api_key: str = None, integration_id: str = None):
        # Initialize configuration from settings unless overridden
        self.api_url = api_url or settings.PAYMOB_API_URL
        self.api_key = api_key if api_key is not None else settings.PAYMOB_API_KEY
        self.integration_id = integration_id if integration_id is not None else settings.PAYMOB_INTEGRATION_ID

    async def _post(self, path: str, payload: dict) -> dict:
        url = urljoin(self.api_url, path)
        async with httpx.AsyncClient(timeout=30.0) as client:
            try:
                response = await client.post(url, json=payload)
                response.raise_for_status()
                return response.json()
            except (httpx.RequestError, httpx.HTTPStatusError) as e:
                # Log gateway response body when there is one, then re-raise
                resp_text = e.response.text if isinstance(e, httpx.HTTPStatusError) else str(e)
                logger.error("Paymob %s error: %s", path, resp_text)
                raise

    async def get_auth_token(self) -> str:
        # Exchange the merchant API key for a short-lived auth token
        data = await self._post("auth/tokens", {"api_key": self.api_key})
        return data["token"]

    async def register_order(self, token: str, amount_cents: int, currency: str, merchant_order_id: str) -> int:
        # Register the order on the gateway side, returns Paymob's order id
        data = await self._post("ecommerce/orders", {
            "auth_token": token,
            "delivery_needed": False,
            "amount_cents": amount_cents,
            "currency": currency,
            "merchant_order_id": merchant_order_id,
            "items": [],
        })
        return data["id"]

    async def create_payment_key(self, token: str, paymob_order_id: int, amount_cents: int,
                                 currency: str, billing_data: dict) -> str:
        # Payment key used by the hosted card iframe
        data = await self._post("acceptance/payment_keys", {
            "auth_token": token,
            "amount_cents": amount_cents,
            "expiration": 3600,
            "order_id": paymob_order_id,
            "billing_data": billing_data,
            "currency": currency,
            "integration_id": int(self.integration_id) if self.integration_id else None,
        })
        return data["token"]

    async def transaction_inquiry(self, token: str, paymob_order_id: str) -> dict:
        # Latest transaction state for a gateway order
        return await self._post("ecommerce/orders/transaction_inquiry", {
            "auth_token": token,
            "order_id": paymob_order_id,
        })
