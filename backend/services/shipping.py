# backend/services/shipping.py
import json
import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from config import settings
from models.setting import SiteSetting
from services.cart_lines import ItemMap, cart_subtotal

logger = logging.getLogger(__name__)

SHIPPING_METHODS_KEY = "shipping_methods"
PAYMENT_METHODS_KEY = "payment_methods"

# Used when the shipping_methods setting is missing or does not list the method
FIXED_SHIPPING_COSTS: Dict[str, float] = {
    "standard": 10.0,
    "express": 15.0,
    "overnight": 25.0,
}

DEFAULT_PAYMENT_METHODS = [
    {"id": "cod", "name": "Cash on Delivery", "description": "Pay when you receive your order", "enabled": True},
    {"id": "paymob", "name": "Credit/Debit Card (Paymob)", "description": "Secure online payment with Paymob", "enabled": True},
]


def _json_setting(db: Session, key: str) -> Optional[list]:
    setting = db.query(SiteSetting).filter(SiteSetting.key == key).first()
    if setting is None or not setting.value:
        return None
    try:
        value = json.loads(setting.value)
    except ValueError:
        logger.warning("Setting %s does not hold valid JSON, ignoring it", key)
        return None
    if not isinstance(value, list):
        logger.warning("Setting %s is not a JSON list, ignoring it", key)
        return None
    return value


def shipping_methods(db: Session) -> List[dict]:
    """Configured shipping options, or the fixed table when none are configured."""
    configured = _json_setting(db, SHIPPING_METHODS_KEY)
    if configured:
        return [m for m in configured if isinstance(m, dict) and "id" in m and "price" in m]
    return [
        {"id": method_id, "name": method_id.title() + " Shipping", "description": None, "price": price}
        for method_id, price in FIXED_SHIPPING_COSTS.items()
    ]


def payment_methods(db: Session) -> List[dict]:
    configured = _json_setting(db, PAYMENT_METHODS_KEY) or DEFAULT_PAYMENT_METHODS
    return [m for m in configured if isinstance(m, dict) and m.get("enabled", True)]


def shipping_cost(db: Session, method: Optional[str]) -> float:
    """Cost of ``method``; an unknown method falls back to the default cost instead of failing."""
    if method:
        for option in _json_setting(db, SHIPPING_METHODS_KEY) or []:
            if isinstance(option, dict) and option.get("id") == method:
                try:
                    return float(option["price"])
                except (KeyError, TypeError, ValueError):
                    logger.warning("Shipping method %s has no usable price", method)
                    break
        if method in FIXED_SHIPPING_COSTS:
            return FIXED_SHIPPING_COSTS[method]
        logger.info("Unknown shipping method %r, using default cost", method)
    return float(settings.DEFAULT_SHIPPING_COST)


def quote(db: Session, items: ItemMap, method: Optional[str]) -> dict:
    """Subtotal, shipping and total for an item map. Total always includes shipping."""
    subtotal = cart_subtotal(items)
    cost = shipping_cost(db, method)
    return {
        "subtotal": subtotal,
        "shipping_method": method,
        "shipping_cost": cost,
        "total": round(subtotal + cost, 2),
    }
