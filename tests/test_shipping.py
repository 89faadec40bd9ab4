import json

import pytest

from models.setting import SiteSetting
from services import shipping


class TestShippingCost:
    @pytest.mark.parametrize("method, cost", [("standard", 10.0), ("express", 15.0), ("overnight", 25.0)])
    def test_fixed_table_when_not_configured(self, db, method, cost):
        assert shipping.shipping_cost(db, method) == cost

    def test_unknown_method_falls_back_to_default(self, db):
        assert shipping.shipping_cost(db, "teleport") == 10.0

    def test_missing_method_uses_default(self, db):
        assert shipping.shipping_cost(db, None) == 10.0

    def test_configured_price_wins_over_fixed_table(self, db, shipping_settings):
        assert shipping.shipping_cost(db, "express") == 20.0

    def test_method_missing_from_setting_uses_fixed_table(self, db, shipping_settings):
        assert shipping.shipping_cost(db, "overnight") == 25.0

    def test_invalid_json_setting_is_ignored(self, db):
        db.add(SiteSetting(key="shipping_methods", value="{not json", group="shipping",
                           label="Shipping Methods", type="json"))
        db.commit()
        assert shipping.shipping_cost(db, "express") == 15.0


class TestQuote:
    def test_total_includes_shipping(self, db):
        items = {"7": {"id": 7, "name": "Dress", "price": 100, "quantity": 2}}
        assert shipping.quote(db, items, "express") == {
            "subtotal": 200.0,
            "shipping_method": "express",
            "shipping_cost": 15.0,
            "total": 215.0,
        }


class TestMethodLists:
    def test_default_shipping_methods(self, db):
        ids = [m["id"] for m in shipping.shipping_methods(db)]
        assert ids == ["standard", "express", "overnight"]

    def test_configured_shipping_methods(self, db, shipping_settings):
        assert shipping.shipping_methods(db) == shipping_settings

    def test_disabled_payment_methods_are_hidden(self, db):
        methods = [
            {"id": "cod", "name": "Cash on Delivery", "enabled": True},
            {"id": "paymob", "name": "Card", "enabled": False},
        ]
        db.add(SiteSetting(key="payment_methods", value=json.dumps(methods), group="payment",
                           label="Payment Methods", type="json"))
        db.commit()

        assert [m["id"] for m in shipping.payment_methods(db)] == ["cod"]

    def test_default_payment_methods(self, db):
        assert {m["id"] for m in shipping.payment_methods(db)} == {"cod", "paymob"}


class TestCheckoutOptionRoutes:
    def test_shipping_methods_route(self, client, shipping_settings):
        data = client.get("/api/checkout/shipping-methods").json()
        assert [(m["id"], m["price"]) for m in data] == [("standard", 12.0), ("express", 20.0)]

    def test_payment_methods_route(self, client):
        data = client.get("/api/checkout/payment-methods").json()
        assert {m["id"] for m in data} == {"cod", "paymob"}
