from conftest import cart_line
from models.log import AuditLog
from services.cart_store import InMemoryCartStore, SqlCartStore


class TestReplaceCart:
    def test_new_session_has_empty_cart(self, client):
        response = client.get("/api/cart")
        assert response.status_code == 200
        assert response.json() == {}

    def test_get_returns_exactly_what_was_posted(self, client):
        body = {"7": cart_line(7, quantity=2), "9": cart_line(9, name="Clutch", price=40.0, image_url="")}
        assert client.post("/api/cart", json=body).status_code == 200

        assert client.get("/api/cart").json() == body

    def test_post_replaces_instead_of_merging(self, client):
        client.post("/api/cart", json={"7": cart_line(7)})
        client.post("/api/cart", json={"9": cart_line(9)})

        assert list(client.get("/api/cart").json()) == ["9"]

    def test_non_positive_quantity_lines_are_not_stored(self, client):
        body = {"7": cart_line(7, quantity=0), "8": cart_line(8, quantity=-2), "9": cart_line(9, quantity=1)}
        response = client.post("/api/cart", json=body)

        assert list(response.json()) == ["9"]
        assert list(client.get("/api/cart").json()) == ["9"]

    def test_malformed_body_is_400_with_field_errors(self, client):
        response = client.post("/api/cart", json={"7": {"id": 7, "name": "Dress"}})

        assert response.status_code == 400
        data = response.json()
        assert data["detail"] == "Validation failed"
        assert data["errors"]

    def test_key_must_match_line_id(self, client):
        response = client.post("/api/cart", json={"7": cart_line(8)})

        assert response.status_code == 400
        assert client.get("/api/cart").json() == {}

    def test_lines_are_addressable_by_their_key(self, client):
        client.post("/api/cart", json={"8": cart_line(8)})

        response = client.put("/api/cart/items/8", json={"quantity": 3})
        assert response.status_code == 200
        assert response.json()["8"]["quantity"] == 3

    def test_carts_are_isolated_per_session(self, client):
        from fastapi.testclient import TestClient
        from main import app

        client.post("/api/cart", json={"7": cart_line(7)})
        with TestClient(app) as other:
            assert other.get("/api/cart").json() == {}

    def test_write_is_audited_with_session(self, client, db):
        client.post("/api/cart", json={"7": cart_line(7)})

        entry = db.query(AuditLog).filter(AuditLog.action == "CART_REPLACE").one()
        assert entry.resource == "cart"
        assert entry.session_id
        assert entry.meta["lines"] == 1


class TestCartItems:
    def test_add_takes_price_snapshot_from_catalog(self, client, catalog):
        gown = catalog["gown"]
        response = client.post("/api/cart/items", json={"productId": gown.id, "quantity": 2})

        assert response.status_code == 200
        line = response.json()[str(gown.id)]
        assert line["price"] == 250.0
        assert line["quantity"] == 2
        assert line["imageUrl"] == "/img/gown.jpg"

    def test_adding_same_product_merges_quantity(self, client, catalog):
        dress = catalog["dress"]
        client.post("/api/cart/items", json={"productId": dress.id})
        response = client.post("/api/cart/items", json={"productId": dress.id, "quantity": 3})

        assert response.json()[str(dress.id)]["quantity"] == 4

    def test_add_unknown_product_is_404(self, client, catalog):
        assert client.post("/api/cart/items", json={"productId": 999}).status_code == 404

    def test_add_out_of_stock_product_is_400(self, client, catalog):
        response = client.post("/api/cart/items", json={"productId": catalog["clutch"].id})
        assert response.status_code == 400

    def test_add_zero_quantity_is_rejected(self, client, catalog):
        response = client.post("/api/cart/items", json={"productId": catalog["dress"].id, "quantity": 0})
        assert response.status_code == 400

    def test_update_quantity(self, client):
        client.post("/api/cart", json={"7": cart_line(7, quantity=1)})
        response = client.put("/api/cart/items/7", json={"quantity": 5})

        assert response.status_code == 200
        assert response.json()["7"]["quantity"] == 5

    def test_update_to_zero_removes_line(self, client):
        client.post("/api/cart", json={"7": cart_line(7)})
        response = client.put("/api/cart/items/7", json={"quantity": 0})

        assert response.json() == {}
        assert client.get("/api/cart").json() == {}

    def test_update_missing_line_is_404(self, client):
        assert client.put("/api/cart/items/7", json={"quantity": 2}).status_code == 404

    def test_delete_line(self, client):
        client.post("/api/cart", json={"7": cart_line(7), "9": cart_line(9)})
        response = client.delete("/api/cart/items/7")

        assert response.status_code == 200
        assert list(response.json()) == ["9"]

    def test_delete_missing_line_is_404(self, client):
        assert client.delete("/api/cart/items/7").status_code == 404


class TestCartSummary:
    def test_summary_includes_shipping_in_total(self, client):
        client.post("/api/cart", json={"7": cart_line(7, price=100.0, quantity=2)})
        response = client.get("/api/cart/summary", params={"shippingMethod": "express"})

        data = response.json()
        assert data["itemCount"] == 2
        assert data["subtotal"] == 200.0
        assert data["shippingMethod"] == "express"
        assert data["shippingCost"] == 15.0
        assert data["total"] == 215.0

    def test_summary_without_method_uses_default_cost(self, client):
        client.post("/api/cart", json={"7": cart_line(7, price=50.0)})
        data = client.get("/api/cart/summary").json()

        assert data["shippingCost"] == 10.0
        assert data["total"] == 60.0

    def test_summary_uses_configured_shipping_methods(self, client, shipping_settings):
        client.post("/api/cart", json={"7": cart_line(7, price=50.0)})
        data = client.get("/api/cart/summary", params={"shippingMethod": "express"}).json()

        assert data["shippingCost"] == 20.0
        assert data["total"] == 70.0


class TestCartStores:
    def _items(self):
        return {"7": cart_line(7, quantity=2), "8": cart_line(8, quantity=0)}

    def test_in_memory_store_replaces_and_drops_empty_lines(self):
        store = InMemoryCartStore()
        assert store.get("s1") == {}

        store.put("s1", None, self._items())
        assert list(store.get("s1")) == ["7"]

        store.clear("s1")
        assert store.get("s1") == {}

    def test_sql_store_creates_row_on_first_write(self, db):
        store = SqlCartStore(db)
        store.put("s1", None, self._items())
        db.commit()

        assert list(store.get("s1")) == ["7"]
        store.put("s1", None, {"9": cart_line(9)})
        db.commit()
        assert list(store.get("s1")) == ["9"]
