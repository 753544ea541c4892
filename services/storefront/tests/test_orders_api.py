from sqlalchemy.exc import OperationalError

from app.infrastructure.store import SqlAlchemyStore

def test_place_order_requires_session(client):
    resp = client.post("/api/orders", json={"items": [{"productId": "p1", "size": "M", "quantity": 1}]})
    assert resp.status_code == 401
    assert resp.json() == {"ok": False, "error": "Not authenticated"}

def test_place_order_success(shopper_client, make_product, stock_of):
    product = make_product(price_minor=4500, stock={"M": 2})

    resp = shopper_client.post("/api/orders", json={"items": [{"productId": product.id, "size": "M", "quantity": 2}]})

    assert resp.status_code == 201
    body = resp.json()
    assert body["ok"] is True
    order = body["order"]
    assert order["subtotal"] == 9000
    assert order["total"] == 9000
    assert order["currency"] == "JMD"
    assert order["status"] == "processing"
    assert order["id"] and order["createdAt"]
    assert stock_of(product.id, "M") == 0

def test_qty_alias_is_accepted(shopper_client, make_product, stock_of):
    product = make_product(stock={"L": 3})
    resp = shopper_client.post("/api/orders", json={"items": [{"productId": product.id, "size": "L", "qty": "2"}]})
    assert resp.status_code == 201
    assert stock_of(product.id, "L") == 1

def test_empty_cart_is_rejected(shopper_client, make_product):
    product = make_product(stock={"M": 2})
    for body in ({}, {"items": []}, {"items": [{"productId": product.id, "size": "M", "quantity": -5}]}):
        resp = shopper_client.post("/api/orders", json=body)
        assert resp.status_code == 400
        assert resp.json() == {"ok": False, "error": "Cart is empty"}

def test_out_of_stock_conflict_body(shopper_client, make_product, stock_of):
    product = make_product(stock={"M": 1})

    resp = shopper_client.post("/api/orders", json={"items": [
        {"productId": product.id, "size": "M", "quantity": 1},
        {"productId": "p404", "size": "L", "quantity": 1},
    ]})

    assert resp.status_code == 409
    assert resp.json() == {
        "ok": False,
        "code": "OUT_OF_STOCK",
        "items": [{"productId": "p404", "size": "L", "available": 0, "reason": "NOT_FOUND"}],
    }
    assert stock_of(product.id, "M") == 1

def test_second_order_for_last_units_conflicts(shopper_client, make_product):
    product = make_product(stock={"M": 2})
    cart = {"items": [{"productId": product.id, "size": "M", "quantity": 2}]}

    assert shopper_client.post("/api/orders", json=cart).status_code == 201
    resp = shopper_client.post("/api/orders", json=cart)

    assert resp.status_code == 409
    assert resp.json()["items"] == [{"productId": product.id, "size": "M", "available": 0}]

def test_price_change_does_not_rewrite_past_orders(client, make_user, make_product, login):
    product = make_product(price_minor=4500, stock={"M": 5})
    shopper = make_user()
    admin = make_user(email="admin@example.com", role="admin")

    login(shopper)
    placed = client.post("/api/orders", json={"items": [{"productId": product.id, "size": "M", "quantity": 2}]})
    order_id = placed.json()["order"]["id"]

    login(admin)
    patched = client.patch(f"/api/admin/products/{product.id}", json={"priceMinor": 9999})
    assert patched.json()["product"]["priceMinor"] == 9999

    login(shopper)
    receipt = client.get(f"/api/orders/{order_id}").json()["order"]
    assert receipt["total"] == 9000
    assert receipt["items"] == [{"name": "Silhouette Tee", "size": "M", "qty": 2, "price": 4500}]

def test_order_history_lists_only_callers_orders(client, make_user, make_product, login):
    product = make_product(price_minor=1000, stock={"M": 10})
    me = make_user()
    other = make_user(email="other@example.com")

    login(other)
    client.post("/api/orders", json={"items": [{"productId": product.id, "size": "M", "quantity": 1}]})
    login(me)
    client.post("/api/orders", json={"items": [{"productId": product.id, "size": "M", "quantity": 3}]})

    for path in ("/api/orders/my", "/api/orders/me"):
        body = client.get(path).json()
        assert body["ok"] is True
        assert len(body["orders"]) == 1
        entry = body["orders"][0]
        assert entry["total"] == 3000
        assert entry["items"] == [{"productId": product.id, "size": "M", "quantity": 3, "unitPrice": 1000}]

def test_receipt_of_another_users_order_is_not_found(client, make_user, make_product, login):
    product = make_product(stock={"M": 2})
    owner = make_user()
    stranger = make_user(email="stranger@example.com")

    login(owner)
    order_id = client.post(
        "/api/orders", json={"items": [{"productId": product.id, "size": "M", "quantity": 1}]}
    ).json()["order"]["id"]

    login(stranger)
    resp = client.get(f"/api/orders/{order_id}")
    assert resp.status_code == 404
    assert resp.json() == {"ok": False, "error": "Order not found"}

def test_database_failure_returns_500_and_keeps_stock(shopper_client, make_product, stock_of, monkeypatch):
    product = make_product(stock={"M": 2})

    def connection_lost(self, *args, **kwargs):
        raise OperationalError("INSERT INTO orders", {}, Exception("connection lost"))

    monkeypatch.setattr(SqlAlchemyStore, "create_order", connection_lost)
    resp = shopper_client.post("/api/orders", json={"items": [{"productId": product.id, "size": "M", "quantity": 1}]})

    assert resp.status_code == 500
    assert resp.json() == {"ok": False, "error": "connection lost"}
    assert stock_of(product.id, "M") == 2
