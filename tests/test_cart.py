from sqlmodel import select

from flowershop.models.cart import CartItem
from flowershop.services import cart_service


def test_cart_requires_login(client):
    response = client.get("/api/cart")

    assert response.status_code == 401
    assert response.json() == {"error": "Not authenticated"}


def test_unknown_session_is_rejected(client):
    response = client.get("/api/cart", headers={"X-Session-Id": "missing"})

    assert response.status_code == 401
    assert response.json()["error"] == "Session expired. Please log in again."


def test_add_and_view_cart(client, user, auth_headers, make_product):
    headers = auth_headers(user)
    rose = make_product("Rose", 120.0)
    tulip = make_product("Tulip", 40.0)

    assert client.post("/api/cart", json={"product_id": rose.id, "quantity": 2}, headers=headers).status_code == 201
    assert client.post("/api/cart", json={"product_id": tulip.id}, headers=headers).status_code == 201

    body = client.get("/api/cart", headers=headers).json()

    assert [i["product_name"] for i in body["items"]] == ["Rose", "Tulip"]
    assert body["items"][0]["line_total"] == 240.0
    assert body["total"] == 280.0


def test_adding_same_product_merges_quantity(client, user, auth_headers, make_product, session):
    headers = auth_headers(user)
    rose = make_product()

    client.post("/api/cart", json={"product_id": rose.id, "quantity": 1}, headers=headers)
    response = client.post("/api/cart", json={"product_id": rose.id, "quantity": 3}, headers=headers)

    assert response.json()["quantity"] == 4
    rows = session.exec(select(CartItem).where(CartItem.user_id == user.id)).all()
    assert len(rows) == 1


def test_add_unknown_product(client, user, auth_headers):
    response = client.post("/api/cart", json={"product_id": 999}, headers=auth_headers(user))

    assert response.status_code == 404
    assert response.json() == {"error": "Product not found"}


def test_add_rejects_non_positive_quantity(client, user, auth_headers, make_product):
    rose = make_product()

    response = client.post(
        "/api/cart", json={"product_id": rose.id, "quantity": 0}, headers=auth_headers(user)
    )

    assert response.status_code == 400
    assert "quantity" in response.json()["error"]


def test_update_quantity_and_remove_on_zero(client, user, auth_headers, make_product):
    headers = auth_headers(user)
    rose = make_product()
    item_id = client.post("/api/cart", json={"product_id": rose.id}, headers=headers).json()["id"]

    updated = client.put(f"/api/cart/{item_id}", json={"quantity": 5}, headers=headers)
    assert updated.json()["quantity"] == 5

    removed = client.put(f"/api/cart/{item_id}", json={"quantity": 0}, headers=headers)
    assert removed.json() == {"message": "Item removed from cart"}
    assert client.get("/api/cart", headers=headers).json() == {"items": [], "total": 0}


def test_cannot_touch_someone_elses_item(client, make_user, auth_headers, make_product):
    owner = make_user(name="Owner")
    other = make_user(name="Other")
    rose = make_product()
    item_id = client.post(
        "/api/cart", json={"product_id": rose.id}, headers=auth_headers(owner)
    ).json()["id"]

    response = client.delete(f"/api/cart/{item_id}", headers=auth_headers(other))

    assert response.status_code == 404
    assert response.json() == {"error": "Cart item not found"}


def test_clear_cart(client, user, auth_headers, make_product):
    headers = auth_headers(user)
    for name in ("Rose", "Lily", "Iris"):
        client.post("/api/cart", json={"product_id": make_product(name).id}, headers=headers)

    response = client.delete("/api/cart", headers=headers)

    assert response.json() == {"message": "Cart cleared", "removed_items": 3}
    assert client.get("/api/cart", headers=headers).json()["items"] == []


def test_cart_total_for_empty_cart_is_zero(session, user):
    assert cart_service.get_cart_total(session, user.id) == 0


def test_purge_cart_leaves_transaction_open(session, user, make_product):
    cart_service.add_to_cart(session, user.id, make_product().id, 2)

    assert cart_service.purge_cart(session, user.id) == 1
    session.rollback()

    assert len(cart_service.get_cart_items(session, user.id)) == 1


def test_merge_adds_quantities(session, user, make_product):
    product = make_product()
    cart_service.add_to_cart(session, user.id, product.id, 3)

    merged = cart_service.add_to_cart(session, user.id, product.id, 2)

    assert merged.quantity == 5
    assert len(cart_service.get_cart_items(session, user.id)) == 1
