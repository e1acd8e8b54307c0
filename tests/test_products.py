import pytest
from sqlmodel import select

from flowershop.exceptions import NotFound, StateConflict
from flowershop.models.order import Order
from flowershop.models.order_item import OrderItem
from flowershop.models.product import Product
from flowershop.schemas.product_schemas import BouquetCreate, BouquetFlowerIn
from flowershop.services import product_service


def bouquet_payload(*flowers, **extra):
    return {
        "name": "Spring",
        "flowers": [{"flower_id": f.id, "quantity": q} for f, q in flowers],
        **extra,
    }


def test_bouquet_price_is_derived_from_flowers(client, admin, auth_headers, make_flower):
    rose = make_flower("Rose", 100.0)
    tulip = make_flower("Tulip", 50.0)

    response = client.post(
        "/api/products/bouquet",
        json=bouquet_payload((rose, 2), (tulip, 3)),
        headers=auth_headers(admin),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["type"] == "bouquet"
    assert body["price"] == 350.0
    assert [(f["name"], f["quantity"]) for f in body["flowers"]] == [("Rose", 2), ("Tulip", 3)]


def test_explicit_bouquet_price_wins(client, admin, auth_headers, make_flower):
    rose = make_flower("Rose", 100.0)

    response = client.post(
        "/api/products/bouquet",
        json=bouquet_payload((rose, 5), price=420.0),
        headers=auth_headers(admin),
    )

    assert response.json()["price"] == 420.0


def test_flower_price_change_does_not_reprice_bouquet(client, admin, auth_headers, make_flower):
    headers = auth_headers(admin)
    rose = make_flower("Rose", 100.0)
    bouquet_id = client.post(
        "/api/products/bouquet", json=bouquet_payload((rose, 3)), headers=headers
    ).json()["id"]

    client.put(f"/api/flowers/{rose.id}", json={"price": 150.0}, headers=headers)

    assert client.get(f"/api/products/{bouquet_id}").json()["price"] == 300.0


def test_bouquet_update_replaces_flowers_and_reprices(client, admin, auth_headers, make_flower):
    headers = auth_headers(admin)
    rose = make_flower("Rose", 100.0)
    lily = make_flower("Lily", 70.0)
    bouquet_id = client.post(
        "/api/products/bouquet", json=bouquet_payload((rose, 1)), headers=headers
    ).json()["id"]

    response = client.put(
        f"/api/products/bouquet/{bouquet_id}",
        json=bouquet_payload((lily, 2), name="Summer"),
        headers=headers,
    )

    body = response.json()
    assert body["name"] == "Summer"
    assert body["price"] == 140.0
    assert [f["flower_id"] for f in body["flowers"]] == [lily.id]


def test_bouquet_with_unknown_flower(session):
    data = BouquetCreate(name="Ghost", flowers=[BouquetFlowerIn(flower_id=404, quantity=1)])

    with pytest.raises(NotFound):
        product_service.create_bouquet(session, data)

    assert session.exec(select(Product)).all() == []


def test_bouquet_needs_flowers(client, admin, auth_headers):
    response = client.post(
        "/api/products/bouquet", json={"name": "Empty", "flowers": []}, headers=auth_headers(admin)
    )

    assert response.status_code == 400


def test_create_and_update_normal_product(client, admin, auth_headers):
    headers = auth_headers(admin)

    created = client.post(
        "/api/products", json={"name": "Vase", "price": 500.0, "description": "Glass"}, headers=headers
    )
    assert created.status_code == 201
    assert created.json()["type"] == "normal"

    product_id = created.json()["id"]
    updated = client.put(f"/api/products/{product_id}", json={"price": 450.0}, headers=headers)

    assert updated.json()["price"] == 450.0
    assert updated.json()["description"] == "Glass"


def test_customers_cannot_create_products(client, user, auth_headers):
    response = client.post("/api/products", json={"name": "Vase", "price": 1.0}, headers=auth_headers(user))

    assert response.status_code == 403


def test_popular_orders_by_purchases(client, make_product):
    make_product("Rare", purchases_count=1)
    make_product("Hit", purchases_count=40)
    make_product("Usual", purchases_count=7)

    names = [p["name"] for p in client.get("/api/products/popular?limit=2").json()]

    assert names == ["Hit", "Usual"]


def test_top_rated_orders_by_rating(client, make_product):
    make_product("Ok", rating=3.5)
    make_product("Best", rating=5.0)

    names = [p["name"] for p in client.get("/api/products/top-rated").json()]

    assert names == ["Best", "Ok"]


def test_product_details_include_reviews_and_files(client, make_product):
    product = make_product()

    body = client.get(f"/api/products/{product.id}").json()

    assert body["reviews"] == []
    assert body["files"] == []
    assert body["subcategory_name"] is None


def test_missing_product(client):
    response = client.get("/api/products/404")

    assert response.status_code == 404
    assert response.json() == {"error": "Product not found"}


def test_delete_product(client, admin, auth_headers, make_product):
    product_id = make_product("Old vase").id

    response = client.delete(f"/api/products/{product_id}", headers=auth_headers(admin))

    assert response.json()["product"]["name"] == "Old vase"
    assert client.get(f"/api/products/{product_id}").status_code == 404


def test_ordered_product_cannot_be_deleted(session, user, make_product):
    product = make_product()
    order = Order(user_id=user.id, order_number="1-1", total_price=100.0, delivery_address="Here")
    session.add(order)
    session.flush()
    session.add(OrderItem(order_id=order.id, product_id=product.id, quantity=1, price=100.0))
    session.commit()

    with pytest.raises(StateConflict):
        product_service.delete_product(session, product.id)
