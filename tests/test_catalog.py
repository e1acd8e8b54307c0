def test_category_crud(client, admin, auth_headers):
    headers = auth_headers(admin)

    created = client.post("/api/categories", json={"name": "Flowers"}, headers=headers)
    assert created.status_code == 201
    category_id = created.json()["id"]

    duplicate = client.post("/api/categories", json={"name": "Flowers"}, headers=headers)
    assert duplicate.status_code == 400
    assert duplicate.json() == {"error": "Category already exists"}

    renamed = client.put(f"/api/categories/{category_id}", json={"name": "Plants"}, headers=headers)
    assert renamed.json()["name"] == "Plants"

    assert client.delete(f"/api/categories/{category_id}", headers=headers).status_code == 200
    assert client.get(f"/api/categories/{category_id}").status_code == 404


def test_categories_list_nested_subcategories(client, admin, auth_headers):
    headers = auth_headers(admin)
    category_id = client.post("/api/categories", json={"name": "Bouquets"}, headers=headers).json()["id"]
    client.post("/api/subcategories", json={"name": "Roses", "category_id": category_id}, headers=headers)
    client.post("/api/subcategories", json={"name": "Mixed", "category_id": category_id}, headers=headers)

    categories = client.get("/api/categories").json()

    assert [s["name"] for s in categories[0]["subcategories"]] == ["Mixed", "Roses"]


def test_subcategory_needs_existing_category(client, admin, auth_headers):
    response = client.post(
        "/api/subcategories", json={"name": "Orphan", "category_id": 99}, headers=auth_headers(admin)
    )

    assert response.status_code == 404


def test_subcategory_with_products_cannot_be_deleted(client, admin, auth_headers, make_product):
    headers = auth_headers(admin)
    category_id = client.post("/api/categories", json={"name": "Gifts"}, headers=headers).json()["id"]
    sub_id = client.post(
        "/api/subcategories", json={"name": "Vases", "category_id": category_id}, headers=headers
    ).json()["id"]
    make_product("Vase", subcategory_id=sub_id)

    assert client.delete(f"/api/subcategories/{sub_id}", headers=headers).status_code == 400
    assert client.delete(f"/api/categories/{category_id}", headers=headers).status_code == 400

    listed = client.get(f"/api/products/subcategory/{sub_id}").json()
    assert [p["subcategory_name"] for p in listed] == ["Vases"]


def test_flower_crud(client, admin, auth_headers):
    headers = auth_headers(admin)

    flower = client.post("/api/flowers", json={"name": "Peony", "price": 90.0}, headers=headers).json()
    assert client.get(f"/api/flowers/{flower['id']}").json()["name"] == "Peony"

    updated = client.put(f"/api/flowers/{flower['id']}", json={"price": 95.0}, headers=headers)
    assert updated.json()["price"] == 95.0
    assert updated.json()["name"] == "Peony"

    assert client.delete(f"/api/flowers/{flower['id']}", headers=headers).status_code == 200
    assert client.get("/api/flowers").json() == []


def test_flower_in_bouquet_cannot_be_deleted(client, admin, auth_headers, make_flower):
    headers = auth_headers(admin)
    rose = make_flower("Rose", 100.0)
    client.post(
        "/api/products/bouquet",
        json={"name": "Mono", "flowers": [{"flower_id": rose.id, "quantity": 11}]},
        headers=headers,
    )

    response = client.delete(f"/api/flowers/{rose.id}", headers=headers)

    assert response.status_code == 400
    assert response.json() == {"error": "Flower is used in a bouquet"}
