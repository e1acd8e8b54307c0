import pytest

from flowershop.exceptions import Forbidden, Unauthorized
from flowershop.models.product import Product
from flowershop.schemas.review_schemas import ReviewCreate, ReviewUpdate
from flowershop.services import review_service


def review(product, rating, title="Nice"):
    return {"title": title, "description": "Fresh and pretty", "rating": rating, "parent_id": product.id}


def product_rating(session, product_id):
    session.expire_all()
    return session.get(Product, product_id).rating


def test_rating_follows_reviews(client, session, make_product):
    product_id = make_product().id
    product = session.get(Product, product_id)

    first = client.post("/api/reviews", json=review(product, 4))
    assert first.status_code == 201
    client.post("/api/reviews", json=review(product, 2))
    assert product_rating(session, product_id) == 3.0

    client.put(f"/api/reviews/{first.json()['id']}", json=review(product, 5))
    assert product_rating(session, product_id) == 3.5

    client.delete(f"/api/reviews/{first.json()['id']}")
    assert product_rating(session, product_id) == 2.0


def test_rating_resets_to_zero_without_reviews(client, session, make_product):
    product = make_product()
    review_id = client.post("/api/reviews", json=review(product, 5)).json()["id"]

    client.delete(f"/api/reviews/{review_id}")

    assert product_rating(session, product.id) == 0


def test_moving_review_updates_both_products(client, session, make_product):
    first = make_product("Rose")
    second = make_product("Tulip")
    review_id = client.post("/api/reviews", json=review(first, 4)).json()["id"]

    client.put(f"/api/reviews/{review_id}", json=review(second, 4))

    assert product_rating(session, first.id) == 0
    assert product_rating(session, second.id) == 4.0


def test_rating_out_of_range(client, make_product):
    response = client.post("/api/reviews", json=review(make_product(), 6))

    assert response.status_code == 400
    assert "rating" in response.json()["error"]


def test_review_for_missing_product(client):
    response = client.post(
        "/api/reviews", json={"title": "?", "description": "?", "rating": 3, "parent_id": 77}
    )

    assert response.status_code == 404
    assert response.json() == {"error": "Product not found"}


def test_logged_in_review_is_attributed(client, user, auth_headers, make_product):
    headers = auth_headers(user)
    product = make_product()

    created = client.post("/api/reviews", json=review(product, 5), headers=headers).json()

    assert created["user_id"] == user.id
    assert [r["id"] for r in client.get("/api/reviews/user/me", headers=headers).json()] == [created["id"]]
    assert len(client.get(f"/api/reviews/parent/{product.id}").json()) == 1


def test_only_author_edits_own_review(client, make_user, auth_headers, make_product):
    author, stranger = make_user(name="Author"), make_user(name="Stranger")
    product = make_product()
    review_id = client.post(
        "/api/reviews", json=review(product, 5), headers=auth_headers(author)
    ).json()["id"]

    response = client.delete(f"/api/reviews/{review_id}", headers=auth_headers(stranger))

    assert response.status_code == 403
    assert response.json() == {"error": "You are not allowed to delete this review"}


def test_anonymous_caller_cannot_touch_owned_review(client, user, auth_headers, make_product):
    product = make_product()
    review_id = client.post(
        "/api/reviews", json=review(product, 5), headers=auth_headers(user)
    ).json()["id"]
    client.cookies.clear()

    deleted = client.delete(f"/api/reviews/{review_id}")
    assert deleted.status_code == 401
    assert deleted.json() == {"error": "Log in to delete this review"}

    edited = client.put(f"/api/reviews/{review_id}", json=review(product, 1))
    assert edited.status_code == 401

    assert client.get(f"/api/reviews/{review_id}").json()["rating"] == 5


def test_delete_service_requires_caller_for_owned_review(session, user, make_product):
    created = review_service.create_review(
        session, ReviewCreate(title="t", description="d", rating=4, parent_id=make_product().id), user.id
    )

    with pytest.raises(Unauthorized):
        review_service.delete_review(session, created.id)


def test_update_review_service_reports_previous_parent(session, make_product):
    first, second = make_product("A"), make_product("B")
    created = review_service.create_review(
        session, ReviewCreate(title="t", description="d", rating=3, parent_id=first.id)
    )

    updated, previous = review_service.update_review(
        session, created.id, ReviewUpdate(title="t", description="d", rating=3, parent_id=second.id)
    )

    assert previous == first.id
    assert updated.parent_id == second.id


def test_owner_check_in_service(session, make_user, make_product):
    author, stranger = make_user(name="Author"), make_user(name="Stranger")
    created = review_service.create_review(
        session,
        ReviewCreate(title="t", description="d", rating=3, parent_id=make_product().id),
        author.id,
    )

    with pytest.raises(Forbidden):
        review_service.update_review(
            session,
            created.id,
            ReviewUpdate(title="x", description="y", rating=1, parent_id=created.parent_id),
            stranger.id,
        )
