import asyncio
import io

import pytest
from fastapi import HTTPException, UploadFile

from flowershop.models.review import Review
from flowershop.routes.files import read_upload


def upload(client, headers, content=b"\x89PNG fake image", **form):
    return client.post(
        "/api/files/upload",
        files={"file": ("photo.png", content, "image/png")},
        data=form,
        headers=headers,
    )


def test_upload_and_download(client, admin, auth_headers, make_product):
    product = make_product()

    response = upload(client, auth_headers(admin), parent_type="product", parent_id=str(product.id))

    assert response.status_code == 201
    stored = response.json()
    assert stored["size"] == len(b"\x89PNG fake image")
    assert stored["parent_type"] == "product"

    download = client.get(f"/api/files/{stored['id']}")
    assert download.content == b"\x89PNG fake image"
    assert download.headers["content-type"] == "image/png"
    assert "photo.png" in download.headers["content-disposition"]

    details = client.get(f"/api/products/{product.id}").json()
    assert [f["id"] for f in details["files"]] == [stored["id"]]


def test_upload_requires_admin(client, user, auth_headers):
    assert upload(client, auth_headers(user)).status_code == 403


def test_upload_rejects_unknown_parent_type(client, admin, auth_headers):
    response = upload(client, auth_headers(admin), parent_type="order", parent_id="1")

    assert response.status_code == 400


def test_upload_size_limit(client, admin, auth_headers):
    too_big = b"0" * (1024 * 1024 + 1)

    response = upload(client, auth_headers(admin), content=too_big)

    assert response.status_code == 413
    assert response.json() == {"error": "File is too large"}


def test_upload_at_size_limit_is_accepted(client, admin, auth_headers):
    response = upload(client, auth_headers(admin), content=b"0" * (1024 * 1024))

    assert response.status_code == 201
    assert response.json()["size"] == 1024 * 1024


class CountingStream(io.BytesIO):
    def __init__(self, data):
        super().__init__(data)
        self.requested = []

    def read(self, size=-1):
        self.requested.append(size)
        return super().read(size)


def test_read_upload_stops_past_limit_without_declared_size():
    stream = CountingStream(b"x" * 5000)

    with pytest.raises(HTTPException) as exc:
        asyncio.run(read_upload(UploadFile(file=stream), 1024))

    assert exc.value.status_code == 413
    assert stream.requested == [1025]


def test_read_upload_trusts_declared_size():
    stream = CountingStream(b"x" * 10)

    with pytest.raises(HTTPException):
        asyncio.run(read_upload(UploadFile(file=stream, size=2048), 1024))

    assert stream.requested == []


def test_files_by_parent_and_delete(client, admin, auth_headers, make_product):
    headers = auth_headers(admin)
    product = make_product()
    file_id = upload(client, headers, parent_type="product", parent_id=str(product.id)).json()["id"]

    listed = client.get(f"/api/files/parent/{product.id}?parent_type=product").json()
    assert [f["id"] for f in listed] == [file_id]

    assert client.delete(f"/api/files/{file_id}", headers=headers).status_code == 200
    assert client.get(f"/api/files/{file_id}").status_code == 404


def test_review_files_are_removed_with_review(client, session, admin, auth_headers, make_product):
    headers = auth_headers(admin)
    review = Review(title="Wow", description="Great", rating=5, parent_id=make_product().id)
    session.add(review)
    session.commit()
    review_id = review.id
    file_id = upload(client, headers, parent_type="review", parent_id=str(review_id)).json()["id"]

    assert client.get(f"/api/reviews/{review_id}").json()["files"][0]["id"] == file_id

    client.delete(f"/api/reviews/{review_id}", headers=headers)

    assert client.get(f"/api/files/{file_id}").status_code == 404
