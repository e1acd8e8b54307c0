import pytest

from flowershop.constants.order_status import ALLOWED_TRANSITIONS, TERMINAL_STATUSES, can_transition
from flowershop.exceptions import NotFound, StateConflict, ValidationFailed
from flowershop.models.order import Order
from flowershop.services import order_service


@pytest.fixture()
def order(session, user):
    order = Order(
        user_id=user.id,
        order_number="1700000000000-1",
        total_price=300.0,
        delivery_address="Mira 10",
    )
    session.add(order)
    session.commit()
    session.refresh(order)
    return order


def test_transition_table():
    assert can_transition("pending", "processing")
    assert can_transition("processing", "delivering")
    assert can_transition("delivering", "completed")
    assert can_transition("delivering", "cancelled")
    assert not can_transition("pending", "completed")
    assert not can_transition("completed", "cancelled")
    assert TERMINAL_STATUSES == {"completed", "cancelled"}
    assert set(ALLOWED_TRANSITIONS) == {"pending", "processing", "delivering", "completed", "cancelled"}


def test_walks_the_full_lifecycle(session, order):
    for status in ("processing", "delivering", "completed"):
        assert order_service.update_order_status(session, order.id, status).status == status


def test_unknown_status_is_rejected_before_lookup(session):
    with pytest.raises(ValidationFailed) as exc_info:
        order_service.update_order_status(session, 12345, "shipped")

    assert "pending, processing, delivering, completed, cancelled" in exc_info.value.message


def test_skipping_a_step_is_rejected(session, order):
    with pytest.raises(StateConflict):
        order_service.update_order_status(session, order.id, "completed")


def test_terminal_order_cannot_move(session, order):
    order_service.update_order_status(session, order.id, "cancelled")

    with pytest.raises(StateConflict):
        order_service.update_order_status(session, order.id, "processing")


def test_setting_same_status_is_a_no_op(session, order):
    before = order.updated_at

    result = order_service.update_order_status(session, order.id, "pending")

    assert result.status == "pending"
    assert result.updated_at == before


def test_missing_order(session):
    with pytest.raises(NotFound):
        order_service.update_order_status(session, 999, "processing")


def test_payment_status(session, order):
    assert order_service.update_payment_status(session, order.id, "paid").payment_status == "paid"

    with pytest.raises(ValidationFailed):
        order_service.update_payment_status(session, order.id, "maybe")


def test_admin_status_endpoint(client, order, admin, auth_headers):
    headers = auth_headers(admin)

    ok = client.put(f"/api/orders/admin/{order.id}/status", json={"status": "processing"}, headers=headers)
    assert ok.status_code == 200
    assert ok.json()["status"] == "processing"

    bad = client.put(f"/api/orders/admin/{order.id}/status", json={"status": "pending"}, headers=headers)
    assert bad.status_code == 400
    assert bad.json() == {"error": "Cannot change order status from 'processing' to 'pending'"}

    unknown = client.put(f"/api/orders/admin/{order.id}/status", json={"status": "lost"}, headers=headers)
    assert unknown.status_code == 400
    assert unknown.json()["error"].startswith("Invalid status")


def test_admin_payment_endpoint(client, order, admin, auth_headers):
    response = client.put(
        f"/api/orders/admin/{order.id}/payment",
        json={"payment_status": "refunded"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    assert response.json()["payment_status"] == "refunded"


def test_admin_order_details(client, order, admin, auth_headers):
    response = client.get(f"/api/orders/admin/{order.id}", headers=auth_headers(admin))

    assert response.json()["order_number"] == "1700000000000-1"
    assert response.json()["items"] == []
