import logging

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from flowershop.database import get_session
from flowershop.dependencies.auth import get_current_user, require_admin
from flowershop.schemas.orders_schemas import (
    OrderCreate,
    OrderStatusUpdate,
    PaymentStatusUpdate,
)
from flowershop.services import order_service
from flowershop.services.session_service import SessionContext

logger = logging.getLogger(__name__)

router = APIRouter()


# -------- ADMIN --------
# declared before "/{order_id}" so "admin" never reaches the int path param

@router.get("/admin/all")
def list_all_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
    session: Session = Depends(get_session),
    _: SessionContext = Depends(require_admin)
):
    return order_service.list_all_orders(session, page=page, limit=limit)


@router.get("/admin/{order_id}")
def admin_order_details(
    order_id: int,
    session: Session = Depends(get_session),
    _: SessionContext = Depends(require_admin)
):
    order = order_service.get_order(session, order_id)
    return order_service.serialize_order(session, order)


@router.put("/admin/{order_id}/status")
def update_order_status(
    order_id: int,
    data: OrderStatusUpdate,
    session: Session = Depends(get_session),
    admin: SessionContext = Depends(require_admin)
):
    order = order_service.update_order_status(session, order_id, data.status)
    logger.info("Admin %s set order %s status to %s", admin.user_id, order_id, data.status)
    return order_service.serialize_order(session, order)


@router.put("/admin/{order_id}/payment")
def update_payment_status(
    order_id: int,
    data: PaymentStatusUpdate,
    session: Session = Depends(get_session),
    admin: SessionContext = Depends(require_admin)
):
    order = order_service.update_payment_status(session, order_id, data.payment_status)
    logger.info("Admin %s set order %s payment to %s", admin.user_id, order_id, data.payment_status)
    return order_service.serialize_order(session, order)


# -------- CUSTOMER --------

@router.post("", status_code=status.HTTP_201_CREATED)
def create_order(
    data: OrderCreate,
    session: Session = Depends(get_session),
    current_user: SessionContext = Depends(get_current_user)
):
    order = order_service.create_order(session, current_user.user_id, data)
    return order_service.serialize_order(session, order)


@router.get("")
def list_my_orders(
    session: Session = Depends(get_session),
    current_user: SessionContext = Depends(get_current_user)
):
    orders = order_service.list_user_orders(session, current_user.user_id)
    return [order_service.serialize_order(session, o) for o in orders]


@router.get("/{order_id}")
def get_my_order(
    order_id: int,
    session: Session = Depends(get_session),
    current_user: SessionContext = Depends(get_current_user)
):
    order = order_service.get_order(session, order_id, current_user.user_id)
    return order_service.serialize_order(session, order)


@router.post("/{order_id}/cancel")
def cancel_order(
    order_id: int,
    session: Session = Depends(get_session),
    current_user: SessionContext = Depends(get_current_user)
):
    order = order_service.cancel_order(session, order_id, current_user.user_id)
    return order_service.serialize_order(session, order)
