import logging
import random
import time
from datetime import date, datetime, timedelta
from typing import List, Optional

from sqlalchemy import func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from flowershop.constants.order_status import (
    ADMIN_STATUSES,
    PAYMENT_STATUSES,
    USER_CANCELLABLE,
    OrderStatus,
    PaymentStatus,
    can_transition,
)
from flowershop.exceptions import (
    EmptyCartError,
    NotFound,
    OrderCreationError,
    StateConflict,
    ValidationFailed,
)
from flowershop.models.order import Order
from flowershop.models.order_item import OrderItem
from flowershop.models.product import Product
from flowershop.models.user import User
from flowershop.schemas.orders_schemas import OrderCreate
from flowershop.services import cart_service
from flowershop.utils.pagination import paginate

logger = logging.getLogger(__name__)


def generate_order_number() -> str:
    # unique index on orders.order_number rejects the rare collision
    return f"{int(time.time() * 1000)}-{random.randrange(1000)}"


def create_order(session: Session, user_id: int, delivery: OrderCreate) -> Order:
    """
    Turn the user's cart into an order in a single transaction.

    Items keep the product price as it is right now, purchase counters
    grow by the ordered quantities and the cart is emptied. Either all of
    that is committed or none of it is.
    """
    cart_items = cart_service.get_cart_items(session, user_id)
    if not cart_items:
        raise EmptyCartError()

    try:
        total = sum(product.price * item.quantity for item, product in cart_items)

        order = Order(
            user_id=user_id,
            order_number=generate_order_number(),
            total_price=total,
            delivery_address=delivery.delivery_address,
            delivery_date=delivery.delivery_date,
            delivery_time=delivery.delivery_time,
            status=OrderStatus.pending.value,
            payment_method=delivery.payment_method,
            payment_status=PaymentStatus.pending.value,
            notes=delivery.notes,
        )
        session.add(order)
        session.flush()

        for item, product in cart_items:
            session.add(OrderItem(
                order_id=order.id,
                product_id=product.id,
                quantity=item.quantity,
                price=product.price,
            ))
            session.exec(
                update(Product)
                .where(Product.id == product.id)
                .values(purchases_count=Product.purchases_count + item.quantity)
            )

        session.flush()
        cart_service.purge_cart(session, user_id)
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("Order creation failed for user %s: %s", user_id, exc)
        raise OrderCreationError() from exc

    session.refresh(order)
    logger.info("Order %s (%s) created for user %s, total %s", order.id, order.order_number, user_id, order.total_price)
    return order


def get_order_items(session: Session, order_id: int) -> List[dict]:
    rows = session.exec(
        select(OrderItem, Product)
        .join(Product, OrderItem.product_id == Product.id)
        .where(OrderItem.order_id == order_id)
        .order_by(OrderItem.id)
    ).all()

    return [
        {
            "id": i.id,
            "order_id": i.order_id,
            "product_id": i.product_id,
            "quantity": i.quantity,
            "price": i.price,
            "line_total": i.price * i.quantity,
            "product_name": p.name,
            "product_type": p.type,
        }
        for i, p in rows
    ]


def serialize_order(session: Session, order: Order) -> dict:
    return {
        "id": order.id,
        "user_id": order.user_id,
        "order_number": order.order_number,
        "total_price": order.total_price,
        "delivery_address": order.delivery_address,
        "delivery_date": order.delivery_date,
        "delivery_time": order.delivery_time,
        "status": order.status,
        "payment_method": order.payment_method,
        "payment_status": order.payment_status,
        "notes": order.notes,
        "created_at": order.created_at,
        "updated_at": order.updated_at,
        "items": get_order_items(session, order.id),
    }


def get_order(session: Session, order_id: int, user_id: Optional[int] = None) -> Order:
    """Order by id; with user_id, someone else's order counts as missing."""
    order = session.get(Order, order_id)
    if not order or (user_id is not None and order.user_id != user_id):
        raise NotFound("Order not found")
    return order


def list_user_orders(session: Session, user_id: int) -> List[Order]:
    return session.exec(
        select(Order)
        .where(Order.user_id == user_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
    ).all()


def list_all_orders(session: Session, page: int = 1, limit: int = 20) -> dict:
    query = (
        select(Order, User)
        .join(User, User.id == Order.user_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
    )
    data = paginate(session=session, query=query, page=page, limit=limit)

    data["results"] = [
        {
            **serialize_order(session, o),
            "user_name": u.name,
            "phone_number": u.phone_number,
        }
        for o, u in data["results"]
    ]
    return data


def cancel_order(session: Session, order_id: int, user_id: int) -> Order:
    order = get_order(session, order_id, user_id)

    if order.status not in USER_CANCELLABLE:
        raise StateConflict("Cannot cancel: order is already in progress")

    order.status = OrderStatus.cancelled.value
    order.updated_at = datetime.utcnow()
    session.add(order)
    session.commit()
    session.refresh(order)
    logger.info("Order %s cancelled by user %s", order.id, user_id)
    return order


def update_order_status(session: Session, order_id: int, new_status: str) -> Order:
    if new_status not in ADMIN_STATUSES:
        raise ValidationFailed(
            f"Invalid status. Allowed values: {', '.join(ADMIN_STATUSES)}"
        )

    order = get_order(session, order_id)

    if order.status == new_status:
        return order

    if not can_transition(order.status, new_status):
        raise StateConflict(
            f"Cannot change order status from '{order.status}' to '{new_status}'"
        )

    order.status = new_status
    order.updated_at = datetime.utcnow()
    session.add(order)
    session.commit()
    session.refresh(order)
    logger.info("Order %s moved to %s", order.id, new_status)
    return order


def update_payment_status(session: Session, order_id: int, payment_status: str) -> Order:
    if payment_status not in PAYMENT_STATUSES:
        raise ValidationFailed(
            f"Invalid payment status. Allowed values: {', '.join(PAYMENT_STATUSES)}"
        )

    order = get_order(session, order_id)
    order.payment_status = payment_status
    order.updated_at = datetime.utcnow()
    session.add(order)
    session.commit()
    session.refresh(order)
    return order


def get_order_stats(session: Session, today: Optional[date] = None) -> dict:
    today = today or date.today()
    start_today = datetime.combine(today, datetime.min.time())
    start_yesterday = start_today - timedelta(days=1)
    start_week = start_today - timedelta(days=7)
    start_month = start_today - timedelta(days=30)

    def count(*conditions):
        return session.exec(select(func.count(Order.id)).where(*conditions)).one()

    def revenue(*conditions):
        total = session.exec(select(func.sum(Order.total_price)).where(*conditions)).one()
        return float(total or 0)

    stats = {
        "total_orders": count(),
        "orders_today": count(Order.created_at >= start_today),
        "orders_yesterday": count(
            Order.created_at >= start_yesterday, Order.created_at < start_today
        ),
        "orders_this_week": count(Order.created_at >= start_week),
        "orders_this_month": count(Order.created_at >= start_month),
        "total_revenue": revenue(),
        "today_revenue": revenue(Order.created_at >= start_today),
        "yesterday_revenue": revenue(
            Order.created_at >= start_yesterday, Order.created_at < start_today
        ),
        "week_revenue": revenue(Order.created_at >= start_week),
        "month_revenue": revenue(Order.created_at >= start_month),
    }

    for status in ADMIN_STATUSES:
        stats[f"{status}_orders"] = count(Order.status == status)

    return stats
