import logging
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import delete, func
from sqlmodel import Session, select

from flowershop.exceptions import NotFound
from flowershop.models.cart import CartItem
from flowershop.models.product import Product

logger = logging.getLogger(__name__)


def get_cart_items(session: Session, user_id: int) -> List[Tuple[CartItem, Product]]:
    return session.exec(
        select(CartItem, Product)
        .join(Product, CartItem.product_id == Product.id)
        .where(CartItem.user_id == user_id)
        .order_by(CartItem.created_at, CartItem.id)
    ).all()


def get_cart_total(session: Session, user_id: int) -> float:
    total = session.exec(
        select(func.sum(Product.price * CartItem.quantity))
        .select_from(CartItem)
        .join(Product, CartItem.product_id == Product.id)
        .where(CartItem.user_id == user_id)
    ).one()
    return total or 0


def serialize_cart_item(item: CartItem, product: Product) -> dict:
    return {
        "id": item.id,
        "user_id": item.user_id,
        "product_id": item.product_id,
        "quantity": item.quantity,
        "product_name": product.name,
        "product_price": product.price,
        "product_type": product.type,
        "line_total": product.price * item.quantity,
        "created_at": item.created_at,
        "updated_at": item.updated_at,
    }


def get_cart(session: Session, user_id: int) -> dict:
    items = get_cart_items(session, user_id)
    return {
        "items": [serialize_cart_item(item, product) for item, product in items],
        "total": get_cart_total(session, user_id),
    }


def add_to_cart(session: Session, user_id: int, product_id: int, quantity: int = 1) -> CartItem:
    product = session.get(Product, product_id)
    if not product:
        raise NotFound("Product not found")

    existing_item = session.exec(
        select(CartItem).where(
            CartItem.user_id == user_id,
            CartItem.product_id == product_id
        )
    ).first()

    if existing_item:
        existing_item.quantity += quantity
        existing_item.updated_at = datetime.utcnow()
        session.add(existing_item)
        session.commit()
        session.refresh(existing_item)
        return existing_item

    new_item = CartItem(
        user_id=user_id,
        product_id=product_id,
        quantity=quantity,
    )
    session.add(new_item)
    session.commit()
    session.refresh(new_item)
    return new_item


def _owned_item(session: Session, item_id: int, user_id: Optional[int]) -> CartItem:
    item = session.get(CartItem, item_id)
    if not item or (user_id is not None and item.user_id != user_id):
        raise NotFound("Cart item not found")
    return item


def remove_from_cart(session: Session, item_id: int, user_id: Optional[int] = None) -> int:
    item = _owned_item(session, item_id, user_id)
    session.delete(item)
    session.commit()
    return item_id


def update_cart_item(
    session: Session,
    item_id: int,
    quantity: int,
    user_id: Optional[int] = None,
) -> Optional[CartItem]:
    """Set the quantity; a non-positive quantity removes the row and returns None."""
    if quantity <= 0:
        remove_from_cart(session, item_id, user_id)
        return None

    item = _owned_item(session, item_id, user_id)
    item.quantity = quantity
    item.updated_at = datetime.utcnow()
    session.add(item)
    session.commit()
    session.refresh(item)
    return item


def purge_cart(session: Session, user_id: int) -> int:
    """Delete the user's cart rows inside the caller's transaction (no commit)."""
    result = session.exec(delete(CartItem).where(CartItem.user_id == user_id))
    return result.rowcount


def clear_cart(session: Session, user_id: int) -> int:
    removed = purge_cart(session, user_id)
    session.commit()
    logger.info("Cleared %s cart items for user %s", removed, user_id)
    return removed
