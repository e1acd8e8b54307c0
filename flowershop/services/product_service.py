import logging
from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy import delete, func
from sqlmodel import Session, select

from flowershop.exceptions import NotFound, StateConflict
from flowershop.models.cart import CartItem
from flowershop.models.category import Subcategory
from flowershop.models.file import File
from flowershop.models.flower import BouquetFlower, Flower
from flowershop.models.order_item import OrderItem
from flowershop.models.product import Product, ProductType
from flowershop.models.review import Review
from flowershop.schemas.product_schemas import (
    BouquetCreate,
    BouquetFlowerIn,
    BouquetUpdate,
    ProductCreate,
    ProductUpdate,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------
# READ
# ---------------------------------------------------------

def get_bouquet_flowers(session: Session, bouquet_id: int) -> List[dict]:
    rows = session.exec(
        select(BouquetFlower, Flower)
        .join(Flower, BouquetFlower.flower_id == Flower.id)
        .where(BouquetFlower.bouquet_id == bouquet_id)
        .order_by(BouquetFlower.id)
    ).all()

    return [
        {
            "id": link.id,
            "flower_id": flower.id,
            "name": flower.name,
            "price": flower.price,
            "quantity": link.quantity,
        }
        for link, flower in rows
    ]


def serialize_product(session: Session, product: Product, detailed: bool = True) -> dict:
    subcategory = session.get(Subcategory, product.subcategory_id) if product.subcategory_id else None

    data = {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "price": product.price,
        "type": product.type,
        "subcategory_id": product.subcategory_id,
        "subcategory_name": subcategory.name if subcategory else None,
        "rating": product.rating,
        "purchases_count": product.purchases_count,
        "created_at": product.created_at,
        "updated_at": product.updated_at,
    }

    if product.is_bouquet:
        data["flowers"] = get_bouquet_flowers(session, product.id)

    if detailed:
        data["reviews"] = session.exec(
            select(Review)
            .where(Review.parent_id == product.id)
            .order_by(Review.created_at.desc())
        ).all()
        data["files"] = [
            {"id": f.id, "filename": f.filename, "mimetype": f.mimetype}
            for f in session.exec(
                select(File)
                .where(File.parent_id == product.id, File.parent_type == "product")
                .order_by(File.created_at)
            ).all()
        ]

    return data


def get_product(session: Session, product_id: int) -> Product:
    product = session.get(Product, product_id)
    if not product:
        raise NotFound("Product not found")
    return product


def list_products(session: Session, subcategory_id: Optional[int] = None) -> List[Product]:
    query = select(Product)
    if subcategory_id is not None:
        query = query.where(Product.subcategory_id == subcategory_id)
    return session.exec(query.order_by(Product.name)).all()


def list_popular(session: Session, limit: int = 10, offset: int = 0) -> List[Product]:
    return session.exec(
        select(Product)
        .order_by(Product.purchases_count.desc(), Product.id)
        .offset(offset)
        .limit(limit)
    ).all()


def list_top_rated(session: Session, limit: int = 10, offset: int = 0) -> List[Product]:
    return session.exec(
        select(Product)
        .order_by(Product.rating.desc(), Product.id)
        .offset(offset)
        .limit(limit)
    ).all()


# ---------------------------------------------------------
# NORMAL PRODUCTS
# ---------------------------------------------------------

def _check_subcategory(session: Session, subcategory_id: Optional[int]) -> None:
    if subcategory_id is not None and not session.get(Subcategory, subcategory_id):
        raise NotFound("Subcategory not found")


def create_product(session: Session, data: ProductCreate) -> Product:
    _check_subcategory(session, data.subcategory_id)

    product = Product(
        name=data.name,
        description=data.description,
        price=data.price,
        type=ProductType.normal.value,
        subcategory_id=data.subcategory_id,
    )
    session.add(product)
    session.commit()
    session.refresh(product)
    return product


def update_product(session: Session, product_id: int, data: ProductUpdate) -> Product:
    product = get_product(session, product_id)
    if product.is_bouquet:
        raise NotFound("Product not found")

    updates = data.model_dump(exclude_unset=True)
    if "subcategory_id" in updates:
        _check_subcategory(session, updates["subcategory_id"])

    for key, value in updates.items():
        setattr(product, key, value)
    product.updated_at = datetime.utcnow()

    session.add(product)
    session.commit()
    session.refresh(product)
    return product


# ---------------------------------------------------------
# BOUQUETS
# ---------------------------------------------------------

def derive_bouquet_price(session: Session, flowers: Iterable[BouquetFlowerIn]) -> float:
    """Sum of flower price x quantity using the flower prices stored right now."""
    total = 0.0
    for item in flowers:
        flower = session.get(Flower, item.flower_id)
        if not flower:
            raise NotFound(f"Flower {item.flower_id} not found")
        total += flower.price * item.quantity
    return total


def _replace_bouquet_flowers(session: Session, bouquet_id: int, flowers: Iterable[BouquetFlowerIn]) -> None:
    session.exec(delete(BouquetFlower).where(BouquetFlower.bouquet_id == bouquet_id))
    for item in flowers:
        session.add(BouquetFlower(
            bouquet_id=bouquet_id,
            flower_id=item.flower_id,
            quantity=item.quantity,
        ))


def create_bouquet(session: Session, data: BouquetCreate) -> Product:
    _check_subcategory(session, data.subcategory_id)

    # validates every flower id before anything is written
    derived = derive_bouquet_price(session, data.flowers)

    bouquet = Product(
        name=data.name,
        description=data.description,
        subcategory_id=data.subcategory_id,
        type=ProductType.bouquet.value,
        price=data.price if data.price else derived,
    )
    session.add(bouquet)
    session.flush()

    _replace_bouquet_flowers(session, bouquet.id, data.flowers)

    session.commit()
    session.refresh(bouquet)
    logger.info("Bouquet %s created with price %s", bouquet.id, bouquet.price)
    return bouquet


def update_bouquet(session: Session, bouquet_id: int, data: BouquetUpdate) -> Product:
    bouquet = session.get(Product, bouquet_id)
    if not bouquet or not bouquet.is_bouquet:
        raise NotFound("Bouquet not found")

    _check_subcategory(session, data.subcategory_id)
    derived = derive_bouquet_price(session, data.flowers)

    bouquet.name = data.name
    bouquet.description = data.description
    bouquet.subcategory_id = data.subcategory_id
    bouquet.price = data.price if data.price else derived
    bouquet.updated_at = datetime.utcnow()
    session.add(bouquet)

    _replace_bouquet_flowers(session, bouquet.id, data.flowers)

    session.commit()
    session.refresh(bouquet)
    return bouquet


# ---------------------------------------------------------
# DELETE
# ---------------------------------------------------------

def delete_product(session: Session, product_id: int) -> dict:
    product = get_product(session, product_id)
    snapshot = product.model_dump()

    ordered = session.exec(
        select(func.count(OrderItem.id)).where(OrderItem.product_id == product_id)
    ).one()
    if ordered:
        raise StateConflict("Product has orders and cannot be deleted")

    review_ids = session.exec(select(Review.id).where(Review.parent_id == product_id)).all()
    if review_ids:
        session.exec(delete(File).where(File.parent_type == "review", File.parent_id.in_(review_ids)))
    session.exec(delete(File).where(File.parent_type == "product", File.parent_id == product_id))
    session.exec(delete(Review).where(Review.parent_id == product_id))
    session.exec(delete(CartItem).where(CartItem.product_id == product_id))
    session.exec(delete(BouquetFlower).where(BouquetFlower.bouquet_id == product_id))

    session.delete(product)
    session.commit()
    return snapshot
