from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from flowershop.database import get_session
from flowershop.dependencies.auth import require_admin
from flowershop.schemas.product_schemas import (
    BouquetCreate,
    BouquetUpdate,
    ProductCreate,
    ProductUpdate,
)
from flowershop.services import product_service
from flowershop.services.session_service import SessionContext

router = APIRouter()


# -------- PUBLIC --------

@router.get("")
def list_products(
    subcategory_id: Optional[int] = None,
    session: Session = Depends(get_session)
):
    products = product_service.list_products(session, subcategory_id)
    return [product_service.serialize_product(session, p, detailed=False) for p in products]


@router.get("/popular")
def popular_products(
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    session: Session = Depends(get_session)
):
    products = product_service.list_popular(session, limit, offset)
    return [product_service.serialize_product(session, p, detailed=False) for p in products]


@router.get("/top-rated")
def top_rated_products(
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    session: Session = Depends(get_session)
):
    products = product_service.list_top_rated(session, limit, offset)
    return [product_service.serialize_product(session, p, detailed=False) for p in products]


@router.get("/subcategory/{subcategory_id}")
def products_by_subcategory(subcategory_id: int, session: Session = Depends(get_session)):
    products = product_service.list_products(session, subcategory_id)
    return [product_service.serialize_product(session, p, detailed=False) for p in products]


@router.get("/{product_id}")
def get_product(product_id: int, session: Session = Depends(get_session)):
    product = product_service.get_product(session, product_id)
    return product_service.serialize_product(session, product)


# -------- ADMIN --------

@router.post("", status_code=status.HTTP_201_CREATED)
def create_product(
    data: ProductCreate,
    session: Session = Depends(get_session),
    _: SessionContext = Depends(require_admin)
):
    product = product_service.create_product(session, data)
    return product_service.serialize_product(session, product)


@router.post("/bouquet", status_code=status.HTTP_201_CREATED)
def create_bouquet(
    data: BouquetCreate,
    session: Session = Depends(get_session),
    _: SessionContext = Depends(require_admin)
):
    bouquet = product_service.create_bouquet(session, data)
    return product_service.serialize_product(session, bouquet)


@router.put("/bouquet/{bouquet_id}")
def update_bouquet(
    bouquet_id: int,
    data: BouquetUpdate,
    session: Session = Depends(get_session),
    _: SessionContext = Depends(require_admin)
):
    bouquet = product_service.update_bouquet(session, bouquet_id, data)
    return product_service.serialize_product(session, bouquet)


@router.put("/{product_id}")
def update_product(
    product_id: int,
    data: ProductUpdate,
    session: Session = Depends(get_session),
    _: SessionContext = Depends(require_admin)
):
    product = product_service.update_product(session, product_id, data)
    return product_service.serialize_product(session, product)


@router.delete("/{product_id}")
def delete_product(
    product_id: int,
    session: Session = Depends(get_session),
    _: SessionContext = Depends(require_admin)
):
    deleted = product_service.delete_product(session, product_id)
    return {"message": "Product deleted", "product": deleted}
