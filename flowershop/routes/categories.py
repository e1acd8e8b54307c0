from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select

from flowershop.database import get_session
from flowershop.dependencies.auth import require_admin
from flowershop.models.category import Category, Subcategory
from flowershop.models.product import Product
from flowershop.schemas.category_schemas import CategoryCreate, CategoryUpdate
from flowershop.services.session_service import SessionContext

router = APIRouter()


def _with_subcategories(session: Session, category: Category) -> dict:
    subcategories = session.exec(
        select(Subcategory)
        .where(Subcategory.category_id == category.id)
        .order_by(Subcategory.name)
    ).all()
    return {**category.model_dump(), "subcategories": subcategories}


@router.get("")
def list_categories(session: Session = Depends(get_session)):
    categories = session.exec(select(Category).order_by(Category.name)).all()
    return [_with_subcategories(session, c) for c in categories]


@router.get("/{category_id}")
def get_category(category_id: int, session: Session = Depends(get_session)):
    category = session.get(Category, category_id)
    if not category:
        raise HTTPException(404, "Category not found")
    return _with_subcategories(session, category)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_category(
    data: CategoryCreate,
    session: Session = Depends(get_session),
    _: SessionContext = Depends(require_admin)
):
    existing = session.exec(select(Category).where(Category.name == data.name)).first()
    if existing:
        raise HTTPException(400, "Category already exists")

    category = Category(name=data.name)
    session.add(category)
    session.commit()
    session.refresh(category)
    return category


@router.put("/{category_id}")
def update_category(
    category_id: int,
    data: CategoryUpdate,
    session: Session = Depends(get_session),
    _: SessionContext = Depends(require_admin)
):
    category = session.get(Category, category_id)
    if not category:
        raise HTTPException(404, "Category not found")

    duplicate = session.exec(
        select(Category).where(Category.name == data.name, Category.id != category_id)
    ).first()
    if duplicate:
        raise HTTPException(400, "Category already exists")

    category.name = data.name
    category.updated_at = datetime.utcnow()
    session.add(category)
    session.commit()
    session.refresh(category)
    return category


@router.delete("/{category_id}")
def delete_category(
    category_id: int,
    session: Session = Depends(get_session),
    _: SessionContext = Depends(require_admin)
):
    category = session.get(Category, category_id)
    if not category:
        raise HTTPException(404, "Category not found")

    subcategory_ids = session.exec(
        select(Subcategory.id).where(Subcategory.category_id == category_id)
    ).all()
    if subcategory_ids:
        used = session.exec(
            select(Product).where(Product.subcategory_id.in_(subcategory_ids))
        ).first()
        if used:
            raise HTTPException(400, "Category has products and cannot be deleted")
        for sub in session.exec(select(Subcategory).where(Subcategory.category_id == category_id)).all():
            session.delete(sub)

    session.delete(category)
    session.commit()
    return {"message": "Category deleted successfully"}
