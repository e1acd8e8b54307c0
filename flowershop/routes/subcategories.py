from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select

from flowershop.database import get_session
from flowershop.dependencies.auth import require_admin
from flowershop.models.category import Category, Subcategory
from flowershop.models.product import Product
from flowershop.schemas.category_schemas import SubcategoryCreate, SubcategoryUpdate
from flowershop.services.session_service import SessionContext

router = APIRouter()


def _with_category(session: Session, sub: Subcategory) -> dict:
    category = session.get(Category, sub.category_id)
    return {
        **sub.model_dump(),
        "category": {"id": category.id, "name": category.name} if category else None,
    }


@router.get("")
def list_subcategories(session: Session = Depends(get_session)):
    subs = session.exec(select(Subcategory).order_by(Subcategory.name)).all()
    return [_with_category(session, s) for s in subs]


@router.get("/{subcategory_id}")
def get_subcategory(subcategory_id: int, session: Session = Depends(get_session)):
    sub = session.get(Subcategory, subcategory_id)
    if not sub:
        raise HTTPException(404, "Subcategory not found")
    return _with_category(session, sub)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_subcategory(
    data: SubcategoryCreate,
    session: Session = Depends(get_session),
    _: SessionContext = Depends(require_admin)
):
    if not session.get(Category, data.category_id):
        raise HTTPException(404, "Category not found")

    sub = Subcategory(name=data.name, category_id=data.category_id)
    session.add(sub)
    session.commit()
    session.refresh(sub)
    return sub


@router.put("/{subcategory_id}")
def update_subcategory(
    subcategory_id: int,
    data: SubcategoryUpdate,
    session: Session = Depends(get_session),
    _: SessionContext = Depends(require_admin)
):
    sub = session.get(Subcategory, subcategory_id)
    if not sub:
        raise HTTPException(404, "Subcategory not found")

    if data.category_id is not None:
        if not session.get(Category, data.category_id):
            raise HTTPException(404, "Category not found")
        sub.category_id = data.category_id
    if data.name:
        sub.name = data.name
    sub.updated_at = datetime.utcnow()

    session.add(sub)
    session.commit()
    session.refresh(sub)
    return sub


@router.delete("/{subcategory_id}")
def delete_subcategory(
    subcategory_id: int,
    session: Session = Depends(get_session),
    _: SessionContext = Depends(require_admin)
):
    sub = session.get(Subcategory, subcategory_id)
    if not sub:
        raise HTTPException(404, "Subcategory not found")

    if session.exec(select(Product).where(Product.subcategory_id == subcategory_id)).first():
        raise HTTPException(400, "Subcategory has products and cannot be deleted")

    session.delete(sub)
    session.commit()
    return {"message": "Subcategory deleted successfully"}
