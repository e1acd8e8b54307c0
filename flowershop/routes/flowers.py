from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select

from flowershop.database import get_session
from flowershop.dependencies.auth import require_admin
from flowershop.models.flower import BouquetFlower, Flower
from flowershop.schemas.flower_schemas import FlowerCreate, FlowerUpdate
from flowershop.services.session_service import SessionContext

router = APIRouter()


@router.get("")
def list_flowers(session: Session = Depends(get_session)):
    return session.exec(select(Flower).order_by(Flower.name)).all()


@router.get("/{flower_id}")
def get_flower(flower_id: int, session: Session = Depends(get_session)):
    flower = session.get(Flower, flower_id)
    if not flower:
        raise HTTPException(404, "Flower not found")
    return flower


@router.post("", status_code=status.HTTP_201_CREATED)
def create_flower(
    data: FlowerCreate,
    session: Session = Depends(get_session),
    _: SessionContext = Depends(require_admin)
):
    flower = Flower(name=data.name, price=data.price)
    session.add(flower)
    session.commit()
    session.refresh(flower)
    return flower


# Bouquet prices are fixed when the bouquet is written; editing a flower
# does not touch them.
@router.put("/{flower_id}")
def update_flower(
    flower_id: int,
    data: FlowerUpdate,
    session: Session = Depends(get_session),
    _: SessionContext = Depends(require_admin)
):
    flower = session.get(Flower, flower_id)
    if not flower:
        raise HTTPException(404, "Flower not found")

    if data.name is not None:
        flower.name = data.name
    if data.price is not None:
        flower.price = data.price
    flower.updated_at = datetime.utcnow()

    session.add(flower)
    session.commit()
    session.refresh(flower)
    return flower


@router.delete("/{flower_id}")
def delete_flower(
    flower_id: int,
    session: Session = Depends(get_session),
    _: SessionContext = Depends(require_admin)
):
    flower = session.get(Flower, flower_id)
    if not flower:
        raise HTTPException(404, "Flower not found")

    in_use = session.exec(
        select(BouquetFlower).where(BouquetFlower.flower_id == flower_id)
    ).first()
    if in_use:
        raise HTTPException(400, "Flower is used in a bouquet")

    session.delete(flower)
    session.commit()
    return {"message": "Flower deleted"}
