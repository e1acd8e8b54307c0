from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select

from flowershop.database import get_session
from flowershop.dependencies.auth import get_current_user
from flowershop.models.address import Address
from flowershop.models.holiday import Holiday
from flowershop.schemas.address_schemas import AddressCreate
from flowershop.schemas.holiday_schemas import HolidayCreate
from flowershop.services.session_service import SessionContext

router = APIRouter()


# -------- ADDRESSES --------

def _own_address(session: Session, address_id: int, user_id: int) -> Address:
    address = session.get(Address, address_id)
    if not address or address.user_id != user_id:
        raise HTTPException(404, "Address not found")
    return address


@router.get("/addresses")
def list_addresses(
    session: Session = Depends(get_session),
    current_user: SessionContext = Depends(get_current_user)
):
    return session.exec(
        select(Address)
        .where(Address.user_id == current_user.user_id)
        .order_by(Address.created_at, Address.id)
    ).all()


@router.post("/addresses", status_code=status.HTTP_201_CREATED)
def add_address(
    data: AddressCreate,
    session: Session = Depends(get_session),
    current_user: SessionContext = Depends(get_current_user)
):
    address = Address(user_id=current_user.user_id, **data.model_dump())

    session.add(address)
    session.commit()
    session.refresh(address)
    return address


@router.put("/addresses/{address_id}")
def update_address(
    address_id: int,
    data: AddressCreate,
    session: Session = Depends(get_session),
    current_user: SessionContext = Depends(get_current_user)
):
    address = _own_address(session, address_id, current_user.user_id)

    address.name = data.name
    address.address = data.address
    address.updated_at = datetime.utcnow()

    session.add(address)
    session.commit()
    session.refresh(address)
    return address


@router.delete("/addresses/{address_id}")
def delete_address(
    address_id: int,
    session: Session = Depends(get_session),
    current_user: SessionContext = Depends(get_current_user)
):
    address = _own_address(session, address_id, current_user.user_id)
    session.delete(address)
    session.commit()
    return {"message": "Address deleted successfully"}


# -------- HOLIDAYS --------

def _own_holiday(session: Session, holiday_id: int, user_id: int) -> Holiday:
    holiday = session.get(Holiday, holiday_id)
    if not holiday or holiday.user_id != user_id:
        raise HTTPException(404, "Holiday not found")
    return holiday


@router.get("/holidays")
def list_holidays(
    session: Session = Depends(get_session),
    current_user: SessionContext = Depends(get_current_user)
):
    return session.exec(
        select(Holiday)
        .where(Holiday.user_id == current_user.user_id)
        .order_by(Holiday.date)
    ).all()


@router.post("/holidays", status_code=status.HTTP_201_CREATED)
def add_holiday(
    data: HolidayCreate,
    session: Session = Depends(get_session),
    current_user: SessionContext = Depends(get_current_user)
):
    holiday = Holiday(user_id=current_user.user_id, name=data.name, date=data.date)
    session.add(holiday)
    session.commit()
    session.refresh(holiday)
    return holiday


@router.put("/holidays/{holiday_id}")
def update_holiday(
    holiday_id: int,
    data: HolidayCreate,
    session: Session = Depends(get_session),
    current_user: SessionContext = Depends(get_current_user)
):
    holiday = _own_holiday(session, holiday_id, current_user.user_id)

    holiday.name = data.name
    holiday.date = data.date
    holiday.updated_at = datetime.utcnow()

    session.add(holiday)
    session.commit()
    session.refresh(holiday)
    return holiday


@router.delete("/holidays/{holiday_id}")
def delete_holiday(
    holiday_id: int,
    session: Session = Depends(get_session),
    current_user: SessionContext = Depends(get_current_user)
):
    holiday = _own_holiday(session, holiday_id, current_user.user_id)
    session.delete(holiday)
    session.commit()
    return {"message": "Holiday deleted"}
