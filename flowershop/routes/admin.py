import logging
from datetime import datetime, time

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy import func
from sqlmodel import Session, select

from flowershop.constants.admin_forms import ENTITY_FORMS
from flowershop.database import get_session
from flowershop.dependencies.auth import require_admin
from flowershop.models.address import Address
from flowershop.models.holiday import Holiday
from flowershop.models.product import Product
from flowershop.models.user import User, UserSession
from flowershop.schemas.user_schemas import RoleUpdate
from flowershop.services import order_service
from flowershop.services.session_service import SessionContext, count_active_users, get_active_users
from flowershop.utils.pagination import paginate

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/stats")
def dashboard_stats(
    request: Request,
    session: Session = Depends(get_session),
    _: SessionContext = Depends(require_admin)
):
    stats = order_service.get_order_stats(session)
    start_today = datetime.combine(datetime.utcnow().date(), time.min)
    window = request.app.state.settings.active_user_window_minutes

    stats["total_users"] = session.exec(select(func.count(User.id))).one()
    stats["active_users"] = count_active_users(session, window)
    stats["new_users_today"] = session.exec(
        select(func.count(User.id)).where(User.created_at >= start_today)
    ).one()
    stats["total_products"] = session.exec(select(func.count(Product.id))).one()
    return stats


def _user_fields(u: User) -> dict:
    return {
        "id": u.id,
        "name": u.name,
        "phone_number": u.phone_number,
        "birth_date": u.birth_date,
        "role": u.role,
        "created_at": u.created_at,
        "updated_at": u.updated_at,
    }


@router.get("/users")
def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
    session: Session = Depends(get_session),
    _: SessionContext = Depends(require_admin)
):
    query = select(User).order_by(User.created_at.desc(), User.id.desc())
    data = paginate(session=session, query=query, page=page, limit=limit)

    data["results"] = [_user_fields(u) for u in data["results"]]
    return data


@router.get("/users/{user_id}")
def get_user_details(
    user_id: int,
    session: Session = Depends(get_session),
    _: SessionContext = Depends(require_admin)
):
    """User card for the admin panel: profile, addresses, holidays and orders."""
    user = session.get(User, user_id)
    if not user:
        raise HTTPException(404, "User not found")

    addresses = session.exec(
        select(Address)
        .where(Address.user_id == user_id)
        .order_by(Address.created_at, Address.id)
    ).all()
    holidays = session.exec(
        select(Holiday)
        .where(Holiday.user_id == user_id)
        .order_by(Holiday.date)
    ).all()
    orders = order_service.list_user_orders(session, user_id)

    return {
        **_user_fields(user),
        "addresses": addresses,
        "holidays": holidays,
        "orders": [order_service.serialize_order(session, o) for o in orders],
    }


@router.put("/users/{user_id}/role")
def update_user_role(
    user_id: int,
    data: RoleUpdate,
    session: Session = Depends(get_session),
    admin: SessionContext = Depends(require_admin)
):
    user = session.get(User, user_id)
    if not user:
        raise HTTPException(404, "User not found")

    user.role = data.role
    session.add(user)

    # keep the role cached on open sessions in step
    for user_session in session.exec(select(UserSession).where(UserSession.user_id == user_id)).all():
        user_session.user_role = data.role
        session.add(user_session)

    session.commit()
    session.refresh(user)
    logger.info("Admin %s set role of user %s to %s", admin.user_id, user_id, data.role)
    return {"id": user.id, "name": user.name, "role": user.role}


@router.get("/active-users")
def active_users(
    request: Request,
    minutes: int | None = Query(None, ge=1, le=1440),
    session: Session = Depends(get_session),
    _: SessionContext = Depends(require_admin)
):
    window = minutes or request.app.state.settings.active_user_window_minutes
    users = get_active_users(session, window)
    return {"minutes": window, "count": len(users), "users": users}


@router.get("/forms")
def list_forms(_: SessionContext = Depends(require_admin)):
    return {name: form.model_dump() for name, form in ENTITY_FORMS.items()}


@router.get("/forms/{entity}")
def get_form(entity: str, _: SessionContext = Depends(require_admin)):
    form = ENTITY_FORMS.get(entity)
    if not form:
        raise HTTPException(404, "Unknown entity")
    return form.model_dump()
