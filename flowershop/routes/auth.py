import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlmodel import Session, select

from flowershop.database import get_session
from flowershop.dependencies.auth import get_current_user
from flowershop.models.user import User
from flowershop.schemas.user_schemas import (
    PasswordChange,
    UserLogin,
    UserPublic,
    UserRegister,
    UserUpdate,
)
from flowershop.services.session_service import (
    SessionContext,
    create_session,
    delete_session,
)
from flowershop.utils.hash import hash_password, verify_password

logger = logging.getLogger(__name__)

router = APIRouter()


def _public(user: User) -> dict:
    return UserPublic(
        id=user.id,
        name=user.name,
        phone_number=user.phone_number,
        birth_date=user.birth_date,
        role=user.role,
    ).model_dump()


def _set_session_cookie(request: Request, response: Response, session_id: str, max_age: int) -> None:
    settings = request.app.state.settings
    response.set_cookie(
        key=settings.session_cookie_name,
        value=session_id,
        max_age=max_age,
        httponly=True,
        secure=settings.is_production,
        samesite="strict" if settings.is_production else "lax",
        path="/",
        domain=settings.cookie_domain if settings.is_production else None,
    )


# -------- AUTH ROUTES --------

@router.post("/register", status_code=status.HTTP_201_CREATED)
def register_user(
    payload: UserRegister,
    request: Request,
    response: Response,
    session: Session = Depends(get_session)
):
    existing_user = session.exec(
        select(User).where(User.phone_number == payload.phone_number)
    ).first()
    if existing_user:
        raise HTTPException(409, "A user with this phone number already exists")

    user = User(
        name=payload.name,
        phone_number=payload.phone_number,
        password_hash=hash_password(payload.password),
        birth_date=payload.birth_date,
    )
    session.add(user)
    session.commit()
    session.refresh(user)

    settings = request.app.state.settings
    user_session = create_session(session, user, ttl_hours=settings.session_ttl_hours)
    _set_session_cookie(request, response, user_session.id, settings.session_ttl_hours * 3600)

    logger.info("Registered user %s", user.id)
    return {"message": "User registered successfully", "user": _public(user)}


@router.post("/login")
def login(
    payload: UserLogin,
    request: Request,
    response: Response,
    session: Session = Depends(get_session)
):
    user = session.exec(select(User).where(User.phone_number == payload.phone_number)).first()

    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(401, "Invalid phone number or password")

    settings = request.app.state.settings
    user_session = create_session(session, user, ttl_hours=settings.session_ttl_hours)
    _set_session_cookie(request, response, user_session.id, settings.session_refresh_days * 86400)

    logger.info("User %s logged in", user.id)
    return {
        "message": "Logged in successfully",
        "user": _public(user),
        "sessionId": user_session.id,
    }


@router.post("/logout")
def logout(request: Request, response: Response, session: Session = Depends(get_session)):
    settings = request.app.state.settings
    token = request.cookies.get(settings.session_cookie_name) or request.headers.get(settings.session_header_name)

    if token:
        delete_session(session, token)

    response.delete_cookie(settings.session_cookie_name, path="/")
    return {"message": "Logged out successfully"}


@router.get("/me")
def get_me(
    session: Session = Depends(get_session),
    current_user: SessionContext = Depends(get_current_user)
):
    user = session.get(User, current_user.user_id)
    return _public(user)


@router.put("/me")
def update_me(
    payload: UserUpdate,
    session: Session = Depends(get_session),
    current_user: SessionContext = Depends(get_current_user)
):
    user = session.get(User, current_user.user_id)
    user.name = payload.name
    user.birth_date = payload.birth_date
    user.updated_at = datetime.utcnow()

    session.add(user)
    session.commit()
    session.refresh(user)
    return _public(user)


@router.put("/password")
def change_password(
    payload: PasswordChange,
    session: Session = Depends(get_session),
    current_user: SessionContext = Depends(get_current_user)
):
    user = session.get(User, current_user.user_id)

    if not verify_password(payload.current_password, user.password_hash):
        raise HTTPException(401, "Current password is incorrect")

    user.password_hash = hash_password(payload.new_password)
    user.updated_at = datetime.utcnow()
    session.add(user)
    session.commit()
    return {"message": "Password changed successfully"}
