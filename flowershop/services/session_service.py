import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional
from uuid import uuid4

from sqlalchemy import delete, func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from flowershop.models.user import ActiveUser, User, UserSession

logger = logging.getLogger(__name__)


@dataclass
class SessionContext:
    """What an authenticated request knows about its caller."""

    session_id: str
    user_id: int
    name: str
    phone_number: str
    role: str
    birth_date: Optional[date] = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def create_session(session: Session, user: User, ttl_hours: int = 24) -> UserSession:
    user_session = UserSession(
        id=str(uuid4()),
        user_id=user.id,
        user_role=user.role,
        expires_at=datetime.utcnow() + timedelta(hours=ttl_hours),
    )
    session.add(user_session)
    session.commit()
    session.refresh(user_session)
    return user_session


def resolve_session(session: Session, token: Optional[str]) -> Optional[SessionContext]:
    if not token:
        return None

    row = session.exec(
        select(UserSession, User)
        .join(User, User.id == UserSession.user_id)
        .where(UserSession.id == token)
        .where(UserSession.expires_at > datetime.utcnow())
    ).first()

    if not row:
        return None

    user_session, user = row
    return SessionContext(
        session_id=user_session.id,
        user_id=user.id,
        name=user.name,
        phone_number=user.phone_number,
        role=user.role,
        birth_date=user.birth_date,
    )


def delete_session(session: Session, token: str) -> bool:
    user_session = session.get(UserSession, token)
    if not user_session:
        return False

    session.exec(delete(ActiveUser).where(ActiveUser.session_id == token))
    session.delete(user_session)
    session.commit()
    return True


def refresh_session(session: Session, token: str, refresh_days: int = 30) -> None:
    user_session = session.get(UserSession, token)
    if not user_session:
        return
    user_session.expires_at = datetime.utcnow() + timedelta(days=refresh_days)
    user_session.updated_at = datetime.utcnow()
    session.add(user_session)
    session.commit()


def track_user_activity(
    session: Session,
    ctx: SessionContext,
    ip: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> None:
    activity = session.exec(
        select(ActiveUser).where(ActiveUser.session_id == ctx.session_id)
    ).first()

    if activity is None:
        activity = ActiveUser(session_id=ctx.session_id, user_id=ctx.user_id)

    activity.ip_address = ip
    activity.user_agent = user_agent
    activity.last_activity = datetime.utcnow()
    session.add(activity)
    session.commit()


def touch_session(
    session: Session,
    ctx: SessionContext,
    refresh_days: int = 30,
    ip: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> None:
    """Extend the session and record activity. Never fails the request."""
    try:
        refresh_session(session, ctx.session_id, refresh_days)
    except SQLAlchemyError:
        session.rollback()
        logger.warning("Could not refresh session for user %s", ctx.user_id, exc_info=True)

    try:
        track_user_activity(session, ctx, ip=ip, user_agent=user_agent)
    except SQLAlchemyError:
        session.rollback()
        logger.warning("Could not track activity for user %s", ctx.user_id, exc_info=True)


def get_active_users(session: Session, minutes: int = 15):
    cutoff = datetime.utcnow() - timedelta(minutes=minutes)
    rows = session.exec(
        select(ActiveUser, User)
        .join(User, User.id == ActiveUser.user_id)
        .where(ActiveUser.last_activity > cutoff)
        .order_by(ActiveUser.last_activity.desc())
    ).all()

    return [
        {
            "id": a.id,
            "session_id": a.session_id,
            "user_id": a.user_id,
            "last_activity": a.last_activity,
            "ip_address": a.ip_address,
            "user_agent": a.user_agent,
            "name": u.name,
            "phone_number": u.phone_number,
            "role": u.role,
        }
        for a, u in rows
    ]


def count_active_users(session: Session, minutes: int = 15) -> int:
    cutoff = datetime.utcnow() - timedelta(minutes=minutes)
    return session.exec(
        select(func.count(func.distinct(ActiveUser.user_id)))
        .where(ActiveUser.last_activity > cutoff)
    ).one()


def clean_expired_sessions(session: Session) -> int:
    expired_ids = session.exec(
        select(UserSession.id).where(UserSession.expires_at <= datetime.utcnow())
    ).all()

    if not expired_ids:
        return 0

    session.exec(delete(ActiveUser).where(ActiveUser.session_id.in_(expired_ids)))
    session.exec(delete(UserSession).where(UserSession.id.in_(expired_ids)))
    session.commit()
    return len(expired_ids)
