import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from sqlmodel import Session

from flowershop.database import get_session
from flowershop.services.session_service import (
    SessionContext,
    resolve_session,
    touch_session,
)

logger = logging.getLogger(__name__)


def _session_token(request: Request) -> Optional[str]:
    settings = request.app.state.settings
    return (
        request.cookies.get(settings.session_cookie_name)
        or request.headers.get(settings.session_header_name)
    )


def _authenticate(request: Request, session: Session) -> Optional[SessionContext]:
    token = _session_token(request)
    if not token:
        return None

    ctx = resolve_session(session, token)
    if ctx is None:
        logger.info("Session not found or expired")
        return None

    settings = request.app.state.settings
    touch_session(
        session,
        ctx,
        refresh_days=settings.session_refresh_days,
        ip=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    return ctx


def get_current_user(
    request: Request,
    session: Session = Depends(get_session),
) -> SessionContext:
    if not _session_token(request):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    ctx = _authenticate(request, session)
    if ctx is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session expired. Please log in again.",
        )
    return ctx


def get_optional_user(
    request: Request,
    session: Session = Depends(get_session),
) -> Optional[SessionContext]:
    return _authenticate(request, session)


def require_admin(current_user: SessionContext = Depends(get_current_user)) -> SessionContext:
    if not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return current_user
