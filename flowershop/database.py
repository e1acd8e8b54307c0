import logging
from typing import Optional

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session

logger = logging.getLogger(__name__)


class Database:
    """Owns the engine (and its connection pool) for one application.

    Built explicitly and handed to whoever needs sessions; nothing is
    connected until ``open()`` and the pool is released on ``close()``.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self._engine: Optional[Engine] = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Database is not open")
        return self._engine

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    def open(self) -> "Database":
        if self._engine is not None:
            return self

        if self.url.startswith("sqlite"):
            kwargs = {"connect_args": {"check_same_thread": False}}
            if ":memory:" in self.url or self.url.rstrip("/") == "sqlite:":
                kwargs["poolclass"] = StaticPool
        else:
            kwargs = {
                "pool_pre_ping": True,   # checks dead connections
                "pool_recycle": 1800,    # refresh every 30 min
            }

        self._engine = create_engine(self.url, echo=self.echo, **kwargs)
        logger.info("Database engine opened (%s)", self._engine.url.get_backend_name())
        return self

    def close(self) -> None:
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        logger.info("Database engine closed")

    def create_all(self) -> None:
        from flowershop import models  # noqa: F401  registers every table

        SQLModel.metadata.create_all(self.engine)

    def session(self) -> Session:
        return Session(self.engine)


def get_database(request: Request) -> Database:
    return request.app.state.db


def get_session(request: Request):
    db: Database = request.app.state.db
    with db.session() as session:
        yield session
