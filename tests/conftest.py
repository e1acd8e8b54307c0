import itertools

import pytest
from fastapi.testclient import TestClient

from flowershop.config import Settings
from flowershop.database import Database
from flowershop.main import create_app
from flowershop.models.flower import Flower
from flowershop.models.product import Product
from flowershop.models.user import User
from flowershop.services.session_service import create_session
from flowershop.utils.hash import hash_password

_phones = itertools.count(1)


@pytest.fixture()
def settings(tmp_path):
    return Settings(
        _env_file=None,
        env="local",
        sqlalchemy_database_url=f"sqlite:///{tmp_path / 'flowershop.db'}",
        max_upload_size_mb=1,
    )


@pytest.fixture()
def database(settings):
    db = Database(settings.database_url).open()
    db.create_all()
    yield db
    db.close()


@pytest.fixture()
def session(database):
    with database.session() as s:
        yield s


@pytest.fixture()
def client(settings, database):
    app = create_app(settings=settings, database=database)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def make_user(session):
    def _make(name="Anna", role="user", password="secret123", phone=None):
        user = User(
            name=name,
            phone_number=phone or f"+7900000{next(_phones):04d}",
            password_hash=hash_password(password),
            role=role,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make


@pytest.fixture()
def user(make_user):
    return make_user()


@pytest.fixture()
def admin(make_user):
    return make_user(name="Admin", role="admin")


@pytest.fixture()
def auth_headers(session):
    """Open a session for the user and return the header that carries it."""

    def _headers(user):
        user_session = create_session(session, user)
        return {"X-Session-Id": user_session.id}

    return _headers


@pytest.fixture()
def make_product(session):
    def _make(name="Rose", price=100.0, **kwargs):
        product = Product(name=name, price=price, **kwargs)
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    return _make


@pytest.fixture()
def make_flower(session):
    def _make(name="Rose", price=100.0):
        flower = Flower(name=name, price=price)
        session.add(flower)
        session.commit()
        session.refresh(flower)
        return flower

    return _make
