import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")

import asyncio
from decimal import Decimal
from itertools import count
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from routebid.config.database import build_engine, get_db
from routebid.core.auth.service import AuthService
from routebid.main import app
from routebid.modules.bidding.schemas import BidCreate
from routebid.modules.bidding.service import BiddingService
from routebid.modules.orders.schemas import OrderCreate
from routebid.modules.orders.service import OrderService
from routebid.shared.database.models import Base, User

_emails = count(1)

TIMES_SQUARE = (40.7590, -73.9850)
NEAR_PICKUP = (40.7600, -73.9840)


def run(coro):
    return asyncio.run(coro)


def order_payload(pickup=NEAR_PICKUP, price="20.00", title="Sobre urgente"):
    return {
        "title": title,
        "pickup": {"address": "1560 Broadway", "lat": pickup[0], "lng": pickup[1]},
        "delivery": {"address": "11 Wall St", "lat": 40.7069, "lng": -74.0113},
        "package": {"description": "Sobre A4", "weight": "0.50"},
        "price": price
    }


def new_user(session, role="customer", first_name=None, lat=None, lng=None) -> User:
    n = next(_emails)
    user = User(
        email=f"{role}{n}@routebid.test",
        password_hash=AuthService.get_password_hash("secret123"),
        first_name=first_name or f"{role.capitalize()}{n}",
        last_name="Test",
        role=role,
        last_lat=lat,
        last_lng=lng,
        is_active=True
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def auth_headers(user) -> dict:
    token = AuthService.issue_token(user)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'routebid-test.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    """Sesión única para pruebas de servicio (no mezclar con ``client``)"""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def make_user(db):
    def _make(role="customer", **kwargs) -> User:
        return new_user(db, role, **kwargs)
    return _make


@pytest.fixture
def customer(make_user):
    return make_user("customer", first_name="Ana")


@pytest.fixture
def drivers(make_user):
    return [make_user("driver", first_name=name) for name in ("Luis", "Marta", "Pedro")]


@pytest.fixture
def create_order(db):
    def _create(owner, **kwargs):
        data = OrderCreate(**order_payload(**kwargs))
        return run(OrderService(db).create_order(data, owner)).order
    return _create


@pytest.fixture
def place_bid(db):
    def _bid(order_id, driver, price="18.00", **kwargs):
        data = BidCreate(bid_price=Decimal(price), **kwargs)
        return run(BiddingService(db).place_bid(order_id, data, driver))
    return _bid


@pytest.fixture
def assigned_order(db, customer, drivers, create_order, place_bid):
    """Pedido con tres ofertas y la del primer conductor aceptada"""
    order = create_order(customer)
    for i, driver in enumerate(drivers):
        place_bid(order["id"], driver, price=f"{18 + i}.00")
    result = run(BiddingService(db).accept_bid(order["id"], drivers[0].id, customer))
    return result.order


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def api_user(session_factory):
    """Crear usuarios en una sesión propia y cerrada (para pruebas HTTP)"""
    def _make(role="customer", **kwargs):
        session = session_factory()
        try:
            user = new_user(session, role, **kwargs)
            data = SimpleNamespace(id=user.id, email=user.email, role=user.role, full_name=user.full_name)
        finally:
            session.close()
        data.headers = auth_headers(data)
        return data
    return _make
