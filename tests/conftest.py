import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text

from pizzeria.app.app import create_app
from pizzeria.core.menu.catalog import MenuCatalog
from pizzeria.core.menu.loader import menu_from_dict
from pizzeria.core.orders.models import Order
from pizzeria.core.orders.status import INITIAL
from pizzeria.infra.changes import ChangeFeed
from pizzeria.infra.db import init_db, make_engine
from pizzeria.infra.logs import utcnow
from pizzeria.infra.menu import DEFAULT_MENU
from pizzeria.infra.orders import OrderStore
from pizzeria.infra.settings import settings


@pytest.fixture
def engine(tmp_path):
    eng = make_engine(f"sqlite:///{tmp_path / 'pizzeria-test.db'}")
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def feed():
    return ChangeFeed()


@pytest.fixture
def store(engine, feed):
    return OrderStore(engine, feed)


@pytest.fixture
def catalog():
    return MenuCatalog(menu_from_dict(DEFAULT_MENU))


@pytest.fixture
def admin_auth(monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_USER", "admin")
    monkeypatch.setattr(settings, "ADMIN_PASS", "geheim")
    return ("admin", "geheim")


@pytest.fixture
def client(engine, feed, tmp_path, admin_auth):
    app = create_app(engine=engine, feed=feed, menu_json=str(tmp_path / "menu.json"))
    with TestClient(app) as c:
        yield c


@pytest.fixture
def customer_headers():
    return {
        "X-User-Id": "user-1",
        "X-User-Email": "ana@example.com",
        "X-User-Phone": "11988887777",
    }


@pytest.fixture
def add_address(engine):
    def _add(user_id="user-1", label="Casa", is_default=True, complement=None, phone=""):
        aid = uuid.uuid4().hex
        with engine.begin() as conn:
            conn.execute(
                text("""
                INSERT INTO addresses (id, user_id, label, cep, street, city, number,
                                       complement, phone, is_default)
                VALUES (:id, :uid, :label, :cep, :street, :city, :number,
                        :complement, :phone, :is_default)
                """),
                {"id": aid, "uid": user_id, "label": label, "cep": "01000-000",
                 "street": "Rua Augusta", "city": "São Paulo", "number": "100",
                 "complement": complement, "phone": phone, "is_default": is_default},
            )
        return aid
    return _add


@pytest.fixture
def make_order():
    def _make(user_id="user-1", total=50.0, items=None):
        now = utcnow()
        items = items or [{"name": "Margherita", "size": "Grande", "quantity": 1,
                           "price": total - 5.0, "flavors": ["Margherita"],
                           "crust": "", "extras": [], "notes": None}]
        return Order(
            id=str(uuid.uuid4()),
            user_id=user_id,
            customer_name="Ana",
            customer_phone="11988887777",
            delivery_address="Rua Augusta, 100, São Paulo",
            items=items,
            subtotal=round(total - 5.0, 2),
            delivery_fee=5.0,
            total=total,
            status=INITIAL,
            payment_method="pix",
            created_at=now,
            updated_at=now,
        )
    return _make
