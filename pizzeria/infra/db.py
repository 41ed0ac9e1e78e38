from __future__ import annotations
from sqlalchemy import (
    Boolean, Column, Float, Integer, MetaData, String, Table, Text,
    UniqueConstraint, create_engine,
)
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from pizzeria.infra.settings import settings

metadata = MetaData()

# JSON-velden (items, data_json, value) worden als tekst opgeslagen zodat
# dezelfde queries op PostgreSQL en SQLite draaien.

logs = Table(
    "logs", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("ts", String(40), nullable=False),
    Column("level", String(10), nullable=False),
    Column("msg", Text, nullable=False),
)

orders = Table(
    "orders", metadata,
    Column("id", String(36), primary_key=True),
    Column("user_id", String(64), index=True),
    Column("customer_name", Text, nullable=False),
    Column("customer_phone", Text, nullable=False, default=""),
    Column("delivery_address", Text, nullable=False),
    Column("items", Text, nullable=False),
    Column("subtotal", Float, nullable=False),
    Column("delivery_fee", Float, nullable=False),
    Column("total", Float, nullable=False),
    Column("status", String(20), nullable=False, index=True),
    Column("payment_method", String(20), nullable=False),
    Column("notes", Text),
    Column("created_at", String(40), nullable=False, index=True),
    Column("updated_at", String(40), nullable=False),
)

order_ratings = Table(
    "order_ratings", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("order_id", String(36), nullable=False),
    Column("user_id", String(64), nullable=False),
    Column("rating", Integer, nullable=False),
    Column("comment", Text),
    Column("created_at", String(40), nullable=False),
    UniqueConstraint("order_id", name="uq_order_ratings_order_id"),
)

order_events = Table(
    "order_events", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("order_id", String(36), nullable=False, index=True),
    Column("ts", String(40), nullable=False),
    Column("event", Text, nullable=False),
    Column("level", String(10), nullable=False, default="INFO"),
    Column("data_json", Text),
)

menu_items = Table(
    "menu_items", metadata,
    Column("id", String(36), primary_key=True),
    Column("name", Text, nullable=False),
    Column("description", Text, nullable=False, default=""),
    Column("image_url", Text),
    Column("category", String(40), nullable=False),
    Column("price_small", Float, nullable=False),
    Column("price_medium", Float, nullable=False),
    Column("price_large", Float, nullable=False),
    Column("price_family", Float, nullable=False),
    Column("is_popular", Boolean, nullable=False, default=False),
    Column("is_available", Boolean, nullable=False, default=True),
    Column("sort_order", Integer, nullable=False, default=0),
)

addresses = Table(
    "addresses", metadata,
    Column("id", String(36), primary_key=True),
    Column("user_id", String(64), nullable=False, index=True),
    Column("label", Text, nullable=False),
    Column("cep", String(12)),
    Column("street", Text, nullable=False),
    Column("city", Text, nullable=False),
    Column("number", String(20), nullable=False),
    Column("complement", Text),
    Column("phone", String(30), nullable=False, default=""),
    Column("is_default", Boolean, nullable=False, default=False),
)

live_settings = Table(
    "live_settings", metadata,
    Column("key", String(64), primary_key=True),
    Column("value", Text, nullable=False),
    Column("updated_at", String(40), nullable=False),
)


def make_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        # SQLite: FastAPI draait sync routes in een threadpool
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, future=True, **kwargs)
    # Render/Neon/PG: SSL vaak verplicht; SQLAlchemy v2 pakt sslmode uit URL
    return create_engine(url, pool_pre_ping=True, future=True)


engine = make_engine(settings.DATABASE_URL)


def init_db(target: Engine | None = None) -> None:
    """Maakt tabellen aan als ze nog niet bestaan."""
    metadata.create_all(target or engine)
