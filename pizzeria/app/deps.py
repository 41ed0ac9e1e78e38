from __future__ import annotations
from typing import Optional

from fastapi import HTTPException, Request, Response, status
from sqlalchemy.engine import Engine

from pizzeria.app.sessions import ClientSession
from pizzeria.core.menu.catalog import MenuCatalog
from pizzeria.core.orders.models import Customer
from pizzeria.infra.menu import load_catalog
from pizzeria.infra.orders import OrderStore
from pizzeria.infra.settings import settings

# Identiteit komt van de auth-gateway vóór deze service
USER_HEADERS = {
    "id": "x-user-id",
    "email": "x-user-email",
    "name": "x-user-name",
    "phone": "x-user-phone",
}


def get_engine(request: Request) -> Engine:
    return request.app.state.engine


def get_store(request: Request) -> OrderStore:
    return request.app.state.store


def get_catalog(request: Request) -> MenuCatalog:
    return load_catalog(request.app.state.engine, fallback=request.app.state.menu_fallback)


def optional_customer(request: Request) -> Optional[Customer]:
    uid = request.headers.get(USER_HEADERS["id"], "").strip()
    if not uid:
        return None
    return Customer(
        id=uid,
        email=request.headers.get(USER_HEADERS["email"], ""),
        name=request.headers.get(USER_HEADERS["name"], ""),
        phone=request.headers.get(USER_HEADERS["phone"], ""),
    )


def require_customer(request: Request) -> Customer:
    customer = optional_customer(request)
    if customer is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": "Faça login para continuar", "redirect": "/auth"},
        )
    return customer


def client_session(request: Request, response: Response) -> ClientSession:
    sid = request.cookies.get(settings.SESSION_COOKIE)
    sess = request.app.state.sessions.get_or_create(sid)
    if sess.id != sid:
        response.set_cookie(settings.SESSION_COOKIE, sess.id, httponly=True, samesite="lax")
    return sess
