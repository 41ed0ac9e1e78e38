from __future__ import annotations
from dataclasses import asdict
from datetime import datetime
from typing import List, Optional
import zoneinfo

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import BaseModel, Field
from sqlalchemy.engine import Engine

from pizzeria.app.deps import (
    client_session, get_catalog, get_engine, get_store, optional_customer, require_customer,
)
from pizzeria.app.serializers import customer_snapshot, item_out, order_out
from pizzeria.app.sessions import ClientSession
from pizzeria.core import pricing
from pizzeria.core.cart import InvalidCartLine, build_line
from pizzeria.core.menu.catalog import MenuCatalog
from pizzeria.core.orders.models import Customer
from pizzeria.infra import live_settings
from pizzeria.infra.addresses import resolve_address
from pizzeria.infra.orders import OrderNotFound, OrderStore, RatingError
from pizzeria.infra.settings import settings
from pizzeria.workflows.checkout import (
    AddressNotResolvedError, CheckoutError, EmptyCartError, MissingPaymentError,
    NotAuthenticatedError, OrderSubmissionFailed, StoreClosedError, submit_order,
)
from pizzeria.workflows.order_sync import CustomerOrdersView

router = APIRouter(tags=["customer"])


# -------- Menukaart --------

@router.get("/menu")
def get_menu(category: str = "all", catalog: MenuCatalog = Depends(get_catalog)):
    menu = catalog.menu
    return {
        "categories": menu.categories,
        "items": [item_out(it) for it in catalog.by_category(category)],
        "sizes": [asdict(s) for s in menu.sizes],
        "crusts": [asdict(c) for c in menu.crusts],
        "extras": [asdict(e) for e in menu.extras],
    }


@router.get("/menu/{item_id}/pairings")
def get_pairings(item_id: str, catalog: MenuCatalog = Depends(get_catalog)):
    item = catalog.get(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail="unknown menu item")
    return {"items": [item_out(it) for it in catalog.eligible_second_flavors(item)]}


@router.get("/store")
def get_store_info(engine: Engine = Depends(get_engine)):
    s = live_settings.get_all(engine)
    now = datetime.now(tz=zoneinfo.ZoneInfo(settings.TZ)).strftime("%H:%M")
    s["open_now"] = live_settings.accepting_orders(engine) and live_settings.is_within_opening_hours(engine, now)
    return s


# -------- Winkelwagen --------

class LineIn(BaseModel):
    flavor_ids: List[str] = Field(min_length=1, max_length=2)
    size: str
    crust_id: Optional[str] = None
    extra_ids: List[str] = Field(default_factory=list)
    quantity: int = Field(default=1, ge=1)
    notes: Optional[str] = Field(default=None, max_length=200)


class QuantityIn(BaseModel):
    quantity: int


@router.post("/cart/quote")
def quote_line(payload: LineIn, catalog: MenuCatalog = Depends(get_catalog)):
    q = pricing.quote(catalog, payload.flavor_ids, payload.size,
                      payload.crust_id, payload.extra_ids, payload.quantity)
    return asdict(q)


@router.get("/cart")
def get_cart(sess: ClientSession = Depends(client_session)):
    return sess.cart.to_dict()


@router.post("/cart/items", status_code=status.HTTP_201_CREATED)
def add_cart_item(payload: LineIn,
                  sess: ClientSession = Depends(client_session),
                  catalog: MenuCatalog = Depends(get_catalog)):
    try:
        line = build_line(catalog, payload.flavor_ids, payload.size, payload.crust_id,
                          payload.extra_ids, payload.quantity, payload.notes)
    except InvalidCartLine as e:
        raise HTTPException(status_code=400, detail=str(e))
    with sess.lock:
        stored = sess.cart.add_item(line)
        out = sess.cart.to_dict()
    out["added"] = asdict(stored)
    return out


@router.patch("/cart/items/{line_id}")
def update_cart_item(line_id: str, payload: QuantityIn,
                     sess: ClientSession = Depends(client_session)):
    with sess.lock:
        sess.cart.update_quantity(line_id, payload.quantity)
        return sess.cart.to_dict()


@router.delete("/cart/items/{line_id}")
def remove_cart_item(line_id: str, sess: ClientSession = Depends(client_session)):
    with sess.lock:
        sess.cart.remove_item(line_id)
        return sess.cart.to_dict()


@router.delete("/cart")
def clear_cart(sess: ClientSession = Depends(client_session)):
    with sess.lock:
        sess.cart.clear_cart()
        return sess.cart.to_dict()


# -------- Afrekenen --------

class CheckoutIn(BaseModel):
    payment_method: Optional[str] = None
    address_id: Optional[str] = None
    notes: Optional[str] = Field(default=None, max_length=500)


_CHECKOUT_STATUS = {
    EmptyCartError: 400,
    MissingPaymentError: 400,
    AddressNotResolvedError: 400,
    NotAuthenticatedError: 401,
    StoreClosedError: 409,
    OrderSubmissionFailed: 503,
}


@router.post("/checkout", status_code=status.HTTP_201_CREATED)
def checkout(payload: CheckoutIn,
             sess: ClientSession = Depends(client_session),
             customer: Optional[Customer] = Depends(optional_customer),
             store: OrderStore = Depends(get_store),
             engine: Engine = Depends(get_engine)):
    live = live_settings.get_all(engine)
    address = resolve_address(engine, customer.id, payload.address_id) if customer else None
    try:
        # winkelwagen op slot tot de order geschreven is
        with sess.lock:
            result = submit_order(store, sess.cart, address, payload.payment_method, customer,
                                  live, notifications=sess.notifications, notes=payload.notes)
    except CheckoutError as e:
        raise HTTPException(
            status_code=_CHECKOUT_STATUS.get(type(e), 400),
            detail={"message": e.message, "redirect": e.redirect, "retryable": e.retryable},
        )
    return {
        "order": order_out(result.order, live["delivery_time"]),
        "notification": asdict(result.notification) if result.notification else None,
        "redirect": result.redirect,
    }


# -------- Mijn bestellingen --------

@router.get("/orders")
def my_orders(customer: Customer = Depends(require_customer),
              store: OrderStore = Depends(get_store),
              engine: Engine = Depends(get_engine)):
    view = CustomerOrdersView(store, customer.id)
    view.refresh()
    return customer_snapshot(view, live_settings.get(engine, "delivery_time"))


@router.get("/orders/{order_id}")
def my_order(order_id: str,
             customer: Customer = Depends(require_customer),
             store: OrderStore = Depends(get_store),
             engine: Engine = Depends(get_engine)):
    order = store.get(order_id)
    if order is None or order.user_id != customer.id:
        raise HTTPException(status_code=404, detail="order not found")
    return order_out(order, live_settings.get(engine, "delivery_time"))


class RatingIn(BaseModel):
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = Field(default=None, max_length=500)


@router.post("/orders/{order_id}/rating", status_code=status.HTTP_201_CREATED)
def rate_order(order_id: str, payload: RatingIn,
               customer: Customer = Depends(require_customer),
               store: OrderStore = Depends(get_store)):
    try:
        rating = store.add_rating(order_id, customer.id, payload.rating, payload.comment)
    except OrderNotFound:
        raise HTTPException(status_code=404, detail="order not found")
    except RatingError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return asdict(rating)


# -------- Meldingen & sessie --------

class ReadIn(BaseModel):
    id: Optional[str] = None


@router.get("/notifications")
def get_notifications(sess: ClientSession = Depends(client_session)):
    return sess.notifications.to_dict()


@router.post("/notifications/read")
def read_notifications(payload: ReadIn, sess: ClientSession = Depends(client_session)):
    if payload.id:
        sess.notifications.mark_as_read(payload.id)
    else:
        sess.notifications.mark_all_as_read()
    return sess.notifications.to_dict()


@router.delete("/notifications")
def clear_notifications(sess: ClientSession = Depends(client_session)):
    sess.notifications.clear()
    return sess.notifications.to_dict()


@router.delete("/session", status_code=status.HTTP_204_NO_CONTENT)
def end_session(request: Request, response: Response):
    """Uitloggen: winkelwagen en meldingen van deze sessie vervallen."""
    request.app.state.sessions.drop(request.cookies.get(settings.SESSION_COOKIE))
    response.delete_cookie(settings.SESSION_COOKIE)
    return None
