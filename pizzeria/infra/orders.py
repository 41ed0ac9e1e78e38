from __future__ import annotations
import json
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from pizzeria.core.orders import status as machine
from pizzeria.core.orders.models import Order, OrderRating
from pizzeria.core.orders.status import OrderStatus, TerminalStatusError
from pizzeria.infra.changes import ChangeEvent, ChangeFeed, INSERT, UPDATE
from pizzeria.infra.logs import log_order_event, mask_phone, utcnow

log = logging.getLogger("pizzeria.orders")


class OrderNotFound(Exception):
    def __init__(self, order_id: str):
        super().__init__(f"order not found: {order_id}")
        self.order_id = order_id


class RatingError(Exception):
    pass


_SELECT = """
SELECT o.id, o.user_id, o.customer_name, o.customer_phone, o.delivery_address,
       o.items, o.subtotal, o.delivery_fee, o.total, o.status, o.payment_method,
       o.notes, o.created_at, o.updated_at,
       r.user_id AS r_user_id, r.rating AS r_rating, r.comment AS r_comment,
       r.created_at AS r_created_at
  FROM orders o
  LEFT JOIN order_ratings r ON r.order_id = o.id
"""

_TERMINAL_SQL = ", ".join(f"'{s.value}'" for s in sorted(machine.TERMINAL, key=lambda s: s.value))


def _row_to_order(r) -> Order:
    rating = None
    if r["r_rating"] is not None:
        rating = OrderRating(
            order_id=r["id"],
            user_id=r["r_user_id"],
            rating=int(r["r_rating"]),
            comment=r["r_comment"],
            created_at=r["r_created_at"],
        )
    return Order(
        id=r["id"],
        user_id=r["user_id"],
        customer_name=r["customer_name"],
        customer_phone=r["customer_phone"],
        delivery_address=r["delivery_address"],
        items=json.loads(r["items"]),
        subtotal=float(r["subtotal"]),
        delivery_fee=float(r["delivery_fee"]),
        total=float(r["total"]),
        status=machine.parse_status(r["status"]),
        payment_method=r["payment_method"],
        notes=r["notes"],
        created_at=r["created_at"],
        updated_at=r["updated_at"],
        rating=rating,
    )


class OrderStore:
    """Orders-tabel. Elke geslaagde schrijfactie gaat daarna het wijzigingskanaal op."""

    def __init__(self, engine: Engine, feed: ChangeFeed):
        self.engine = engine
        self.feed = feed

    # ---------- lezen ----------

    def _query(self, where: str = "", params: Optional[Dict[str, Any]] = None) -> List[Order]:
        sql = _SELECT + (f" WHERE {where}" if where else "") + " ORDER BY o.created_at DESC, o.id"
        with self.engine.connect() as conn:
            rows = conn.execute(text(sql), params or {}).mappings().all()
        return [_row_to_order(r) for r in rows]

    def get(self, order_id: str) -> Optional[Order]:
        found = self._query("o.id = :id", {"id": order_id})
        return found[0] if found else None

    def list_for_user(self, user_id: str) -> List[Order]:
        return self._query("o.user_id = :uid", {"uid": user_id})

    def list_all(self) -> List[Order]:
        return self._query()

    # ---------- schrijven ----------

    def create(self, order: Order) -> Order:
        with self.engine.begin() as conn:
            conn.execute(
                text("""
                INSERT INTO orders
                    (id, user_id, customer_name, customer_phone, delivery_address,
                     items, subtotal, delivery_fee, total, status, payment_method,
                     notes, created_at, updated_at)
                VALUES
                    (:id, :uid, :name, :phone, :addr,
                     :items, :subtotal, :fee, :total, :status, :pay,
                     :notes, :created, :updated)
                """),
                {
                    "id": order.id,
                    "uid": order.user_id,
                    "name": order.customer_name,
                    "phone": order.customer_phone,
                    "addr": order.delivery_address,
                    "items": json.dumps(order.items, ensure_ascii=False),
                    "subtotal": order.subtotal,
                    "fee": order.delivery_fee,
                    "total": order.total,
                    "status": order.status.value,
                    "pay": order.payment_method,
                    "notes": order.notes,
                    "created": order.created_at,
                    "updated": order.updated_at,
                },
            )
            log_order_event(conn, order.id, "order_created", data={
                "total": order.total,
                "items": len(order.items),
                "payment_method": order.payment_method,
                "phone": mask_phone(order.customer_phone),
            })
        log.info(f"order {order.id} created total={order.total:.2f}")
        self.feed.publish(ChangeEvent("orders", INSERT, order.id, order.user_id))
        return order

    def update_status(self, order_id: str, target) -> Order:
        """Handmatige statuskeuze vanuit het dashboard."""
        order = self.get(order_id)
        if order is None:
            raise OrderNotFound(order_id)
        new = machine.transition(order.status, target)
        if new == order.status:
            return order
        return self._write_status(order, new, source="manual")

    def apply_action(self, order_id: str, action: str) -> Order:
        """Snelknop: accept / reject / ship / deliver."""
        order = self.get(order_id)
        if order is None:
            raise OrderNotFound(order_id)
        new = machine.apply_action(order.status, action)
        return self._write_status(order, new, source=action)

    def _write_status(self, order: Order, new: OrderStatus, source: str) -> Order:
        # eindstatus wordt in de WHERE bewaakt; verder wint de laatste schrijver
        with self.engine.begin() as conn:
            res = conn.execute(
                text(f"""
                UPDATE orders
                   SET status = :st, updated_at = :ts
                 WHERE id = :id
                   AND status NOT IN ({_TERMINAL_SQL})
                """),
                {"st": new.value, "ts": utcnow(), "id": order.id},
            )
            if res.rowcount:
                log_order_event(conn, order.id, "status_changed", data={
                    "from": order.status.value, "to": new.value, "source": source,
                })
        if res.rowcount == 0:
            current = self.get(order.id)
            if current is None:
                raise OrderNotFound(order.id)
            raise TerminalStatusError(current.status)

        log.info(f"order {order.id} {order.status.value} -> {new.value} ({source})")
        self.feed.publish(ChangeEvent("orders", UPDATE, order.id, order.user_id))
        return self.get(order.id)

    def add_rating(self, order_id: str, user_id: str, rating: int,
                   comment: Optional[str] = None) -> OrderRating:
        if isinstance(rating, bool) or not isinstance(rating, int) or not (1 <= rating <= 5):
            raise RatingError("rating must be an integer 1..5")
        order = self.get(order_id)
        if order is None or order.user_id != user_id:
            raise OrderNotFound(order_id)
        if not machine.can_rate(order.status):
            raise RatingError("order can only be rated after delivery")
        if order.rating is not None:
            raise RatingError("order already rated")

        created = utcnow()
        comment = (comment or "").strip() or None
        try:
            with self.engine.begin() as conn:
                conn.execute(
                    text("""
                    INSERT INTO order_ratings (order_id, user_id, rating, comment, created_at)
                    VALUES (:oid, :uid, :rating, :comment, :ts)
                    """),
                    {"oid": order_id, "uid": user_id, "rating": rating,
                     "comment": comment, "ts": created},
                )
                log_order_event(conn, order_id, "rating_created", data={"rating": rating})
        except IntegrityError:
            raise RatingError("order already rated") from None

        log.info(f"order {order_id} rated {rating}")
        self.feed.publish(ChangeEvent("order_ratings", INSERT, order_id, user_id))
        return OrderRating(order_id=order_id, user_id=user_id, rating=rating,
                           comment=comment, created_at=created)
