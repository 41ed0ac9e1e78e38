from __future__ import annotations
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

from pizzeria.core.cart import CartStore
from pizzeria.core.notifications import Notification, NotificationCenter
from pizzeria.core.orders.models import Address, Customer, Order, PaymentMethod
from pizzeria.core.orders.status import INITIAL
from pizzeria.infra.logs import utcnow
from pizzeria.infra.orders import OrderStore

log = logging.getLogger("pizzeria.checkout")


# -------------------------------------------------
#  Fouten (met doel-pagina voor de frontend)
# -------------------------------------------------
class CheckoutError(Exception):
    message = "Não foi possível finalizar o pedido"
    redirect: Optional[str] = None
    retryable = False

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class EmptyCartError(CheckoutError):
    message = "Seu carrinho está vazio"
    redirect = "/cart"


class StoreClosedError(CheckoutError):
    message = "A pizzaria está fechada para pedidos no momento"


class MissingPaymentError(CheckoutError):
    message = "Selecione uma forma de pagamento"


class AddressNotResolvedError(CheckoutError):
    message = "Cadastre um endereço de entrega"
    redirect = "/addresses"


class NotAuthenticatedError(CheckoutError):
    message = "Faça login para continuar"
    redirect = "/auth"


class OrderSubmissionFailed(CheckoutError):
    message = "Erro ao criar pedido. Tente novamente"
    retryable = True


@dataclass
class CheckoutResult:
    order: Order
    notification: Optional[Notification]
    redirect: str = "/orders"


def _payment(value: Optional[str]) -> PaymentMethod:
    if not value:
        raise MissingPaymentError()
    try:
        return PaymentMethod(value)
    except ValueError:
        raise MissingPaymentError(f"Forma de pagamento inválida: {value}") from None


def submit_order(
    store: OrderStore,
    cart: CartStore,
    address: Optional[Address],
    payment_method: Optional[str],
    customer: Optional[Customer],
    live: Dict[str, Any],
    notifications: Optional[NotificationCenter] = None,
    notes: Optional[str] = None,
) -> CheckoutResult:
    """
    Zet de winkelwagen om in één orders-rij met status 'received'.
    Alle controles gebeuren vóór het schrijven; bij een fout blijft de
    winkelwagen ongemoeid. Na het schrijven verdwijnen alleen de bestelde
    regels; wat intussen is toegevoegd blijft staan.
    """
    line_ids, items, subtotal = cart.freeze()
    if not items:
        raise EmptyCartError()
    if customer is None:
        raise NotAuthenticatedError()
    if not live.get("is_open", True):
        raise StoreClosedError()
    method = _payment(payment_method)
    if address is None:
        raise AddressNotResolvedError()

    fee = round(float(live.get("delivery_fee", 0.0)), 2)
    now = utcnow()
    order = Order(
        id=str(uuid.uuid4()),
        user_id=customer.id,
        customer_name=customer.display_name,
        customer_phone=address.phone or customer.phone or "",
        delivery_address=address.flatten(),
        items=items,
        subtotal=subtotal,
        delivery_fee=fee,
        total=round(subtotal + fee, 2),
        status=INITIAL,
        payment_method=method.value,
        notes=(notes or "").strip() or None,
        created_at=now,
        updated_at=now,
    )

    try:
        store.create(order)
    except SQLAlchemyError as e:
        log.error(f"order insert failed for user {customer.id}: {e}")
        raise OrderSubmissionFailed() from e

    cart.remove_lines(line_ids)
    note = None
    if notifications is not None:
        note = notifications.add(
            "Pedido enviado! 🎉",
            f"Seu pedido de R$ {order.total:.2f} foi recebido e aguarda confirmação.",
            "success",
        )
    return CheckoutResult(order=order, notification=note)
