from __future__ import annotations
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, List, Optional

from .status import OrderStatus


class PaymentMethod(str, Enum):
    # letterlijke waarden; card_delivery = kaart bij bezorging
    CREDIT_ONLINE = "credit_online"
    CARD_DELIVERY = "card_delivery"
    PIX = "pix"
    CASH = "cash"


@dataclass
class Customer:
    id: str
    email: str = ""
    name: str = ""
    phone: str = ""

    @property
    def display_name(self) -> str:
        if self.name:
            return self.name
        if self.email:
            return self.email.split("@")[0]
        return "Cliente"


@dataclass
class Address:
    id: str
    user_id: str
    label: str
    street: str
    number: str
    city: str
    complement: Optional[str] = None
    phone: str = ""
    cep: Optional[str] = None
    is_default: bool = False

    def flatten(self) -> str:
        compl = f" - {self.complement}" if self.complement else ""
        return f"{self.street}, {self.number}{compl}, {self.city}"


@dataclass
class OrderRating:
    order_id: str
    user_id: str
    rating: int
    comment: Optional[str] = None
    created_at: str = ""


@dataclass
class Order:
    id: str
    user_id: Optional[str]
    customer_name: str
    customer_phone: str
    delivery_address: str
    items: List[Dict[str, Any]]
    subtotal: float
    delivery_fee: float
    total: float
    status: OrderStatus
    payment_method: str
    notes: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""
    rating: Optional[OrderRating] = None

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["status"] = self.status.value
        return d
