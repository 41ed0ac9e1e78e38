from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Dict

SIZE_IDS = ("small", "medium", "large", "family")

@dataclass
class SizeOption:
    id: str  # "small" | "medium" | "large" | "family"
    label: str
    slices: str = ""
    serves: str = ""

@dataclass
class CrustOption:
    id: str
    label: str
    price: float = 0.0

@dataclass
class ExtraOption:
    id: str
    label: str
    price: float = 0.0

@dataclass
class MenuItem:
    id: str
    name: str
    category: str
    prices: Dict[str, float]
    description: str = ""
    image_url: Optional[str] = None
    is_popular: bool = False
    is_available: bool = True
    sort_order: int = 0

    def price_for(self, size: str) -> float:
        return float(self.prices.get(size, 0.0))

@dataclass
class Menu:
    meta: Dict[str, str]
    categories: List[str]
    items: List[MenuItem]
    sizes: List[SizeOption] = field(default_factory=list)
    crusts: List[CrustOption] = field(default_factory=list)
    extras: List[ExtraOption] = field(default_factory=list)
