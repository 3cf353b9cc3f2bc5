from __future__ import annotations

from typing import List, Optional, Tuple

from .models import Part, PriceSelection


def resolve_default(part: Part) -> PriceSelection:
    # first offer in catalog order, no cheapest/best-stock heuristic
    if part.offers:
        offer = part.offers[0]
        return PriceSelection(supplier_id=offer.supplier_id, price=offer.price)
    return PriceSelection(supplier_id=None, price=part.price)


def resolve_for_supplier(part: Part, supplier_id: Optional[str]) -> float:
    for offer in part.offers:
        if offer.supplier_id == supplier_id:
            return offer.price
    return part.price


def supplier_options(part: Part) -> List[Tuple[str, float]]:
    return [(offer.supplier_id, offer.price) for offer in part.offers]


def has_supplier(part: Part, supplier_id: Optional[str]) -> bool:
    return any(offer.supplier_id == supplier_id for offer in part.offers)
