from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Dict, List

from .models import OrderItem, OrderRecord, Part, Supplier, SupplierOffer


def part_from_dict(item: Dict[str, Any]) -> Part:
    offers = tuple(
        SupplierOffer(
            supplier_id=str(o["supplier_id"]),
            price=float(o.get("price", 0)),
            stock=int(o.get("stock", 0)),
        )
        for o in item.get("offers", [])
    )
    return Part(
        part_id=str(item.get("part_id", item["part_number"])),
        part_number=str(item["part_number"]),
        name=item.get("name", ""),
        name_localized=item.get("name_localized", ""),
        brand=item.get("brand", ""),
        category=item.get("category", ""),
        price=float(item.get("price", 0)),
        stock=int(item.get("stock", 0)),
        unit=item.get("unit", "pc"),
        offers=offers,
    )


def part_to_dict(part: Part) -> Dict[str, Any]:
    return {
        "part_id": part.part_id,
        "part_number": part.part_number,
        "name": part.name,
        "name_localized": part.name_localized,
        "brand": part.brand,
        "category": part.category,
        "price": part.price,
        "stock": part.stock,
        "unit": part.unit,
        "offers": [vars(o) for o in part.offers],
    }


def load_parts(data: bytes | None) -> List[Part]:
    if not data:
        return []
    payload = json.loads(data.decode("utf-8"))
    return [part_from_dict(item) for item in payload]


def load_suppliers(data: bytes | None) -> List[Supplier]:
    if not data:
        return []
    payload = json.loads(data.decode("utf-8"))
    out = []
    for item in payload:
        out.append(
            Supplier(
                supplier_id=item["supplier_id"],
                name=item.get("name", item["supplier_id"]),
            )
        )
    return out


def order_from_dict(item: Dict[str, Any]) -> OrderRecord:
    items = tuple(
        OrderItem(
            part_id=str(i.get("part_id", "")),
            part_number=str(i.get("part_number", "")),
            name=i.get("name", ""),
            quantity=int(i.get("quantity", 0)),
            unit_price=float(i.get("unit_price", 0)),
            total=float(i.get("total", 0)),
        )
        for i in item.get("items", [])
    )
    created = item.get("created_at")
    return OrderRecord(
        order_number=item["order_number"],
        supplier_id=item.get("supplier_id"),
        supplier_name=item.get("supplier_name", ""),
        notes=item.get("notes", ""),
        is_draft=bool(item.get("is_draft", True)),
        items=items,
        total=float(item.get("total", sum(i.total for i in items))),
        created_at=datetime.fromisoformat(created) if created else datetime.now(),
        supersedes=item.get("supersedes"),
    )


def load_order(data: bytes | None) -> OrderRecord | None:
    if not data:
        return None
    return order_from_dict(json.loads(data.decode("utf-8")))
