from __future__ import annotations

from typing import Dict, Iterable, Optional

from .models import OrderLine, SupplierGroup

UNASSIGNED = "unassigned"


def supplier_key(line: OrderLine) -> str:
    return line.selected_supplier_id or UNASSIGNED


def partition(lines: Iterable[OrderLine], directory=None) -> Dict[str, SupplierGroup]:
    """Group valid lines by selected supplier, first-seen supplier first."""
    groups: Dict[str, SupplierGroup] = {}
    for line in lines:
        if not line.is_valid:
            continue
        key = supplier_key(line)
        group = groups.get(key)
        if group is None:
            supplier_id: Optional[str] = line.selected_supplier_id
            name = directory.display_name(supplier_id) if directory is not None else (supplier_id or "Unassigned")
            group = groups[key] = SupplierGroup(supplier_id=supplier_id, supplier_name=name)
        group.lines.append(line)
        group.total += line.selected_price * line.quantity
    return groups


def grid_total(lines: Iterable[OrderLine]) -> float:
    return sum(line.selected_price * line.quantity for line in lines if line.is_valid)
