from __future__ import annotations

import re
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

from .errors import EmptySubmissionError
from .log import get_logger
from .models import OrderItem, OrderLine, OrderRecord, SupplierGroup

logger = get_logger(__name__)

DRAFT_PREFIX = "DRAFT"
FINAL_PREFIX = "ORD"


def _supplier_suffix(supplier_id: Optional[str]) -> str:
    if not supplier_id:
        return "GEN"
    cleaned = re.sub(r"[^A-Za-z0-9]", "", supplier_id).upper()
    return cleaned[-6:] or "GEN"


def new_batch_token() -> str:
    return uuid.uuid4().hex[:6].upper()


def order_number(
    is_draft: bool,
    supplier_id: Optional[str],
    now: datetime,
    ordinal: int = 1,
    batch: str = "",
) -> str:
    """``PREFIX-timestamp[-batch]-NNsuffix``; one batch token per submission."""
    prefix = DRAFT_PREFIX if is_draft else FINAL_PREFIX
    stamp = now.strftime("%Y%m%d%H%M%S")
    if batch:
        stamp = f"{stamp}-{batch}"
    return f"{prefix}-{stamp}-{ordinal:02d}{_supplier_suffix(supplier_id)}"


def snapshot(line: OrderLine) -> OrderItem:
    part = line.resolved_part
    return OrderItem(
        part_id=part.part_id,
        part_number=part.part_number,
        name=part.name,
        quantity=line.quantity,
        unit_price=line.selected_price,
        total=line.selected_price * line.quantity,
    )


def build(
    groups: Dict[str, SupplierGroup],
    notes: str,
    is_draft: bool,
    now: Optional[datetime] = None,
    supersedes: Optional[str] = None,
) -> List[OrderRecord]:
    """One order record per supplier group; a single submission can fan out."""
    if not groups:
        raise EmptySubmissionError()
    now = now or datetime.now(timezone.utc)
    batch = new_batch_token()
    records: List[OrderRecord] = []
    for ordinal, group in enumerate(groups.values(), start=1):
        items = tuple(snapshot(line) for line in group.lines)
        records.append(
            OrderRecord(
                order_number=order_number(is_draft, group.supplier_id, now, ordinal, batch),
                supplier_id=group.supplier_id,
                supplier_name=group.supplier_name,
                notes=notes,
                is_draft=is_draft,
                items=items,
                total=group.total,
                created_at=now,
                supersedes=supersedes,
            )
        )
    logger.info(
        "built %d %s record(s): %s",
        len(records),
        "draft" if is_draft else "final",
        ", ".join(r.order_number for r in records),
    )
    return records
