from __future__ import annotations

from typing import Dict, Generic, Iterable, List, Optional, Protocol, Sequence, TypeVar

from .log import get_logger
from .models import OrderRecord, Part, Supplier

logger = get_logger(__name__)

T = TypeVar("T")


class CatalogProvider(Protocol):
    def parts(self) -> Sequence[Part]:
        ...


class StaticCatalog:
    def __init__(self, parts: Iterable[Part] = ()):
        self._parts: List[Part] = list(parts)

    def parts(self) -> Sequence[Part]:
        return tuple(self._parts)

    def extend(self, parts: Iterable[Part]) -> None:
        self._parts.extend(parts)

    def replace(self, parts: Iterable[Part]) -> None:
        self._parts = list(parts)


class SupplierDirectory:
    def __init__(self, suppliers: Iterable[Supplier] = ()):
        self._by_id: Dict[str, Supplier] = {s.supplier_id: s for s in suppliers}

    def replace(self, suppliers: Iterable[Supplier]) -> None:
        self._by_id = {s.supplier_id: s for s in suppliers}

    def display_name(self, supplier_id: Optional[str]) -> str:
        if not supplier_id:
            return "Unassigned"
        supplier = self._by_id.get(supplier_id)
        return supplier.name if supplier else supplier_id

    def all(self) -> List[Supplier]:
        return list(self._by_id.values())


class Notifier(Protocol):
    def notify(self, message: str, level: str = "info") -> None:
        ...


class LogNotifier:
    def notify(self, message: str, level: str = "info") -> None:
        logger.info("[%s] %s", level, message)


class RecordingNotifier:
    def __init__(self):
        self.messages: List[tuple] = []

    def notify(self, message: str, level: str = "info") -> None:
        self.messages.append((level, message))


class Mailbox(Generic[T]):
    """One-shot holder: whatever is put is handed out by a single ``take``."""

    def __init__(self):
        self._item: Optional[T] = None

    def put(self, item: T) -> None:
        self._item = item

    def take(self) -> Optional[T]:
        item, self._item = self._item, None
        return item

    def peek(self) -> Optional[T]:
        return self._item


class OrderSink(Protocol):
    def accept(self, records: Sequence[OrderRecord]) -> None:
        ...


class InMemoryOrderSink:
    def __init__(self):
        self.records: Dict[str, OrderRecord] = {}

    def accept(self, records: Sequence[OrderRecord]) -> None:
        for record in records:
            if record.supersedes:
                self.records.pop(record.supersedes, None)
            self.records[record.order_number] = record

    def get(self, order_number: str) -> Optional[OrderRecord]:
        return self.records.get(order_number)

    def all(self) -> List[OrderRecord]:
        return list(self.records.values())
