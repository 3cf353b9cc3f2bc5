from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class SupplierOffer:
    supplier_id: str
    price: float
    stock: int = 0


@dataclass(frozen=True)
class Part:
    part_id: str
    part_number: str
    name: str
    name_localized: str = ""
    brand: str = ""
    category: str = ""
    price: float = 0.0  # default price when no supplier offer applies
    stock: int = 0
    unit: str = "pc"
    offers: Tuple[SupplierOffer, ...] = ()


@dataclass(frozen=True)
class Supplier:
    supplier_id: str
    name: str


# Editor sub-states of a single order line


@dataclass(frozen=True)
class Empty:
    pass


@dataclass(frozen=True)
class Typing:
    suggestions: Tuple[Part, ...] = ()
    highlighted: int = -1
    open: bool = True


@dataclass(frozen=True)
class Resolved:
    part: Part
    supplier_id: Optional[str]
    price: float


@dataclass(frozen=True)
class Detached:
    """A line loaded from a draft whose part is gone from the catalog."""

    price: float


EditorState = Union[Empty, Typing, Resolved, Detached]


@dataclass(frozen=True)
class OrderLine:
    line_id: str
    raw_text: str = ""
    quantity: int = 0
    editor: EditorState = field(default_factory=Empty)

    @property
    def resolved_part(self) -> Optional[Part]:
        if isinstance(self.editor, Resolved):
            return self.editor.part
        return None

    @property
    def suggestions(self) -> Tuple[Part, ...]:
        if isinstance(self.editor, Typing):
            return self.editor.suggestions
        return ()

    @property
    def suggestions_open(self) -> bool:
        return isinstance(self.editor, Typing) and self.editor.open and bool(self.editor.suggestions)

    @property
    def highlighted_index(self) -> int:
        if isinstance(self.editor, Typing) and self.editor.open:
            return self.editor.highlighted
        return -1

    @property
    def selected_supplier_id(self) -> Optional[str]:
        if isinstance(self.editor, Resolved):
            return self.editor.supplier_id
        return None

    @property
    def selected_price(self) -> float:
        if isinstance(self.editor, (Resolved, Detached)):
            return self.editor.price
        return 0.0

    @property
    def is_empty(self) -> bool:
        return isinstance(self.editor, Empty) and not self.raw_text and self.quantity == 0

    @property
    def is_valid(self) -> bool:
        return self.resolved_part is not None and self.quantity > 0

    @property
    def line_total(self) -> float:
        if not self.is_valid:
            return 0.0
        return self.selected_price * self.quantity


class Field(str, Enum):
    IDENTIFIER = "identifier"
    QUANTITY = "quantity"


@dataclass(frozen=True)
class FocusTarget:
    row: int
    field: Field = Field.IDENTIFIER


@dataclass(frozen=True)
class GridState:
    lines: Tuple[OrderLine, ...]
    focus: FocusTarget = FocusTarget(0)
    notes: str = ""
    editing_draft_id: Optional[str] = None

    @property
    def valid_lines(self) -> Tuple[OrderLine, ...]:
        return tuple(line for line in self.lines if line.is_valid)


@dataclass(frozen=True)
class OrderItem:
    part_id: str
    part_number: str
    name: str
    quantity: int
    unit_price: float
    total: float


@dataclass(frozen=True)
class OrderRecord:
    order_number: str
    supplier_id: Optional[str]
    supplier_name: str
    notes: str
    is_draft: bool
    items: Tuple[OrderItem, ...]
    total: float
    created_at: datetime
    supersedes: Optional[str] = None


@dataclass(frozen=True)
class Transition:
    """Result of a grid command.

    ``focus`` is applied by the caller once the new state has been rendered;
    ``settle`` does that for callers without a render step.
    """

    state: GridState
    focus: Optional[FocusTarget] = None
    records: Tuple[OrderRecord, ...] = ()

    def settle(self) -> GridState:
        if self.focus is None:
            return self.state
        return replace(self.state, focus=self.focus)


@dataclass
class SupplierGroup:
    supplier_id: Optional[str]
    supplier_name: str
    lines: list = field(default_factory=list)
    total: float = 0.0


@dataclass(frozen=True)
class MatchResult:
    exact: Optional[Part] = None
    suggestions: Tuple[Part, ...] = ()


@dataclass(frozen=True)
class PriceSelection:
    supplier_id: Optional[str]
    price: float


@dataclass(frozen=True)
class TableData:
    headers: Tuple[str, ...]
    rows: Tuple[Tuple[str, ...], ...]
    delimiter: str = ","


@dataclass(frozen=True)
class ProcessedItem:
    original_text: str
    quantity: int
    matched_part: Optional[Part]
    alternatives: Tuple[Part, ...]
    selected_part: Optional[Part]


@dataclass(frozen=True)
class ImportStats:
    total: int
    matched: int
    with_alternatives: int
    not_found: int
    selected: int
