from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from . import lines as line_ops
from . import matcher, partition, submission
from .channels import CatalogProvider, LogNotifier, Mailbox, Notifier, OrderSink, SupplierDirectory
from .config import Settings, get_settings
from .errors import EmptySubmissionError, LineIndexError
from .log import get_logger
from .models import (
    Field,
    FocusTarget,
    GridState,
    OrderLine,
    OrderRecord,
    Part,
    SupplierGroup,
    Transition,
)

logger = get_logger(__name__)

ADD_ROW = "add_row"
REMOVE_ROW = "remove_row"
DUPLICATE_ROW = "duplicate_row"
SUBMIT_ORDER = "submit_order"
CLEAR_ALL = "clear_all"

DEFAULT_SHORTCUTS: Dict[str, str] = {
    "ctrl+enter": ADD_ROW,
    "ctrl+delete": REMOVE_ROW,
    "ctrl+d": DUPLICATE_ROW,
    "ctrl+s": SUBMIT_ORDER,
    "ctrl+shift+backspace": CLEAR_ALL,
}

_MODIFIERS = ("ctrl", "alt", "shift", "meta")


def normalize_combo(combo: str) -> str:
    """Canonical form of a key combination, e.g. ``Shift+Ctrl+D`` -> ``ctrl+shift+d``."""
    keys = [k.strip().lower() for k in combo.split("+") if k.strip()]
    mods = [m for m in _MODIFIERS if m in keys]
    rest = [k for k in keys if k not in _MODIFIERS]
    return "+".join(mods + rest)


class GridController:
    """Owns the quick order grid's commands.

    The controller holds collaborators only; grid data lives in the
    ``GridState`` passed in and returned by every command.
    """

    def __init__(
        self,
        catalog: CatalogProvider,
        directory: Optional[SupplierDirectory] = None,
        notifier: Optional[Notifier] = None,
        sink: Optional[OrderSink] = None,
        drafts: Optional[Mailbox] = None,
        reorders: Optional[Mailbox] = None,
        settings: Optional[Settings] = None,
        shortcuts: Optional[Dict[str, str]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.catalog = catalog
        self.directory = directory or SupplierDirectory()
        self.notifier = notifier or LogNotifier()
        self.sink = sink
        self.drafts = drafts if drafts is not None else Mailbox()
        self.reorders = reorders if reorders is not None else Mailbox()
        self.settings = settings or get_settings()
        self.shortcuts = {normalize_combo(k): v for k, v in (shortcuts or DEFAULT_SHORTCUTS).items()}
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    # state helpers

    def _empty_batch(self, count: Optional[int] = None) -> Tuple[OrderLine, ...]:
        return tuple(line_ops.empty_line() for _ in range(count or self.settings.batch_size))

    def _pad(self, rows: Iterable[OrderLine]) -> Tuple[OrderLine, ...]:
        rows = list(rows)
        missing = self.settings.batch_size - len(rows)
        if missing > 0:
            rows.extend(self._empty_batch(missing))
        return tuple(rows)

    def new_state(self) -> GridState:
        return GridState(lines=self._empty_batch())

    def _line(self, state: GridState, index: int) -> OrderLine:
        if not 0 <= index < len(state.lines):
            raise LineIndexError(f"row {index} out of range (grid has {len(state.lines)} rows)")
        return state.lines[index]

    def _put(self, state: GridState, index: int, line: OrderLine) -> GridState:
        rows = list(state.lines)
        rows[index] = line
        return replace(state, lines=tuple(rows))

    def _focused_row(self, state: GridState) -> int:
        return max(0, min(state.focus.row, len(state.lines) - 1))

    def _parts(self) -> Sequence[Part]:
        # read per command: the catalog may have been refreshed since the last edit
        return self.catalog.parts()

    def focus(self, state: GridState, target: FocusTarget) -> GridState:
        row = max(0, min(target.row, len(state.lines) - 1))
        return replace(state, focus=FocusTarget(row, target.field))

    # row operations

    def insert_after(self, state: GridState, index: int) -> Transition:
        self._line(state, index)
        rows = list(state.lines)
        rows.insert(index + 1, line_ops.empty_line())
        logger.debug("inserted row after %d", index)
        return Transition(replace(state, lines=tuple(rows)), focus=FocusTarget(index + 1))

    def remove_at(self, state: GridState, index: int) -> Transition:
        self._line(state, index)
        rows = list(state.lines)
        del rows[index]
        if not rows:
            rows.append(line_ops.empty_line())
        logger.debug("removed row %d", index)
        return Transition(replace(state, lines=tuple(rows)), focus=FocusTarget(max(0, index - 1)))

    def duplicate_at(self, state: GridState, index: int) -> Transition:
        source = self._line(state, index)
        rows = list(state.lines)
        rows.insert(index + 1, line_ops.duplicate_line(source))
        return Transition(replace(state, lines=tuple(rows)), focus=FocusTarget(index + 1))

    def clear_all(self, state: GridState) -> Transition:
        return Transition(GridState(lines=self._empty_batch()), focus=FocusTarget(0))

    def add_rows(self, state: GridState, count: Optional[int] = None) -> Transition:
        rows = state.lines + self._empty_batch(count or self.settings.grow_by)
        return Transition(replace(state, lines=rows))

    # cell editing

    def edit_text(self, state: GridState, index: int, text: str) -> Transition:
        line = line_ops.edit_text(
            self._line(state, index),
            text,
            self._parts(),
            limit=self.settings.inline_limit,
            min_length=self.settings.min_query_length,
        )
        return Transition(self._put(state, index, line))

    def identifier_key(self, state: GridState, index: int, key: str) -> Transition:
        line, focus = line_ops.identifier_key(self._line(state, index), key, row=index)
        return Transition(self._put(state, index, line), focus=focus)

    def choose_suggestion(self, state: GridState, index: int, suggestion: int) -> Transition:
        line, focus = line_ops.choose_suggestion(self._line(state, index), suggestion, row=index)
        return Transition(self._put(state, index, line), focus=focus)

    def set_quantity(self, state: GridState, index: int, value) -> Transition:
        return Transition(self._put(state, index, line_ops.set_quantity(self._line(state, index), value)))

    def select_supplier(self, state: GridState, index: int, supplier_id: Optional[str]) -> Transition:
        return Transition(self._put(state, index, line_ops.select_supplier(self._line(state, index), supplier_id)))

    def clear_line(self, state: GridState, index: int) -> Transition:
        return Transition(self._put(state, index, line_ops.clear_line(self._line(state, index))))

    def set_notes(self, state: GridState, notes: str) -> GridState:
        return replace(state, notes=notes or "")

    # keyboard flow

    def quantity_key(self, state: GridState, index: int, key: str) -> Transition:
        """Tab/Enter on a quantity cell moves to the next row's identifier.

        On the last row the grid grows first so keyboard entry never dead-ends.
        """
        self._line(state, index)
        if key not in (line_ops.KEY_TAB, line_ops.KEY_ENTER):
            return Transition(state)
        target = index + 1
        if target >= len(state.lines):
            state = self.add_rows(state).state
        return Transition(state, focus=FocusTarget(target, Field.IDENTIFIER))

    def global_shortcut(self, state: GridState, combo: str) -> Transition:
        action = self.shortcuts.get(normalize_combo(combo))
        if action is None:
            return Transition(state)
        row = self._focused_row(state)
        logger.debug("shortcut %s -> %s on row %d", combo, action, row)
        if action == ADD_ROW:
            result = self.insert_after(state, row)
            self.notifier.notify("Row added")
            return result
        if action == REMOVE_ROW:
            return self.remove_at(state, row)
        if action == DUPLICATE_ROW:
            return self.duplicate_at(state, row)
        if action == CLEAR_ALL:
            return self.clear_all(state)
        if action == SUBMIT_ORDER:
            try:
                return self.submit(state, is_draft=False)
            except EmptySubmissionError as exc:
                self.notifier.notify(str(exc), level="error")
                return Transition(state)
        return Transition(state)

    # aggregates

    def valid_lines(self, state: GridState) -> Tuple[OrderLine, ...]:
        return state.valid_lines

    def total(self, state: GridState) -> float:
        return partition.grid_total(state.lines)

    def groups(self, state: GridState) -> Dict[str, SupplierGroup]:
        return partition.partition(state.lines, self.directory)

    # external order handoff

    def _lines_from_order(self, record: OrderRecord) -> List[OrderLine]:
        parts = self._parts()
        rows: List[OrderLine] = []
        for item in record.items:
            part = matcher.find_exact(item.part_number, parts, min_length=1)
            if part is None:
                # keep what the draft said; the user has to re-resolve it
                rows.append(line_ops.detached_line(item.part_number, item.quantity, item.unit_price))
                continue
            rows.append(line_ops.resolved_line(part, line_ops.coerce_quantity(item.quantity), record.supplier_id))
        return rows

    def load_draft(self, state: GridState) -> Transition:
        record = self.drafts.take()
        if record is None:
            return Transition(state)
        rows = self._lines_from_order(record)
        missing = sum(1 for line in rows if line.resolved_part is None)
        new_state = GridState(
            lines=self._pad(rows),
            notes=record.notes or "",
            editing_draft_id=record.order_number,
        )
        logger.info("loaded draft %s: %d item(s), %d detached", record.order_number, len(rows), missing)
        self.notifier.notify(f"Draft {record.order_number} loaded for editing")
        if missing:
            self.notifier.notify(f"{missing} item(s) are no longer in the catalog", level="warning")
        return Transition(new_state, focus=FocusTarget(0))

    def load_reorder(self, state: GridState) -> Transition:
        record = self.reorders.take()
        if record is None:
            return Transition(state)
        rows = self._lines_from_order(record)
        logger.info("reordering %s: %d item(s)", record.order_number, len(rows))
        self.notifier.notify(f"Items from {record.order_number} added to a new order")
        return Transition(GridState(lines=self._pad(rows)), focus=FocusTarget(0))

    def apply_import(self, state: GridState, items: Sequence[Tuple[Part, int]]) -> Transition:
        if not items:
            self.notifier.notify("Nothing selected to import", level="warning")
            return Transition(state)
        kept = [line for line in state.lines if not line.is_empty]
        imported = [line_ops.resolved_line(part, line_ops.coerce_quantity(qty)) for part, qty in items]
        rows = self._pad(kept + imported)
        logger.info("imported %d line(s), kept %d existing", len(imported), len(kept))
        self.notifier.notify(f"Imported {len(imported)} item(s)")
        return Transition(replace(state, lines=rows), focus=FocusTarget(len(kept)))

    def submit(self, state: GridState, is_draft: bool = False) -> Transition:
        """Fan the grid out into one order record per supplier and reset it.

        Raises ``EmptySubmissionError`` without touching the grid when no line
        is valid.
        """
        groups = self.groups(state)
        records = submission.build(
            groups,
            state.notes,
            is_draft,
            now=self.clock(),
            supersedes=state.editing_draft_id,
        )
        if self.sink is not None:
            self.sink.accept(records)
        label = "Draft saved" if is_draft else "Order sent"
        self.notifier.notify(f"{label}: {len(records)} order(s) for {len(groups)} supplier(s)")
        return Transition(self.new_state(), focus=FocusTarget(0), records=tuple(records))
