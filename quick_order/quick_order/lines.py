from __future__ import annotations

import uuid
from dataclasses import replace
from typing import Optional, Sequence, Tuple

from . import matcher, pricing
from .log import get_logger
from .models import (
    Detached,
    Empty,
    Field,
    FocusTarget,
    OrderLine,
    Part,
    Resolved,
    Typing,
)

logger = get_logger(__name__)

KEY_DOWN = "ArrowDown"
KEY_UP = "ArrowUp"
KEY_ENTER = "Enter"
KEY_TAB = "Tab"
KEY_ESCAPE = "Escape"


def new_line_id() -> str:
    return uuid.uuid4().hex


def empty_line() -> OrderLine:
    return OrderLine(line_id=new_line_id())


def resolved_line(part: Part, quantity: int = 0, supplier_id: Optional[str] = None) -> OrderLine:
    return OrderLine(
        line_id=new_line_id(),
        raw_text=part.part_number,
        quantity=quantity,
        editor=_resolve(part, supplier_id),
    )


def _resolve(part: Part, supplier_id: Optional[str] = None) -> Resolved:
    if supplier_id is not None and pricing.has_supplier(part, supplier_id):
        return Resolved(part=part, supplier_id=supplier_id, price=pricing.resolve_for_supplier(part, supplier_id))
    default = pricing.resolve_default(part)
    return Resolved(part=part, supplier_id=default.supplier_id, price=default.price)


def edit_text(
    line: OrderLine,
    text: str,
    catalog: Sequence[Part],
    limit: int = matcher.INLINE_LIMIT,
    min_length: int = matcher.MIN_QUERY_LENGTH,
) -> OrderLine:
    """Apply a keystroke to the identifier field and re-run the matcher."""
    result = matcher.match(text, catalog, limit=limit, min_length=min_length)
    if result.exact is not None:
        current = line.resolved_part
        if current is not None and current.part_id == result.exact.part_id:
            # same part re-typed, keep the user's supplier choice
            return replace(line, raw_text=text)
        return replace(line, raw_text=text, editor=_resolve(result.exact))
    if not text:
        return replace(line, raw_text=text, editor=Empty())
    return replace(line, raw_text=text, editor=Typing(suggestions=result.suggestions))


def select_part(line: OrderLine, part: Part) -> OrderLine:
    return replace(line, raw_text=part.part_number, editor=_resolve(part))


def identifier_key(line: OrderLine, key: str, row: int = 0) -> Tuple[OrderLine, Optional[FocusTarget]]:
    """Handle a navigation key on the identifier field.

    Only acts while the suggestion list is open. Enter commits the highlighted
    suggestion (the first one when nothing is highlighted) and asks for focus
    on the row's quantity field.
    """
    if not line.suggestions_open:
        return line, None
    editor = line.editor
    count = len(editor.suggestions)
    if key == KEY_DOWN:
        return replace(line, editor=replace(editor, highlighted=(editor.highlighted + 1) % count)), None
    if key == KEY_UP:
        start = editor.highlighted if editor.highlighted >= 0 else 0
        return replace(line, editor=replace(editor, highlighted=(start - 1) % count)), None
    if key == KEY_ENTER:
        index = editor.highlighted if editor.highlighted >= 0 else 0
        return select_part(line, editor.suggestions[index]), FocusTarget(row, Field.QUANTITY)
    if key == KEY_ESCAPE:
        return replace(line, editor=replace(editor, open=False, highlighted=-1)), None
    return line, None


def choose_suggestion(line: OrderLine, index: int, row: int = 0) -> Tuple[OrderLine, Optional[FocusTarget]]:
    suggestions = line.suggestions
    if not 0 <= index < len(suggestions):
        return line, None
    return select_part(line, suggestions[index]), FocusTarget(row, Field.QUANTITY)


def coerce_quantity(value) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(0, value)
    if isinstance(value, float):
        return max(0, int(value)) if value == value else 0
    text = str(value or "").strip()
    # leading integer, like a number input that tolerates trailing junk
    digits = ""
    for i, ch in enumerate(text):
        if ch.isdigit() or (i == 0 and ch in "+-"):
            digits += ch
        else:
            break
    try:
        return max(0, int(digits))
    except ValueError:
        return 0


def set_quantity(line: OrderLine, value) -> OrderLine:
    return replace(line, quantity=coerce_quantity(value))


def select_supplier(line: OrderLine, supplier_id: Optional[str]) -> OrderLine:
    editor = line.editor
    if not isinstance(editor, Resolved):
        logger.debug("supplier change ignored on unresolved line %s", line.line_id)
        return line
    price = pricing.resolve_for_supplier(editor.part, supplier_id)
    return replace(line, editor=replace(editor, supplier_id=supplier_id, price=price))


def clear_line(line: OrderLine) -> OrderLine:
    return OrderLine(line_id=line.line_id)


def duplicate_line(line: OrderLine) -> OrderLine:
    return replace(line, line_id=new_line_id())


def detached_line(text: str, quantity: int, price: float) -> OrderLine:
    return OrderLine(
        line_id=new_line_id(),
        raw_text=text,
        quantity=coerce_quantity(quantity),
        editor=Detached(price=price),
    )
