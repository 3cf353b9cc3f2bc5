import pytest

from quick_order import lines
from quick_order.models import Detached, Empty, Field, FocusTarget, Resolved, Typing


@pytest.fixture
def line():
    return lines.empty_line()


def test_exact_text_resolves_with_default_supplier(line, parts, switch_part):
    resolved = lines.edit_text(line, "96700-B11004X", parts)
    assert resolved.editor == Resolved(switch_part, "S1", 120)
    assert resolved.suggestions == ()
    assert resolved.highlighted_index == -1


def test_partial_text_shows_suggestions(line, parts):
    typing = lines.edit_text(line, "brk", parts)
    assert isinstance(typing.editor, Typing)
    assert [p.part_number for p in typing.suggestions] == ["TOY-BRK-001", "TOY-BRK-002"]
    assert typing.highlighted_index == -1
    assert typing.resolved_part is None


def test_short_or_empty_text(line, parts):
    short = lines.edit_text(line, "T", parts)
    assert isinstance(short.editor, Typing)
    assert not short.suggestions_open
    assert isinstance(lines.edit_text(short, "", parts).editor, Empty)


def test_resolution_is_rechecked_on_every_keystroke(line, parts):
    resolved = lines.edit_text(line, "TOY-BRK-001", parts)
    assert resolved.resolved_part is not None
    backspaced = lines.edit_text(resolved, "TOY-BRK-00", parts)
    assert backspaced.resolved_part is None
    assert len(backspaced.suggestions) == 2


def test_arrow_keys_wrap_both_directions(line, parts):
    typing = lines.edit_text(line, "brk", parts)
    down1, _ = lines.identifier_key(typing, "ArrowDown")
    down2, _ = lines.identifier_key(down1, "ArrowDown")
    down3, _ = lines.identifier_key(down2, "ArrowDown")
    assert [down1.highlighted_index, down2.highlighted_index, down3.highlighted_index] == [0, 1, 0]
    up, _ = lines.identifier_key(typing, "ArrowUp")
    assert up.highlighted_index == 1
    up_again, _ = lines.identifier_key(down1, "ArrowUp")
    assert up_again.highlighted_index == 1


def test_enter_selects_highlighted_and_moves_to_quantity(line, parts):
    typing = lines.edit_text(line, "brk", parts)
    down, _ = lines.identifier_key(typing, "ArrowDown")
    down, _ = lines.identifier_key(down, "ArrowDown")
    selected, focus = lines.identifier_key(down, "Enter", row=4)
    assert selected.raw_text == "TOY-BRK-002"
    assert selected.selected_supplier_id == "S3"
    assert focus == FocusTarget(4, Field.QUANTITY)


def test_enter_without_highlight_takes_first(line, parts):
    typing = lines.edit_text(line, "brk", parts)
    selected, focus = lines.identifier_key(typing, "Enter")
    assert selected.raw_text == "TOY-BRK-001"
    assert focus.field is Field.QUANTITY


def test_escape_closes_list_without_touching_text(line, parts):
    typing = lines.edit_text(line, "brk", parts)
    down, _ = lines.identifier_key(typing, "ArrowDown")
    closed, focus = lines.identifier_key(down, "Escape")
    assert focus is None
    assert closed.raw_text == "brk"
    assert closed.resolved_part is None
    assert not closed.suggestions_open
    assert closed.highlighted_index == -1
    assert lines.identifier_key(closed, "ArrowDown")[0] == closed


def test_choose_suggestion_by_index(line, parts):
    typing = lines.edit_text(line, "brk", parts)
    chosen, focus = lines.choose_suggestion(typing, 1, row=2)
    assert chosen.raw_text == "TOY-BRK-002"
    assert focus == FocusTarget(2, Field.QUANTITY)
    assert lines.choose_suggestion(typing, 7) == (typing, None)


@pytest.mark.parametrize(
    "value, expected",
    [("7", 7), ("abc", 0), ("-4", 0), ("", 0), (None, 0), (3.9, 3), (-2, 0), ("12pcs", 12)],
)
def test_quantity_is_coerced(line, value, expected):
    assert lines.set_quantity(line, value).quantity == expected


def test_supplier_reselection_reprices_only(line, parts, switch_part):
    resolved = lines.set_quantity(lines.edit_text(line, "96700-B11004X", parts), 3)
    switched = lines.select_supplier(resolved, "S2")
    assert switched.selected_price == 115
    assert switched.resolved_part == switch_part
    assert switched.quantity == 3
    stray = lines.select_supplier(resolved, "S9")
    assert stray.selected_price == 120


def test_supplier_change_on_unresolved_line_is_ignored(line, parts):
    typing = lines.edit_text(line, "brk", parts)
    assert lines.select_supplier(typing, "S2") is typing


def test_clear_and_duplicate(line, parts):
    resolved = lines.set_quantity(lines.edit_text(line, "TOY-FLT-010", parts), 4)
    cleared = lines.clear_line(resolved)
    assert cleared.line_id == resolved.line_id
    assert cleared.is_empty
    copy = lines.duplicate_line(resolved)
    assert copy.line_id != resolved.line_id
    assert (copy.raw_text, copy.quantity, copy.editor) == (resolved.raw_text, resolved.quantity, resolved.editor)


def test_detached_line_is_never_valid():
    detached = lines.detached_line("OLD-123", 5, 42.0)
    assert detached.editor == Detached(42.0)
    assert detached.selected_price == 42.0
    assert not detached.is_valid
    assert detached.line_total == 0
