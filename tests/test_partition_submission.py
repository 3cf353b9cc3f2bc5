import random
from dataclasses import FrozenInstanceError

import pytest

from quick_order import lines, partition, submission
from quick_order.errors import EmptySubmissionError
from quick_order.partition import UNASSIGNED

from conftest import FIXED_NOW, type_line


def test_single_line_scenario(controller, state):
    state = type_line(controller, state, 0, "96700-B11004X")
    line = state.lines[0]
    assert (line.selected_supplier_id, line.selected_price) == ("S1", 120)

    state = controller.set_quantity(state, 0, 3).settle()
    assert state.lines[0].is_valid
    assert state.lines[0].line_total == 360

    groups = controller.groups(state)
    assert list(groups) == ["S1"]
    assert groups["S1"].total == 360
    assert groups["S1"].supplier_name == "Gulf Auto Parts"

    records = controller.submit(state, is_draft=False).records
    assert len(records) == 1
    record = records[0]
    assert not record.is_draft
    assert record.order_number.startswith("ORD-")
    assert len(record.items) == 1
    item = record.items[0]
    assert (item.part_number, item.quantity, item.unit_price, item.total) == ("96700-B11004X", 3, 120, 360)
    assert record.total == 360


def test_two_suppliers_make_two_orders(controller, state):
    state = type_line(controller, state, 0, "96700-B11004X", 1)
    state = type_line(controller, state, 1, "TOY-BRK-001", 1)
    records = controller.submit(state).records
    assert [r.supplier_id for r in records] == ["S1", "S2"]
    assert len({r.order_number for r in records}) == 2


def test_groups_follow_first_seen_order_with_unassigned(controller, state):
    state = type_line(controller, state, 0, "TOY-BRK-001", 1)
    state = type_line(controller, state, 1, "HYU-BLT-330", 2)
    state = type_line(controller, state, 2, "96700-B11004X", 1)
    state = type_line(controller, state, 3, "TOY-BRK-001", 2)
    groups = controller.groups(state)
    assert list(groups) == ["S2", UNASSIGNED, "S1"]
    assert groups[UNASSIGNED].supplier_id is None
    assert groups[UNASSIGNED].supplier_name == "Unassigned"
    assert groups[UNASSIGNED].total == 520
    assert groups["S2"].total == 3 * 180
    assert sum(g.total for g in groups.values()) == controller.total(state)


def test_partition_covers_exactly_the_valid_lines(parts):
    rng = random.Random(7)
    for _ in range(50):
        rows = []
        for _ in range(rng.randint(0, 12)):
            line = lines.empty_line()
            choice = rng.random()
            if choice < 0.6:
                line = lines.select_part(line, rng.choice(parts))
                if line.resolved_part.offers and rng.random() < 0.3:
                    line = lines.select_supplier(line, rng.choice(["S1", "S2", "S3"]))
            elif choice < 0.8:
                line = lines.edit_text(line, "brk", parts)
            line = lines.set_quantity(line, rng.randint(0, 4))
            rows.append(line)
        groups = partition.partition(rows)
        grouped = [line.line_id for g in groups.values() for line in g.lines]
        valid = [line.line_id for line in rows if line.is_valid]
        assert sorted(grouped) == sorted(valid)
        assert len(grouped) == len(set(grouped))
        assert sum(g.total for g in groups.values()) == pytest.approx(partition.grid_total(rows))


def test_build_fans_out_per_group(parts):
    a = lines.set_quantity(lines.select_part(lines.empty_line(), parts[0]), 2)
    b = lines.set_quantity(lines.select_part(lines.empty_line(), parts[3]), 5)
    c = lines.set_quantity(lines.select_part(lines.empty_line(), parts[1]), 1)
    groups = partition.partition([a, b, c])
    assert [len(g.lines) for g in groups.values()] == [2, 1]

    records = submission.build(groups, "notes", is_draft=True, now=FIXED_NOW)
    assert len(records) == 2
    assert [len(r.items) for r in records] == [2, 1]
    assert [r.total for r in records] == [g.total for g in groups.values()]
    assert all(r.is_draft and r.order_number.startswith("DRAFT-20261019093000-") for r in records)


def test_build_refuses_empty_groups():
    with pytest.raises(EmptySubmissionError):
        submission.build({}, "", is_draft=False)


def test_records_are_snapshots(controller, state):
    state = type_line(controller, state, 0, "TOY-FLT-010", 2)
    record = controller.submit(state).records[0]
    edited = controller.set_quantity(state, 0, 9).settle()
    assert edited.lines[0].quantity == 9
    assert record.items[0].quantity == 2
    with pytest.raises(FrozenInstanceError):
        record.items[0].quantity = 9


def test_order_number_suffix():
    assert submission.order_number(False, "s-1", FIXED_NOW, 2) == "ORD-20261019093000-02S1"
    assert submission.order_number(True, None, FIXED_NOW) == "DRAFT-20261019093000-01GEN"
    assert submission.order_number(False, "S2", FIXED_NOW, 1, "A1B2C3") == "ORD-20261019093000-A1B2C3-01S2"


def test_records_of_one_submission_share_a_batch_token(parts):
    a = lines.set_quantity(lines.select_part(lines.empty_line(), parts[0]), 1)
    b = lines.set_quantity(lines.select_part(lines.empty_line(), parts[1]), 1)
    records = submission.build(partition.partition([a, b]), "", is_draft=False, now=FIXED_NOW)
    tokens = {r.order_number.split("-")[2] for r in records}
    assert len(tokens) == 1
    again = submission.build(partition.partition([a, b]), "", is_draft=False, now=FIXED_NOW)
    assert {r.order_number for r in records}.isdisjoint(r.order_number for r in again)
