"""
Shared fixtures for quick order tests
"""
from datetime import datetime, timezone

import pytest

from quick_order.channels import InMemoryOrderSink, Mailbox, RecordingNotifier, StaticCatalog, SupplierDirectory
from quick_order.config import Settings
from quick_order.grid import GridController
from quick_order.models import Part, Supplier, SupplierOffer

FIXED_NOW = datetime(2026, 10, 19, 9, 30, 0, tzinfo=timezone.utc)


def make_part(part_number, price=10.0, offers=(), name="", brand="", name_localized="", part_id=None, stock=5):
    return Part(
        part_id=part_id or f"id-{part_number}",
        part_number=part_number,
        name=name or f"Part {part_number}",
        name_localized=name_localized,
        brand=brand,
        price=price,
        stock=stock,
        offers=tuple(SupplierOffer(sid, p, 4) for sid, p in offers),
    )


@pytest.fixture
def switch_part():
    return make_part("96700-B11004X", price=120, offers=[("S1", 120), ("S2", 115)], name="Audio switch", brand="Hyundai")


@pytest.fixture
def parts(switch_part):
    return [
        switch_part,
        make_part("TOY-BRK-001", price=185, offers=[("S2", 180)], name="Brake pad set", brand="Toyota"),
        make_part("TOY-BRK-002", price=190, offers=[("S3", 188)], name="Rear brake pad set", brand="Toyota"),
        make_part("TOY-FLT-010", price=25, offers=[("S1", 24)], name="Oil filter", brand="Toyota"),
        make_part("HYU-BLT-330", price=260, name="Timing belt", brand="Hyundai", name_localized="سير التوقيت"),
    ]


@pytest.fixture
def catalog(parts):
    return StaticCatalog(parts)


@pytest.fixture
def directory():
    return SupplierDirectory([
        Supplier("S1", "Gulf Auto Parts"),
        Supplier("S2", "Riyadh Motors Supply"),
        Supplier("S3", "Eastern Spares Co."),
    ])


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def sink():
    return InMemoryOrderSink()


@pytest.fixture
def drafts():
    return Mailbox()


@pytest.fixture
def controller(catalog, directory, notifier, sink, drafts):
    return GridController(
        catalog,
        directory=directory,
        notifier=notifier,
        sink=sink,
        drafts=drafts,
        reorders=Mailbox(),
        settings=Settings(),
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def state(controller):
    return controller.new_state()


def type_line(controller, state, row, text, qty=None):
    """Type a part number (and optionally a quantity) into a row."""
    state = controller.edit_text(state, row, text).settle()
    if qty is not None:
        state = controller.set_quantity(state, row, qty).settle()
    return state
