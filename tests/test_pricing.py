from quick_order import pricing
from quick_order.models import PriceSelection

from conftest import make_part


def test_default_is_first_offer_not_cheapest(switch_part):
    assert pricing.resolve_default(switch_part) == PriceSelection("S1", 120)


def test_default_without_offers_uses_part_price():
    part = make_part("HYU-BLT-330", price=260)
    assert pricing.resolve_default(part) == PriceSelection(None, 260)


def test_resolve_for_supplier(switch_part):
    assert pricing.resolve_for_supplier(switch_part, "S2") == 115
    assert pricing.resolve_for_supplier(switch_part, "S9") == 120
    assert pricing.resolve_for_supplier(switch_part, None) == 120


def test_supplier_options(switch_part):
    assert pricing.supplier_options(switch_part) == [("S1", 120), ("S2", 115)]
    assert pricing.has_supplier(switch_part, "S2")
    assert not pricing.has_supplier(switch_part, "S3")
