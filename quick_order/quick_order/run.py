from __future__ import annotations

import argparse
import json
from pathlib import Path

from . import data
from .cache import CachedCatalog
from .channels import InMemoryOrderSink, LogNotifier, SupplierDirectory
from .config import get_settings
from .documents import orders_to_dict
from .grid import GridController
from .log import configure_logging, get_logger

logger = get_logger(__name__)


def sample_session(controller: GridController, is_draft: bool = False):
    """Type a few part numbers the way a counter clerk would and submit."""
    state = controller.new_state()
    entries = [("96700-B11004X", 3), ("TOY-BRK-001", 2), ("TOY-FLT-010", 12)]
    for row, (text, qty) in enumerate(entries):
        state = controller.edit_text(state, row, text).settle()
        state = controller.set_quantity(state, row, qty).settle()
        state = controller.quantity_key(state, row, "Enter").settle()
    state = controller.set_notes(state, "Deliver to the Dammam branch")
    return controller.submit(state, is_draft=is_draft).records


def main():
    parser = argparse.ArgumentParser(description="Quick order demo")
    parser.add_argument("--draft", action="store_true", help="save the sample order as drafts")
    parser.add_argument("--offline", action="store_true", help="serve the catalog from the local cache")
    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings.log_level)
    catalog = CachedCatalog(
        settings.cache_path,
        fetch=data.sample_parts,
        fallback=data.sample_parts,
        ttl_seconds=settings.cache_ttl_hours * 60 * 60,
        is_online=lambda: not args.offline,
    )
    catalog.sync()
    if catalog.is_from_cache:
        logger.info("using cached catalog from %s", catalog.last_updated)
    sink = InMemoryOrderSink()
    controller = GridController(
        catalog,
        directory=SupplierDirectory(data.sample_suppliers()),
        notifier=LogNotifier(),
        sink=sink,
        settings=settings,
    )
    records = sample_session(controller, is_draft=args.draft)
    out_dir = Path(__file__).resolve().parent.parent / "output"
    out_dir.mkdir(parents=True, exist_ok=True)
    out_file = out_dir / "orders.json"
    out_file.write_text(json.dumps(orders_to_dict(records, settings.vat_rate), indent=2, ensure_ascii=False))
    print(f"{len(records)} order(s) written to {out_file}")


if __name__ == "__main__":
    main()
