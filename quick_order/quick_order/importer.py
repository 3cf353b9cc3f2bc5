from __future__ import annotations

import csv
import io
import re
from dataclasses import replace
from typing import List, Optional, Sequence, Tuple

from . import lines, matcher
from .errors import ImportColumnError
from .log import get_logger
from .models import ImportStats, Part, ProcessedItem, TableData

logger = get_logger(__name__)


def detect_delimiter(header: str) -> str:
    if "\t" in header:
        return "\t"
    if ";" in header:
        return ";"
    return ","


def parse_table(text: str) -> TableData:
    """Read delimiter-separated text; the first non-empty line is the header."""
    # raw lines keep leading empty cells; cells are stripped after parsing
    rows = [line for line in re.split(r"[\r\n]+", text or "") if line.strip()]
    if not rows:
        return TableData(headers=(), rows=())
    delimiter = detect_delimiter(rows[0])
    reader = csv.reader(io.StringIO("\n".join(rows)), delimiter=delimiter)
    parsed = [tuple(cell.strip() for cell in record) for record in reader]
    return TableData(headers=parsed[0], rows=tuple(parsed[1:]), delimiter=delimiter)


def _import_quantity(raw: str) -> int:
    return lines.coerce_quantity(raw) or 1


def _cell(row: Tuple[str, ...], index: int) -> str:
    if 0 <= index < len(row):
        return row[index] or ""
    return ""


def process(
    table: TableData,
    id_column: Optional[str],
    quantity_column: Optional[str],
    catalog: Sequence[Part],
    limit: int = matcher.IMPORT_LIMIT,
) -> List[ProcessedItem]:
    """Match every data row against the catalog for human review.

    Exact matches are pre-selected; anything else waits for an explicit
    choice among its alternatives.
    """
    if not id_column or id_column not in table.headers:
        raise ImportColumnError(f"Choose the part number column before importing (got {id_column!r})")
    id_idx = table.headers.index(id_column)
    qty_idx = table.headers.index(quantity_column) if quantity_column in table.headers else -1

    items: List[ProcessedItem] = []
    for row in table.rows:
        text = _cell(row, id_idx).strip()
        if not text:
            continue
        quantity = _import_quantity(_cell(row, qty_idx)) if qty_idx >= 0 else 1
        result = matcher.match_for_import(text, catalog, limit=limit)
        items.append(
            ProcessedItem(
                original_text=text,
                quantity=quantity,
                matched_part=result.exact,
                alternatives=result.suggestions,
                selected_part=result.exact,
            )
        )
    logger.info("processed %d import row(s) against %d catalog part(s)", len(items), len(catalog))
    return items


def parse_identifier_list(text: str, catalog: Sequence[Part]) -> List[ProcessedItem]:
    """Pasted part numbers separated by newlines, commas or semicolons."""
    identifiers = [chunk.strip() for chunk in re.split(r"[\n,;]", text or "") if chunk.strip()]
    table = TableData(headers=("part_number",), rows=tuple((i,) for i in identifiers))
    return process(table, "part_number", None, catalog)


def select_alternative(items: Sequence[ProcessedItem], index: int, part: Optional[Part]) -> List[ProcessedItem]:
    updated = list(items)
    updated[index] = replace(updated[index], selected_part=part)
    return updated


def import_stats(items: Sequence[ProcessedItem]) -> ImportStats:
    return ImportStats(
        total=len(items),
        matched=sum(1 for i in items if i.matched_part),
        with_alternatives=sum(1 for i in items if not i.matched_part and i.alternatives),
        not_found=sum(1 for i in items if not i.matched_part and not i.alternatives),
        selected=sum(1 for i in items if i.selected_part),
    )


def final_items(items: Sequence[ProcessedItem]) -> List[Tuple[Part, int]]:
    return [(i.selected_part, i.quantity) for i in items if i.selected_part is not None]
