from __future__ import annotations

from typing import Dict, List, Optional

from fastapi import FastAPI, File, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from . import data, importer, loader, matcher, pricing, stock
from .channels import InMemoryOrderSink, Mailbox, RecordingNotifier, StaticCatalog, SupplierDirectory
from .config import get_settings
from .documents import order_pdf_bytes, order_summary, order_to_dict
from .errors import EmptySubmissionError, ImportColumnError, LineIndexError
from .grid import GridController
from .log import configure_logging, get_logger
from .models import GridState, OrderLine, Part, ProcessedItem, TableData, Transition

settings = get_settings()
configure_logging(settings.log_level)
logger = get_logger(__name__)

app = FastAPI(title="Quick Order", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

catalog = StaticCatalog(data.sample_parts())
directory = SupplierDirectory(data.sample_suppliers())
notifier = RecordingNotifier()
sink = InMemoryOrderSink()
drafts: Mailbox = Mailbox()
reorders: Mailbox = Mailbox()
controller = GridController(
    catalog,
    directory=directory,
    notifier=notifier,
    sink=sink,
    drafts=drafts,
    reorders=reorders,
    settings=settings,
)

# Simple in-memory state shared across requests
current_state: GridState = controller.new_state()
current_import: Dict = {"table": None, "items": []}


def reset_state() -> None:
    global current_state, current_import
    catalog.replace(data.sample_parts())
    directory.replace(data.sample_suppliers())
    notifier.messages.clear()
    sink.records.clear()
    drafts.take()
    reorders.take()
    current_state = controller.new_state()
    current_import = {"table": None, "items": []}


def _part_to_dict(part: Optional[Part]) -> Optional[dict]:
    if part is None:
        return None
    return {
        "part_id": part.part_id,
        "part_number": part.part_number,
        "name": part.name,
        "name_localized": part.name_localized,
        "brand": part.brand,
        "price": part.price,
        "stock_level": stock.stock_level(part.stock),
        "offers": [
            {"supplier_id": sid, "supplier_name": directory.display_name(sid), "price": price}
            for sid, price in pricing.supplier_options(part)
        ],
    }


def _line_to_dict(line: OrderLine) -> dict:
    available = stock.line_stock(line)
    check = stock.validate_quantity(line.quantity, available) if available is not None else None
    return {
        "line_id": line.line_id,
        "raw_text": line.raw_text,
        "quantity": line.quantity,
        "state": type(line.editor).__name__.lower(),
        "part": _part_to_dict(line.resolved_part),
        "suggestions": [_part_to_dict(p) for p in line.suggestions] if line.suggestions_open else [],
        "highlighted_index": line.highlighted_index,
        "supplier_id": line.selected_supplier_id,
        "price": line.selected_price,
        "line_total": line.line_total,
        "valid": line.is_valid,
        "stock": None if check is None else {"ok": check.is_valid, "message": check.message, "kind": check.kind},
    }


def _state_to_dict(state: GridState) -> dict:
    groups = controller.groups(state)
    subtotal = controller.total(state)
    return {
        "lines": [_line_to_dict(line) for line in state.lines],
        "focus": {"row": state.focus.row, "field": state.focus.field.value},
        "notes": state.notes,
        "editing_draft_id": state.editing_draft_id,
        "groups": [
            {
                "supplier_id": g.supplier_id,
                "supplier_name": g.supplier_name,
                "line_count": len(g.lines),
                "total": g.total,
            }
            for g in groups.values()
        ],
        "valid_count": len(state.valid_lines),
        "summary": order_summary(subtotal, settings.vat_rate),
    }


def _drain_toasts() -> List[dict]:
    toasts = [{"level": level, "message": message} for level, message in notifier.messages]
    notifier.messages.clear()
    return toasts


def _commit(transition: Transition) -> dict:
    global current_state
    current_state = transition.settle()
    payload = {"grid": _state_to_dict(current_state), "toasts": _drain_toasts()}
    if transition.records:
        payload["orders"] = [order_to_dict(r, settings.vat_rate) for r in transition.records]
    return payload


def _row_error(exc: LineIndexError) -> JSONResponse:
    return JSONResponse({"error": str(exc)}, status_code=404)


@app.get("/api/catalog/search")
async def catalog_search(q: str = "", limit: Optional[int] = None):
    parts = matcher.search(q, catalog.parts(), limit=limit or settings.search_limit)
    return {"query": q, "results": [_part_to_dict(p) for p in parts]}


@app.post("/api/catalog")
async def upload_catalog(
    parts: Optional[UploadFile] = File(default=None),
    suppliers: Optional[UploadFile] = File(default=None),
):
    new_parts = loader.load_parts(parts.file.read() if parts else None)
    new_suppliers = loader.load_suppliers(suppliers.file.read() if suppliers else None)
    if new_parts:
        catalog.replace(new_parts)
    if new_suppliers:
        directory.replace(new_suppliers)
    logger.info("catalog upload: %d part(s), %d supplier(s)", len(new_parts), len(new_suppliers))
    return {"parts": len(catalog.parts()), "suppliers": len(directory.all())}


@app.get("/api/grid")
async def grid_state():
    return {"grid": _state_to_dict(current_state), "toasts": _drain_toasts()}


@app.post("/api/grid/rows/{index}/{command}")
async def row_command(index: int, command: str, request: Request):
    body = {}
    if await request.body():
        body = await request.json()
    try:
        if command == "text":
            transition = controller.edit_text(current_state, index, str(body.get("text", "")))
        elif command == "key":
            if body.get("field") == "quantity":
                transition = controller.quantity_key(current_state, index, body.get("key", ""))
            else:
                transition = controller.identifier_key(current_state, index, body.get("key", ""))
        elif command == "suggestion":
            try:
                suggestion = int(body.get("index", 0))
            except (TypeError, ValueError):
                return JSONResponse({"error": "Suggestion index must be a number"}, status_code=422)
            transition = controller.choose_suggestion(current_state, index, suggestion)
        elif command == "quantity":
            transition = controller.set_quantity(current_state, index, body.get("value"))
        elif command == "supplier":
            transition = controller.select_supplier(current_state, index, body.get("supplier_id"))
        elif command == "clear":
            transition = controller.clear_line(current_state, index)
        elif command == "insert":
            transition = controller.insert_after(current_state, index)
        elif command == "remove":
            transition = controller.remove_at(current_state, index)
        elif command == "duplicate":
            transition = controller.duplicate_at(current_state, index)
        else:
            return JSONResponse({"error": f"Unknown row command {command}"}, status_code=404)
    except LineIndexError as exc:
        return _row_error(exc)
    return _commit(transition)


@app.post("/api/grid/shortcut")
async def grid_shortcut(request: Request):
    body = await request.json()
    return _commit(controller.global_shortcut(current_state, body.get("combo", "")))


@app.post("/api/grid/clear")
async def grid_clear():
    return _commit(controller.clear_all(current_state))


@app.post("/api/grid/notes")
async def grid_notes(request: Request):
    global current_state
    body = await request.json()
    current_state = controller.set_notes(current_state, body.get("notes", ""))
    return {"grid": _state_to_dict(current_state), "toasts": _drain_toasts()}


def _import_to_dict(items: List[ProcessedItem]) -> dict:
    stats = importer.import_stats(items)
    return {
        "items": [
            {
                "original_text": i.original_text,
                "quantity": i.quantity,
                "matched": _part_to_dict(i.matched_part),
                "alternatives": [_part_to_dict(p) for p in i.alternatives],
                "selected": _part_to_dict(i.selected_part),
            }
            for i in items
        ],
        "stats": vars(stats),
        "can_import": stats.selected > 0,
    }


@app.post("/api/import/preview")
async def import_preview(file: UploadFile = File(...)):
    text = file.file.read().decode("utf-8-sig", errors="replace")
    table = importer.parse_table(text)
    current_import["table"] = table
    current_import["items"] = []
    return {
        "headers": list(table.headers),
        "delimiter": table.delimiter,
        "row_count": len(table.rows),
        "preview": [list(r) for r in table.rows[:3]],
    }


@app.post("/api/import/process")
async def import_process(request: Request):
    body = await request.json()
    table: Optional[TableData] = current_import.get("table")
    if table is None:
        return JSONResponse({"error": "Upload a file first"}, status_code=409)
    try:
        items = importer.process(
            table,
            body.get("id_column"),
            body.get("quantity_column"),
            catalog.parts(),
            limit=settings.import_alternatives,
        )
    except ImportColumnError as exc:
        return JSONResponse({"error": str(exc)}, status_code=422)
    current_import["items"] = items
    return _import_to_dict(items)


@app.post("/api/import/select")
async def import_select(request: Request):
    body = await request.json()
    items: List[ProcessedItem] = current_import.get("items", [])
    try:
        row = int(body.get("row", -1))
    except (TypeError, ValueError):
        return JSONResponse({"error": "Import row must be a number"}, status_code=422)
    if not 0 <= row < len(items):
        return JSONResponse({"error": "Import row not found"}, status_code=404)
    part_id = body.get("part_id")
    choice = None
    if part_id is not None:
        choice = next((p for p in items[row].alternatives if p.part_id == part_id), None)
        if choice is None:
            return JSONResponse({"error": "Part is not an alternative for this row"}, status_code=422)
    current_import["items"] = importer.select_alternative(items, row, choice)
    return _import_to_dict(current_import["items"])


@app.post("/api/import/commit")
async def import_commit():
    selected = importer.final_items(current_import.get("items", []))
    current_import["table"] = None
    current_import["items"] = []
    return _commit(controller.apply_import(current_state, selected))


@app.post("/api/orders")
async def submit_order(request: Request):
    body = {}
    if await request.body():
        body = await request.json()
    try:
        transition = controller.submit(current_state, is_draft=bool(body.get("draft", False)))
    except EmptySubmissionError as exc:
        return JSONResponse({"error": str(exc)}, status_code=422)
    return _commit(transition)


@app.get("/api/orders")
async def list_orders():
    return {"orders": [order_to_dict(r, settings.vat_rate) for r in sink.all()]}


@app.get("/api/orders/{order_number}/pdf")
async def order_pdf(order_number: str):
    record = sink.get(order_number)
    if record is None:
        return JSONResponse({"error": "Order not found"}, status_code=404)
    return Response(
        content=order_pdf_bytes(record, settings.vat_rate),
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{order_number}.pdf"'},
    )


@app.post("/api/orders/{order_number}/edit")
async def edit_order(order_number: str):
    record = sink.get(order_number)
    if record is None:
        return JSONResponse({"error": "Order not found"}, status_code=404)
    drafts.put(record)
    return _commit(controller.load_draft(current_state))


@app.post("/api/orders/{order_number}/reorder")
async def reorder(order_number: str):
    record = sink.get(order_number)
    if record is None:
        return JSONResponse({"error": "Order not found"}, status_code=404)
    reorders.put(record)
    return _commit(controller.load_reorder(current_state))
