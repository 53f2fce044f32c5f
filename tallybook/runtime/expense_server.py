"""FastAPI server for importing and browsing expenses."""

import datetime
import json
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from tallybook.application.expenses import (
    BulkImportRequest,
    ExpenseEntryRequest,
    run_bulk_import,
    run_expense_entry,
)
from tallybook.domain.expense import ParseResult
from tallybook.domain.summary import (
    expense_totals,
    spending_trend,
    summarize_by_category,
    summarize_by_month,
    summarize_by_store,
)
from tallybook.runtime.expense_storage import ExpenseStorageError, delete_expenses, load_expenses
from tallybook.runtime.logging import get_logger
from tallybook.runtime.paths import get_paths

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Create data directories on startup."""
    get_paths().ensure_directories()
    yield


app = FastAPI(title="Tallybook", lifespan=lifespan)


@app.exception_handler(ExpenseStorageError)
async def storage_error_handler(request: Request, exc: ExpenseStorageError) -> JSONResponse:
    return JSONResponse({"status": "error", "message": str(exc)}, status_code=500)


def _parse_payload(parsed: ParseResult) -> dict[str, Any]:
    return {
        "records": [record.to_dict() for record in parsed.records],
        "errors": parsed.errors,
        "total": str(parsed.total),
    }


async def _read_text(request: Request) -> str:
    body = await request.body()
    return body.decode("utf-8", errors="replace")


@app.post("/import/preview")
async def preview_import(request: Request) -> JSONResponse:
    """Parse a pasted Markdown table without storing anything."""
    result = run_bulk_import(BulkImportRequest(text=await _read_text(request)))
    return JSONResponse({"status": result.status, **_parse_payload(result.parsed)})


@app.post("/import")
async def apply_import(request: Request) -> JSONResponse:
    """Parse a pasted Markdown table and append its records."""
    result = run_bulk_import(BulkImportRequest(text=await _read_text(request), apply=True))
    payload = {"status": result.status, **_parse_payload(result.parsed)}
    if result.status == "empty":
        return JSONResponse(payload, status_code=400)
    payload["stored_count"] = result.stored_count
    return JSONResponse(payload)


@app.get("/expenses")
async def list_expenses() -> JSONResponse:
    expenses = load_expenses()
    return JSONResponse({"expenses": [record.to_dict() for record in expenses]})


@app.post("/expenses")
async def create_expense(request: Request) -> JSONResponse:
    """Add one expense from JSON form values."""
    try:
        payload = await request.json()
    except json.JSONDecodeError:
        return JSONResponse({"status": "invalid", "message": "Body must be JSON"}, status_code=422)
    if not isinstance(payload, dict):
        return JSONResponse({"status": "invalid", "message": "Body must be a JSON object"}, status_code=422)

    result = run_expense_entry(
        ExpenseEntryRequest(
            item=str(payload.get("item") or ""),
            date=str(payload.get("date") or ""),
            unit_price=str(payload.get("unit_price", 0)),
            qty=str(payload.get("qty", 1)),
            category=str(payload.get("category") or ""),
            store=str(payload.get("store") or ""),
        )
    )
    if result.status == "invalid" or result.record is None:
        return JSONResponse({"status": "invalid", "message": result.error}, status_code=422)
    return JSONResponse(
        {"status": "saved", "index": result.index, "expense": result.record.to_dict()},
        status_code=201,
    )


@app.delete("/expenses/{index}")
async def remove_expense(index: int) -> JSONResponse:
    deleted = delete_expenses([index])
    if not deleted:
        return JSONResponse({"status": "error", "message": f"No expense at index {index}"}, status_code=404)
    return JSONResponse({"status": "deleted", "expense": deleted[0].to_dict()})


@app.get("/summary")
async def summary(months: int = 12) -> JSONResponse:
    """Totals plus category, store and monthly breakdowns."""
    expenses = load_expenses()
    totals = expense_totals(expenses)
    by_month = summarize_by_month(expenses, today=datetime.date.today(), months=max(1, months))
    return JSONResponse(
        {
            "count": totals.count,
            "total": str(totals.total),
            "average": str(totals.average),
            "categories": [
                {
                    "category": c.category,
                    "total": str(c.total),
                    "count": c.count,
                    "average_unit_price": str(c.average_unit_price),
                }
                for c in summarize_by_category(expenses)
            ],
            "stores": [
                {"store": s.store, "total": str(s.total), "count": s.count, "unique_items": s.unique_items}
                for s in summarize_by_store(expenses)
            ],
            "months": [
                {"month": m.month, "total": str(m.total), "count": m.count, "change": str(m.change)}
                for m in by_month
            ],
            "trend": spending_trend(by_month),
        }
    )


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=8080)
