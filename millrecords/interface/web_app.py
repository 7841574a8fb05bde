"""Mini README: FastAPI-powered records desk for the mill.

Structure:
    * create_application - application factory wiring routes and templates.
    * Exception handlers - translate domain errors into HTTP responses.

The interface exposes the transaction form endpoints, the filtered records
listing, dashboard statistics, the CSV download and a printable receipt
page. All state lives in a ``TransactionBook`` kept on ``app.state`` and
loaded from the configured storage backend on first use.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Form, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response
from fastapi.templating import Jinja2Templates

from ..configuration import MillRecordsSettings, get_settings
from ..export import export_filename, export_to_delimited_text
from ..logging_utils import configure_root_logger, get_logger
from ..records import (
    DEFAULT_RATES,
    EditingSession,
    FilterCriteria,
    NotFoundError,
    StoreError,
    TransactionBook,
    TransactionDraft,
    UnknownCropError,
    ValidationError,
    aggregate_stats,
    build_receipt,
    filter_transactions,
    sum_total_amount,
)
from ..storage import REGISTRY, TransactionGateway
from ..utils.formatting import format_amount, format_currency, format_number

LOGGER = get_logger(__name__)

RECENT_RECORDS_ON_DASHBOARD = 10


def _criteria(
    search: Optional[str],
    crop: Optional[str],
    date_from: Optional[str],
    date_to: Optional[str],
) -> FilterCriteria:
    return FilterCriteria(
        search_text=search or None,
        crop_type=crop or None,
        date_from=date_from or None,
        date_to=date_to or None,
    )


def _draft_from_form(
    customer_name: str,
    contact: str,
    date_value: str,
    crop_type: str,
    quantity: str,
    charge_per_kg: str,
    amount_paid: str,
) -> TransactionDraft:
    return TransactionDraft(
        customer_name=customer_name,
        contact=contact,
        date=date_value,
        crop_type=crop_type or None,
        quantity=quantity,
        charge_per_kg=charge_per_kg or None,
        amount_paid=amount_paid or 0.0,
    )


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "detail": "Transaction input is invalid",
                "violations": [violation.as_dict() for violation in exc.violations],
            },
        )

    @app.exception_handler(UnknownCropError)
    async def unknown_crop_handler(request: Request, exc: UnknownCropError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
        LOGGER.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=502, content={"detail": f"Storage error: {exc}"})


def create_application(
    *,
    settings: Optional[MillRecordsSettings] = None,
    gateway: Optional[TransactionGateway] = None,
) -> FastAPI:
    """Create the FastAPI application with routes and dependencies."""

    settings = settings or get_settings()
    configure_root_logger(settings.log_level)
    if gateway is None:
        REGISTRY.load_plugins()
        gateway = REGISTRY.create(settings.store_backend, settings)
    book = TransactionBook(gateway)

    app = FastAPI(title="Mill Records Desk", version="0.1.0")
    app.state.book = book
    app.state.settings = settings
    templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
    templates.env.filters["currency"] = lambda value: format_currency(value, settings.currency)
    templates.env.filters["amount"] = format_amount
    templates.env.filters["number"] = format_number
    _register_error_handlers(app)

    @app.get("/", response_class=HTMLResponse)
    async def dashboard(request: Request) -> HTMLResponse:
        """Render the dashboard cards with the most recent records."""

        await book.ensure_loaded()
        records = book.list_transactions()
        stats = aggregate_stats(records)
        LOGGER.debug(
            "Dashboard metrics -> transactions: %s revenue: %.2f quantity: %.2f",
            stats.transaction_count,
            stats.total_revenue,
            stats.total_quantity_kg,
        )
        return templates.TemplateResponse(
            request,
            "dashboard.html",
            {
                "business_name": settings.business_name,
                "stats": stats,
                "recent": records[:RECENT_RECORDS_ON_DASHBOARD],
            },
        )

    @app.get("/health")
    async def health() -> JSONResponse:
        return JSONResponse({"status": "ok", "storage": gateway.metadata()})

    @app.get("/api/rates")
    async def rates() -> JSONResponse:
        """Return the default per-kilogram charge of each crop."""

        return JSONResponse({crop.value: rate for crop, rate in DEFAULT_RATES.items()})

    @app.get("/api/transactions")
    async def list_transactions(
        search: Optional[str] = None,
        crop: Optional[str] = None,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
    ) -> JSONResponse:
        """Return the records matching the search panel filters."""

        await book.ensure_loaded()
        records = book.list_transactions()
        matched = filter_transactions(records, _criteria(search, crop, date_from, date_to))
        return JSONResponse(
            {
                "transactions": [transaction.as_dict() for transaction in matched],
                "shown": len(matched),
                "total": len(records),
                "total_amount": sum_total_amount(matched),
            }
        )

    @app.get("/api/transactions/{transaction_id}")
    async def get_transaction(transaction_id: str) -> JSONResponse:
        await book.ensure_loaded()
        return JSONResponse(book.get(transaction_id).as_dict())

    @app.post("/api/transactions")
    async def create_transaction(
        customer_name: str = Form(""),
        contact: str = Form(""),
        date_value: str = Form("", alias="date"),
        crop_type: str = Form(""),
        quantity: str = Form(""),
        charge_per_kg: str = Form(""),
        amount_paid: str = Form(""),
    ) -> JSONResponse:
        """Validate the submitted form and record a new transaction."""

        await book.ensure_loaded()
        draft = _draft_from_form(
            customer_name, contact, date_value, crop_type, quantity, charge_per_kg, amount_paid
        )
        session = EditingSession(book, draft)
        transaction = await session.submit()
        return JSONResponse(status_code=201, content=transaction.as_dict())

    @app.put("/api/transactions/{transaction_id}")
    async def update_transaction(
        transaction_id: str,
        customer_name: str = Form(""),
        contact: str = Form(""),
        date_value: str = Form("", alias="date"),
        crop_type: str = Form(""),
        quantity: str = Form(""),
        charge_per_kg: str = Form(""),
        amount_paid: str = Form(""),
    ) -> JSONResponse:
        """Replace every field of an existing transaction."""

        await book.ensure_loaded()
        draft = _draft_from_form(
            customer_name, contact, date_value, crop_type, quantity, charge_per_kg, amount_paid
        )
        session = EditingSession(book, draft, transaction_id=transaction_id)
        transaction = await session.submit()
        return JSONResponse(transaction.as_dict())

    @app.delete("/api/transactions/{transaction_id}")
    async def delete_transaction(transaction_id: str) -> JSONResponse:
        await book.ensure_loaded()
        await book.delete(transaction_id)
        LOGGER.info("Transaction %s deleted via web interface", transaction_id)
        return JSONResponse({"deleted": transaction_id})

    @app.get("/api/stats")
    async def stats() -> JSONResponse:
        """Return the dashboard statistics for every record."""

        await book.ensure_loaded()
        return JSONResponse(aggregate_stats(book.list_transactions()).as_dict())

    @app.post("/api/refresh")
    async def refresh() -> JSONResponse:
        """Reload the working set from storage."""

        records = await book.refresh()
        return JSONResponse({"count": len(records)})

    @app.get("/api/export")
    async def export_csv(
        search: Optional[str] = None,
        crop: Optional[str] = None,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
    ) -> Response:
        """Download the filtered records as CSV."""

        await book.ensure_loaded()
        matched = filter_transactions(
            book.list_transactions(), _criteria(search, crop, date_from, date_to)
        )
        filename = export_filename(date.today())
        LOGGER.info("Exporting %s transactions as %s", len(matched), filename)
        return Response(
            content=export_to_delimited_text(matched),
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    @app.get("/receipts/{transaction_id}", response_class=HTMLResponse)
    async def receipt(request: Request, transaction_id: str) -> HTMLResponse:
        """Render a printable receipt for one transaction."""

        await book.ensure_loaded()
        transaction = book.get(transaction_id)
        return templates.TemplateResponse(
            request,
            "receipt.html",
            {
                "receipt": build_receipt(
                    transaction,
                    business_name=settings.business_name,
                    currency=settings.currency,
                )
            },
        )

    return app
