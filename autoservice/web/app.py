"""FastAPI-based web interface for the auto service shop."""

from __future__ import annotations

import logging
from decimal import Decimal
from pathlib import Path
from typing import Dict, Iterable, List, Optional
from urllib.parse import urlencode

from fastapi import FastAPI, Form, Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates

from ..domain import InvoiceStatus, WorkOrderStatus
from ..formatting import format_money
from ..services import ShopError, ShopOptions, ShopService

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["money"] = format_money


def _redirect(**params: object) -> RedirectResponse:
    target = "/"
    if params:
        target += "?" + urlencode(params)
    return RedirectResponse(target, status_code=303)


def _failure(exc: ShopError) -> RedirectResponse:
    logger.info("Request rejected: %s", exc)
    return _redirect(error=str(exc))


def _plain_records(records: Iterable[Dict]) -> List[Dict]:
    # Decimals go out as strings so totals keep their two places.
    return [
        {
            key: str(value) if isinstance(value, Decimal) else value
            for key, value in record.items()
        }
        for record in records
    ]


def create_app(
    service: Optional[ShopService] = None,
    *,
    options: Optional[ShopOptions] = None,
    demo_data: bool = False,
) -> FastAPI:
    if service is None:
        service = ShopService(options=options)
    elif options is not None:
        service.options = options
    if demo_data:
        ensure_demo_data(service)

    app = FastAPI(title="Auto Service Shop")
    app.state.shop_service = service

    @app.get("/")
    async def dashboard(request: Request):
        service: ShopService = request.app.state.shop_service
        work_orders = service.list_work_orders()
        open_work_orders = [
            order
            for order in work_orders
            if order.status in {WorkOrderStatus.PENDING, WorkOrderStatus.IN_PROGRESS}
        ]
        invoices = service.list_invoices()
        outstanding = [
            invoice for invoice in invoices if invoice.status is InvoiceStatus.UNPAID
        ]
        query = request.query_params
        return templates.TemplateResponse(
            request,
            "dashboard.html",
            {
                "customers": service.list_customers(),
                "vehicles": service.list_vehicles(),
                "work_orders": work_orders,
                "open_work_orders": open_work_orders,
                "invoices": invoices,
                "outstanding": outstanding,
                "options": service.options,
                "message": query.get("message"),
                "error": query.get("error"),
            },
        )

    @app.get("/api/summary")
    async def summary(request: Request):
        service: ShopService = request.app.state.shop_service
        return {
            "customers": _plain_records(service.customers.as_dicts()),
            "vehicles": _plain_records(service.vehicles.as_dicts()),
            "work_orders": _plain_records(service.work_orders.as_dicts()),
            "invoices": _plain_records(service.invoices.as_dicts()),
        }

    @app.post("/customers")
    async def create_customer(
        request: Request,
        name: str = Form(...),
        phone: str = Form(""),
    ):
        service: ShopService = request.app.state.shop_service
        customer = service.create_customer(name.strip(), phone.strip())
        return _redirect(message=f"Created customer ID {customer.id}")

    @app.post("/customers/{customer_id}/vehicles")
    async def attach_vehicle(
        customer_id: int,
        request: Request,
        vehicle_id: int = Form(...),
    ):
        service: ShopService = request.app.state.shop_service
        try:
            service.attach_vehicle(customer_id, vehicle_id)
        except ShopError as exc:
            return _failure(exc)
        return _redirect(message="Vehicle attached.")

    @app.post("/work-orders")
    async def book_work_order(
        request: Request,
        customer_id: int = Form(...),
        vehicle_id: int = Form(...),
    ):
        service: ShopService = request.app.state.shop_service
        try:
            work_order = service.book_work_order(customer_id, vehicle_id)
        except ShopError as exc:
            return _failure(exc)
        return _redirect(message=f"WO created: {work_order.id}")

    @app.post("/work-orders/{work_order_id}/hours")
    async def add_hours(
        work_order_id: int,
        request: Request,
        hours: str = Form(...),
    ):
        service: ShopService = request.app.state.shop_service
        try:
            service.add_labour_hours(work_order_id, hours.strip())
        except ShopError as exc:
            return _failure(exc)
        return _redirect(message="Hours added.")

    @app.post("/work-orders/{work_order_id}/done")
    async def mark_done(work_order_id: int, request: Request):
        service: ShopService = request.app.state.shop_service
        try:
            service.mark_done(work_order_id)
        except ShopError as exc:
            return _failure(exc)
        return _redirect(message="Marked DONE.")

    @app.post("/work-orders/{work_order_id}/approve")
    async def approve(work_order_id: int, request: Request):
        service: ShopService = request.app.state.shop_service
        try:
            invoice = service.approve(work_order_id)
        except ShopError as exc:
            return _failure(exc)
        return _redirect(message=f"Approved. Invoice ID {invoice.id}")

    @app.post("/invoices/{invoice_id}/pay")
    async def pay_invoice(
        invoice_id: int,
        request: Request,
        amount: str = Form(...),
    ):
        service: ShopService = request.app.state.shop_service
        try:
            service.pay_invoice(invoice_id, amount.strip())
        except ShopError as exc:
            return _failure(exc)
        return _redirect(message="Paid. Thank you.")

    return app


def ensure_demo_data(service: ShopService) -> None:
    if service.list_customers():
        return

    alice = service.create_customer("Alice Moreau", "555-0100")
    hatchback = service.register_vehicle(
        alice.id, "Volkswagen", "Golf", 2019, powertrain="Petrol", body_type="Hatchback"
    )
    bob = service.create_customer("Bob Lindqvist", "555-0147")
    pickup = service.register_vehicle(
        bob.id, "Ford", "F-150 Lightning", 2023, powertrain="Electric", body_type="Pickup"
    )

    brakes = service.book_work_order(alice.id, hatchback.id)
    service.add_labour_hours(brakes.id, "2.5")
    service.mark_done(brakes.id)
    service.approve(brakes.id)

    service.book_work_order(bob.id, pickup.id)

