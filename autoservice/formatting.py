"""Single-line text rendering of shop records for the interactive shells."""

from __future__ import annotations

from decimal import Decimal

from .domain import Customer, Invoice, Vehicle, WorkOrder


def format_money(value: Decimal) -> str:
    return f"${value:.2f}"


def describe_customer(customer: Customer) -> str:
    return (
        f"Customer{{id={customer.id}, name={customer.name!r}, "
        f"phone={customer.phone!r}, vehicles={customer.vehicle_ids}}}"
    )


def describe_vehicle(vehicle: Vehicle) -> str:
    return f"Vehicle{{{vehicle.display}, owner={vehicle.owner_id}}}"


def describe_work_order(work_order: WorkOrder) -> str:
    return (
        f"WO{{id={work_order.id}, cust={work_order.customer_id}, "
        f"veh={work_order.vehicle_id}, status={work_order.status.value}, "
        f"hours={work_order.labour_hours}}}"
    )


def describe_invoice(invoice: Invoice) -> str:
    return (
        f"Invoice{{id={invoice.id}, wo={invoice.work_order_id}, "
        f"total={format_money(invoice.total)}, status={invoice.status.value}}}"
    )


__all__ = [
    "format_money",
    "describe_customer",
    "describe_vehicle",
    "describe_work_order",
    "describe_invoice",
]
