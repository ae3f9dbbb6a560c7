"""Lifecycle engine for an automotive service shop.

This package provides data models, in-memory repositories, and the service
facade that books work orders, accrues labour, approves completed work into
invoices and settles them.
"""

from .domain import (
    Customer,
    Invoice,
    InvoiceStatus,
    Vehicle,
    WorkOrder,
    WorkOrderStatus,
)
from .services import (
    HOURLY_RATE,
    CustomerNotFoundError,
    InsufficientPaymentError,
    InvalidHoursError,
    InvalidTransitionError,
    InvoiceNotFoundError,
    ShopError,
    ShopOptions,
    ShopService,
    VehicleNotLinkedError,
    WorkOrderNotDoneError,
    WorkOrderNotFoundError,
)

__all__ = [
    "Customer",
    "Invoice",
    "InvoiceStatus",
    "Vehicle",
    "WorkOrder",
    "WorkOrderStatus",
    "HOURLY_RATE",
    "ShopError",
    "ShopOptions",
    "ShopService",
    "CustomerNotFoundError",
    "VehicleNotLinkedError",
    "WorkOrderNotFoundError",
    "InvalidHoursError",
    "InvalidTransitionError",
    "WorkOrderNotDoneError",
    "InvoiceNotFoundError",
    "InsufficientPaymentError",
]
