"""Core data structures for the auto service shop."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import FrozenSet, List, Mapping


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WorkOrderStatus(str, Enum):
    """Lifecycle stages for a work order."""

    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"
    APPROVED = "APPROVED"

    def can_transition_to(self, target: "WorkOrderStatus") -> bool:
        return target in WORK_ORDER_TRANSITIONS[self]


class InvoiceStatus(str, Enum):
    """Settlement state of an invoice."""

    UNPAID = "UNPAID"
    PAID = "PAID"


# Statuses only move forward; APPROVED is terminal.
WORK_ORDER_TRANSITIONS: Mapping[WorkOrderStatus, FrozenSet[WorkOrderStatus]] = {
    WorkOrderStatus.PENDING: frozenset(
        {WorkOrderStatus.IN_PROGRESS, WorkOrderStatus.DONE}
    ),
    WorkOrderStatus.IN_PROGRESS: frozenset({WorkOrderStatus.DONE}),
    WorkOrderStatus.DONE: frozenset({WorkOrderStatus.APPROVED}),
    WorkOrderStatus.APPROVED: frozenset(),
}


@dataclass(slots=True)
class Customer:
    """Customer master data with the ids of the vehicles they own."""

    id: int
    name: str
    phone: str
    vehicle_ids: List[int] = field(default_factory=list)

    def owns_vehicle(self, vehicle_id: int) -> bool:
        return vehicle_id in self.vehicle_ids


@dataclass(slots=True)
class Vehicle:
    """A vehicle owned by exactly one customer."""

    id: int
    owner_id: int
    make: str
    model: str
    year: int
    powertrain: str = ""
    body_type: str = ""

    @property
    def display(self) -> str:
        return (
            f"{self.id}: {self.year} {self.make} {self.model} "
            f"({self.powertrain}, {self.body_type})"
        )


@dataclass(slots=True)
class WorkOrder:
    """A unit of service work for one customer's vehicle."""

    id: int
    customer_id: int
    vehicle_id: int
    status: WorkOrderStatus = WorkOrderStatus.PENDING
    labour_hours: Decimal = Decimal("0")
    created_at: datetime = field(default_factory=_utcnow)


@dataclass(slots=True)
class Invoice:
    """Invoice raised when a work order is approved."""

    id: int
    work_order_id: int
    total: Decimal
    status: InvoiceStatus = InvoiceStatus.UNPAID
    created_at: datetime = field(default_factory=_utcnow)

    @property
    def is_paid(self) -> bool:
        return self.status is InvoiceStatus.PAID


__all__ = [
    "WorkOrderStatus",
    "InvoiceStatus",
    "WORK_ORDER_TRANSITIONS",
    "Customer",
    "Vehicle",
    "WorkOrder",
    "Invoice",
]
