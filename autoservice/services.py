"""Service layer that implements the work order and invoice lifecycle."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import List, Optional, Union

from .domain import (
    Customer,
    Invoice,
    InvoiceStatus,
    Vehicle,
    WorkOrder,
    WorkOrderStatus,
)
from .repository import InMemoryRepository, RecordNotFoundError

logger = logging.getLogger(__name__)

HOURLY_RATE = Decimal("100.00")
CENTS = Decimal("0.01")

Number = Union[Decimal, float, int, str]


class ShopError(Exception):
    """Base class for every failure raised by :class:`ShopService`."""


class ShopNotFoundError(ShopError, RecordNotFoundError):
    """A referenced id does not exist in the relevant collection."""


class CustomerNotFoundError(ShopNotFoundError):
    def __init__(self, customer_id: int) -> None:
        super().__init__(f"No such customer: {customer_id}")
        self.customer_id = customer_id


class WorkOrderNotFoundError(ShopNotFoundError):
    def __init__(self, work_order_id: int) -> None:
        super().__init__(f"No such work order: {work_order_id}")
        self.work_order_id = work_order_id


class InvoiceNotFoundError(ShopNotFoundError):
    def __init__(self, invoice_id: int) -> None:
        super().__init__(f"No such invoice: {invoice_id}")
        self.invoice_id = invoice_id


class InvalidInputError(ShopError, ValueError):
    """A primitive argument was rejected by a business rule."""


class InvalidHoursError(InvalidInputError):
    def __init__(self, hours: Decimal) -> None:
        super().__init__(f"Labour hours must not be negative (got {hours})")
        self.hours = hours


class InsufficientPaymentError(InvalidInputError):
    def __init__(self, invoice_id: int, amount: Decimal, total: Decimal) -> None:
        super().__init__(
            f"Payment of {amount} does not cover invoice {invoice_id} total of {total}"
        )
        self.invoice_id = invoice_id
        self.amount = amount
        self.total = total


class PreconditionFailedError(ShopError):
    """The referenced records exist but are not in a state that allows the operation."""


class VehicleNotLinkedError(PreconditionFailedError):
    def __init__(self, customer_id: int, vehicle_id: int) -> None:
        super().__init__(
            f"Vehicle {vehicle_id} is not linked to customer {customer_id}"
        )
        self.customer_id = customer_id
        self.vehicle_id = vehicle_id


class WorkOrderNotDoneError(PreconditionFailedError):
    def __init__(self, work_order_id: int, status: WorkOrderStatus) -> None:
        super().__init__(
            f"Work order {work_order_id} must be DONE before approval (is {status.value})"
        )
        self.work_order_id = work_order_id
        self.status = status


class InvalidTransitionError(PreconditionFailedError):
    def __init__(
        self, work_order_id: int, current: WorkOrderStatus, action: str
    ) -> None:
        super().__init__(
            f"Cannot {action} work order {work_order_id} in status {current.value}"
        )
        self.work_order_id = work_order_id
        self.current = current
        self.action = action


@dataclass(slots=True)
class ShopOptions:
    """Switches that tighten the default, permissive lifecycle rules."""

    strict_transitions: bool = False
    deduplicate_vehicle_ids: bool = False


def to_decimal(value: Number) -> Decimal:
    """Convert a primitive number into an exact :class:`Decimal`.

    Floats go through ``str`` so that ``2.5`` becomes ``Decimal("2.5")``
    rather than its binary approximation.
    """

    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except InvalidOperation as exc:
            raise InvalidInputError(f"Not a number: {value!r}") from exc
    if not result.is_finite():
        raise InvalidInputError(f"Not a finite number: {value!r}")
    return result


def round_money(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


class ShopService:
    """Facade that exposes the shop's lifecycle operations to clients.

    A service instance is the whole registry: it owns one repository per
    entity kind and nothing is stored at module level, so every caller (or
    test) gets an isolated shop by constructing a new service.
    """

    def __init__(
        self,
        customer_repo: Optional[InMemoryRepository[Customer]] = None,
        vehicle_repo: Optional[InMemoryRepository[Vehicle]] = None,
        work_order_repo: Optional[InMemoryRepository[WorkOrder]] = None,
        invoice_repo: Optional[InMemoryRepository[Invoice]] = None,
        options: Optional[ShopOptions] = None,
    ) -> None:
        # Empty repositories are falsy, so compare against None.
        self.customers = (
            customer_repo if customer_repo is not None else InMemoryRepository()
        )
        self.vehicles = vehicle_repo if vehicle_repo is not None else InMemoryRepository()
        self.work_orders = (
            work_order_repo if work_order_repo is not None else InMemoryRepository()
        )
        self.invoices = invoice_repo if invoice_repo is not None else InMemoryRepository()
        self.options = options if options is not None else ShopOptions()

    def update_options(
        self,
        *,
        strict_transitions: Optional[bool] = None,
        deduplicate_vehicle_ids: Optional[bool] = None,
    ) -> ShopOptions:
        if strict_transitions is not None:
            self.options.strict_transitions = strict_transitions
        if deduplicate_vehicle_ids is not None:
            self.options.deduplicate_vehicle_ids = deduplicate_vehicle_ids
        logger.info("Shop options updated: %s", self.options)
        return self.options

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    def find_customer(self, customer_id: int) -> Optional[Customer]:
        return self.customers.find(customer_id)

    def find_vehicle(self, vehicle_id: int) -> Optional[Vehicle]:
        return self.vehicles.find(vehicle_id)

    def find_work_order(self, work_order_id: int) -> Optional[WorkOrder]:
        return self.work_orders.find(work_order_id)

    def find_invoice(self, invoice_id: int) -> Optional[Invoice]:
        return self.invoices.find(invoice_id)

    def find_invoice_for_work_order(self, work_order_id: int) -> Optional[Invoice]:
        for invoice in self.invoices.list():
            if invoice.work_order_id == work_order_id:
                return invoice
        return None

    def list_customers(self) -> List[Customer]:
        return self.customers.list()

    def list_vehicles(self) -> List[Vehicle]:
        return self.vehicles.list()

    def list_work_orders(self) -> List[WorkOrder]:
        return self.work_orders.list()

    def list_invoices(self) -> List[Invoice]:
        return self.invoices.list()

    def _require_customer(self, customer_id: int) -> Customer:
        customer = self.find_customer(customer_id)
        if customer is None:
            logger.warning("Customer %s not found", customer_id)
            raise CustomerNotFoundError(customer_id)
        return customer

    def _require_work_order(self, work_order_id: int) -> WorkOrder:
        work_order = self.find_work_order(work_order_id)
        if work_order is None:
            logger.warning("Work order %s not found", work_order_id)
            raise WorkOrderNotFoundError(work_order_id)
        return work_order

    def _require_invoice(self, invoice_id: int) -> Invoice:
        invoice = self.find_invoice(invoice_id)
        if invoice is None:
            logger.warning("Invoice %s not found", invoice_id)
            raise InvoiceNotFoundError(invoice_id)
        return invoice

    # ------------------------------------------------------------------
    # Customers and vehicles
    # ------------------------------------------------------------------
    def create_customer(self, name: str, phone: str) -> Customer:
        customer = Customer(id=self.customers.next_id(), name=name, phone=phone)
        self.customers.add(customer.id, customer)
        logger.info("Created customer %s (%s)", customer.id, customer.name)
        return customer

    def attach_vehicle(self, customer_id: int, vehicle_id: int) -> Customer:
        customer = self._require_customer(customer_id)
        if self.options.deduplicate_vehicle_ids and customer.owns_vehicle(vehicle_id):
            logger.info(
                "Vehicle %s already attached to customer %s", vehicle_id, customer_id
            )
            return customer
        customer.vehicle_ids.append(vehicle_id)
        logger.info("Attached vehicle %s to customer %s", vehicle_id, customer_id)
        return customer

    def _next_free_vehicle_id(self) -> int:
        # Ids attached by hand never went through the allocator; skip them.
        attached = {
            vehicle_id
            for customer in self.customers.list()
            for vehicle_id in customer.vehicle_ids
        }
        vehicle_id = self.vehicles.next_id()
        while vehicle_id in attached:
            vehicle_id = self.vehicles.next_id()
        return vehicle_id

    def register_vehicle(
        self,
        owner_id: int,
        make: str,
        model: str,
        year: int,
        *,
        powertrain: str = "",
        body_type: str = "",
    ) -> Vehicle:
        self._require_customer(owner_id)
        vehicle = Vehicle(
            id=self._next_free_vehicle_id(),
            owner_id=owner_id,
            make=make,
            model=model,
            year=year,
            powertrain=powertrain,
            body_type=body_type,
        )
        self.vehicles.add(vehicle.id, vehicle)
        self.attach_vehicle(owner_id, vehicle.id)
        return vehicle

    # ------------------------------------------------------------------
    # Work orders
    # ------------------------------------------------------------------
    def book_work_order(self, customer_id: int, vehicle_id: int) -> WorkOrder:
        customer = self._require_customer(customer_id)
        if not customer.owns_vehicle(vehicle_id):
            logger.warning(
                "Refused booking: vehicle %s not linked to customer %s",
                vehicle_id,
                customer_id,
            )
            raise VehicleNotLinkedError(customer_id, vehicle_id)
        work_order = WorkOrder(
            id=self.work_orders.next_id(),
            customer_id=customer_id,
            vehicle_id=vehicle_id,
            status=WorkOrderStatus.IN_PROGRESS,
        )
        self.work_orders.add(work_order.id, work_order)
        logger.info(
            "Booked work order %s for customer %s, vehicle %s",
            work_order.id,
            customer_id,
            vehicle_id,
        )
        return work_order

    def add_labour_hours(self, work_order_id: int, hours: Number) -> WorkOrder:
        work_order = self._require_work_order(work_order_id)
        amount = to_decimal(hours)
        if amount < 0:
            logger.warning(
                "Refused negative hours %s on work order %s", amount, work_order_id
            )
            raise InvalidHoursError(amount)
        if self.options.strict_transitions and work_order.status in {
            WorkOrderStatus.DONE,
            WorkOrderStatus.APPROVED,
        }:
            logger.warning(
                "Refused hours on work order %s in status %s",
                work_order_id,
                work_order.status.value,
            )
            raise InvalidTransitionError(
                work_order_id, work_order.status, "record labour on"
            )
        work_order.labour_hours += amount
        if work_order.status is WorkOrderStatus.PENDING:
            work_order.status = WorkOrderStatus.IN_PROGRESS
        logger.info(
            "Added %s hours to work order %s (total %s)",
            amount,
            work_order_id,
            work_order.labour_hours,
        )
        return work_order

    def mark_done(self, work_order_id: int) -> WorkOrder:
        work_order = self._require_work_order(work_order_id)
        if self.options.strict_transitions and not work_order.status.can_transition_to(
            WorkOrderStatus.DONE
        ):
            logger.warning(
                "Refused to mark work order %s done from %s",
                work_order_id,
                work_order.status.value,
            )
            raise InvalidTransitionError(work_order_id, work_order.status, "complete")
        work_order.status = WorkOrderStatus.DONE
        logger.info("Work order %s marked DONE", work_order_id)
        return work_order

    def approve(self, work_order_id: int) -> Invoice:
        """Approve a DONE work order and raise its invoice.

        The invoice total is frozen here as ``labour_hours * HOURLY_RATE``
        rounded half-up to cents.
        """

        work_order = self._require_work_order(work_order_id)
        if work_order.status is not WorkOrderStatus.DONE:
            logger.warning(
                "Refused approval of work order %s in status %s",
                work_order_id,
                work_order.status.value,
            )
            raise WorkOrderNotDoneError(work_order_id, work_order.status)
        work_order.status = WorkOrderStatus.APPROVED
        invoice = Invoice(
            id=self.invoices.next_id(),
            work_order_id=work_order.id,
            total=round_money(work_order.labour_hours * HOURLY_RATE),
        )
        self.invoices.add(invoice.id, invoice)
        logger.info(
            "Approved work order %s, invoice %s for %s",
            work_order_id,
            invoice.id,
            invoice.total,
        )
        return invoice

    # ------------------------------------------------------------------
    # Invoices
    # ------------------------------------------------------------------
    def pay_invoice(self, invoice_id: int, amount: Number) -> Invoice:
        invoice = self._require_invoice(invoice_id)
        payment = to_decimal(amount)
        if payment < invoice.total:
            logger.warning(
                "Refused payment of %s on invoice %s (total %s)",
                payment,
                invoice_id,
                invoice.total,
            )
            raise InsufficientPaymentError(invoice_id, payment, invoice.total)
        invoice.status = InvoiceStatus.PAID
        logger.info("Invoice %s paid with %s", invoice_id, payment)
        return invoice


__all__ = [
    "HOURLY_RATE",
    "ShopOptions",
    "ShopService",
    "ShopError",
    "ShopNotFoundError",
    "CustomerNotFoundError",
    "WorkOrderNotFoundError",
    "InvoiceNotFoundError",
    "InvalidInputError",
    "InvalidHoursError",
    "InsufficientPaymentError",
    "PreconditionFailedError",
    "VehicleNotLinkedError",
    "WorkOrderNotDoneError",
    "InvalidTransitionError",
    "to_decimal",
    "round_money",
]
