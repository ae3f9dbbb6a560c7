"""Interactive menu shell driving the shop service from a terminal."""

from __future__ import annotations

import argparse
import logging
import sys
from decimal import Decimal, InvalidOperation
from typing import Callable, Dict, Optional, Sequence, TextIO

from .formatting import (
    describe_customer,
    describe_invoice,
    describe_work_order,
    format_money,
)
from .services import ShopError, ShopOptions, ShopService

MENU = """
Menu:
1) Create Customer
2) Attach Vehicle ID to Customer
3) Book Work Order
4) Add Labour Hours
5) Mark WO as DONE
6) Approve WO -> Invoice
7) Pay Invoice
8) List Customers
9) List Work Orders
10) List Invoices
0) Exit"""


class ConsoleShell:
    """Numbered-menu front end. Parses input, calls the service, prints results."""

    def __init__(
        self,
        service: ShopService,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
    ) -> None:
        self.service = service
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout
        self._actions: Dict[int, Callable[[], None]] = {
            1: self.create_customer,
            2: self.attach_vehicle,
            3: self.book_work_order,
            4: self.add_hours,
            5: self.mark_done,
            6: self.approve,
            7: self.pay_invoice,
            8: self.list_customers,
            9: self.list_work_orders,
            10: self.list_invoices,
        }

    # ------------------------------------------------------------------
    # Input / output helpers
    # ------------------------------------------------------------------
    def write(self, text: str = "") -> None:
        print(text, file=self._stdout)

    def read_line(self, prompt: str) -> str:
        self._stdout.write(prompt)
        self._stdout.flush()
        line = self._stdin.readline()
        if not line:
            raise EOFError
        return line.rstrip("\n")

    def read_int(self, prompt: str) -> int:
        while True:
            text = self.read_line(prompt).strip()
            try:
                return int(text)
            except ValueError:
                self.write("Enter a whole number.")

    def read_decimal(self, prompt: str) -> Decimal:
        while True:
            text = self.read_line(prompt).strip()
            try:
                value = Decimal(text)
            except InvalidOperation:
                value = None
            if value is not None and value.is_finite():
                return value
            self.write("Enter a number (e.g., 1.5).")

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------
    def run(self) -> None:
        self.write("=== Auto Service System ===")
        while True:
            self.write(MENU)
            try:
                choice = self.read_int("Choose: ")
                if choice == 0:
                    break
                action = self._actions.get(choice)
                if action is None:
                    self.write("Invalid.")
                    continue
                try:
                    action()
                except ShopError as exc:
                    self.write(f"Error: {exc}")
            except EOFError:
                self.write()
                break
        self.write("Bye.")

    # ------------------------------------------------------------------
    # Menu actions
    # ------------------------------------------------------------------
    def create_customer(self) -> None:
        name = self.read_line("Name: ")
        phone = self.read_line("Phone: ")
        customer = self.service.create_customer(name, phone)
        self.write(f"Created customer ID {customer.id}")

    def attach_vehicle(self) -> None:
        customer_id = self.read_int("Customer ID: ")
        vehicle_id = self.read_int("Existing Vehicle ID: ")
        self.service.attach_vehicle(customer_id, vehicle_id)
        self.write("Vehicle attached.")

    def book_work_order(self) -> None:
        customer_id = self.read_int("Customer ID: ")
        vehicle_id = self.read_int("Vehicle ID (must belong to customer): ")
        work_order = self.service.book_work_order(customer_id, vehicle_id)
        self.write(f"WO created: {work_order.id}")

    def add_hours(self) -> None:
        work_order_id = self.read_int("WO ID: ")
        hours = self.read_decimal("Hours to add: ")
        work_order = self.service.add_labour_hours(work_order_id, hours)
        self.write(f"Hours added. Total: {work_order.labour_hours}")

    def mark_done(self) -> None:
        work_order_id = self.read_int("WO ID: ")
        self.service.mark_done(work_order_id)
        self.write("Marked DONE.")

    def approve(self) -> None:
        work_order_id = self.read_int("WO ID: ")
        invoice = self.service.approve(work_order_id)
        self.write(
            f"Approved. Invoice ID {invoice.id} for {format_money(invoice.total)}"
        )

    def pay_invoice(self) -> None:
        invoice_id = self.read_int("Invoice ID: ")
        amount = self.read_decimal("Payment amount: $")
        self.service.pay_invoice(invoice_id, amount)
        self.write("Paid. Thank you.")

    def list_customers(self) -> None:
        self.write("-- Customers --")
        for customer in self.service.list_customers():
            self.write(describe_customer(customer))

    def list_work_orders(self) -> None:
        self.write("-- Work Orders --")
        for work_order in self.service.list_work_orders():
            self.write(describe_work_order(work_order))

    def list_invoices(self) -> None:
        self.write("-- Invoices --")
        for invoice in self.service.list_invoices():
            self.write(describe_invoice(invoice))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Auto service shop console")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="reject status transitions outside the forward-only table",
    )
    parser.add_argument(
        "--dedupe-vehicles",
        action="store_true",
        help="ignore repeated attachment of the same vehicle id",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    options = ShopOptions(
        strict_transitions=args.strict,
        deduplicate_vehicle_ids=args.dedupe_vehicles,
    )
    ConsoleShell(ShopService(options=options)).run()


if __name__ == "__main__":
    main()
