"""Demonstration script walking one repair job through the whole lifecycle."""

from __future__ import annotations

import logging
from pprint import pprint

from . import ShopService
from .formatting import describe_invoice, describe_work_order, format_money


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    shop = ShopService()

    # Master data
    customer = shop.create_customer(name="Alice Moreau", phone="555-0100")
    vehicle = shop.register_vehicle(
        customer.id,
        make="Toyota",
        model="Corolla",
        year=2018,
        powertrain="Hybrid",
        body_type="Sedan",
    )
    shop.attach_vehicle(customer.id, 42)
    print(f"Customer {customer.name} with vehicles {customer.vehicle_ids}")
    print(f"   {vehicle.display}")

    # Work order
    work_order = shop.book_work_order(customer.id, 42)
    shop.add_labour_hours(work_order.id, 1.25)
    shop.add_labour_hours(work_order.id, 1.75)
    shop.mark_done(work_order.id)
    print(describe_work_order(work_order))

    # Invoice
    invoice = shop.approve(work_order.id)
    print(describe_invoice(invoice))
    shop.pay_invoice(invoice.id, invoice.total)
    print(f"Paid: {format_money(invoice.total)} -> {invoice.status.value}")

    print("\nInvoices")
    pprint(list(shop.invoices.as_dicts()))


if __name__ == "__main__":  # pragma: no cover - manual execution
    main()
