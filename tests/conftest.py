import pytest

from autoservice import ShopService


@pytest.fixture
def service() -> ShopService:
    return ShopService()


@pytest.fixture
def alice(service):
    customer = service.create_customer("Alice", "555-0100")
    service.attach_vehicle(customer.id, 42)
    return customer


@pytest.fixture
def done_order(service, alice):
    work_order = service.book_work_order(alice.id, 42)
    service.add_labour_hours(work_order.id, 2.5)
    service.mark_done(work_order.id)
    return work_order
