import pytest
from fastapi.testclient import TestClient

from autoservice import InvoiceStatus, ShopOptions, ShopService, WorkOrderStatus
from autoservice.web.app import create_app, ensure_demo_data


@pytest.fixture
def client(service):
    return TestClient(create_app(service))


def test_dashboard_renders_empty_shop(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "Auto Service Shop" in response.text


def test_lifecycle_through_forms(client, service):
    response = client.post("/customers", data={"name": "Alice", "phone": "555-0100"})
    assert response.status_code == 200
    assert "Created customer ID 1" in response.text

    client.post("/customers/1/vehicles", data={"vehicle_id": "42"})
    client.post("/work-orders", data={"customer_id": "1", "vehicle_id": "42"})
    client.post("/work-orders/1/hours", data={"hours": "2.5"})
    client.post("/work-orders/1/done")
    response = client.post("/work-orders/1/approve")
    assert "Approved. Invoice ID 1" in response.text
    assert "$250.00" in response.text

    response = client.post("/invoices/1/pay", data={"amount": "250.00"})
    assert "Paid. Thank you." in response.text
    assert service.find_work_order(1).status is WorkOrderStatus.APPROVED
    assert service.find_invoice(1).status is InvoiceStatus.PAID


def test_rejections_redirect_with_error(client, service):
    service.create_customer("Alice", "555-0100")
    response = client.post(
        "/work-orders",
        data={"customer_id": "1", "vehicle_id": "42"},
        follow_redirects=False,
    )
    assert response.status_code == 303
    assert "error=" in response.headers["location"]
    assert service.list_work_orders() == []

    response = client.post("/work-orders/1/approve")
    assert "No such work order: 1" in response.text


def test_insufficient_payment_is_reported(client, service):
    service.create_customer("Alice", "555-0100")
    service.attach_vehicle(1, 42)
    service.book_work_order(1, 42)
    service.add_labour_hours(1, 1)
    service.mark_done(1)
    service.approve(1)

    response = client.post("/invoices/1/pay", data={"amount": "99.99"})
    assert "does not cover invoice 1" in response.text
    assert service.find_invoice(1).status is InvoiceStatus.UNPAID


def test_summary_endpoint(client, service):
    ensure_demo_data(service)
    payload = client.get("/api/summary").json()
    assert [c["name"] for c in payload["customers"]] == ["Alice Moreau", "Bob Lindqvist"]
    assert payload["vehicles"][0]["make"] == "Volkswagen"
    assert payload["work_orders"][0]["status"] == "APPROVED"
    assert payload["work_orders"][1]["status"] == "IN_PROGRESS"
    assert payload["invoices"][0]["total"] == "250.00"
    assert payload["work_orders"][0]["labour_hours"] == "2.5"
    assert payload["invoices"][0]["status"] == "UNPAID"


def test_demo_data_is_seeded_once():
    service = ShopService()
    create_app(service, demo_data=True)
    ensure_demo_data(service)
    assert len(service.list_customers()) == 2
    assert len(service.list_invoices()) == 1


def test_options_apply_to_supplied_service(service):
    app = create_app(service, options=ShopOptions(strict_transitions=True))
    assert app.state.shop_service is service
    assert service.options.strict_transitions
