"""Tests for the invoice API endpoints."""

import inspect
from decimal import Decimal

import pytest
from fastapi.routing import APIRoute

from invoicing.models.invoice import Invoice
from invoicing.repositories.customer_repository import CustomerRepository
from invoicing.routers.invoices import router as invoices_router
from invoicing.schemas.customer import CustomerCreate


@pytest.fixture
def invoice_payload(shop, customer):
    return {
        "amount": "500.00",
        "payment_mode": "Cash",
        "shop_id": shop.id,
        "customer_id": customer.id,
    }


def _create(client, payload, **overrides):
    response = client.post("/invoices", json={**payload, **overrides})
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestCreateInvoiceAPI:
    def test_create_invoice_with_direct_discount(self, client, invoice_payload):
        response = client.post(
            "/invoices",
            json={**invoice_payload, "discount": "50", "discount_type": "Direct"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == 201
        assert body["message"] == "Invoice created successfully with discount"
        data = body["data"]
        assert data["status"] == "success"
        assert data["invoice_status"] == "Pending"
        assert data["discount_type"] == "Direct"
        assert Decimal(data["discount_amount"]) == Decimal("50")
        assert Decimal(data["total_amount"]) == Decimal("450")
        assert data["shop_name"] == "Corner Grocery"
        assert data["customer_name"] == "Ravi Kumar"
        assert data["customer_mobile"] == "9876543210"
        assert data["invoice_number"] == f"INV-{data['id']}"

    def test_create_invoice_with_percentage_discount_and_tax(self, client, invoice_payload):
        data = _create(
            client,
            invoice_payload,
            amount="1000",
            discount="10",
            discount_type="Percentage",
            tax_amount="180",
        )

        assert Decimal(data["discount_amount"]) == Decimal("100")
        assert Decimal(data["total_amount"]) == Decimal("1080")

    def test_create_invoice_without_discount(self, client, invoice_payload):
        data = _create(client, invoice_payload)

        assert Decimal(data["discount_amount"]) == Decimal("0")
        assert Decimal(data["total_amount"]) == Decimal("500")
        assert data["discount"] is None

    def test_missing_required_fields(self, client):
        response = client.post("/invoices", json={"amount": "10"})

        assert response.status_code == 400
        body = response.json()
        assert body["status"] == 400
        assert body["message"] == "Please provide valid inputs."
        assert body["error"]["code"] == "INPUT_VALIDATION_ERROR"
        fields = {d["field"] for d in body["error"]["details"]}
        assert "body -> paymentMode" in fields
        assert "body -> shopId" in fields
        assert "body -> customerId" in fields

    @pytest.mark.parametrize(
        "overrides",
        [
            {"amount": "0"},
            {"amount": "-5"},
            {"amount": "not-a-number"},
            {"payment_mode": "   "},
            {"discount": "-1", "discount_type": "Direct"},
            {"discount": "10", "discount_type": "Coupon"},
            {"discount": "150", "discount_type": "Percentage"},
            {"tax_amount": "-3"},
            {"due_date": "tomorrow"},
        ],
    )
    def test_invalid_fields_are_rejected(self, client, invoice_payload, overrides):
        response = client.post("/invoices", json={**invoice_payload, **overrides})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INPUT_VALIDATION_ERROR"

    def test_discount_above_total(self, client, db_session, invoice_payload):
        response = client.post(
            "/invoices",
            json={**invoice_payload, "discount": "600", "discount_type": "Direct"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"]["code"] == "INPUT_VALIDATION_ERROR"
        assert body["error"]["details"][0]["field"] == "discount"
        assert db_session.query(Invoice).count() == 0

    def test_total_too_large_for_money_columns(self, client, db_session, invoice_payload):
        response = client.post(
            "/invoices",
            json={**invoice_payload, "amount": "99999999.99", "tax_amount": "1.00"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"]["code"] == "INPUT_VALIDATION_ERROR"
        assert body["error"]["details"][0]["field"] == "tax_amount"
        assert db_session.query(Invoice).count() == 0

    def test_largest_storable_total(self, client, invoice_payload):
        data = _create(client, invoice_payload, amount="99999998.99", tax_amount="1.00")
        assert Decimal(data["total_amount"]) == Decimal("99999999.99")

    def test_unknown_customer(self, client, invoice_payload):
        response = client.post("/invoices", json={**invoice_payload, "customer_id": 9999})

        assert response.status_code == 500
        body = response.json()
        assert body["message"] == "Database operation failed"
        assert body["error"]["code"] == "DB_OPERATION_ERROR"


class TestGetInvoiceAPI:
    def test_get_invoice(self, client, invoice_payload):
        created = _create(client, invoice_payload, discount="50", discount_type="Direct")

        response = client.get(f"/invoices/{created['id']}")

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Invoice fetched successfully"
        data = body["data"]
        assert data["id"] == created["id"]
        assert data["status"] == "Pending"
        assert Decimal(data["total_amount"]) == Decimal("450")
        assert data["shop_name"] == "Corner Grocery"
        assert data["customer_name"] == "Ravi Kumar"

    def test_get_is_repeatable(self, client, invoice_payload):
        created = _create(client, invoice_payload)

        first = client.get(f"/invoices/{created['id']}").json()
        second = client.get(f"/invoices/{created['id']}").json()

        assert first == second

    def test_get_missing_invoice(self, client):
        response = client.get("/invoices/999")

        assert response.status_code == 404
        body = response.json()
        assert body["status"] == 404
        assert body["message"] == "Invoice not found"
        assert body["error"]["code"] == "NOT_FOUND_ERROR"

    def test_get_non_integer_id(self, client):
        response = client.get("/invoices/abc")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INPUT_VALIDATION_ERROR"


class TestListInvoicesAPI:
    def test_list_empty(self, client):
        response = client.get("/invoices")

        assert response.status_code == 200
        assert response.json()["data"] == []
        assert response.headers["X-Total-Count"] == "0"

    def test_list_invoices(self, client, invoice_payload):
        ids = [_create(client, invoice_payload)["id"] for _ in range(3)]

        response = client.get("/invoices")

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Invoices fetched successfully"
        assert [i["id"] for i in body["data"]] == ids

    def test_list_by_customer(self, client, db_session, invoice_payload):
        other = CustomerRepository(db_session).create(CustomerCreate(name="Meera Shah"))
        _create(client, invoice_payload)
        theirs = _create(client, invoice_payload, customer_id=other.id)

        response = client.get("/invoices", params={"customer_id": other.id})

        assert [i["id"] for i in response.json()["data"]] == [theirs["id"]]
        assert response.headers["X-Total-Count"] == "1"

    def test_list_ordered_by_total_desc(self, client, invoice_payload):
        _create(client, invoice_payload, amount="100")
        _create(client, invoice_payload, amount="300")
        _create(client, invoice_payload, amount="200")

        response = client.get("/invoices", params={"order_by": "total_amount:desc"})

        totals = [Decimal(i["total_amount"]) for i in response.json()["data"]]
        assert totals == [Decimal("300"), Decimal("200"), Decimal("100")]


class TestFilterInvoicesAPI:
    def test_filter_by_status(self, client, invoice_payload):
        pending = _create(client, invoice_payload)
        paid = _create(client, invoice_payload)
        client.patch("/invoices", json={"id": paid["id"], "status": "Paid"})

        response = client.get("/invoices", params={"status": "Pending"})

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Invoices filtered successfully"
        assert [i["id"] for i in body["data"]] == [pending["id"]]
        assert "X-Total-Count" not in response.headers

    def test_filter_ignores_pagination(self, client, invoice_payload):
        for _ in range(3):
            _create(client, invoice_payload)

        response = client.get("/invoices", params={"status": "Pending", "limit": 1})

        assert len(response.json()["data"]) == 3

    def test_filter_with_no_matches(self, client, invoice_payload):
        _create(client, invoice_payload)

        response = client.get("/invoices", params={"status": "Cancelled"})

        assert response.status_code == 200
        assert response.json()["data"] == []

    @pytest.mark.parametrize("status_value", ["", "   "])
    def test_blank_status(self, client, status_value):
        response = client.get("/invoices", params={"status": status_value})

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Invalid or missing status parameter"
        assert body["error"]["code"] == "INPUT_VALIDATION_ERROR"


class TestUpdateInvoiceAPI:
    def test_replace_invoice(self, client, invoice_payload):
        created = _create(
            client, invoice_payload, discount="50", discount_type="Direct", tax_amount="20"
        )

        response = client.put(
            f"/invoices/{created['id']}",
            json={**invoice_payload, "amount": "800", "total_amount": "800", "status": "Paid"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Invoice updated successfully"
        data = body["data"]
        assert Decimal(data["amount"]) == Decimal("800")
        assert Decimal(data["total_amount"]) == Decimal("800")
        assert data["status"] == "Paid"
        # Omitted optional fields are cleared on a full replacement
        assert data["discount"] is None
        assert data["discount_type"] is None
        assert data["tax_amount"] is None
        assert data["invoice_number"] == created["invoice_number"]

    def test_replace_missing_invoice(self, client, invoice_payload):
        response = client.put(
            "/invoices/999", json={**invoice_payload, "total_amount": "500"}
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND_ERROR"

    def test_replace_requires_total_amount(self, client, invoice_payload):
        created = _create(client, invoice_payload)

        response = client.put(f"/invoices/{created['id']}", json=invoice_payload)

        assert response.status_code == 400

    def test_replace_non_integer_id(self, client, invoice_payload):
        response = client.put("/invoices/abc", json={**invoice_payload, "total_amount": "500"})

        assert response.status_code == 400
        body = response.json()
        assert body["error"]["code"] == "INPUT_VALIDATION_ERROR"
        assert "path -> invoice_id" in {d["field"] for d in body["error"]["details"]}

    def test_patch_invoice(self, client, invoice_payload):
        created = _create(client, invoice_payload, tax_amount="20")

        response = client.patch(
            "/invoices", json={"id": created["id"], "payment_mode": "UPI", "status": "Paid"}
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["payment_mode"] == "UPI"
        assert data["status"] == "Paid"
        # Untouched fields keep their values
        assert Decimal(data["amount"]) == Decimal("500")
        assert Decimal(data["tax_amount"]) == Decimal("20")
        assert Decimal(data["total_amount"]) == Decimal("520")

    def test_patch_is_persisted(self, client, db_session, invoice_payload):
        created = _create(client, invoice_payload)

        client.patch("/invoices", json={"id": created["id"], "status": "Cancelled"})

        db_session.expire_all()
        assert db_session.get(Invoice, created["id"]).status == "Cancelled"

    def test_patch_missing_invoice(self, client):
        response = client.patch("/invoices", json={"id": 999, "status": "Paid"})

        assert response.status_code == 404
        assert response.json()["message"] == "Invoice not found"

    @pytest.mark.parametrize(
        "body",
        [
            {"status": "Paid"},
            {"id": 0, "status": "Paid"},
            {"id": "abc", "status": "Paid"},
            {"id": 1, "amount": None},
            {"id": 1, "status": "  "},
        ],
    )
    def test_patch_invalid_body(self, client, body):
        response = client.patch("/invoices", json=body)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INPUT_VALIDATION_ERROR"

    def test_patch_discount_over_stored_percentage_type(self, client, db_session, invoice_payload):
        created = _create(client, invoice_payload, discount="10", discount_type="Percentage")

        response = client.patch("/invoices", json={"id": created["id"], "discount": "250"})

        assert response.status_code == 400
        body = response.json()
        assert body["error"]["code"] == "INPUT_VALIDATION_ERROR"
        assert body["error"]["details"][0]["field"] == "discount"
        db_session.expire_all()
        assert db_session.get(Invoice, created["id"]).discount == Decimal("10.00")

    def test_patch_type_to_percentage_over_stored_discount(self, client, invoice_payload):
        created = _create(client, invoice_payload, discount="150", discount_type="Direct")

        response = client.patch(
            "/invoices", json={"id": created["id"], "discount_type": "Percentage"}
        )

        assert response.status_code == 400

    def test_patch_discount_within_stored_percentage_type(self, client, invoice_payload):
        created = _create(client, invoice_payload, discount="10", discount_type="Percentage")

        response = client.patch("/invoices", json={"id": created["id"], "discount": "100"})

        assert response.status_code == 200
        assert Decimal(response.json()["data"]["discount"]) == Decimal("100")

    def test_patch_large_direct_discount(self, client, invoice_payload):
        created = _create(client, invoice_payload, discount="10", discount_type="Direct")

        response = client.patch("/invoices", json={"id": created["id"], "discount": "250"})

        assert response.status_code == 200
        assert response.json()["data"]["discount_type"] == "Direct"


class TestDeleteInvoiceAPI:
    def test_delete_invoice(self, client, invoice_payload):
        created = _create(client, invoice_payload)

        response = client.delete(f"/invoices/{created['id']}")

        assert response.status_code == 204
        assert response.content == b""
        assert client.get(f"/invoices/{created['id']}").status_code == 404

    def test_delete_missing_invoice(self, client):
        response = client.delete("/invoices/999")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND_ERROR"

    def test_delete_non_integer_id(self, client):
        response = client.delete("/invoices/abc")

        assert response.status_code == 400


class TestCamelCaseRequests:
    def test_create_with_camel_case_fields(self, client, shop, customer):
        response = client.post(
            "/invoices",
            json={
                "amount": 500,
                "paymentMode": "Cash",
                "shopId": shop.id,
                "customerId": customer.id,
                "discountType": "Direct",
                "discount": 50,
                "taxAmount": 20,
                "dueDate": "2026-11-30",
            },
        )

        assert response.status_code == 201, response.text
        data = response.json()["data"]
        assert data["payment_mode"] == "Cash"
        assert data["due_date"] == "2026-11-30"
        assert Decimal(data["total_amount"]) == Decimal("470")

    def test_page_number_query_parameter(self, client, invoice_payload):
        ids = [_create(client, invoice_payload)["id"] for _ in range(12)]

        response = client.get("/invoices", params={"limit": 10, "pageNumber": 2})

        assert [i["id"] for i in response.json()["data"]] == ids[10:]

    def test_replace_with_camel_case_fields(self, client, invoice_payload, shop, customer):
        created = _create(client, invoice_payload)

        response = client.put(
            f"/invoices/{created['id']}",
            json={
                "amount": "300",
                "paymentMode": "UPI",
                "shopId": shop.id,
                "customerId": customer.id,
                "totalAmount": "300",
            },
        )

        assert response.status_code == 200
        assert response.json()["data"]["payment_mode"] == "UPI"

    def test_patch_with_camel_case_fields(self, client, invoice_payload):
        created = _create(client, invoice_payload)

        response = client.patch(
            "/invoices", json={"id": created["id"], "paymentMode": "Card", "taxAmount": "5"}
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["payment_mode"] == "Card"
        assert Decimal(data["tax_amount"]) == Decimal("5")


def test_handlers_run_in_threadpool():
    endpoints = [r.endpoint for r in invoices_router.routes if isinstance(r, APIRoute)]

    assert endpoints
    assert not any(inspect.iscoroutinefunction(e) for e in endpoints)


def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {"app": "Shop Invoicing", "version": "0.1.0", "status": "running"}
