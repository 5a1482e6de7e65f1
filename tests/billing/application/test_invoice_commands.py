"""Application tests for invoice generation and cancellation via domain.process()."""

import json

import pytest
from billing.invoice.cancellation import CancelInvoice
from billing.invoice.generation import GenerateInvoice
from billing.invoice.invoice import Invoice, InvoiceStatus
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError


def _generate(**overrides):
    defaults = {
        "service_request_id": "req-100",
        "mechanic_id": "mech-100",
        "customer_id": "cust-100",
        "items": json.dumps([{"description": "Puncture repair", "quantity": 1, "unit_price": 400.0}]),
        "tax_rate": 18.0,
    }
    defaults.update(overrides)
    return current_domain.process(GenerateInvoice(**defaults), asynchronous=False)


class TestGenerateInvoice:
    def test_generate_returns_invoice_id(self):
        invoice_id = _generate()
        assert invoice_id is not None

    def test_generate_persists_pending_invoice(self):
        invoice_id = _generate()
        invoice = current_domain.repository_for(Invoice).get(invoice_id)
        assert invoice.status == InvoiceStatus.PENDING.value
        assert invoice.total_amount == pytest.approx(472.0)
        assert len(invoice.items) == 1
        assert invoice.currency == "INR"

    def test_generate_with_explicit_number(self):
        invoice_id = _generate(invoice_number="INV-001")
        invoice = current_domain.repository_for(Invoice).get(invoice_id)
        assert invoice.invoice_number == "INV-001"

    def test_generate_without_items_fails(self):
        with pytest.raises(ValidationError):
            _generate(items="[]")


class TestCancelInvoice:
    def test_cancel_pending_invoice(self):
        invoice_id = _generate()
        current_domain.process(CancelInvoice(invoice_id=invoice_id, reason="Raised by mistake"), asynchronous=False)
        invoice = current_domain.repository_for(Invoice).get(invoice_id)
        assert invoice.status == InvoiceStatus.CANCELLED.value
        assert invoice.cancellation_reason == "Raised by mistake"

    def test_cancel_unknown_invoice(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(CancelInvoice(invoice_id="missing", reason="Nope"), asynchronous=False)

    def test_cancel_paid_invoice_fails(self, pending_invoice):
        pending_invoice.mark_paid("order_abc", "pay_xyz", "sig")
        current_domain.repository_for(Invoice).add(pending_invoice)
        with pytest.raises(ValidationError):
            current_domain.process(
                CancelInvoice(invoice_id=str(pending_invoice.id), reason="Too late"),
                asynchronous=False,
            )


class TestInvoiceRepository:
    def test_find_by_order_id(self, pending_invoice):
        repo = current_domain.repository_for(Invoice)
        pending_invoice.attach_gateway_order("order_find_me")
        repo.add(pending_invoice)
        assert str(repo.find_by_order_id("order_find_me").id) == str(pending_invoice.id)
        assert repo.find_by_order_id("order_unknown") is None
        assert repo.find_by_order_id("") is None

    def test_find_for_party(self, pending_invoice):
        _generate(mechanic_id="mech-001", customer_id="cust-999")
        _generate(mechanic_id="mech-999", customer_id="cust-999")
        repo = current_domain.repository_for(Invoice)
        assert len(repo.find_for_party("mech-001")) == 2
        assert len(repo.find_for_party("cust-001")) == 1
        assert len(repo.find_for_party("cust-999")) == 2
        assert repo.find_for_party("nobody") == []

    def test_find_for_party_returns_every_invoice(self):
        for index in range(105):
            _generate(service_request_id=f"req-{index}")
        repo = current_domain.repository_for(Invoice)
        assert len(repo.find_for_party("mech-100")) == 105
        assert len(repo.find_for_party("cust-100")) == 105
