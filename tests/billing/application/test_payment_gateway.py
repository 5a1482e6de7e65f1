"""Tests for gateway port/adapter integration."""

from unittest.mock import MagicMock, patch

import pytest
import requests
from billing.gateway import build_gateway, get_gateway, reset_gateway, set_gateway
from billing.gateway.fake_adapter import FakeGateway
from billing.gateway.port import OrderResult
from billing.gateway.razorpay_adapter import RazorpayGateway
from billing.gateway.signature import compute_payment_signature

from shared.settings import ConfigurationError, Settings


def _response(status_code=200, payload=None):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.json.return_value = payload or {}
    return response


class TestFakeGateway:
    def test_default_order_succeeds(self):
        gateway = FakeGateway()
        result = gateway.create_order(amount=150000, currency="INR", receipt="INV-001")
        assert isinstance(result, OrderResult)
        assert result.success is True
        assert result.order_id.startswith("order_")
        assert result.amount == 150000
        assert result.currency == "INR"

    def test_configured_order_fails(self):
        gateway = FakeGateway()
        gateway.configure(should_succeed=False, failure_reason="Merchant suspended")
        result = gateway.create_order(amount=150000, currency="INR", receipt="INV-001")
        assert result.success is False
        assert result.failure_reason == "Merchant suspended"

    def test_records_calls(self):
        gateway = FakeGateway()
        gateway.create_order(amount=100, currency="INR", receipt="INV-002", notes={"invoice_id": "inv-1"})
        assert gateway.calls[0]["method"] == "create_order"
        assert gateway.calls[0]["notes"] == {"invoice_id": "inv-1"}

    def test_verifies_its_own_signatures(self):
        gateway = FakeGateway()
        signature = gateway.sign("order_abc", "pay_xyz")
        assert signature == compute_payment_signature("fake_secret", "order_abc", "pay_xyz")
        assert gateway.verify_payment_signature("order_abc", "pay_xyz", signature) is True
        assert gateway.verify_payment_signature("order_abc", "pay_other", signature) is False


class TestRazorpayGateway:
    def test_create_order_posts_to_orders_endpoint(self):
        gateway = RazorpayGateway(key_id="rzp_test_key", key_secret="secret", timeout=5.0)
        with patch("billing.gateway.razorpay_adapter.requests.post") as post:
            post.return_value = _response(200, {"id": "order_abc", "amount": 150000, "currency": "INR"})
            result = gateway.create_order(150000, "INR", "INV-001", notes={"invoice_id": "inv-1"})

        assert result == OrderResult(success=True, order_id="order_abc", amount=150000, currency="INR")
        args, kwargs = post.call_args
        assert args[0] == "https://api.razorpay.com/v1/orders"
        assert kwargs["json"] == {
            "amount": 150000,
            "currency": "INR",
            "receipt": "INV-001",
            "notes": {"invoice_id": "inv-1"},
        }
        assert kwargs["auth"] == ("rzp_test_key", "secret")
        assert kwargs["timeout"] == 5.0

    def test_create_order_reports_gateway_rejection(self):
        gateway = RazorpayGateway(key_id="rzp_test_key", key_secret="secret")
        with patch("billing.gateway.razorpay_adapter.requests.post") as post:
            post.return_value = _response(401, {"error": {"description": "Authentication failed"}})
            result = gateway.create_order(150000, "INR", "INV-001")

        assert result.success is False
        assert result.failure_reason == "Gateway returned 401"

    def test_create_order_reports_transport_error(self):
        gateway = RazorpayGateway(key_id="rzp_test_key", key_secret="secret")
        with patch("billing.gateway.razorpay_adapter.requests.post") as post:
            post.side_effect = requests.ConnectionError("boom")
            result = gateway.create_order(150000, "INR", "INV-001")

        assert result.success is False
        assert result.failure_reason == "Gateway unreachable"

    def test_signature_verified_with_key_secret(self):
        gateway = RazorpayGateway(key_id="rzp_test_key", key_secret="test_secret")
        signature = "a734976b4a9aa4403181acd25d87b09ad8cb31f7d73be91e2bb9eb5c517ca319"
        assert gateway.verify_payment_signature("order_abc", "pay_xyz", signature) is True
        assert gateway.verify_payment_signature("order_abc", "pay_xyz", signature[::-1]) is False


class TestGatewayRegistry:
    def test_build_gateway_from_settings(self):
        gateway = build_gateway(Settings(razorpay_key_id="rzp_live", razorpay_key_secret="s3cret", http_timeout=3.0))
        assert isinstance(gateway, RazorpayGateway)
        assert gateway.key_id == "rzp_live"
        assert gateway.timeout == 3.0

    def test_build_gateway_without_secret_fails(self):
        with pytest.raises(ConfigurationError) as exc:
            build_gateway(Settings(razorpay_key_id="rzp_live"))
        assert exc.value.message == "Razorpay credentials not configured"

    def test_get_gateway_reads_environment(self, monkeypatch):
        monkeypatch.delenv("RAZORPAY_KEY_SECRET", raising=False)
        reset_gateway()
        with pytest.raises(ConfigurationError):
            get_gateway()

        monkeypatch.setenv("RAZORPAY_KEY_ID", "rzp_env")
        monkeypatch.setenv("RAZORPAY_KEY_SECRET", "env_secret")
        gateway = get_gateway()
        assert isinstance(gateway, RazorpayGateway)
        assert get_gateway() is gateway

    def test_set_gateway_overrides_default(self):
        fake = FakeGateway()
        set_gateway(fake)
        assert get_gateway() is fake
        reset_gateway()
        set_gateway(FakeGateway(key_id="rzp_other"))
        assert get_gateway().key_id == "rzp_other"
