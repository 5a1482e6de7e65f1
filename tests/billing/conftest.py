import pytest
from billing.gateway import set_gateway
from billing.gateway.fake_adapter import FakeGateway
from billing.invoice.invoice import Invoice

from shared.auth import set_identity_provider
from shared.auth.fake_adapter import FakeIdentityProvider

MECHANIC_ID = "mech-001"
CUSTOMER_ID = "cust-001"
MECHANIC_TOKEN = "token-mechanic"
CUSTOMER_TOKEN = "token-customer"


@pytest.fixture(autouse=True)
def _ctx(billing_bed, notifications_bed, clean_domains):
    with billing_bed.domain_context():
        yield


@pytest.fixture()
def gateway():
    fake = FakeGateway()
    set_gateway(fake)
    return fake


@pytest.fixture()
def identity_provider():
    provider = FakeIdentityProvider()
    provider.register(MECHANIC_TOKEN, MECHANIC_ID, email="mechanic@example.com", role="mechanic")
    provider.register(CUSTOMER_TOKEN, CUSTOMER_ID, email="customer@example.com", role="customer")
    set_identity_provider(provider)
    return provider


def make_invoice(**overrides) -> Invoice:
    defaults = {
        "service_request_id": "req-001",
        "mechanic_id": MECHANIC_ID,
        "customer_id": CUSTOMER_ID,
        "items_data": [
            {"description": "Flat tyre repair", "quantity": 1, "unit_price": 800.0},
            {"description": "Tow (5 km)", "quantity": 1, "unit_price": 700.0},
        ],
    }
    defaults.update(overrides)
    return Invoice.create(**defaults)


@pytest.fixture()
def pending_invoice():
    """A persisted pending invoice for 1500.00."""
    from protean import current_domain

    invoice = make_invoice()
    current_domain.repository_for(Invoice).add(invoice)
    return current_domain.repository_for(Invoice).get(invoice.id)
