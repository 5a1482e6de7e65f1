import pytest

from shared.auth import set_identity_provider
from shared.auth.fake_adapter import FakeIdentityProvider

USER_ID = "user-001"
USER_TOKEN = "token-user"


@pytest.fixture(autouse=True)
def _ctx(notifications_bed, clean_domains):
    with notifications_bed.domain_context():
        yield


@pytest.fixture()
def identity_provider():
    provider = FakeIdentityProvider()
    provider.register(USER_TOKEN, USER_ID)
    provider.register("token-other", "user-002")
    set_identity_provider(provider)
    return provider
