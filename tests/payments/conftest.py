import pytest


@pytest.fixture(autouse=True)
def _ctx(domain_beds):
    with domain_beds["payments"].domain_context():
        yield
