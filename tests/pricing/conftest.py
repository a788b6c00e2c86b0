import pytest


@pytest.fixture(autouse=True)
def _ctx(domain_beds):
    with domain_beds["pricing"].domain_context():
        yield
