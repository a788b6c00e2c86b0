import pytest


@pytest.fixture(autouse=True)
def _ctx(domain_beds):
    with domain_beds["identity"].domain_context():
        yield
