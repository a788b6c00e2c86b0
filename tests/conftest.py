import os
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Select the config environment before any domain or cached settings object is built.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env
    os.environ["ENVIRONMENT"] = session.config.option.env
    os.environ.setdefault("PAYMENT_GATEWAY", "fake")

    from shared.config import get_settings

    get_settings.cache_clear()


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def domain_beds():
    """Initialize every server-side domain once per session."""
    from identity.domain import identity
    from ordering.domain import ordering
    from payments.domain import payments
    from pricing.domain import pricing

    beds = {domain.name: DomainFixture(domain) for domain in (identity, ordering, payments, pricing)}
    for bed in beds.values():
        bed.setup()

    yield beds

    for bed in beds.values():
        bed.teardown()


@pytest.fixture(autouse=True)
def run_around_tests(domain_beds):
    """Fixture to automatically cleanup infrastructure after every test"""
    yield

    from payments.gateway import reset_gateway
    from protean import current_domain
    from shared.config import get_settings

    for bed in domain_beds.values():
        with bed.domain.domain_context():
            # Clear all databases
            for _, provider in current_domain.providers.items():
                provider._data_reset()

            # Drain event stores
            current_domain.event_store.store._data_reset()

    reset_gateway()
    get_settings.cache_clear()
