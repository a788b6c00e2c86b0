from decimal import Decimal

import pytest
from payments.intent.amounts import to_minor_units


@pytest.mark.parametrize(
    "amount, expected",
    [
        (Decimal("25.20"), 2520),
        (Decimal("10.005"), 1001),
        (Decimal("10.004"), 1000),
        (Decimal("0.10"), 50),
        (Decimal("0"), 50),
    ],
)
def test_to_minor_units(amount, expected):
    assert to_minor_units(amount, minimum=50) == expected
