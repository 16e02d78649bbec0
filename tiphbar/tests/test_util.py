import asyncio
from decimal import Decimal

import pytest

from tiphbar.exceptions import InvalidAmountError
from tiphbar.util import AccountLocks, format_hbar, hbar_to_tinybars, parse_hbar_amount


@pytest.mark.parametrize("value,expected", (
    ("1", Decimal("1")),
    ("1.5", Decimal("1.5")),
    (" 2.25 ", Decimal("2.25")),
    (0.1, Decimal("0.1")),
    (3, Decimal("3")),
    (Decimal("0.00000001"), Decimal("0.00000001")),
    ("1.10000000000", Decimal("1.1")),
    ("50000000000", Decimal("50000000000")),
    ("49999999999.99999999", Decimal("49999999999.99999999")),
))
def test_parse_hbar_amount(value, expected: Decimal) -> None:
    assert parse_hbar_amount(value) == expected


@pytest.mark.parametrize("value", ("", "abc", "0", 0, -1, "-0.00000001", "0.000000001",
    "NaN", "-Infinity", float("inf"), True, None, "50000000000.00000001", "50000000001", "1e21",
    Decimal("1E+30"), 10**40))
def test_parse_hbar_amount_invalid(value) -> None:
    with pytest.raises(InvalidAmountError):
        parse_hbar_amount(value)


def test_hbar_to_tinybars() -> None:
    assert hbar_to_tinybars(Decimal("1")) == 100_000_000
    assert hbar_to_tinybars(Decimal("0.00000001")) == 1
    assert hbar_to_tinybars(Decimal("12.34567891")) == 1_234_567_891
    assert hbar_to_tinybars(parse_hbar_amount("49999999999.99999999")) == \
        4_999_999_999_999_999_999


def test_format_hbar() -> None:
    assert format_hbar(Decimal("1.50")) == "1.5 HBAR"
    assert format_hbar(Decimal("100")) == "100 HBAR"
    assert format_hbar(Decimal("0.00000001")) == "0.00000001 HBAR"


async def test_account_locks_serialise_per_account() -> None:
    locks = AccountLocks()
    events: list[str] = []
    release = asyncio.Event()

    async def hold(account_id: str, name: str) -> None:
        async with locks.hold(account_id):
            events.append(f"{name} start")
            await release.wait()
            events.append(f"{name} end")

    task1 = asyncio.ensure_future(hold("0.0.1", "a"))
    task2 = asyncio.ensure_future(hold("0.0.1", "b"))
    task3 = asyncio.ensure_future(hold("0.0.2", "c"))
    for _ in range(5):
        await asyncio.sleep(0)

    # Different accounts do not wait on each other.
    assert events == [ "a start", "c start" ]
    assert locks.is_locked("0.0.1")
    assert len(locks) == 2

    release.set()
    await asyncio.gather(task1, task2, task3)
    assert events.index("a end") < events.index("b start")
    assert len(locks) == 0
    assert not locks.is_locked("0.0.1")


async def test_account_locks_released_on_error() -> None:
    locks = AccountLocks()
    with pytest.raises(ValueError):
        async with locks.hold("0.0.1"):
            raise ValueError("failed")
    assert len(locks) == 0
