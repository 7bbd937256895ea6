from datetime import date, timedelta
from decimal import Decimal

import pytest

from ledger_recon.demo_feeds import (
    LOOKBACK_DAYS,
    SeededRandom,
    get_bank_transactions,
    get_chart_of_accounts,
    get_ledger_transactions,
    hash_code,
)

TODAY = date(2025, 6, 30)


@pytest.mark.parametrize(
    ("s", "expected"),
    [
        ("", 0),
        ("a", 97),
        ("hello", 99162322),
        # 32-bit overflow wraps negative before abs()
        ("polygenelubricants", 2147483648),
    ],
)
def test_hash_code(s, expected):
    assert hash_code(s) == expected


def test_seeded_random_is_reproducible():
    a, b = SeededRandom(42), SeededRandom(42)
    seq = [a() for _ in range(20)]
    assert seq == [b() for _ in range(20)]
    assert all(0.0 <= x <= 1.0 for x in seq)
    assert seq != [SeededRandom(43)() for _ in range(20)]


def test_seeded_random_first_draw():
    # (1 * 1103515245 + 12345) & 0x7fffffff
    assert SeededRandom(1)() == 1103527590 / 0x7FFFFFFF


def test_randint_below_stays_in_range():
    rnd = SeededRandom(7)
    assert all(0 <= rnd.randint_below(3) < 3 for _ in range(200))


def test_ledger_feed_shape():
    txns = get_ledger_transactions("ws-demo", today=TODAY)
    assert 50 <= len(txns) <= 79
    assert len({t.id for t in txns}) == len(txns)
    assert all(TODAY - timedelta(days=LOOKBACK_DAYS) < t.date <= TODAY for t in txns)
    assert all(t.amount != 0 for t in txns)
    dates = [t.date for t in txns]
    assert dates == sorted(dates, reverse=True)
    assert all(t.id.startswith("ledger-txn-ws-demo-") for t in txns)
    assert all(t.external_id.startswith("GL-ws-demo-") for t in txns)


def test_ledger_feed_is_deterministic():
    assert get_ledger_transactions("acme", today=TODAY) == get_ledger_transactions(
        "acme", today=TODAY
    )
    assert get_ledger_transactions("acme", today=TODAY) != get_ledger_transactions(
        "globex", today=TODAY
    )


def test_bank_feed_is_deterministic():
    assert get_bank_transactions("acme", today=TODAY) == get_bank_transactions(
        "acme", today=TODAY
    )


def test_bank_feed_mirrors_ledger():
    ledger = {t.id: t for t in get_ledger_transactions("acme", today=TODAY)}
    bank = get_bank_transactions("acme", today=TODAY)

    mirrored = [b for b in bank if b.id.startswith("bank-txn-")]
    extra = [b for b in bank if b.id.startswith("bank-only-")]
    assert len(mirrored) + len(extra) == len(bank)
    assert 5 <= len(extra) <= 12
    assert len(mirrored) <= len(ledger)

    for b in mirrored:
        source = ledger[b.id.replace("bank-txn-", "ledger-txn-", 1)]
        assert 0 <= (b.date - source.date).days <= 3
        fee_cap = max(Decimal(50), abs(source.amount) * Decimal("0.03") + Decimal("0.01"))
        assert abs(b.amount - source.amount) <= fee_cap
        assert b.external_id == "BANK-" + source.external_id.removeprefix("GL-")
        assert b.bank_name in {"Chase Business", "Bank of America"}

    for b in extra:
        assert b.external_id.startswith("BANK-ONLY-acme-")
        assert TODAY - timedelta(days=30) < b.date <= TODAY

    dates = [b.date for b in bank]
    assert dates == sorted(dates, reverse=True)


def test_chart_of_accounts():
    chart = get_chart_of_accounts("ws1")
    assert len(chart) == 24
    assert len({c.id for c in chart}) == 24
    assert all(c.id.startswith("ws1-cat-") for c in chart)
    assert {c.type for c in chart} == {"expense", "income", "asset", "liability"}
    assert [c.name for c in get_chart_of_accounts("ws2")] == [c.name for c in chart]


def test_ledger_categories_exist_in_chart():
    names = {c.name for c in get_chart_of_accounts("ws")}
    assert all(t.category_name in names for t in get_ledger_transactions("ws", today=TODAY))
