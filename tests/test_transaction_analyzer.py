"""
Tests for the transaction analyzer: contract classification with per-run
memoization, ERC-20 Approval decoding, UTC day buckets and gas summary.

The is-contract lookup is a MagicMock so no RPC is involved.
"""

from __future__ import annotations

from unittest.mock import MagicMock

from agent_diff.analyzer import ERC20_APPROVAL_TOPIC, GasUsagePattern, TransactionAnalyzer
from agent_diff.analyzer.transaction_analyzer import parse_approval_events
from agent_diff.chain.models import RawLog, RawTransaction

ADDRESS = "0x1234567890123456789012345678901234567890"
CONTRACT = "0xabcdef0000000000000000000000000000000001"
EOA = "0x3333333333333333333333333333333333333333"
TOKEN = "0xaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa"
OWNER = "0x00000000000000000000000000000000000000a1"
SPENDER = "0x00000000000000000000000000000000000000b2"
# 2025-01-01T00:00:00Z
JAN_1_2025 = 1735689600
DAY = 86400


def _topic(address: str) -> str:
    """Left-pad a 20-byte address into a 32-byte log topic."""
    return "0x" + "0" * 24 + address[2:]


def _approval_log(token: str = TOKEN, spender: str = SPENDER, data: str = "0x64") -> RawLog:
    return RawLog(address=token, topics=(ERC20_APPROVAL_TOPIC, _topic(OWNER), _topic(spender)), data=data)


def _tx(
    to: str | None = CONTRACT,
    gas_used: str = "21000",
    timestamp: int = JAN_1_2025,
    logs: tuple[RawLog, ...] = (),
    tx_hash: str = "0xhash",
) -> RawTransaction:
    return RawTransaction(
        hash=tx_hash,
        to=to,
        from_address=ADDRESS,
        value="0",
        gas_used=gas_used,
        timestamp=timestamp,
        logs=logs,
    )


def _analyzer(contracts: set[str]) -> tuple[TransactionAnalyzer, MagicMock]:
    lookup = MagicMock(side_effect=lambda addr: addr in contracts)
    return TransactionAnalyzer(lookup), lookup


def test_contract_recipients_only_and_lookups_memoized():
    """Only contract recipients are kept; each distinct address is looked up once per run."""
    analyzer, lookup = _analyzer({CONTRACT})
    txs = [_tx(to=CONTRACT), _tx(to=CONTRACT.upper().replace("0X", "0x")), _tx(to=EOA), _tx(to=EOA), _tx(to=None)]

    result = analyzer.analyze(txs)

    assert result.contract_interactions == (CONTRACT,)
    assert lookup.call_count == 2
    called = sorted(c.args[0] for c in lookup.call_args_list)
    assert called == sorted([CONTRACT, EOA])


def test_each_run_gets_a_fresh_cache():
    """Separate analyze() calls do not share the memo table."""
    analyzer, lookup = _analyzer({CONTRACT})
    analyzer.analyze([_tx(to=CONTRACT)])
    analyzer.analyze([_tx(to=CONTRACT)])
    assert lookup.call_count == 2


def test_supplied_cache_is_used_and_filled():
    """A caller-supplied memo table short-circuits lookups and records new ones."""
    analyzer, lookup = _analyzer(set())
    cache = {CONTRACT: True}

    result = analyzer.analyze([_tx(to=CONTRACT), _tx(to=EOA)], contract_cache=cache)

    assert result.contract_interactions == (CONTRACT,)
    lookup.assert_called_once_with(EOA)
    assert cache == {CONTRACT: True, EOA: False}


def test_approval_event_decoded():
    """A well-formed Approval log yields owner, spender, decimal value and lowercased token."""
    analyzer, _ = _analyzer(set())
    log = _approval_log(token=TOKEN.upper().replace("0X", "0x"), data="0x" + "f" * 64)

    result = analyzer.analyze([_tx(to=EOA, logs=(log,), tx_hash="0xabc")])

    assert len(result.approval_events) == 1
    event = result.approval_events[0]
    assert event.token_address == TOKEN
    assert event.owner == OWNER
    assert event.spender == SPENDER
    assert event.value == str(2**256 - 1)
    assert event.transaction_hash == "0xabc"
    assert event.timestamp == JAN_1_2025


def test_approval_signature_compared_case_insensitively():
    log = RawLog(
        address=TOKEN,
        topics=(ERC20_APPROVAL_TOPIC.upper().replace("0X", "0x"), _topic(OWNER), _topic(SPENDER)),
        data="0x01",
    )
    assert len(parse_approval_events([log], "0xh", JAN_1_2025)) == 1


def test_non_approval_logs_ignored():
    """Wrong topic count or a different event signature is not an approval."""
    transfer_sig = "0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef"
    logs = [
        RawLog(address=TOKEN, topics=(ERC20_APPROVAL_TOPIC, _topic(OWNER)), data="0x01"),
        RawLog(address=TOKEN, topics=(ERC20_APPROVAL_TOPIC, _topic(OWNER), _topic(SPENDER), _topic(SPENDER)), data="0x01"),
        RawLog(address=TOKEN, topics=(transfer_sig, _topic(OWNER), _topic(SPENDER)), data="0x01"),
    ]
    assert parse_approval_events(logs, "0xh", JAN_1_2025) == []


def test_malformed_logs_skipped_individually():
    """A bad topic or bad data skips only that log; the good log in the same tx survives."""
    short_topic = RawLog(address=TOKEN, topics=(ERC20_APPROVAL_TOPIC, "0x" + "0" * 40, _topic(SPENDER)), data="0x01")
    no_prefix = RawLog(address=TOKEN, topics=(ERC20_APPROVAL_TOPIC, _topic(OWNER), "00" + _topic(SPENDER)[2:]), data="0x01")
    data_not_hex = _approval_log(data="100")
    data_empty = _approval_log(data="0x")
    data_garbage = _approval_log(data="0xzz")
    good = _approval_log(data="0x0a")

    analyzer, _ = _analyzer(set())
    result = analyzer.analyze(
        [_tx(to=EOA, logs=(short_topic, no_prefix, data_not_hex, data_empty, data_garbage, good))]
    )

    assert len(result.approval_events) == 1
    assert result.approval_events[0].value == "10"


def test_daily_buckets_use_utc_calendar_day():
    analyzer, _ = _analyzer(set())
    txs = [
        _tx(timestamp=JAN_1_2025),
        _tx(timestamp=JAN_1_2025 + DAY - 1),
        _tx(timestamp=JAN_1_2025 + DAY),
        _tx(timestamp=JAN_1_2025 - 1),
    ]

    result = analyzer.analyze(txs)

    assert result.daily_transaction_volume == {
        "2024-12-31": 1,
        "2025-01-01": 2,
        "2025-01-02": 1,
    }


def test_gas_average_truncates_and_handles_big_values():
    """Average gas is the floor of the mean, exact for values far beyond 64 bits."""
    analyzer, _ = _analyzer(set())

    result = analyzer.analyze([_tx(gas_used="21000"), _tx(gas_used="21001")])
    assert result.gas_usage.average_gas_used == "21000"
    assert result.gas_usage.pattern == GasUsagePattern.LOW

    huge = 10**30
    result = analyzer.analyze([_tx(gas_used=str(huge)), _tx(gas_used=str(huge + 3))])
    assert result.gas_usage.average_gas_used == str(huge + 1)
    assert result.gas_usage.pattern == GasUsagePattern.HIGH


def test_gas_pattern_boundaries():
    analyzer, _ = _analyzer(set())
    expected = {
        "100000": GasUsagePattern.LOW,
        "100001": GasUsagePattern.MEDIUM,
        "500000": GasUsagePattern.MEDIUM,
        "500001": GasUsagePattern.HIGH,
    }
    for gas, pattern in expected.items():
        assert analyzer.analyze([_tx(gas_used=gas)]).gas_usage.pattern == pattern


def test_no_transactions():
    """Empty input: nothing collected, average 0, pattern low, no lookups."""
    analyzer, lookup = _analyzer({CONTRACT})

    result = analyzer.analyze([])

    assert result.contract_interactions == ()
    assert result.approval_events == ()
    assert result.daily_transaction_volume == {}
    assert result.gas_usage.average_gas_used == "0"
    assert result.gas_usage.pattern == GasUsagePattern.LOW
    lookup.assert_not_called()
