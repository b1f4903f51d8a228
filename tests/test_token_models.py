"""
Unit Tests for token result models

Tests:
- RenewResult truthiness per outcome
- ReclaimReport.changed
- PoolStats.total
"""

import pytest

from token_pool.tokens import PoolStats, ReclaimReport, RenewOutcome, RenewResult

pytestmark = [pytest.mark.unit]


@pytest.mark.parametrize(
    "outcome,truthy",
    [
        (RenewOutcome.RENEWED_LEASE, True),
        (RenewOutcome.RENEWED_POOL_SLOT, True),
        (RenewOutcome.NOT_FOUND, False),
    ],
)
def test_renew_result_truthiness(outcome, truthy):
    assert bool(RenewResult(outcome, "tok", 1.0)) is truthy


def test_renew_result_is_lease_only_for_lease_branch():
    assert RenewResult(RenewOutcome.RENEWED_LEASE, "tok", 1.0).is_lease
    assert not RenewResult(RenewOutcome.RENEWED_POOL_SLOT, "tok", 1.0).is_lease


def test_renew_result_is_immutable():
    result = RenewResult(RenewOutcome.NOT_FOUND, "tok")
    with pytest.raises(AttributeError):
        result.token = "other"  # type: ignore[misc]


def test_renew_outcome_values_are_strings():
    assert RenewOutcome.RENEWED_POOL_SLOT == "renewed_pool_slot"


def test_reclaim_report_changed():
    assert not ReclaimReport().changed
    assert ReclaimReport(recycled=1).changed
    assert ReclaimReport(purged=2).changed


def test_pool_stats_total():
    assert PoolStats(pool_size=3, leased=2, max_tokens=10).total == 5
