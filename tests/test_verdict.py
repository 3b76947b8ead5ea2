"""Tests for the verdict bands and the risk clamp (siteguard/services/verdict.py)."""

import pytest

from siteguard.services.findings import Verdict
from siteguard.services.verdict import clamp_risk, classify_verdict


@pytest.mark.parametrize(
    "risk,verdict",
    [
        (0, Verdict.SAFE),
        (30, Verdict.SAFE),
        (31, Verdict.WARNING),
        (70, Verdict.WARNING),
        (71, Verdict.DANGER),
        (100, Verdict.DANGER),
    ],
)
def test_classify_verdict_boundaries(risk: int, verdict: Verdict):
    assert classify_verdict(risk) is verdict


def test_classify_verdict_is_monotonic():
    order = [Verdict.SAFE, Verdict.WARNING, Verdict.DANGER]
    ranks = [order.index(classify_verdict(r)) for r in range(0, 101)]
    assert ranks == sorted(ranks)


@pytest.mark.parametrize(
    "total,expected",
    [(-20, 0), (0, 0), (55, 55), (100, 100), (155, 100)],
)
def test_clamp_risk(total: int, expected: int):
    assert clamp_risk(total) == expected
