"""
Tests for the domain reputation estimator (siteguard/services/domain_reputation.py).

Covers the score adjustments, label thresholds, the allow-list override,
hostname helpers and the finding handed to the aggregator.
"""

import pytest

from siteguard.services.domain_reputation import (
    ReputationLabel,
    estimate_reputation,
    get_registered_domain,
    get_tld,
    label_for_score,
    reputation_finding,
    reputation_score,
)
from siteguard.services.findings import Category, Severity


# ── reputation_score ──────────────────────────────────────────


@pytest.mark.parametrize(
    "hostname,age,expected",
    [
        # base 50 + com 10
        ("example.com", None, 60),
        ("example.com", 10, 80),
        ("example.com", 5, 80),
        ("example.com", 4, 70),
        ("example.com", 2, 70),
        ("example.com", 1, 50),
        ("example.com", 0, 50),
        # neutral TLD
        ("example.net", None, 50),
        ("example.org", None, 60),
        ("example.edu", None, 60),
        ("example.gov", None, 60),
        # free-registration TLD
        ("example.tk", None, 30),
        ("example.ml", None, 30),
        # long (21 chars) and hyphenated (3 hyphens)
        ("my-cool-shop-site.xyz", None, 35),
        # only the last suffix label counts as the TLD
        ("example.co.uk", None, 50),
    ],
)
def test_reputation_score(hostname: str, age, expected: int):
    assert reputation_score(hostname, age) == expected


def test_length_penalty_boundary():
    twenty = "abcdefghijklmnop.net"
    assert len(twenty) == 20
    assert reputation_score(twenty, None) == 50
    assert reputation_score("a" + twenty, None) == 45


def test_hyphen_penalty_boundary():
    assert reputation_score("a-b-c.net", None) == 50
    assert reputation_score("a-b-c-d.net", None) == 40


@pytest.mark.parametrize(
    "hostname",
    ["google.com", "www.github.com", "mail.google.com", "en.wikipedia.org"],
)
def test_allow_list_is_always_excellent(hostname: str):
    for age in (None, 0, 1, 30):
        estimate = estimate_reputation(hostname, age)
        assert estimate.score == 95
        assert estimate.label is ReputationLabel.EXCELLENT


def test_lookalike_is_not_allow_listed():
    estimate = estimate_reputation("google.com.login-check.tk", None)
    assert estimate.label is not ReputationLabel.EXCELLENT


# ── labels ────────────────────────────────────────────────────


@pytest.mark.parametrize(
    "score,label",
    [
        (95, ReputationLabel.EXCELLENT),
        (80, ReputationLabel.EXCELLENT),
        (79, ReputationLabel.GOOD),
        (60, ReputationLabel.GOOD),
        (59, ReputationLabel.FAIR),
        (40, ReputationLabel.FAIR),
        (39, ReputationLabel.POOR),
        (-15, ReputationLabel.POOR),
    ],
)
def test_label_thresholds(score: int, label: ReputationLabel):
    assert label_for_score(score) is label


def test_estimate_is_deterministic():
    first = estimate_reputation("some-shop.example.net", 3)
    second = estimate_reputation("some-shop.example.net", 3)
    assert first == second


def test_estimate_keeps_unknown_age():
    assert estimate_reputation("example.com").age_years is None


# ── reputation_finding ────────────────────────────────────────


@pytest.mark.parametrize(
    "hostname,age,severity,risk",
    [
        ("google.com", None, Severity.SECURE, 0),      # Excellent
        ("example.com", None, Severity.SECURE, 0),     # Good
        ("example.net", None, Severity.WARNING, 15),   # Fair
        ("example.tk", None, Severity.DANGER, 35),     # Poor
    ],
)
def test_reputation_finding(hostname: str, age, severity: Severity, risk: int):
    finding = reputation_finding(estimate_reputation(hostname, age))
    assert finding.category is Category.REPUTATION
    assert finding.severity is severity
    assert finding.risk == risk


# ── hostname helpers ──────────────────────────────────────────


def test_registered_domain():
    assert get_registered_domain("docs.google.com") == "google.com"
    assert get_registered_domain("shop.example.co.uk") == "example.co.uk"
    assert get_registered_domain("192.168.1.1") == "192.168.1.1"


def test_get_tld():
    assert get_tld("example.com") == "com"
    assert get_tld("192.168.1.1-test-1-2-3-4.tk") == "tk"
