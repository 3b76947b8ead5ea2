"""
Tests for the URL structure heuristic (siteguard/services/url_structure.py).

Pure synchronous tests: each rule in isolation, rule combinations, and the
severity of the single finding emitted per hostname.
"""

import pytest

from siteguard.services.findings import Category, Severity
from siteguard.services.url_structure import evaluate_url_structure, url_structure_finding


@pytest.mark.parametrize(
    "hostname,expected_risk",
    [
        ("example.com", 0),
        # IP literal (8 digits also trips the digit rule)
        ("192.168.1.1", 30),
        ("1.2.3.4", 30),
        # hyphens: 3 is fine, 4 is not
        ("a-b-c-d.com", 0),
        ("a-b-c-d-e.com", 10),
        # digits: 3 is fine, 4 is not
        ("shop123.com", 0),
        ("shop1234.com", 10),
        # hyphens and digits together
        ("192.168.1.1-test-1-2-3-4.tk", 20),
    ],
)
def test_url_structure_risk(hostname: str, expected_risk: int):
    assert evaluate_url_structure(hostname).risk == expected_risk


def test_ip_literal_needs_whole_hostname():
    # dotted quad followed by more labels is not an IP literal
    result = evaluate_url_structure("192.168.1.1.example.com")
    assert not any("IP address" in r for r in result.reasons)


def test_rules_are_additive():
    ip_only = evaluate_url_structure("1.1.1.1")
    assert ip_only.risk == 30
    assert len(ip_only.reasons) == 2


def test_normal_hostname_is_secure():
    finding = url_structure_finding("example.com")
    assert finding.category is Category.URL_STRUCTURE
    assert finding.severity is Severity.SECURE
    assert finding.risk == 0
    assert finding.message == "URL structure appears normal"


def test_single_rule_is_warning():
    finding = url_structure_finding("shop1234.com")
    assert finding.severity is Severity.WARNING
    assert finding.risk == 10
    assert "digits" in finding.message


def test_subtotal_above_fifteen_is_danger():
    finding = url_structure_finding("192.168.1.1-test-1-2-3-4.tk")
    assert finding.severity is Severity.DANGER
    assert finding.risk == 20


def test_ip_literal_finding_mentions_ip():
    finding = url_structure_finding("10.0.0.1")
    assert finding.severity is Severity.DANGER
    assert "IP address" in finding.message
