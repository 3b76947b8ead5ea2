"""
URL structure heuristic.

Looks only at the hostname string. Each rule adds a fixed amount of risk
and the rules are independent, so a host can trip all of them at once:

    dotted-quad IPv4 literal   +20
    more than 3 hyphens        +10
    more than 3 digits         +10
"""

import re
from typing import NamedTuple

from siteguard.services.findings import Category, Finding, Severity


IPV4_LITERAL = re.compile(r"^\d{1,3}(?:\.\d{1,3}){3}$")

IP_LITERAL_RISK = 20
HYPHEN_RISK = 10
DIGIT_RISK = 10

MAX_HYPHENS = 3
MAX_DIGITS = 3

# Subtotals strictly above this are reported as danger rather than warning.
DANGER_ABOVE = 15


class UrlStructureResult(NamedTuple):
    risk: int
    reasons: list[str]


def evaluate_url_structure(hostname: str) -> UrlStructureResult:
    """Sum the structural rule contributions for a hostname."""
    risk = 0
    reasons: list[str] = []

    if IPV4_LITERAL.match(hostname):
        risk += IP_LITERAL_RISK
        reasons.append("uses an IP address instead of a domain name")

    hyphens = hostname.count("-")
    if hyphens > MAX_HYPHENS:
        risk += HYPHEN_RISK
        reasons.append(f"excessive hyphens ({hyphens})")

    digits = sum(1 for ch in hostname if ch.isdigit())
    if digits > MAX_DIGITS:
        risk += DIGIT_RISK
        reasons.append(f"excessive digits ({digits})")

    return UrlStructureResult(risk, reasons)


def url_structure_finding(hostname: str) -> Finding:
    result = evaluate_url_structure(hostname)
    if result.risk == 0:
        return Finding(Category.URL_STRUCTURE, Severity.SECURE, "URL structure appears normal")

    severity = Severity.DANGER if result.risk > DANGER_ABOVE else Severity.WARNING
    message = "Suspicious URL structure: " + ", ".join(result.reasons)
    return Finding(Category.URL_STRUCTURE, severity, message, risk=result.risk)
