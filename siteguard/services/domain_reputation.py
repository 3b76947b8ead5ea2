"""
Domain reputation estimator.

Scores a hostname from its shape and an age estimate, then buckets the
score into a four-level label:

1. Domain age      - +20 (≥ 5y), +10 (2–5y), −10 (< 2y), 0 (unknown)
2. TLD             - +10 for com/org/edu/gov, −20 for free-registration TLDs
3. Length          - −5 for hostnames longer than 20 characters
4. Hyphenation     - −10 for more than 2 hyphens
5. Allow-list      - globally recognised domains are pinned to 95

The score always starts at 50. No I/O happens here; the same
(hostname, age) pair always yields the same estimate.

The tldextract-backed hostname helpers below (registered domain, TLD) are
shared with the certificate resolver and the age table.
"""

import logging
from enum import Enum
from typing import NamedTuple, Optional

import tldextract

from siteguard.services.findings import Category, Finding, Severity

logger = logging.getLogger(__name__)

# Offline extractor: never fetches the public suffix list at runtime,
# uses the snapshot bundled with tldextract.
_extract = tldextract.TLDExtract(suffix_list_urls=())


# ═══════════════════════════════════════════════════════════════
# Types
# ═══════════════════════════════════════════════════════════════

class ReputationLabel(Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"


class ReputationEstimate(NamedTuple):
    label: ReputationLabel
    age_years: Optional[int]
    score: int


# ═══════════════════════════════════════════════════════════════
# Reference sets
# ═══════════════════════════════════════════════════════════════

BASE_SCORE = 50
ALLOW_LIST_SCORE = 95

TRUSTED_TLDS = frozenset({"com", "org", "edu", "gov"})

# Free-registration TLDs historically abused for throwaway domains.
SUSPICIOUS_TLDS = frozenset({"tk", "ml", "ga", "cf"})

# Globally recognised domains; matched against the hostname, the hostname
# without "www." and the registered domain.
ALLOW_LIST = frozenset({
    "google.com", "youtube.com", "facebook.com", "wikipedia.org",
    "amazon.com", "microsoft.com", "apple.com", "github.com",
    "linkedin.com", "stackoverflow.com", "mozilla.org", "cloudflare.com",
})

LABEL_THRESHOLDS = (
    (80, ReputationLabel.EXCELLENT),
    (60, ReputationLabel.GOOD),
    (40, ReputationLabel.FAIR),
)

# (severity, risk) handed to the aggregator per label
LABEL_RISK = {
    ReputationLabel.EXCELLENT: (Severity.SECURE, 0),
    ReputationLabel.GOOD: (Severity.SECURE, 0),
    ReputationLabel.FAIR: (Severity.WARNING, 15),
    ReputationLabel.POOR: (Severity.DANGER, 35),
}


# ═══════════════════════════════════════════════════════════════
# Domain Extraction
# ═══════════════════════════════════════════════════════════════

def extract_domain_parts(hostname: str) -> tuple[str, str, str]:
    """
    Split a hostname into (subdomain, domain, suffix).
    Example: "docs.google.com" → ("docs", "google", "com")
    """
    if not hostname:
        return "", "", ""
    ext = _extract(hostname)
    return ext.subdomain, ext.domain, ext.suffix


def get_registered_domain(hostname: str) -> str:
    """Get registered domain: 'docs.google.com' → 'google.com'."""
    _, domain, suffix = extract_domain_parts(hostname)
    if domain and suffix:
        return f"{domain}.{suffix}"
    return hostname


def get_tld(hostname: str) -> str:
    """Last label of the public suffix ('example.co.uk' → 'uk')."""
    _, _, suffix = extract_domain_parts(hostname)
    if suffix:
        return suffix.rsplit(".", 1)[-1]
    return hostname.rsplit(".", 1)[-1] if "." in hostname else ""


def is_allow_listed(hostname: str) -> bool:
    candidates = {hostname, get_registered_domain(hostname)}
    if hostname.startswith("www."):
        candidates.add(hostname[4:])
    return not ALLOW_LIST.isdisjoint(candidates)


# ═══════════════════════════════════════════════════════════════
# Scoring
# ═══════════════════════════════════════════════════════════════

def _age_adjustment(age_years: Optional[int]) -> int:
    if age_years is None:
        return 0
    if age_years >= 5:
        return 20
    if age_years >= 2:
        return 10
    return -10


def _tld_adjustment(tld: str) -> int:
    if tld in TRUSTED_TLDS:
        return 10
    if tld in SUSPICIOUS_TLDS:
        return -20
    return 0


def reputation_score(hostname: str, age_years: Optional[int]) -> int:
    """Raw 0-100-ish reputation points before labelling."""
    if is_allow_listed(hostname):
        return ALLOW_LIST_SCORE

    score = BASE_SCORE
    score += _age_adjustment(age_years)
    score += _tld_adjustment(get_tld(hostname))
    if len(hostname) > 20:
        score -= 5
    if hostname.count("-") > 2:
        score -= 10
    return score


def label_for_score(score: int) -> ReputationLabel:
    for threshold, label in LABEL_THRESHOLDS:
        if score >= threshold:
            return label
    return ReputationLabel.POOR


def estimate_reputation(hostname: str, age_years: Optional[int] = None) -> ReputationEstimate:
    """
    Estimate a hostname's reputation.

    Parameters
    ----------
    hostname : str
        Normalised hostname (e.g. "docs.google.com").
    age_years : int | None
        Domain age from the age collaborator; None means unknown and
        leaves the score untouched.
    """
    score = reputation_score(hostname, age_years)
    label = label_for_score(score)
    logger.debug("Reputation %s: age=%s score=%d → %s", hostname, age_years, score, label.value)
    return ReputationEstimate(label, age_years, score)


def reputation_finding(estimate: ReputationEstimate) -> Finding:
    severity, risk = LABEL_RISK[estimate.label]
    if severity is Severity.SECURE:
        message = f"{estimate.label.value} domain reputation"
    elif severity is Severity.WARNING:
        message = f"{estimate.label.value} domain reputation: limited trust signals"
    else:
        message = f"{estimate.label.value} domain reputation: strong negative signals"
    return Finding(Category.REPUTATION, severity, message, risk=risk)
