"""
Risk Aggregator - orchestrates one website analysis.

Pipeline:
1. Input validation & URL normalisation (fails fast, no lookups)
2. Hostname extraction
3. Parallel lookups: CT certificate records, domain age
4. Certificate, protocol, reputation and URL-structure checks
5. Sum of risk contributions, clamped to [0, 100]
6. Verdict: safe / warning / danger

Findings are always emitted in the same order (certificate, protocol,
reputation, URL structure), one per check. Nothing is cached between calls.
"""

import asyncio
import logging
import time
from urllib.parse import urlparse

from siteguard.core.errors import AnalysisError, InvalidURLError
from siteguard.services.certificate import (
    CertificateResolver,
    CertificateSignal,
    certificate_finding,
    format_expiry,
)
from siteguard.services.domain_age import DomainAgeEstimator, format_age
from siteguard.services.domain_reputation import (
    estimate_reputation,
    get_registered_domain,
    reputation_finding,
)
from siteguard.services.findings import Category, Finding, RiskReport, Severity
from siteguard.services.url_input import is_secure_scheme, normalize_url
from siteguard.services.url_structure import url_structure_finding
from siteguard.services.verdict import clamp_risk, classify_verdict

logger = logging.getLogger(__name__)

INSECURE_PROTOCOL_RISK = 30


def protocol_finding(secure: bool) -> Finding:
    if secure:
        return Finding(Category.PROTOCOL, Severity.SECURE, "Connection uses HTTPS encryption")
    return Finding(
        Category.PROTOCOL, Severity.DANGER,
        "Connection is not encrypted (HTTP)", risk=INSECURE_PROTOCOL_RISK,
    )


class RiskAnalyzer:
    """
    Combines certificate transparency data, protocol, domain reputation and
    URL structure into a single clamped risk score and verdict.
    """

    def __init__(
        self,
        certificate_resolver: CertificateResolver | None = None,
        age_estimator: DomainAgeEstimator | None = None,
    ):
        self.certificate_resolver = certificate_resolver or CertificateResolver()
        self.age_estimator = age_estimator or DomainAgeEstimator()

    # ──────────────────────────────────────────────────────────
    # Public API
    # ──────────────────────────────────────────────────────────

    async def analyze(self, url: str) -> RiskReport:
        """
        Analyse a URL and return its RiskReport.

        Raises InvalidURLError before any lookup if the input is not a URL,
        and AnalysisError if something unexpected fails afterwards.
        """
        start = time.perf_counter()

        # ── 1. Normalise ──
        url = normalize_url(url)

        # ── 2. Hostname ──
        try:
            parsed = urlparse(url)
            hostname = (parsed.hostname or "").rstrip(".")
        except ValueError as exc:
            raise AnalysisError(f"Could not extract hostname from {url!r}") from exc
        if not hostname:
            raise AnalysisError(f"Could not extract hostname from {url!r}")

        secure = is_secure_scheme(url)

        try:
            report = await self._run_checks(url, hostname, secure)
        except (InvalidURLError, AnalysisError):
            raise
        except Exception as exc:
            logger.exception("Analysis failed for %s", url)
            raise AnalysisError("Analysis failed") from exc

        elapsed_ms = int((time.perf_counter() - start) * 1000)
        report.details["analysis_time_ms"] = elapsed_ms
        logger.info(
            "Analysed %s → risk=%d status=%s (%dms)",
            hostname, report.total_risk, report.status.value, elapsed_ms,
        )
        return report

    # ──────────────────────────────────────────────────────────
    # Checks
    # ──────────────────────────────────────────────────────────

    async def _run_checks(self, url: str, hostname: str, secure: bool) -> RiskReport:
        # ── 3. Lookups (parallel, independent) ──
        results = await asyncio.gather(
            self.certificate_resolver.resolve(hostname, secure),
            self.age_estimator.estimate(hostname),
            return_exceptions=True,
        )
        cert_signal = self._certificate_or_fallback(results[0], hostname, secure)
        age_years = results[1] if isinstance(results[1], int) else None
        if isinstance(results[1], BaseException):
            logger.warning("Domain age lookup failed for %s: %s", hostname, results[1])

        # ── 4. Heuristics ──
        reputation = estimate_reputation(hostname, age_years)
        findings = [
            certificate_finding(cert_signal),
            protocol_finding(secure),
            reputation_finding(reputation),
            url_structure_finding(hostname),
        ]

        # ── 5. Score ──
        total_risk = clamp_risk(sum(f.risk for f in findings))

        # ── 6. Verdict ──
        status = classify_verdict(total_risk)

        logger.debug(
            "Risk breakdown %s: %s",
            hostname, ", ".join(f"{f.category.value}={f.risk}" for f in findings),
        )

        return RiskReport(
            url=url,
            total_risk=total_risk,
            status=status,
            findings=findings,
            details={
                "hostname": hostname,
                "registered_domain": get_registered_domain(hostname),
                "domain_age": format_age(age_years),
                "ssl_expiry": format_expiry(cert_signal),
                "ssl_issuer": cert_signal.issuer if cert_signal else None,
                "ssl_days_until_expiry": cert_signal.days_until_expiry if cert_signal else None,
                "reputation": reputation.label.value,
                "reputation_score": reputation.score,
            },
        )

    @staticmethod
    def _certificate_or_fallback(result, hostname: str, secure: bool) -> CertificateSignal | None:
        """The resolver absorbs its own failures; this covers anything that slips through."""
        if isinstance(result, CertificateSignal) or result is None:
            return result
        logger.warning("Certificate resolution failed for %s: %s", hostname, result)
        return CertificateSignal(is_valid=True) if secure else None


# Singleton
analyzer = RiskAnalyzer()
