"""
Shared result types for the risk engine.

Finding severity and report verdict are deliberately two separate closed
enums: a finding is secure / warning / danger, a whole report is
safe / warning / danger. Nothing else is accepted.
"""

from dataclasses import dataclass, field
from enum import Enum


class Category(str, Enum):
    """Which check produced a finding (also the canonical report order)."""
    CERTIFICATE = "CertificateStatus"
    PROTOCOL = "ProtocolStatus"
    REPUTATION = "ReputationStatus"
    URL_STRUCTURE = "UrlStructure"


class Severity(str, Enum):
    SECURE = "secure"
    WARNING = "warning"
    DANGER = "danger"


class Verdict(str, Enum):
    SAFE = "safe"
    WARNING = "warning"
    DANGER = "danger"


@dataclass(frozen=True)
class Finding:
    category: Category
    severity: Severity
    message: str
    risk: int = 0

    def to_dict(self) -> dict:
        return {
            "category": self.category.value,
            "severity": self.severity.value,
            "message": self.message,
            "risk": self.risk,
        }


RECOMMENDATIONS = {
    Verdict.SAFE: (
        "Website appears to be secure",
        "This website passed all security checks. Continue browsing with confidence.",
    ),
    Verdict.WARNING: (
        "Exercise caution",
        "Some security concerns were identified. Proceed with caution and "
        "avoid entering sensitive information.",
    ),
    Verdict.DANGER: (
        "High risk website",
        "Significant security threats detected. We strongly recommend avoiding this website.",
    ),
}


@dataclass
class RiskReport:
    """Result of one analysis. Built fresh per call, never cached."""
    url: str
    total_risk: int
    status: Verdict
    findings: list[Finding] = field(default_factory=list)
    details: dict = field(default_factory=dict)

    @property
    def passed(self) -> int:
        return sum(1 for f in self.findings if f.severity is Severity.SECURE)

    @property
    def warnings(self) -> int:
        return sum(1 for f in self.findings if f.severity is Severity.WARNING)

    @property
    def critical(self) -> int:
        return sum(1 for f in self.findings if f.severity is Severity.DANGER)

    @property
    def recommendation(self) -> dict:
        title, text = RECOMMENDATIONS[self.status]
        return {"title": title, "text": text}

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "risk_score": self.total_risk,
            "status": self.status.value,
            "findings": [f.to_dict() for f in self.findings],
            "summary": {
                "passed": self.passed,
                "warnings": self.warnings,
                "critical": self.critical,
            },
            "recommendation": self.recommendation,
            "details": dict(self.details),
        }
