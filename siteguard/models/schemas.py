from pydantic import BaseModel, Field, field_validator

from siteguard.services.findings import Category, Severity, Verdict
from siteguard.services.url_input import normalize_url


class AnalyzeRequest(BaseModel):
    # Length is capped by settings.MAX_URL_LENGTH inside normalize_url
    url: str = Field(..., min_length=1, description="URL to analyze")

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        # InvalidURLError is a ValueError, so pydantic reports it as a 422
        return normalize_url(v)


class FindingOut(BaseModel):
    category: Category
    severity: Severity
    message: str
    risk: int = Field(0, description="Risk points this finding adds to the total")


class SummaryOut(BaseModel):
    passed: int = Field(description="Checks that came back secure")
    warnings: int
    critical: int = Field(description="Checks that came back as danger")


class RecommendationOut(BaseModel):
    title: str
    text: str


class ReportDetails(BaseModel):
    hostname: str
    registered_domain: str | None = None
    domain_age: str
    ssl_expiry: str
    ssl_issuer: str | None = None
    ssl_days_until_expiry: int | None = None
    reputation: str
    reputation_score: int
    analysis_time_ms: int | None = None


class AnalyzeResult(BaseModel):
    url: str
    risk_score: int = Field(ge=0, le=100, description="Overall risk score 0-100")
    status: Verdict
    findings: list[FindingOut]
    summary: SummaryOut
    recommendation: RecommendationOut
    details: ReportDetails
