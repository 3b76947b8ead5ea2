"""Map a clamped 0-100 risk total onto the three verdict bands."""

from siteguard.services.findings import Verdict

# Upper bounds, inclusive: 0-30 safe, 31-70 warning, 71-100 danger.
SAFE_MAX = 30
WARNING_MAX = 70


def classify_verdict(total_risk: int) -> Verdict:
    if total_risk <= SAFE_MAX:
        return Verdict.SAFE
    if total_risk <= WARNING_MAX:
        return Verdict.WARNING
    return Verdict.DANGER


def clamp_risk(total: int, low: int = 0, high: int = 100) -> int:
    """Saturating clamp of a summed risk into [low, high]."""
    return max(low, min(high, total))
