"""
Caller-visible failures of the risk engine.

Only two outcomes ever leave the engine as exceptions:

- InvalidURLError - the input is not a usable URL; nothing was analysed.
- AnalysisError   - something unexpected broke after the input was accepted.

Lookup failures (CT logs, domain age) are absorbed inside the services
and show up as "unknown" findings instead.
"""


class SiteGuardError(Exception):
    """Base class for all engine errors."""


class InvalidURLError(SiteGuardError, ValueError):
    """The supplied string is not a parseable URL, even after normalisation."""


class AnalysisError(SiteGuardError):
    """Unexpected internal failure during an otherwise valid analysis."""
