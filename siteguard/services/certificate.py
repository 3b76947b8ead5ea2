"""
Certificate Signal Resolver

Uses Certificate Transparency logs (crt.sh) as a stand-in for the live
certificate of a host:

1. Query CT for the exact hostname.
2. Keep entries whose SANs match the hostname exactly or via a single-label
   wildcard; lookalike names are ignored.
3. Nothing matched → query the registered domain, where wildcard
   certificates are usually logged, and filter again.
4. Drop entries with an unparseable not_after, pick the latest expiry.

When no usable record exists, a URL with a secure scheme still gets a
"valid, expiry unknown" signal. Plain-text URLs get None (unknown).
Lookup failures never escape this module.
"""

import asyncio
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Optional, Protocol

import aiohttp

from siteguard.core.config import settings
from siteguard.services.domain_reputation import get_registered_domain
from siteguard.services.findings import Category, Finding, Severity

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400

# Certificates expiring within this many days are reported as a warning.
EXPIRY_WARNING_DAYS = 30

EXPIRING_RISK = 20
INVALID_RISK = 40
UNKNOWN_RISK = 15


# ═══════════════════════════════════════════════════════════════
# Result Data Classes
# ═══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class CertificateRecord:
    issuer: str | None
    not_after: datetime
    names: tuple[str, ...] = ()


@dataclass(frozen=True)
class CertificateSignal:
    is_valid: bool
    expiry: datetime | None = None
    days_until_expiry: int | None = None
    issuer: str | None = None


class CertificateLookup(Protocol):
    async def fetch(self, query: str) -> list[dict]: ...


# ═══════════════════════════════════════════════════════════════
# CT log client
# ═══════════════════════════════════════════════════════════════

class CTLogClient:
    """Fetches raw certificate entries from crt.sh's JSON output."""

    def __init__(self, base_url: str = "https://crt.sh/", timeout: float = 10.0):
        self.base_url = base_url
        self.timeout = timeout

    async def fetch(self, query: str) -> list[dict]:
        """
        Return the decoded JSON entries for a crt.sh identity query.

        Raises aiohttp.ClientError / asyncio.TimeoutError on transport
        problems and ValueError when the body is not a JSON list.
        """
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        params = {"q": query, "output": "json"}
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(self.base_url, params=params) as resp:
                resp.raise_for_status()
                # crt.sh answers with text/html content-type on some mirrors
                data = await resp.json(content_type=None)

        if data is None:
            return []
        if not isinstance(data, list):
            raise ValueError(f"unexpected CT response type: {type(data).__name__}")
        return data


# ═══════════════════════════════════════════════════════════════
# Parsing helpers
# ═══════════════════════════════════════════════════════════════

def parse_timestamp(value) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp as UTC; None if it does not parse."""
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_issuer(issuer_name) -> Optional[str]:
    """'C=US, O=Let's Encrypt, CN=R3' → "Let's Encrypt" (falls back to CN, then raw)."""
    if not isinstance(issuer_name, str) or not issuer_name.strip():
        return None
    parts = {}
    for chunk in issuer_name.split(","):
        key, sep, value = chunk.strip().partition("=")
        if sep and key.strip() not in parts:
            parts[key.strip()] = value.strip().strip('"')
    return parts.get("O") or parts.get("CN") or issuer_name.strip()


def entry_names(entry: dict) -> tuple[str, ...]:
    names = []
    for raw in (entry.get("name_value") or "", entry.get("common_name") or ""):
        if not isinstance(raw, str):
            continue
        for name in raw.split("\n"):
            name = name.strip().lower().rstrip(".")
            if name and name not in names:
                names.append(name)
    return tuple(names)


def name_matches(name: str, hostname: str) -> bool:
    """Exact match, or '*.example.com' covering exactly one extra label."""
    if name == hostname:
        return True
    if name.startswith("*."):
        suffix = name[1:]
        if hostname.endswith(suffix):
            label = hostname[: -len(suffix)]
            return bool(label) and "." not in label
    return False


def parse_records(entries: Iterable[dict]) -> list[CertificateRecord]:
    """Turn raw CT entries into records, discarding malformed expiry dates."""
    records = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        not_after = parse_timestamp(entry.get("not_after"))
        if not_after is None:
            continue
        records.append(CertificateRecord(
            issuer=parse_issuer(entry.get("issuer_name")),
            not_after=not_after,
            names=entry_names(entry),
        ))
    return records


def matching_records(records: Iterable[CertificateRecord], hostname: str) -> list[CertificateRecord]:
    return [r for r in records if any(name_matches(n, hostname) for n in r.names)]


def select_latest(records: Iterable[CertificateRecord]) -> Optional[CertificateRecord]:
    """The record with the latest not_after wins, whatever the input order."""
    return max(records, key=lambda r: r.not_after, default=None)


def days_until(expiry: datetime, now: datetime) -> int:
    return math.ceil((expiry - now).total_seconds() / SECONDS_PER_DAY)


def signal_from_record(record: CertificateRecord, now: datetime) -> CertificateSignal:
    days = days_until(record.not_after, now)
    return CertificateSignal(
        is_valid=days > 0,
        expiry=record.not_after,
        days_until_expiry=days,
        issuer=record.issuer,
    )


# ═══════════════════════════════════════════════════════════════
# Resolver
# ═══════════════════════════════════════════════════════════════

class CertificateResolver:
    """Resolves a hostname to a CertificateSignal (or None for unknown)."""

    def __init__(self, lookup: CertificateLookup | None = None):
        self.lookup = lookup or CTLogClient(
            base_url=settings.CT_LOG_URL,
            timeout=settings.CT_LOOKUP_TIMEOUT,
        )

    async def resolve(
        self,
        hostname: str,
        secure_scheme: bool,
        now: datetime | None = None,
    ) -> Optional[CertificateSignal]:
        now = now or datetime.now(timezone.utc)

        record = select_latest(await self._matching(hostname))
        if record is not None:
            signal = signal_from_record(record, now)
            logger.info(
                "CT %s: expiry=%s days=%d issuer=%s",
                hostname, record.not_after.date(), signal.days_until_expiry, signal.issuer,
            )
            return signal

        if secure_scheme:
            logger.info("CT %s: no usable record, assuming valid certificate (https)", hostname)
            return CertificateSignal(is_valid=True)

        logger.info("CT %s: no usable record", hostname)
        return None

    async def _matching(self, hostname: str) -> list[CertificateRecord]:
        records = matching_records(await self._fetch(hostname), hostname)
        if records:
            return records

        registered = get_registered_domain(hostname)
        if registered and registered != hostname:
            records = matching_records(await self._fetch(registered), hostname)
        return records

    async def _fetch(self, query: str) -> list[CertificateRecord]:
        try:
            return parse_records(await self.lookup.fetch(query))
        except asyncio.TimeoutError:
            logger.warning("CT lookup timed out for %s", query)
        except aiohttp.ClientError as exc:
            logger.warning("CT lookup failed for %s: %s", query, exc)
        except ValueError as exc:
            logger.warning("CT lookup returned malformed data for %s: %s", query, exc)
        except Exception as exc:
            logger.warning("CT lookup error for %s: %s", query, str(exc)[:120])
        return []


# ═══════════════════════════════════════════════════════════════
# Classification
# ═══════════════════════════════════════════════════════════════

def certificate_finding(signal: Optional[CertificateSignal]) -> Finding:
    if signal is None:
        return Finding(
            Category.CERTIFICATE, Severity.WARNING,
            "Unable to verify SSL certificate", risk=UNKNOWN_RISK,
        )

    days = signal.days_until_expiry
    if not signal.is_valid or (days is not None and days <= 0):
        return Finding(
            Category.CERTIFICATE, Severity.DANGER,
            "SSL certificate is invalid or expired", risk=INVALID_RISK,
        )
    if days is None:
        return Finding(Category.CERTIFICATE, Severity.SECURE, "Valid SSL certificate (HTTPS)")
    if days <= EXPIRY_WARNING_DAYS:
        return Finding(
            Category.CERTIFICATE, Severity.WARNING,
            f"SSL certificate expires in {days} days", risk=EXPIRING_RISK,
        )
    return Finding(
        Category.CERTIFICATE, Severity.SECURE,
        f"Valid SSL certificate, expires in {days} days",
    )


def format_expiry(signal: Optional[CertificateSignal]) -> str:
    if signal is None:
        return "Unknown"
    if signal.expiry is None:
        return "Valid (expiry unknown)" if signal.is_valid else "Invalid"
    when = signal.expiry.strftime("%b %d, %Y")
    if signal.is_valid:
        return f"Valid until {when}"
    return f"Expired on {when}"
