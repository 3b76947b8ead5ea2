"""
Domain age estimation.

Live WHOIS lookups are not available to the engine, so age comes from a
small static table of registration years for well-known registered domains,
measured against today's date. Free-registration TLDs default to zero years;
anything else is unknown (None), which the reputation score treats as
"no adjustment" rather than as young.
"""

import logging
from datetime import date
from typing import Optional

from siteguard.services.domain_reputation import get_registered_domain, get_tld

logger = logging.getLogger(__name__)


# Year each registered domain was first registered.
KNOWN_REGISTRATION_YEARS: dict[str, int] = {
    "google.com": 1997,
    "youtube.com": 2005,
    "facebook.com": 1997,
    "wikipedia.org": 2001,
    "amazon.com": 1994,
    "microsoft.com": 1991,
    "apple.com": 1987,
    "github.com": 2007,
    "linkedin.com": 2002,
    "stackoverflow.com": 2003,
    "mozilla.org": 1998,
    "cloudflare.com": 2009,
    "reddit.com": 2005,
    "twitter.com": 2000,
    "netflix.com": 1997,
    "paypal.com": 1999,
    "bbc.co.uk": 1996,
    "nytimes.com": 1994,
    "mit.edu": 1985,
    "python.org": 1995,
}

# TLDs whose domains are handed out for free and churn quickly.
FREE_TLD_DEFAULT_AGE = 0
FREE_TLDS = frozenset({"tk", "ml", "ga", "cf", "gq"})


class DomainAgeEstimator:
    """
    Static-table age lookup. Async so it can be gathered with the CT lookup.

    `today` pins the reference date; by default every lookup uses the
    current date, so ages keep moving with the calendar.
    """

    def __init__(
        self,
        table: Optional[dict[str, int]] = None,
        today: Optional[date] = None,
    ):
        self.table = dict(KNOWN_REGISTRATION_YEARS if table is None else table)
        self.today = today

    def lookup(self, hostname: str) -> Optional[int]:
        year = self.table.get(get_registered_domain(hostname), self.table.get(hostname))
        if year is not None:
            current = (self.today or date.today()).year
            return max(0, current - year)
        if get_tld(hostname) in FREE_TLDS:
            return FREE_TLD_DEFAULT_AGE
        return None

    async def estimate(self, hostname: str) -> Optional[int]:
        age = self.lookup(hostname)
        logger.debug("Domain age %s → %s", hostname, age if age is not None else "unknown")
        return age


def format_age(age_years: Optional[int]) -> str:
    if age_years is None:
        return "Unknown"
    if age_years == 1:
        return "1 year"
    if age_years == 0:
        return "Less than 1 year"
    return f"{age_years} years"
