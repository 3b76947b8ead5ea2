"""
Analyse one or more URLs from the command line against the live CT log.

Run with: python -m scripts.analyze_url example.com http://192.168.1.1-test-1-2-3-4.tk
"""

import asyncio
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from siteguard.core.errors import AnalysisError, InvalidURLError
from siteguard.services.analyzer import analyzer


MARKS = {"secure": "[ OK ]", "warning": "[WARN]", "danger": "[FAIL]"}


def print_report(report) -> None:
    data = report.to_dict()
    print("=" * 70)
    print(f"{data['url']}")
    print(f"Risk score: {data['risk_score']}/100   Status: {data['status'].upper()}")
    print("=" * 70)
    for finding in data["findings"]:
        mark = MARKS[finding["severity"]]
        print(f"{mark} {finding['category']:<18} +{finding['risk']:<3} {finding['message']}")

    details = data["details"]
    print()
    print(f"    Domain age : {details['domain_age']}")
    print(f"    SSL expiry : {details['ssl_expiry']}")
    print(f"    SSL issuer : {details['ssl_issuer'] or 'Unknown'}")
    print(f"    Reputation : {details['reputation']} ({details['reputation_score']})")

    summary = data["summary"]
    print()
    print(
        f"    {summary['passed']} passed, {summary['warnings']} warnings, "
        f"{summary['critical']} critical"
    )
    print(f"    {data['recommendation']['title']}: {data['recommendation']['text']}")
    print()


async def main(urls: list[str]) -> int:
    failures = 0
    for url in urls:
        try:
            report = await analyzer.analyze(url)
        except InvalidURLError as exc:
            print(f"[INVALID] {url!r}: {exc}\n")
            failures += 1
            continue
        except AnalysisError as exc:
            print(f"[ERROR] {url!r}: {exc}\n")
            failures += 1
            continue
        print_report(report)
    return 1 if failures else 0


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__.strip())
        sys.exit(2)
    sys.exit(asyncio.run(main(sys.argv[1:])))
