#!/usr/bin/env python3
"""
Validation script for the shortlink service.
Exercises a running deployment end to end: shorten, redirect, stats, errors.
"""

import sys
import time
import argparse
from typing import Optional
from datetime import datetime

import httpx


class ServiceValidator:
    """Validates shortlink service functionality against a live server."""

    def __init__(self, base_url: str = "http://localhost:9200", client: Optional[httpx.Client] = None):
        self.base_url = base_url.rstrip("/")
        self.client = client or httpx.Client(base_url=self.base_url, timeout=5)
        self.test_results = []

    def print_header(self, text: str):
        print(f"\n{'='*60}")
        print(f"  {text}")
        print(f"{'='*60}\n")

    def print_test(self, name: str, passed: bool, details: str = ""):
        """Print and record one check."""
        status = "PASS" if passed else "FAIL"
        self.test_results.append((name, passed))
        print(f"[{status}] {name}")
        if details:
            print(f"       {details}")

    def check_health(self) -> bool:
        response = self.client.get("/api/health")
        data = response.json() if response.status_code == 200 else {}
        healthy = data.get("status") == "healthy"
        self.print_test(
            "Health Check",
            healthy,
            f"DB: {data.get('database', 'N/A')}, Cache: {data.get('cache', 'N/A')}",
        )
        return healthy

    def check_shorten(self) -> Optional[str]:
        """Create a link and return its code."""
        target = f"https://example.com/validate/{int(time.time())}"
        response = self.client.post("/shorten", json={"url": target})

        if response.status_code != 201:
            self.print_test("Create Short URL", False, f"Status: {response.status_code}")
            return None

        data = response.json()
        ok = data.get("originalUrl") == target and bool(data.get("code"))
        self.print_test("Create Short URL", ok, f"Code: {data.get('code')}, URL: {data.get('shortUrl')}")
        return data.get("code") if ok else None

    def check_redirect_counts(self, code: str) -> bool:
        """Follow a link once and confirm the click was counted."""
        before = self.client.get(f"/stats/{code}").json().get("totalClicks", 0)
        response = self.client.get(f"/{code}", follow_redirects=False)
        after = self.client.get(f"/stats/{code}").json().get("totalClicks", 0)

        ok = response.status_code == 302 and after == before + 1
        self.print_test(
            "Redirect And Count",
            ok,
            f"Status: {response.status_code}, Location: {response.headers.get('location', 'N/A')}, "
            f"Clicks: {before} -> {after}",
        )
        return ok

    def check_duplicate_custom_code(self) -> bool:
        custom_code = f"v{int(time.time())}"
        first = self.client.post("/shorten", json={"url": "https://example.com/a", "customCode": custom_code})
        second = self.client.post("/shorten", json={"url": "https://example.com/b", "customCode": custom_code})

        ok = first.status_code == 201 and second.status_code == 409
        self.print_test(
            "Duplicate Code Rejection",
            ok,
            f"Status: {first.status_code} then {second.status_code} (expected 201 then 409)",
        )
        return ok

    def check_invalid_url(self) -> bool:
        response = self.client.post("/shorten", json={"url": "not-a-valid-url"})
        ok = response.status_code == 400
        self.print_test("Invalid URL Rejection", ok, f"Status: {response.status_code} (expected 400)")
        return ok

    def check_unknown_code(self) -> bool:
        response = self.client.get("/nonexistent999", follow_redirects=False)
        ok = response.status_code == 404
        self.print_test("Unknown Code", ok, f"Status: {response.status_code} (expected 404)")
        return ok

    def check_statistics(self) -> bool:
        response = self.client.get("/api/stats")
        data = response.json() if response.status_code == 200 else {}
        ok = "totalUrls" in data
        self.print_test("Statistics", ok, f"Total URLs: {data.get('totalUrls', 'N/A')}")
        return ok

    def run_all_tests(self) -> bool:
        """Run all checks; returns True if every one passed."""
        self.print_header("shortlink Service Validation")
        print(f"Testing service at: {self.base_url}")
        print(f"Timestamp: {datetime.now().isoformat()}\n")

        if not self.check_health():
            print("\nHealth check failed. Service may not be running.")
            print(f"   Make sure the service is accessible at {self.base_url}")
            return False

        code = self.check_shorten()
        if code:
            self.check_redirect_counts(code)

        self.check_duplicate_custom_code()
        self.check_invalid_url()
        self.check_unknown_code()
        self.check_statistics()

        self.print_summary()
        return all(passed for _, passed in self.test_results)

    def print_summary(self):
        total = len(self.test_results)
        passed = sum(1 for _, p in self.test_results if p)
        failed = total - passed

        self.print_header("Summary")
        print(f"Total:  {total}")
        print(f"Passed: {passed}")
        print(f"Failed: {failed}")

        if failed > 0:
            print("\nFailed checks:")
            for name, ok in self.test_results:
                if not ok:
                    print(f"   - {name}")
        print()


def main():
    parser = argparse.ArgumentParser(description="Validate a running shortlink service")
    parser.add_argument(
        "--url",
        default="http://localhost:9200",
        help="Base URL of the service (default: http://localhost:9200)"
    )
    args = parser.parse_args()

    validator = ServiceValidator(args.url)

    try:
        success = validator.run_all_tests()
        sys.exit(0 if success else 1)
    except KeyboardInterrupt:
        print("\n\nValidation interrupted by user")
        sys.exit(2)
    except httpx.HTTPError as e:
        print(f"\n\nValidation failed with error: {str(e)}")
        sys.exit(3)


if __name__ == "__main__":
    main()
