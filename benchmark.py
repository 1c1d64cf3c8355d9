#!/usr/bin/env python3
"""
Performance Benchmark for mailcheck

Measures throughput of the format-only pipeline. No network access.
"""

import time
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from mailcheck import EmailValidator, FormatRule, LengthRule

# Test emails
VALID_EMAILS = [
    "user@example.com",
    "john.doe@company.org",
    "alice123@gmail.com",
    "bob_smith@yahoo.com",
    "user@sub.domain.co.uk",
]

INVALID_EMAILS = [
    "plainaddress",
    "@missing-local.com",
    "user@",
    "a@b",
    "bad char@x.com",
]

ALL_EMAILS = VALID_EMAILS + INVALID_EMAILS


def benchmark(validator, emails, iterations=10000):
    """Run benchmark and return statistics."""
    start_time = time.perf_counter()

    for _ in range(iterations):
        for email in emails:
            validator.validate(email)

    total_time = time.perf_counter() - start_time
    total_requests = iterations * len(emails)

    return {
        'total_time': total_time,
        'total_requests': total_requests,
        'rps': total_requests / total_time,
        'avg_time_ms': (total_time / total_requests) * 1000
    }


def report(title, result):
    print(f"\n{title}")
    print(f"  Total time: {result['total_time']:.3f}s")
    print(f"  Total requests: {result['total_requests']}")
    print(f"  RPS: {result['rps']:,.0f} requests/second")
    print(f"  Avg time: {result['avg_time_ms']:.4f}ms")


def main():
    print("=" * 60)
    print("mailcheck Performance Benchmark")
    print("=" * 60)

    validator = EmailValidator([FormatRule()])
    strict = EmailValidator([FormatRule(), LengthRule()])

    # Warmup
    print("\n[Warmup] Running 1000 iterations...")
    benchmark(validator, ALL_EMAILS, iterations=1000)

    report("[Benchmark 1] Valid emails only (10,000 iterations)",
           benchmark(validator, VALID_EMAILS))
    report("[Benchmark 2] Invalid emails only (10,000 iterations)",
           benchmark(validator, INVALID_EMAILS))
    report("[Benchmark 3] Mixed emails (10,000 iterations)",
           benchmark(validator, ALL_EMAILS))
    report("[Benchmark 4] Mixed emails, format + length rules (10,000 iterations)",
           benchmark(strict, ALL_EMAILS))

    print("\n" + "=" * 60)


if __name__ == "__main__":
    main()
