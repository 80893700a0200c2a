#!/usr/bin/env python
"""
Simple Test Runner for DazzleUtils
==================================

Runs all tests except the slow, timing based ones.

Usage:
    python run_tests.py           # Run all non-slow tests
    python run_tests.py --slow    # Show info about slow tests
    python run_tests.py --all     # Run everything including slow tests
"""

import subprocess
import sys
import argparse
from pathlib import Path


def run_tests(include_slow=False):
    """Run the test suite."""
    cmd = [
        sys.executable, "-m", "pytest",
        "tests",
        "--tb=short",               # Short traceback format
        "--durations=10",           # Show 10 slowest tests
        "-v"                        # Verbose output
    ]

    if not include_slow:
        cmd.extend(["-m", "not slow"])
        print("Running all tests EXCEPT slow tests...")
        print("=" * 60)
    else:
        print("Running ALL tests including slow ones...")
        print("=" * 60)

    result = subprocess.run(cmd, cwd=Path(__file__).parent)
    return result.returncode


def show_slow_tests():
    """Show information about slow tests."""
    print("=" * 60)
    print("SLOW TESTS")
    print("=" * 60)
    print("\nThe following tests are marked as @pytest.mark.slow:")
    print("-" * 60)

    slow_tests = [
        ("test_task_queue.py::TestInterval (4 tests)",
         "Checks spacing between job starts with real sleeps",
         "~1s", "Waits on asyncio timers for 50-100ms intervals"),
    ]

    for test_name, description, duration, reason in slow_tests:
        print(f"\n* {test_name}")
        print(f"   Description: {description}")
        print(f"   Duration: {duration}")
        print(f"   Why slow: {reason}")

    print("""
Run them with:
   python -m pytest -m slow -v

They can be flaky on heavily loaded CI machines because they measure
wall clock gaps between job starts.
""")


def main():
    parser = argparse.ArgumentParser(description="Test runner for DazzleUtils")
    parser.add_argument("--slow", action="store_true", help="Show info about slow tests")
    parser.add_argument("--all", action="store_true", help="Run all tests including slow ones")

    args = parser.parse_args()

    if args.slow:
        show_slow_tests()
        return 0

    return run_tests(include_slow=args.all)


if __name__ == "__main__":
    sys.exit(main())
