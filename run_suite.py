#!/usr/bin/env python
"""Run a ShapeDiff suite from the command line."""

import argparse
import json
import logging
import sys
from pathlib import Path

from shapediff import LogLevel, SuiteRunner, load_suite


def configure_logging(level: str):
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Compare response shapes of a reference and a candidate API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_suite.py suite.yaml report.json
  python run_suite.py -s suite.yaml -r report.json
  python run_suite.py --suite suite.yaml --verbose
        """
    )

    parser.add_argument(
        "suite",
        nargs="?",
        help="Path to YAML/JSON suite file"
    )
    parser.add_argument(
        "report",
        nargs="?",
        help="Path to output JSON report file"
    )

    # Also support named arguments
    parser.add_argument("-s", "--suite", dest="suite_named", help="Path to suite file")
    parser.add_argument("-r", "--report", dest="report_named", help="Path to output report")
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress console output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every request")

    args = parser.parse_args(argv)

    suite_path = args.suite or args.suite_named
    report_path = args.report or args.report_named

    if not suite_path:
        parser.error("Suite path is required")

    if not Path(suite_path).exists():
        print(f"Error: Suite file not found: {suite_path}", file=sys.stderr)
        return 1

    try:
        config, cases = load_suite(suite_path)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    configure_logging(LogLevel.DEBUG.level if args.verbose else config.log_level.level)

    if not args.quiet:
        print(f"Suite: {suite_path}")
        print(f"Reference: {config.reference_url}")
        print(f"Candidate: {config.candidate_url}")
        print(f"Cases: {len(cases)}\n")

    runner = SuiteRunner(config, cases)
    try:
        report = runner.run(print_report=not args.quiet)
    finally:
        runner.close()

    if report_path:
        with open(report_path, 'w') as f:
            json.dump(report.to_dict(), indent=2, fp=f)
        if not args.quiet:
            print(f"\nReport saved to: {report_path}")

    return 0 if report.failed == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
