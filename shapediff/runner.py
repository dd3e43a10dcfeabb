"""Suite runner: executes a list of request cases against both backends."""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from .config import TesterConfig, load_yaml
from .endpoints import Endpoint, format_endpoint
from .exceptions import ErrorKind, ShapeDiffError
from .models import HttpMethod, JsonKind
from .tester import Tester

logger = logging.getLogger(__name__)


@dataclass
class SuiteCase:
    """One request to send to both backends."""

    endpoint: str
    method: HttpMethod = HttpMethod.GET
    body: Any = None
    args: list = field(default_factory=list)
    name: str = ""

    def __post_init__(self):
        self.method = HttpMethod.parse(self.method)
        try:
            JsonKind.validate(self.body, "body")
        except TypeError as e:
            raise ValueError(f"Case body is not JSON: {e}") from None
        if not self.name:
            self.name = f"{self.method.value} {self.endpoint}"
        # Fails early on a wrong number of placeholder args
        format_endpoint(self.endpoint, *self.args)

    @classmethod
    def from_dict(cls, data: dict) -> SuiteCase:
        """
        Build a case from a suite file entry.

        'endpoint' is either a path template ('/admin/quiz/{}') or the name
        of a catalog entry ('ADMIN_QUIZ_ID').
        """
        if not isinstance(data, dict):
            raise ValueError(f"Case must be a mapping, got {type(data).__name__}")
        if not data.get("endpoint"):
            raise ValueError(f"Case is missing 'endpoint': {data}")

        unknown = sorted(set(data) - {"endpoint", "method", "body", "args", "name"})
        if unknown:
            raise ValueError(f"Unknown case keys: {', '.join(unknown)}")

        endpoint = str(data["endpoint"])
        if not endpoint.startswith("/"):
            endpoint = Endpoint.lookup(endpoint).value

        args = data.get("args", [])
        if args is None:
            args = []
        elif not isinstance(args, list):
            args = [args]

        return cls(
            endpoint=endpoint,
            method=data.get("method", HttpMethod.GET),
            body=data.get("body"),
            args=args,
            name=data.get("name", ""),
        )

    def resolved_endpoint(self) -> str:
        return format_endpoint(self.endpoint, *self.args)


@dataclass
class CaseResult:
    """Outcome of a single case."""
    name: str
    endpoint: str
    method: str
    passed: bool
    duration_ms: int = 0
    error: Optional[dict] = None

    @property
    def error_kind(self) -> Optional[str]:
        return self.error["code"] if self.error else None

    def to_dict(self) -> dict:
        result = {
            "name": self.name,
            "endpoint": self.endpoint,
            "method": self.method,
            "passed": self.passed,
            "duration_ms": self.duration_ms,
        }
        if self.error:
            result["error"] = self.error
        return result


@dataclass
class SuiteReport:
    """Report across all cases of a suite."""
    total: int = 0
    passed: int = 0
    failed: int = 0
    results: list[CaseResult] = field(default_factory=list)
    breakdown: dict[str, list[str]] = field(default_factory=dict)
    timestamp: str = ""

    def __post_init__(self):
        if not self.timestamp:
            self.timestamp = datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')
        if not self.breakdown:
            self.breakdown = {kind.value: [] for kind in ErrorKind}

    def add(self, result: CaseResult):
        self.results.append(result)
        self.total += 1
        if result.passed:
            self.passed += 1
        else:
            self.failed += 1
            self.breakdown.setdefault(result.error_kind, []).append(result.name)

    def to_dict(self) -> dict:
        pass_rate = f"{(self.passed / self.total * 100):.1f}%" if self.total > 0 else "0.0%"
        return {
            "timestamp": self.timestamp,
            "summary": {
                "total_cases": self.total,
                "passed": self.passed,
                "failed": self.failed,
                "pass_rate": pass_rate
            },
            "breakdown": self.breakdown,
            "results": [r.to_dict() for r in self.results]
        }

    def print_summary(self):
        pass_rate = f"{(self.passed / self.total * 100):.1f}%" if self.total > 0 else "0.0%"
        print(f"\nTest Results: {self.passed}/{self.total} passed ({pass_rate})")
        if self.failed > 0:
            print(f"  Failed: {self.failed}")

        for kind, names in self.breakdown.items():
            if names:
                print(f"  {kind}: {len(names)} cases")

        for result in self.results:
            if not result.passed:
                print(f"\n  {result.name}:")
                print(f"    {result.error['message']}")


class SuiteRunner:
    """
    Runs request cases through a Tester and collects a SuiteReport.

    Usage:
        config, cases = load_suite("suite.yaml")
        report = SuiteRunner(config, cases).run()
    """

    def __init__(
        self,
        config: TesterConfig,
        cases: list[SuiteCase],
        tester: Optional[Tester] = None
    ):
        self.config = config
        self.cases = cases
        self.tester = tester or Tester.from_config(config)

    def run_case(self, case: SuiteCase) -> CaseResult:
        """Run one case; comparison failures are captured in the result."""
        start_time = time.time()
        endpoint = case.resolved_endpoint()
        error = None

        try:
            self.tester.compare(endpoint, case.method, case.body)
        except ShapeDiffError as e:
            error = e.to_dict()

        duration_ms = int((time.time() - start_time) * 1000)
        result = CaseResult(
            name=case.name,
            endpoint=endpoint,
            method=case.method.value,
            passed=error is None,
            duration_ms=duration_ms,
            error=error,
        )

        if result.passed:
            logger.info("PASS: %s", case.name)
        else:
            logger.warning("FAIL: %s - %s", case.name, error["message"])
        return result

    def run(self, print_report: bool = True) -> SuiteReport:
        """
        Run all cases.

        With fail_fast the cases run one by one and the run stops at the
        first failure; otherwise they run on max_workers threads.
        """
        report = SuiteReport()

        if self.config.fail_fast:
            for case in self.cases:
                result = self.run_case(case)
                report.add(result)
                if not result.passed:
                    logger.info("Stopping after first failure (fail_fast)")
                    break
        elif self.config.max_workers > 1:
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                # map() keeps case order
                for result in executor.map(self.run_case, self.cases):
                    report.add(result)
        else:
            for case in self.cases:
                report.add(self.run_case(case))

        if print_report:
            report.print_summary()

        return report

    def close(self):
        self.tester.close()


def load_suite(path: str | Path) -> tuple[TesterConfig, list[SuiteCase]]:
    """
    Load a suite file: backend settings plus a 'cases' list.

    Example suite.yaml:
        reference_url: http://localhost:5000
        candidate_url: http://localhost:8080
        cases:
          - endpoint: /admin/quiz/list
            body: {token: abc}
          - endpoint: ADMIN_QUIZ_ID_NAME
            method: PUT
            args: [1]
            body: {token: abc, name: Quiz A}
    """
    data = load_yaml(path)
    if not isinstance(data, dict):
        raise ValueError(f"Suite file must contain a mapping: {path}")

    settings = {k: v for k, v in data.items() if k != "cases"}
    config = TesterConfig.from_dict(settings)
    cases = [SuiteCase.from_dict(entry) for entry in data.get("cases") or []]
    return config, cases


def run_suite(path: str | Path, print_report: bool = True) -> SuiteReport:
    """
    Run a suite file in one call:

        from shapediff import run_suite
        report = run_suite("suite.yaml")
    """
    config, cases = load_suite(path)
    runner = SuiteRunner(config, cases)
    try:
        return runner.run(print_report=print_report)
    finally:
        runner.close()
