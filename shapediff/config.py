"""Configuration for ShapeDiff test runs."""

from __future__ import annotations

import yaml
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

from .models import LogLevel


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass
class TesterConfig:
    """Settings shared by both backends and the suite runner."""
    reference_url: str
    candidate_url: str
    timeout_seconds: Optional[float] = 30
    concurrent_dispatch: bool = True
    max_workers: int = 1
    fail_fast: bool = False
    headers: dict[str, str] = field(default_factory=dict)
    log_level: LogLevel = LogLevel.INFO

    def __post_init__(self):
        for key in ("reference_url", "candidate_url"):
            value = getattr(self, key)
            if not value:
                raise ValueError(f"{key} is required")
            if not isinstance(value, str):
                raise ValueError(f"{key} must be a string, got {type(value).__name__}")
        if self.timeout_seconds is not None:
            if not _is_number(self.timeout_seconds):
                raise ValueError(f"timeout_seconds must be a number, got {self.timeout_seconds!r}")
            if self.timeout_seconds <= 0:
                raise ValueError(f"timeout_seconds must be positive, got {self.timeout_seconds}")
        if isinstance(self.max_workers, bool) or not isinstance(self.max_workers, int):
            raise ValueError(f"max_workers must be an integer, got {self.max_workers!r}")
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {self.max_workers}")
        for key in ("concurrent_dispatch", "fail_fast"):
            if not isinstance(getattr(self, key), bool):
                raise ValueError(f"{key} must be true or false, got {getattr(self, key)!r}")
        if not isinstance(self.headers, dict):
            raise ValueError(f"headers must be a mapping, got {type(self.headers).__name__}")
        if not isinstance(self.log_level, LogLevel):
            try:
                self.log_level = LogLevel(str(self.log_level).upper())
            except ValueError:
                raise ValueError(f"Unknown log_level: {self.log_level}") from None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TesterConfig:
        """
        Build a config from a plain mapping (e.g. parsed YAML).

        Raises:
            ValueError: On missing URLs, unknown keys or invalid values
        """
        if not isinstance(data, dict):
            raise ValueError(f"Config must be a mapping, got {type(data).__name__}")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")

        for key in ("reference_url", "candidate_url"):
            if key not in data:
                raise ValueError(f"{key} is required")

        return cls(**data)


def load_yaml(path: str | Path) -> Any:
    """Load a YAML or JSON file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    with open(path, 'r') as f:
        content = f.read()

    # JSON is valid YAML, so one parser covers both
    try:
        return yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse {path}: {e}") from e
