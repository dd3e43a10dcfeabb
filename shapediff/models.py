"""Data models for ShapeDiff."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Union

from jsonpath_ng.jsonpath import Child, Fields, Index, Root

from .utils import build_path, render_value


PathSegment = Union[str, int]


class LogLevel(Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"

    @property
    def level(self) -> str:
        return "WARNING" if self is LogLevel.WARN else self.value


class JsonKind(Enum):
    """The tag of a decoded JSON value."""
    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"

    @classmethod
    def of(cls, value: Any) -> JsonKind:
        # bool is an int subclass, so it has to be tested first
        if value is None:
            return cls.NULL
        if isinstance(value, bool):
            return cls.BOOLEAN
        if isinstance(value, (int, float)):
            return cls.NUMBER
        if isinstance(value, str):
            return cls.STRING
        if isinstance(value, list):
            return cls.ARRAY
        if isinstance(value, dict):
            return cls.OBJECT
        raise TypeError(f"Not a JSON value: {type(value).__name__}")

    @classmethod
    def validate(cls, value: Any, where: str = "$"):
        """
        Check that a whole tree is made of JSON values with string keys.

        Raises:
            TypeError: Naming the first offending position
        """
        try:
            kind = cls.of(value)
        except TypeError:
            raise TypeError(f"{where} is not a JSON value: {type(value).__name__}") from None
        if kind == cls.ARRAY:
            for index, item in enumerate(value):
                cls.validate(item, build_path(where, index))
        elif kind == cls.OBJECT:
            for key, item in value.items():
                if not isinstance(key, str):
                    raise TypeError(f"{where} has a non-string key: {key!r}")
                cls.validate(item, build_path(where, key))

    @property
    def is_scalar(self) -> bool:
        return self not in (JsonKind.ARRAY, JsonKind.OBJECT)


class MismatchType(Enum):
    TYPE_MISMATCH = "TYPE_MISMATCH"
    MISSING_IN_REFERENCE = "MISSING_IN_REFERENCE"
    MISSING_IN_CLIENT = "MISSING_IN_CLIENT"
    ARRAY_LENGTH_MISMATCH = "ARRAY_LENGTH_MISMATCH"


class HttpMethod(Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"

    @classmethod
    def parse(cls, method: HttpMethod | str) -> HttpMethod:
        if isinstance(method, cls):
            return method
        try:
            return cls(str(method).strip().upper())
        except ValueError:
            raise ValueError(f"Unsupported HTTP method: {method!r}") from None

    @property
    def sends_query(self) -> bool:
        return self in (HttpMethod.GET, HttpMethod.DELETE)

    @property
    def sends_json(self) -> bool:
        return self in (HttpMethod.POST, HttpMethod.PUT)


class _Key(Fields):
    """A single object key, taken literally even when it is '*'."""

    def reified_fields(self, datum):
        return self.fields


@dataclass(frozen=True)
class ComparisonPath:
    """Position inside two JSON trees being compared in lockstep."""
    segments: tuple[PathSegment, ...] = ()

    def child(self, segment: PathSegment) -> ComparisonPath:
        return ComparisonPath(self.segments + (segment,))

    def parent(self) -> ComparisonPath:
        return ComparisonPath(self.segments[:-1])

    def __iter__(self) -> Iterator[PathSegment]:
        return iter(self.segments)

    def __len__(self) -> int:
        return len(self.segments)

    def __str__(self) -> str:
        return self.to_jsonpath()

    def to_jsonpath(self) -> str:
        path = "$"
        for segment in self.segments:
            path = build_path(path, segment)
        return path

    def to_expression(self):
        """Build the equivalent jsonpath_ng expression."""
        expr = Root()
        for segment in self.segments:
            step = Index(segment) if isinstance(segment, int) else _Key(segment)
            expr = Child(expr, step)
        return expr

    def resolve(self, document: Any) -> list[Any]:
        """Return the values found at this path in a document."""
        return [match.value for match in self.to_expression().find(document)]


@dataclass(frozen=True)
class MismatchRecord:
    """The first structural divergence between two responses."""
    endpoint: str
    path: ComparisonPath
    client_value: Any
    reference_value: Any
    type: MismatchType = MismatchType.TYPE_MISMATCH

    @property
    def client_kind(self) -> JsonKind:
        return JsonKind.of(self.client_value)

    @property
    def reference_kind(self) -> JsonKind:
        return JsonKind.of(self.reference_value)

    @property
    def message(self) -> str:
        location = f"{self.endpoint} at {self.path.to_jsonpath()}"
        client = render_value(self.client_value)
        reference = render_value(self.reference_value)

        if self.type == MismatchType.MISSING_IN_REFERENCE:
            return f"Shape mismatch on {location}: key missing in reference (client: {client})"
        if self.type == MismatchType.MISSING_IN_CLIENT:
            return f"Shape mismatch on {location}: key missing in client (reference: {reference})"
        if self.type == MismatchType.ARRAY_LENGTH_MISMATCH:
            return (
                f"Shape mismatch on {location}: array length "
                f"{len(self.client_value)} vs {len(self.reference_value)} "
                f"(client: {client}, reference: {reference})"
            )
        return (
            f"Shape mismatch on {location}: {self.client_kind.value} vs "
            f"{self.reference_kind.value} (client: {client}, reference: {reference})"
        )

    def locate(self, client_document: Any, reference_document: Any) -> tuple[list, list]:
        """Re-locate the divergence inside two full responses."""
        return self.path.resolve(client_document), self.path.resolve(reference_document)

    def context(self, client_document: Any, reference_document: Any) -> dict:
        """The values enclosing the divergence on each side, if any."""
        if not self.path:
            return {}
        parent = self.path.parent()
        client, reference = parent.resolve(client_document), parent.resolve(reference_document)
        return {
            "parent_path": parent.to_jsonpath(),
            "client_parent": client[0] if client else None,
            "reference_parent": reference[0] if reference else None,
        }

    def to_dict(self) -> dict:
        return {
            "endpoint": self.endpoint,
            "path": self.path.to_jsonpath(),
            "segments": list(self.path.segments),
            "type": self.type.value,
            "client_value": self.client_value,
            "reference_value": self.reference_value,
        }
