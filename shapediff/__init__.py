"""
ShapeDiff - Differential API Shape-Conformance Tester

Sends the same request to a reference backend and a candidate backend and
checks that both JSON responses have the same structure: the same keys, the
same array lengths and the same value kind at every position. Values
themselves are never compared.
"""

from .comparator import compare_shape, shapes_match
from .client import RequestClient, encode_query
from .tester import Tester
from .models import (
    ComparisonPath,
    HttpMethod,
    JsonKind,
    LogLevel,
    MismatchRecord,
    MismatchType,
)
from .exceptions import (
    ErrorKind,
    ShapeDiffError,
    TransportError,
    SerializationError,
    ShapeMismatchError,
)
from .endpoints import Endpoint, format_endpoint
from .config import TesterConfig
from .runner import (
    SuiteCase,
    CaseResult,
    SuiteReport,
    SuiteRunner,
    load_suite,
    run_suite,
)

__version__ = "1.0.0"
__all__ = [
    # Core
    "compare_shape",
    "shapes_match",
    "RequestClient",
    "encode_query",
    "Tester",
    # Models
    "ComparisonPath",
    "HttpMethod",
    "JsonKind",
    "LogLevel",
    "MismatchRecord",
    "MismatchType",
    # Errors
    "ErrorKind",
    "ShapeDiffError",
    "TransportError",
    "SerializationError",
    "ShapeMismatchError",
    # Endpoints
    "Endpoint",
    "format_endpoint",
    # Suite Runner
    "TesterConfig",
    "SuiteCase",
    "CaseResult",
    "SuiteReport",
    "SuiteRunner",
    "load_suite",
    "run_suite",
]
