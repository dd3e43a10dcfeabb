"""Dual dispatch of one request to a reference and a candidate backend."""

from __future__ import annotations

import logging
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import Any, TYPE_CHECKING

from .client import RequestClient
from .comparator import compare_shape
from .exceptions import ShapeMismatchError
from .models import ComparisonPath, HttpMethod

if TYPE_CHECKING:
    from .config import TesterConfig

logger = logging.getLogger(__name__)


class Tester:
    """
    Sends the same request to both backends and compares response shapes.

    Usage:
        with Tester.from_config(config) as tester:
            tester.compare("/admin/quiz/list", "GET", {"token": token})

    compare() returns None when both responses have the same shape and
    raises a ShapeDiffError otherwise. The tester holds no per-call state,
    so compare() may be called from several threads at once.
    """

    def __init__(
        self,
        reference: RequestClient,
        candidate: RequestClient,
        concurrent_dispatch: bool = True
    ):
        """
        Initialize the tester.

        Args:
            reference: Client for the known-good implementation
            candidate: Client for the implementation under test
            concurrent_dispatch: Send both requests in parallel
        """
        self.reference = reference
        self.candidate = candidate
        self.concurrent_dispatch = concurrent_dispatch

    @classmethod
    def from_config(cls, config: TesterConfig) -> Tester:
        return cls(
            reference=RequestClient(
                config.reference_url,
                timeout=config.timeout_seconds,
                headers=config.headers,
            ),
            candidate=RequestClient(
                config.candidate_url,
                timeout=config.timeout_seconds,
                headers=config.headers,
            ),
            concurrent_dispatch=config.concurrent_dispatch,
        )

    def compare(
        self,
        endpoint: str,
        method: HttpMethod | str = HttpMethod.GET,
        body: Any = None
    ) -> None:
        """
        Compare the responses of both backends for one request.

        Args:
            endpoint: Endpoint path with placeholders already substituted
            method: HTTP method
            body: Optional JSON body (query string for GET/DELETE)

        Raises:
            TransportError: A backend could not be reached or returned non-JSON
            SerializationError: The body cannot be sent as a query string
            ShapeMismatchError: The responses differ in shape
        """
        method = HttpMethod.parse(method)

        candidate_value, reference_value = self._dispatch(endpoint, method, body)

        mismatch = compare_shape(candidate_value, reference_value, endpoint, ComparisonPath())
        if mismatch is not None:
            logger.debug("Mismatch on %s %s at %s", method.value, endpoint, mismatch.path)
            raise ShapeMismatchError(
                mismatch, mismatch.context(candidate_value, reference_value)
            )

        logger.debug("Shapes match for %s %s", method.value, endpoint)

    def _dispatch(self, endpoint: str, method: HttpMethod, body: Any) -> tuple[Any, Any]:
        """Fetch (candidate, reference) responses."""
        if not self.concurrent_dispatch:
            candidate_value = self.candidate.request(method, endpoint, body)
            reference_value = self.reference.request(method, endpoint, body)
            return candidate_value, reference_value

        executor = ThreadPoolExecutor(max_workers=2)
        try:
            candidate_future = executor.submit(self.candidate.request, method, endpoint, body)
            reference_future = executor.submit(self.reference.request, method, endpoint, body)

            done, _ = wait([candidate_future, reference_future], return_when=FIRST_EXCEPTION)
            for future in (candidate_future, reference_future):
                if future in done and future.exception() is not None:
                    raise future.exception()

            return candidate_future.result(), reference_future.result()
        finally:
            # Never block on a sibling that is still in flight
            executor.shutdown(wait=False, cancel_futures=True)

    def close(self):
        self.reference.close()
        self.candidate.close()

    def __enter__(self) -> Tester:
        return self

    def __exit__(self, *exc_info):
        self.close()
