"""HTTP transport for one backend."""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from .exceptions import SerializationError, TransportError
from .models import HttpMethod, JsonKind
from .utils import join_url

logger = logging.getLogger(__name__)


def encode_query(body: Any) -> list[tuple[str, str]]:
    """
    Encode a JSON object as query string parameters.

    Only flat objects can be encoded: values must be scalars. None values
    are skipped and booleans are written as 'true'/'false'.

    Raises:
        ValueError: If the body cannot be represented as a query string
    """
    if JsonKind.of(body) != JsonKind.OBJECT:
        raise ValueError(f"expected an object, got {JsonKind.of(body).value}")

    params = []
    for key, value in body.items():
        kind = JsonKind.of(value)
        if kind == JsonKind.NULL:
            continue
        if not kind.is_scalar:
            raise ValueError(f"field '{key}' is an {kind.value}, only scalars are supported")
        if kind == JsonKind.BOOLEAN:
            params.append((key, "true" if value else "false"))
        else:
            params.append((key, str(value)))
    return params


class RequestClient:
    """
    Sends requests to a single backend and decodes JSON responses.

    Usage:
        client = RequestClient("http://localhost:5000")
        data = client.request("GET", "/admin/quiz/list", {"token": "abc"})

    The client keeps no state besides its base URL and the pooled session,
    so one instance can serve many comparisons at once.
    """

    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = 30,
        headers: Optional[dict] = None
    ):
        """
        Initialize the client.

        Args:
            base_url: Backend root URL, e.g. 'http://localhost:5000'
            session: Optional pre-built session (a new one is created otherwise)
            timeout: Per-request timeout in seconds (None waits forever)
            headers: Static headers added to every request
        """
        if not base_url:
            raise ValueError("base_url is required")
        self.base_url = base_url
        self.session = session or requests.Session()
        self.timeout = timeout
        if headers:
            self.session.headers.update(headers)

    def url_for(self, endpoint: str) -> str:
        return join_url(self.base_url, endpoint)

    def request(
        self,
        method: HttpMethod | str,
        endpoint: str,
        body: Any = None
    ) -> Any:
        """
        Send one request and return the decoded JSON body.

        GET/DELETE bodies are sent as query parameters; POST/PUT bodies are
        sent as the JSON payload. Status codes are not checked.

        Raises:
            SerializationError: The body cannot be encoded as a query string
                or is not a JSON value
            TransportError: The request failed or the response is not JSON
        """
        method = HttpMethod.parse(method)
        url = self.url_for(endpoint)
        kwargs: dict[str, Any] = {"timeout": self.timeout}

        if body is not None:
            if method.sends_query:
                try:
                    kwargs["params"] = encode_query(body)
                except (ValueError, TypeError) as e:
                    raise SerializationError(method.value, endpoint, str(e)) from e
            elif method.sends_json:
                try:
                    JsonKind.validate(body)
                except TypeError as e:
                    raise SerializationError(method.value, endpoint, str(e)) from e
                kwargs["json"] = body

        logger.debug("%s %s", method.value, url)

        try:
            response = self.session.request(method.value, url, **kwargs)
        except requests.RequestException as e:
            raise TransportError(method.value, endpoint, url, str(e)) from e

        logger.debug("%s %s -> %s", method.value, url, response.status_code)

        try:
            return response.json()
        except ValueError as e:
            # requests' JSONDecodeError derives from ValueError
            raise TransportError(
                method.value, endpoint, url, f"response body is not valid JSON: {e}"
            ) from e

    def close(self):
        self.session.close()

    def __enter__(self) -> RequestClient:
        return self

    def __exit__(self, *exc_info):
        self.close()

    def __repr__(self) -> str:
        return f"RequestClient({self.base_url!r})"
