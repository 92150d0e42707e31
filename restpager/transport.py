"""HTTP transport used by the pagination iterators.

The iterators only depend on the `Transport` protocol; `UrllibTransport` is the
default implementation. Retries, connection pooling and auth belong to whoever
provides the transport.
"""

from __future__ import annotations

from typing import Protocol
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from restpager.exceptions import TransportFailure
from restpager.pagination.models import RequestDescriptor, Response
from restpager.utils.logging import get_logger


class Transport(Protocol):
    """Performs exactly one HTTP call."""

    def execute(self, request: RequestDescriptor) -> Response:
        """Send the request and return the response, or raise TransportFailure."""
        ...


class UrllibTransport:
    """Transport built on urllib.request.

    HTTP error statuses come back as a Response so the caller decides what they mean;
    network errors and timeouts raise TransportFailure.
    """

    def __init__(self, timeout_s: float = 30.0):
        self.timeout_s = timeout_s

    def execute(self, request: RequestDescriptor) -> Response:
        url = request.full_url()
        data = request.body.encode("utf-8") if request.body is not None else None

        get_logger().debug("HTTP request", method=request.method, url=url)

        req = Request(url, data=data, headers=dict(request.headers), method=request.method.upper())
        try:
            with urlopen(req, timeout=self.timeout_s) as resp:
                return Response(
                    status_code=resp.status,
                    headers=list(resp.headers.items()),
                    body=resp.read(),
                )
        except HTTPError as e:
            headers = list(e.headers.items()) if e.headers is not None else []
            return Response(status_code=e.code, headers=headers, body=e.read() or b"")
        except (URLError, TimeoutError, OSError) as e:
            reason = getattr(e, "reason", e)
            raise TransportFailure(f"{type(e).__name__}: {reason}", url=url) from e
