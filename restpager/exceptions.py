"""Custom exceptions for restpager."""

from typing import Optional


class RestPagerException(Exception):
    """Base exception for all restpager errors."""

    pass


class InvalidConfigurationError(RestPagerException):
    """Pagination configuration cannot be turned into an iterator."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(self._format_error())

    def _format_error(self) -> str:
        parts = ["Invalid pagination configuration"]
        if self.field:
            parts.append(f"\n  Field: {self.field}")
        parts.append(f"\n  Error: {self.message}")
        return "".join(parts)


class TransportFailure(RestPagerException):
    """The HTTP call for a page failed (network error, timeout or error status)."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        self.message = message
        self.url = url
        self.status_code = status_code
        super().__init__(self._format_error())

    def _format_error(self) -> str:
        parts = [f"✗ Request failed: {self.message}"]
        if self.url:
            parts.append(f"\n  URL: {self.url}")
        if self.status_code is not None:
            parts.append(f"\n  Status: {self.status_code}")
        return "".join(parts)


class MalformedResponseError(RestPagerException):
    """Pagination metadata is present in the response but cannot be used."""

    def __init__(self, message: str, url: Optional[str] = None, path: Optional[str] = None):
        self.message = message
        self.url = url
        self.path = path
        super().__init__(self._format_error())

    def _format_error(self) -> str:
        parts = [f"✗ Malformed response: {self.message}"]
        if self.url:
            parts.append(f"\n  URL: {self.url}")
        if self.path:
            parts.append(f"\n  Path: {self.path}")
        return "".join(parts)


class TerminatedIterationError(RestPagerException):
    """next() was called after the last page had already been returned."""

    def __init__(self, page_count: int):
        self.page_count = page_count
        super().__init__(
            f"✗ Pagination already terminated after {page_count} page(s); "
            "create a new iterator to scan again"
        )


class ExpressionEvaluationError(RestPagerException):
    """The custom pagination script raised or returned something unusable."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.message = message
        self.cause = cause
        super().__init__(self._format_error())

    def _format_error(self) -> str:
        parts = [f"✗ Custom pagination script failed: {self.message}"]
        if self.cause is not None:
            parts.append(f"\n  Cause: {type(self.cause).__name__}: {self.cause}")
        return "".join(parts)
