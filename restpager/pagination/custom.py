"""User-scripted pagination.

The script is plain Python and must define::

    def get_next_page_url(url, page, headers):
        ...

where `url` is the URL of the page just fetched, `page` its body as text and
`headers` a dict of its response headers. Header names are lowercased, so
look them up as ``headers.get("x-cursor")``. The function returns:

- ``None`` (or an empty string) when there are no more pages,
- a URL string for the next page (relative URLs resolve against `url`),
- a dict with any of ``url``, ``method``, ``headers``, ``body``, ``params`` that
  is laid over the previous request.
"""

from dataclasses import replace
from typing import Any, Callable, Dict, Optional
from urllib.parse import urljoin

from restpager.config import PaginationType, SourceConfig
from restpager.exceptions import ExpressionEvaluationError, InvalidConfigurationError
from restpager.pagination.base import BaseHttpPaginationIterator
from restpager.pagination.models import Page, RequestDescriptor

SCRIPT_FUNCTION = "get_next_page_url"
REQUEST_KEYS = frozenset({"url", "method", "headers", "body", "params"})


def load_script_function(source: str) -> Callable[..., Any]:
    """Execute the script source and return its get_next_page_url function.

    Raises:
        InvalidConfigurationError: If the script does not compile, fails while
            loading, or does not define the function
    """
    try:
        code = compile(source, "<custom pagination script>", "exec")
    except SyntaxError as e:
        raise InvalidConfigurationError(
            f"custom pagination script has a syntax error on line {e.lineno}: {e.msg}",
            field="custom_script",
        ) from e

    namespace: Dict[str, Any] = {"__name__": "restpager_custom_pagination"}
    try:
        exec(code, namespace)
    except Exception as e:
        raise InvalidConfigurationError(
            f"custom pagination script failed while loading: {type(e).__name__}: {e}",
            field="custom_script",
        ) from e

    func = namespace.get(SCRIPT_FUNCTION)
    if not callable(func):
        raise InvalidConfigurationError(
            f"custom pagination script must define a function '{SCRIPT_FUNCTION}(url, page, headers)'",
            field="custom_script",
        )
    return func


class CustomPaginationIterator(BaseHttpPaginationIterator):
    """Delegates the next-request decision to a user script."""

    pagination_type = PaginationType.CUSTOM

    def __init__(self, config: SourceConfig, transport):
        try:
            source = config.load_custom_script()
        except OSError as e:
            raise InvalidConfigurationError(
                f"cannot read custom pagination script: {e}", field="custom_script_path"
            ) from e
        self._script = load_script_function(source)
        super().__init__(config, transport)

    def _next_request(self, page: Page) -> Optional[RequestDescriptor]:
        try:
            result = self._script(page.url, page.text, page.header_dict())
        except Exception as e:
            raise ExpressionEvaluationError(
                f"{SCRIPT_FUNCTION} raised on page {page.number}", cause=e
            ) from e
        return self._to_request(result, page)

    def _to_request(self, result: Any, page: Page) -> Optional[RequestDescriptor]:
        if result is None:
            return None

        if isinstance(result, str):
            if not result.strip():
                return None
            return replace(page.request, url=urljoin(page.url, result.strip()), params={})

        if isinstance(result, dict):
            return self._overlay(result, page)

        raise ExpressionEvaluationError(
            f"{SCRIPT_FUNCTION} returned {type(result).__name__}; "
            "expected None, a URL string or a request dict"
        )

    def _overlay(self, result: Dict[str, Any], page: Page) -> RequestDescriptor:
        unknown = set(result) - REQUEST_KEYS
        if unknown:
            raise ExpressionEvaluationError(
                f"{SCRIPT_FUNCTION} returned unknown request keys: {sorted(unknown)}"
            )

        previous = page.request
        changes: Dict[str, Any] = {}

        if "url" in result:
            url = result["url"]
            if not isinstance(url, str) or not url.strip():
                raise ExpressionEvaluationError(f"'url' must be a non-empty string, got {url!r}")
            changes["url"] = urljoin(page.url, url.strip())
            changes["params"] = {}

        if "method" in result:
            if not isinstance(result["method"], str):
                raise ExpressionEvaluationError("'method' must be a string")
            changes["method"] = result["method"].upper()

        if "headers" in result:
            if not isinstance(result["headers"], dict):
                raise ExpressionEvaluationError("'headers' must be a dict")
            changes["headers"] = {
                **previous.headers,
                **{str(k): str(v) for k, v in result["headers"].items()},
            }

        if "body" in result:
            if result["body"] is not None and not isinstance(result["body"], str):
                raise ExpressionEvaluationError("'body' must be a string or None")
            changes["body"] = result["body"]

        if "params" in result:
            if not isinstance(result["params"], dict):
                raise ExpressionEvaluationError("'params' must be a dict")
            changes["params"] = dict(result["params"])

        return replace(previous, **changes)
