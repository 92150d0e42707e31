"""Value objects passed between the iterators and the transport."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from restpager.exceptions import MalformedResponseError

HeaderPairs = List[Tuple[str, str]]
HeadersInput = Union[Mapping[str, str], Iterable[Tuple[str, str]], None]


def _header_pairs(headers: HeadersInput) -> HeaderPairs:
    if headers is None:
        return []
    if isinstance(headers, Mapping):
        return [(str(k), str(v)) for k, v in headers.items()]
    return [(str(k), str(v)) for k, v in headers]


def _first_header(pairs: HeaderPairs, name: str) -> Optional[str]:
    """Case-insensitive header lookup; the first match wins."""
    wanted = name.lower()
    for key, value in pairs:
        if key.lower() == wanted:
            return value
    return None


@dataclass(frozen=True)
class RequestDescriptor:
    """A fully specified HTTP call."""

    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None
    params: Dict[str, Any] = field(default_factory=dict)

    def full_url(self) -> str:
        """URL with `params` merged into the query string, replacing same-named keys."""
        if not self.params:
            return self.url

        parts = urlsplit(self.url)
        query = [
            (k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k not in self.params
        ]
        query.extend((k, str(v)) for k, v in self.params.items())
        return urlunsplit(parts._replace(query=urlencode(query)))

    def with_url(self, url: str) -> "RequestDescriptor":
        return replace(self, url=url)

    def with_params(self, **params: Any) -> "RequestDescriptor":
        return replace(self, params={**self.params, **params})

    def with_headers(self, **headers: str) -> "RequestDescriptor":
        return replace(self, headers={**self.headers, **headers})

    def with_body(self, body: Optional[str]) -> "RequestDescriptor":
        return replace(self, body=body)


@dataclass
class Response:
    """What a transport hands back for one request."""

    status_code: int
    headers: HeaderPairs = field(default_factory=list)
    body: bytes = b""

    def __post_init__(self):
        self.headers = _header_pairs(self.headers)
        if isinstance(self.body, str):
            self.body = self.body.encode("utf-8")
        elif self.body is None:
            self.body = b""


@dataclass
class Page:
    """One fetched page: the raw payload plus the metadata needed to parse it downstream."""

    number: int
    request: RequestDescriptor
    status_code: int
    headers: HeaderPairs
    body: bytes

    @classmethod
    def from_response(cls, number: int, request: RequestDescriptor, response: Response) -> "Page":
        return cls(
            number=number,
            request=request,
            status_code=response.status_code,
            headers=list(response.headers),
            body=response.body,
        )

    @property
    def url(self) -> str:
        return self.request.full_url()

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def header(self, name: str) -> Optional[str]:
        return _first_header(self.headers, name)

    def header_dict(self) -> Dict[str, str]:
        """Headers as a plain dict keyed by lowercased name; the first duplicate wins."""
        result: Dict[str, str] = {}
        for key, value in self.headers:
            result.setdefault(key.lower(), value)
        return result

    def is_blank(self) -> bool:
        return not self.body.strip()

    def json(self) -> Any:
        """Decode the body as JSON.

        Raises:
            MalformedResponseError: If the body is not valid JSON
        """
        try:
            return json.loads(self.body)
        except (ValueError, UnicodeDecodeError) as e:
            raise MalformedResponseError(
                f"response body is not valid JSON ({e})", url=self.url
            ) from e


@dataclass
class PaginationState:
    """Mutable bookkeeping owned by a single iterator."""

    next_request: Optional[RequestDescriptor]
    last_page: Optional[Page] = None
    page_count: int = 0
    terminal: bool = False

    def advance(self, page: Page, next_request: Optional[RequestDescriptor]) -> None:
        self.last_page = page
        self.page_count += 1
        self.next_request = next_request
        self.terminal = next_request is None

    def terminate(self) -> None:
        self.next_request = None
        self.terminal = True
