from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Iterator, Optional

from restpager.config import PaginationType, SourceConfig
from restpager.exceptions import RestPagerException, TerminatedIterationError, TransportFailure
from restpager.pagination.models import Page, PaginationState, RequestDescriptor
from restpager.utils.logging import get_logger

if TYPE_CHECKING:
    from restpager.transport import Transport

SENSITIVE_HEADER_HINTS = ("authorization", "token", "secret", "api-key", "apikey", "x-api-key")


class BaseHttpPaginationIterator(ABC):
    """Lazy, single-pass sequence of pages for one pagination convention.

    Subclasses only decide what the request after a given page looks like by
    implementing `_next_request`; returning None ends the iteration. The base
    class owns the state machine:

        Initial --next()--> HasMore --next()--> HasMore | Terminal

    Terminal is absorbing. Instances are not thread safe; use one per scan.
    """

    pagination_type: PaginationType

    def __init__(self, config: SourceConfig, transport: "Transport"):
        self.config = config
        self.transport = transport
        self._logger = get_logger().bind(pagination=self.pagination_type.value)

        for name, value in config.headers.items():
            if any(hint in name.lower() for hint in SENSITIVE_HEADER_HINTS):
                self._logger.register_secret(value)

        self._state = PaginationState(next_request=self._initial_request())

    # ------------------------------------------------------------------
    # Strategy hooks
    # ------------------------------------------------------------------

    def _base_request(self) -> RequestDescriptor:
        """The request described by the config, before any pagination is applied."""
        return RequestDescriptor(
            method=self.config.method.value,
            url=self.config.url,
            headers=dict(self.config.headers),
            body=self.config.body,
        )

    def _initial_request(self) -> RequestDescriptor:
        return self._base_request()

    @abstractmethod
    def _next_request(self, page: Page) -> Optional[RequestDescriptor]:
        """
        Compute the request that follows `page`.

        Args:
            page: The page that was just fetched.

        Returns:
            The next request, or None if `page` is the last one.

        Raises:
            MalformedResponseError: If the pagination metadata exists but is unusable.
        """
        pass

    # ------------------------------------------------------------------
    # Iteration contract
    # ------------------------------------------------------------------

    @property
    def state(self) -> PaginationState:
        return self._state

    @property
    def page_count(self) -> int:
        return self._state.page_count

    def has_next(self) -> bool:
        """True while a request is queued. Never performs I/O."""
        return not self._state.terminal and self._state.next_request is not None

    def next(self) -> Page:
        """Fetch the queued page and queue the one after it.

        Raises:
            TerminatedIterationError: If the iteration already finished
            TransportFailure: If the request failed or returned an error status
            MalformedResponseError: If the pagination metadata cannot be used
        """
        if not self.has_next():
            raise TerminatedIterationError(self._state.page_count)

        request = self._state.next_request
        number = self._state.page_count + 1

        if number > 1 and self.config.wait_time_between_pages_ms:
            time.sleep(self.config.wait_time_between_pages_ms / 1000.0)

        self._logger.debug(
            "Fetching page", page=number, method=request.method, url=request.full_url()
        )

        try:
            response = self.transport.execute(request)
        except RestPagerException:
            raise
        except Exception as e:
            raise TransportFailure(f"{type(e).__name__}: {e}", url=request.full_url()) from e

        if response.status_code >= 400:
            raise TransportFailure(
                f"HTTP {response.status_code}",
                url=request.full_url(),
                status_code=response.status_code,
            )

        page = Page.from_response(number, request, response)

        try:
            next_request = self._next_request(page)
        except RestPagerException as e:
            # State is untouched so a retry re-issues the same request.
            self._logger.error("Could not determine next page", page=number, error=str(e))
            raise

        if next_request is not None and self.config.max_pages and number >= self.config.max_pages:
            self._logger.info("Reached max_pages limit", max_pages=self.config.max_pages)
            next_request = None

        self._state.advance(page, next_request)

        if self._state.terminal:
            self._logger.info("Pagination finished", pages=self._state.page_count)
        return page

    def close(self) -> None:
        """Stop the iteration; no further requests will be made."""
        self._state.terminate()

    def __iter__(self) -> Iterator[Page]:
        return self

    def __next__(self) -> Page:
        if not self.has_next():
            raise StopIteration
        return self.next()
