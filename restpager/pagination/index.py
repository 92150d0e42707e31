import json
from typing import Optional

from restpager.config import INDEX_PLACEHOLDER, PaginationType, SourceConfig
from restpager.pagination.base import BaseHttpPaginationIterator
from restpager.pagination.models import Page, RequestDescriptor
from restpager.pagination.paths import MISSING, resolve_path


class IncrementAnIndexPaginationIterator(BaseHttpPaginationIterator):
    """Walks a numeric index (page number or offset) from `index_start` by `index_increment`.

    The index replaces ``{pagination.index}`` in the URL and body, and/or is sent
    as the `index_param` query parameter. The server gives no pagination hints, so
    the walk stops on an empty page (when `stop_on_empty_page` is set) or once the
    next index would pass `index_max`, which is inclusive.
    """

    pagination_type = PaginationType.INCREMENT_AN_INDEX

    def __init__(self, config: SourceConfig, transport):
        self._index = config.index_start
        super().__init__(config, transport)

    @property
    def current_index(self) -> int:
        """Index used by the queued request (or the last one, once terminated)."""
        return self._index

    def _request_for(self, index: int) -> RequestDescriptor:
        request = self._base_request()
        value = str(index)

        if INDEX_PLACEHOLDER in request.url:
            request = request.with_url(request.url.replace(INDEX_PLACEHOLDER, value))
        if request.body and INDEX_PLACEHOLDER in request.body:
            request = request.with_body(request.body.replace(INDEX_PLACEHOLDER, value))
        if self.config.index_param:
            request = request.with_params(**{self.config.index_param: index})
        return request

    def _initial_request(self) -> RequestDescriptor:
        return self._request_for(self._index)

    def is_empty_page(self, page: Page) -> bool:
        """Blank body, empty JSON array/object, or empty list at `results_path`.

        Bodies that are not JSON are only judged by blankness.
        """
        if page.is_blank():
            return True
        try:
            data = json.loads(page.body)
        except (ValueError, UnicodeDecodeError):
            return False

        if self.config.results_path:
            data = resolve_path(data, self.config.results_path)
            if data is MISSING:
                return True
        if data is None:
            return True
        if isinstance(data, (list, dict)):
            return len(data) == 0
        return False

    def _next_request(self, page: Page) -> Optional[RequestDescriptor]:
        if self.config.stop_on_empty_page and self.is_empty_page(page):
            self._logger.debug("Empty page, stopping", page=page.number, index=self._index)
            return None

        next_index = self._index + self.config.index_increment
        if self.config.index_max is not None and next_index > self.config.index_max:
            return None

        self._index = next_index
        return self._request_for(next_index)
