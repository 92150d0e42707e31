from typing import Optional

from restpager.config import PaginationType
from restpager.pagination.base import BaseHttpPaginationIterator
from restpager.pagination.models import Page, RequestDescriptor


class NonePaginationIterator(BaseHttpPaginationIterator):
    """Non-paginated endpoint: the base request is the only page."""

    pagination_type = PaginationType.NONE

    def _next_request(self, page: Page) -> Optional[RequestDescriptor]:
        return None
