from dataclasses import replace
from typing import Optional
from urllib.parse import urljoin

from restpager.config import PaginationType
from restpager.exceptions import MalformedResponseError
from restpager.pagination.base import BaseHttpPaginationIterator
from restpager.pagination.models import Page, RequestDescriptor
from restpager.pagination.paths import is_absent, resolve_path


class LinkInResponseBodyPaginationIterator(BaseHttpPaginationIterator):
    """Follows the next-page URL found at `next_page_field_path` in the JSON body.

    A missing, null or empty field ends the iteration. A body that is not JSON,
    or a field that is not a string, is an error rather than the last page.
    Relative links are resolved against the URL of the page they came from.
    """

    pagination_type = PaginationType.LINK_IN_RESPONSE_BODY

    def _next_request(self, page: Page) -> Optional[RequestDescriptor]:
        path = self.config.next_page_field_path
        value = resolve_path(page.json(), path)
        if is_absent(value):
            return None

        if not isinstance(value, str):
            raise MalformedResponseError(
                f"next page link is a {type(value).__name__}, expected a string",
                url=page.url,
                path=path,
            )

        return replace(page.request, url=urljoin(page.url, value.strip()), params={})
