import re
from dataclasses import replace
from typing import Dict, Optional
from urllib.parse import urljoin

from restpager.config import PaginationType
from restpager.exceptions import MalformedResponseError
from restpager.pagination.base import BaseHttpPaginationIterator
from restpager.pagination.models import Page, RequestDescriptor
from restpager.pagination.paths import is_absent

LINK_PART = re.compile(r'<([^>]+)>\s*((?:;[^;,]*)*)')
REL_PARAM = re.compile(r';\s*rel\s*=\s*"?([^";]+)"?', re.IGNORECASE)


def parse_link_header(link_header: str) -> Dict[str, str]:
    """Parse an RFC 5988 Link header into {rel: url}; the first url of each rel wins."""
    links: Dict[str, str] = {}
    for match in LINK_PART.finditer(link_header):
        url, params = match.groups()
        rel_match = REL_PARAM.search(params)
        if not rel_match:
            continue
        for rel in rel_match.group(1).split():
            links.setdefault(rel.lower(), url.strip())
    return links


class LinkInResponseHeaderPaginationIterator(BaseHttpPaginationIterator):
    """Follows the next-page URL carried in a response header.

    The header value is either the bare URL or an RFC 5988 list such as
    ``<https://api/x?page=2>; rel="next", <https://api/x?page=9>; rel="last"``,
    in which case the entry whose rel matches `link_rel` is used. A value that
    opens with ``<`` but yields no link entries is reported as malformed.
    """

    pagination_type = PaginationType.LINK_IN_RESPONSE_HEADER

    def _next_request(self, page: Page) -> Optional[RequestDescriptor]:
        value = page.header(self.config.link_header_name)
        if is_absent(value):
            return None

        value = value.strip()
        if value.startswith("<"):
            links = parse_link_header(value)
            if not links:
                raise MalformedResponseError(
                    f"{self.config.link_header_name} header is not a valid link list: {value!r}",
                    url=page.url,
                    path=self.config.link_header_name,
                )
            next_url = links.get(self.config.link_rel.lower())
            if not next_url:
                return None
        else:
            next_url = value

        return replace(page.request, url=urljoin(page.url, next_url), params={})
