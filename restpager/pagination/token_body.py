import json
from typing import Any, Dict, Optional

from restpager.config import PaginationType, SourceConfig, TokenLocation
from restpager.exceptions import InvalidConfigurationError, MalformedResponseError
from restpager.pagination.base import BaseHttpPaginationIterator
from restpager.pagination.models import Page, RequestDescriptor
from restpager.pagination.paths import is_absent, resolve_path


class TokenPaginationIterator(BaseHttpPaginationIterator):
    """Continuation token pagination.

    The token found at `next_page_token_path` is opaque: it is put back into the
    original request (not the previous one) as a query parameter, header or JSON
    body field named `next_page_token_param`.
    """

    pagination_type = PaginationType.TOKEN_IN_RESPONSE_BODY

    def __init__(self, config: SourceConfig, transport):
        if config.token_location == TokenLocation.BODY:
            self._body_template = self._parse_body_template(config.body)
        else:
            self._body_template = None
        super().__init__(config, transport)
        if config.token_location == TokenLocation.QUERY:
            self._logger.register_sensitive_param(config.next_page_token_param)

    @staticmethod
    def _parse_body_template(body: Optional[str]) -> Dict[str, Any]:
        if body is None or not body.strip():
            return {}
        try:
            template = json.loads(body)
        except ValueError as e:
            raise InvalidConfigurationError(
                f"request body must be a JSON object to carry the token ({e})", field="body"
            ) from e
        if not isinstance(template, dict):
            raise InvalidConfigurationError(
                "request body must be a JSON object to carry the token", field="body"
            )
        return template

    def _extract_token(self, page: Page) -> Optional[str]:
        path = self.config.next_page_token_path
        token = resolve_path(page.json(), path)
        if is_absent(token):
            return None
        if isinstance(token, (dict, list, bool)):
            raise MalformedResponseError(
                f"continuation token is a {type(token).__name__}, expected a scalar",
                url=page.url,
                path=path,
            )
        return str(token)

    def _next_request(self, page: Page) -> Optional[RequestDescriptor]:
        token = self._extract_token(page)
        if token is None:
            return None

        param = self.config.next_page_token_param
        base = self._base_request()
        location = self.config.token_location

        if location == TokenLocation.QUERY:
            return base.with_params(**{param: token})
        if location == TokenLocation.HEADER:
            return base.with_headers(**{param: token})

        body = dict(self._body_template)
        body[param] = token
        return base.with_body(json.dumps(body))
