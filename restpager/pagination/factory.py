"""Selects the pagination iterator for a source configuration."""

from typing import TYPE_CHECKING, Dict, Optional, Type

from restpager.config import PaginationType, SourceConfig
from restpager.exceptions import InvalidConfigurationError
from restpager.pagination.base import BaseHttpPaginationIterator
from restpager.pagination.custom import CustomPaginationIterator
from restpager.pagination.index import IncrementAnIndexPaginationIterator
from restpager.pagination.link_body import LinkInResponseBodyPaginationIterator
from restpager.pagination.link_header import LinkInResponseHeaderPaginationIterator
from restpager.pagination.none import NonePaginationIterator
from restpager.pagination.token_body import TokenPaginationIterator

if TYPE_CHECKING:
    from restpager.transport import Transport

PAGINATION_ITERATORS: Dict[PaginationType, Type[BaseHttpPaginationIterator]] = {
    PaginationType.NONE: NonePaginationIterator,
    PaginationType.LINK_IN_RESPONSE_HEADER: LinkInResponseHeaderPaginationIterator,
    PaginationType.LINK_IN_RESPONSE_BODY: LinkInResponseBodyPaginationIterator,
    PaginationType.TOKEN_IN_RESPONSE_BODY: TokenPaginationIterator,
    PaginationType.INCREMENT_AN_INDEX: IncrementAnIndexPaginationIterator,
    PaginationType.CUSTOM: CustomPaginationIterator,
}


class PaginationIteratorFactory:
    """Creates the iterator matching `config.pagination_type`."""

    @staticmethod
    def create_instance(
        config: SourceConfig, transport: Optional["Transport"] = None
    ) -> BaseHttpPaginationIterator:
        raw_type = config.pagination_type
        try:
            pagination_type = PaginationType(raw_type)
        except ValueError:
            raise InvalidConfigurationError(
                f"Unsupported pagination type: '{raw_type}'. "
                f"Available: {[t.value for t in PaginationType]}",
                field="pagination_type",
            )

        iterator_class = PAGINATION_ITERATORS.get(pagination_type)
        if iterator_class is None:
            raise InvalidConfigurationError(
                f"Unsupported pagination type: '{pagination_type.value}'", field="pagination_type"
            )

        if transport is None:
            from restpager.transport import UrllibTransport

            transport = UrllibTransport(timeout_s=config.timeout_s)

        return iterator_class(config, transport)


def create_pagination_iterator(
    config: SourceConfig, transport: Optional["Transport"] = None
) -> BaseHttpPaginationIterator:
    """Create a pagination iterator from a validated config."""
    return PaginationIteratorFactory.create_instance(config, transport)
