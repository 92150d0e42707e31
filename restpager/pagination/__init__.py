from restpager.pagination.base import BaseHttpPaginationIterator
from restpager.pagination.custom import CustomPaginationIterator
from restpager.pagination.factory import (
    PAGINATION_ITERATORS,
    PaginationIteratorFactory,
    create_pagination_iterator,
)
from restpager.pagination.index import IncrementAnIndexPaginationIterator
from restpager.pagination.link_body import LinkInResponseBodyPaginationIterator
from restpager.pagination.link_header import LinkInResponseHeaderPaginationIterator
from restpager.pagination.models import Page, PaginationState, RequestDescriptor, Response
from restpager.pagination.none import NonePaginationIterator
from restpager.pagination.token_body import TokenPaginationIterator

__all__ = [
    "BaseHttpPaginationIterator",
    "CustomPaginationIterator",
    "IncrementAnIndexPaginationIterator",
    "LinkInResponseBodyPaginationIterator",
    "LinkInResponseHeaderPaginationIterator",
    "NonePaginationIterator",
    "TokenPaginationIterator",
    "PAGINATION_ITERATORS",
    "PaginationIteratorFactory",
    "create_pagination_iterator",
    "Page",
    "PaginationState",
    "RequestDescriptor",
    "Response",
]
