"""restpager - one iteration contract for paginated REST endpoints."""

__version__ = "0.1.0"

from restpager.config import PaginationType, SourceConfig
from restpager.exceptions import (
    ExpressionEvaluationError,
    InvalidConfigurationError,
    MalformedResponseError,
    RestPagerException,
    TerminatedIterationError,
    TransportFailure,
)
from restpager.pagination import (
    BaseHttpPaginationIterator,
    Page,
    PaginationIteratorFactory,
    RequestDescriptor,
    Response,
    create_pagination_iterator,
)
from restpager.transport import Transport, UrllibTransport

__all__ = [
    "PaginationType",
    "SourceConfig",
    "ExpressionEvaluationError",
    "InvalidConfigurationError",
    "MalformedResponseError",
    "RestPagerException",
    "TerminatedIterationError",
    "TransportFailure",
    "BaseHttpPaginationIterator",
    "Page",
    "PaginationIteratorFactory",
    "RequestDescriptor",
    "Response",
    "create_pagination_iterator",
    "Transport",
    "UrllibTransport",
    "__version__",
]
