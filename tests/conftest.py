from typing import List, Union

import pytest

from restpager.config import SourceConfig
from restpager.pagination.models import RequestDescriptor, Response
from restpager.utils import logging as restpager_logging


class FakeTransport:
    """Replays canned responses and records every request it receives."""

    def __init__(self, responses: List[Union[Response, Exception]]):
        self._responses = list(responses)
        self.requests: List[RequestDescriptor] = []

    def execute(self, request: RequestDescriptor) -> Response:
        self.requests.append(request)
        if not self._responses:
            raise AssertionError(f"Unexpected request: {request.full_url()}")
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    @property
    def urls(self) -> List[str]:
        return [r.full_url() for r in self.requests]


def _response(body: str = "", status: int = 200, headers=None) -> Response:
    return Response(status_code=status, headers=headers or {}, body=body.encode("utf-8"))


@pytest.fixture
def make_transport():
    """Build a FakeTransport from a list of responses."""
    return FakeTransport


@pytest.fixture
def make_config():
    """Build a validated SourceConfig with a default URL."""

    def _make(**overrides) -> SourceConfig:
        data = {"url": "http://api/items"}
        data.update(overrides)
        return SourceConfig(**data)

    return _make


@pytest.fixture(autouse=True)
def fresh_logger():
    """Give each test its own global logger so secrets and levels do not leak between tests."""
    original = restpager_logging.logger
    restpager_logging.configure_logging(structured=False, level="WARNING")
    yield
    restpager_logging.logger = original


@pytest.fixture
def make_response():
    """Build a Response from a text body."""
    return _response
