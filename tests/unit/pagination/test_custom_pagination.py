"""Tests for CustomPaginationIterator."""

import textwrap
from pathlib import Path

import pytest

from restpager.config import SourceConfig
from restpager.exceptions import ExpressionEvaluationError, InvalidConfigurationError
from restpager.pagination import CustomPaginationIterator

EXAMPLES_DIR = Path(__file__).resolve().parents[3] / "examples"


def _config(make_config, script, **overrides):
    return make_config(
        pagination_type="custom", custom_script=textwrap.dedent(script), **overrides
    )


CURSOR_SCRIPT = """
import json

def get_next_page_url(url, page, headers):
    cursor = json.loads(page).get("cursor")
    if not cursor:
        return None
    return "http://api/items?cursor=" + cursor
"""


class TestCustomScript:
    """Tests for the script contract."""

    def test_url_string_result(self, make_config, make_transport, make_response):
        """Test a returned URL becomes the next request."""
        transport = make_transport(
            [make_response('{"cursor": "c2"}'), make_response('{"cursor": null}')]
        )
        pages = list(CustomPaginationIterator(_config(make_config, CURSOR_SCRIPT), transport))

        assert len(pages) == 2
        assert transport.urls == ["http://api/items", "http://api/items?cursor=c2"]

    def test_script_sees_url_body_and_headers(self, make_config, make_transport, make_response):
        """Test the script receives the page URL, body text and lowercased headers."""
        script = """
        seen = []

        def get_next_page_url(url, page, headers):
            seen.append((url, page, headers))
            if headers.get("x-more") == "yes":
                return url + "?p=2"
            return None
        """
        transport = make_transport(
            [make_response("first", headers={"X-More": "yes"}), make_response("second")]
        )
        iterator = CustomPaginationIterator(_config(make_config, script), transport)

        list(iterator)

        seen = iterator._script.__globals__["seen"]
        assert seen[0] == ("http://api/items", "first", {"x-more": "yes"})
        assert seen[1][0] == "http://api/items?p=2"

    @pytest.mark.parametrize("header_name", ["X-Cursor", "x-cursor"])
    def test_shipped_cursor_example(self, make_transport, make_response, header_name):
        """Test the example script finds the cursor whatever case the server uses."""
        config = SourceConfig.from_yaml(str(EXAMPLES_DIR / "custom_cursor.yaml"))
        transport = make_transport(
            [
                make_response('{"has_more": true}', headers={header_name: "c2"}),
                make_response('{"has_more": false}'),
            ]
        )

        pages = list(CustomPaginationIterator(config, transport))

        assert len(pages) == 2
        assert transport.urls[1] == "https://api.example.com/v2/records?cursor=c2"

    def test_dict_result_overlays_request(self, make_config, make_transport, make_response):
        """Test a returned dict replaces only the fields it names."""
        script = """
        def get_next_page_url(url, page, headers):
            if page == "last":
                return None
            return {"method": "post", "headers": {"X-Cursor": "2"}, "body": "after=2"}
        """
        transport = make_transport([make_response("more"), make_response("last")])
        config = _config(make_config, script, headers={"Accept": "text/plain"})
        iterator = CustomPaginationIterator(config, transport)

        list(iterator)

        second = transport.requests[1]
        assert second.url == "http://api/items"
        assert second.method == "POST"
        assert second.headers == {"Accept": "text/plain", "X-Cursor": "2"}
        assert second.body == "after=2"

    def test_dict_result_with_params(self, make_config, make_transport, make_response):
        """Test params in the returned dict are merged into the URL."""
        script = """
        def get_next_page_url(url, page, headers):
            return {"url": "http://api/other", "params": {"page": 2}}
        """
        transport = make_transport([make_response("x")])
        iterator = CustomPaginationIterator(_config(make_config, script, max_pages=1), transport)

        iterator.next()
        assert iterator.has_next() is False

        transport = make_transport([make_response("x")])
        iterator = CustomPaginationIterator(_config(make_config, script), transport)
        iterator.next()
        assert iterator.state.next_request.full_url() == "http://api/other?page=2"

    def test_empty_string_terminates(self, make_config, make_transport, make_response):
        """Test an empty string is a stop signal."""
        script = """
        def get_next_page_url(url, page, headers):
            return ""
        """
        transport = make_transport([make_response("x")])
        iterator = CustomPaginationIterator(_config(make_config, script), transport)

        iterator.next()
        assert iterator.has_next() is False

    def test_script_from_file(self, make_config, make_transport, make_response, tmp_path):
        """Test the script can be loaded from custom_script_path."""
        script_file = tmp_path / "paging.py"
        script_file.write_text(textwrap.dedent(CURSOR_SCRIPT), encoding="utf-8")
        config = make_config(pagination_type="custom", custom_script_path=str(script_file))
        transport = make_transport([make_response('{"cursor": null}')])

        pages = list(CustomPaginationIterator(config, transport))
        assert len(pages) == 1


class TestCustomScriptErrors:
    """Tests for script failures."""

    def test_raising_script(self, make_config, make_transport, make_response):
        """Test exceptions inside the script become ExpressionEvaluationError with the cause."""
        script = """
        def get_next_page_url(url, page, headers):
            return {}["missing"]
        """
        transport = make_transport([make_response("x")])
        iterator = CustomPaginationIterator(_config(make_config, script), transport)

        with pytest.raises(ExpressionEvaluationError) as exc_info:
            iterator.next()

        assert isinstance(exc_info.value.cause, KeyError)
        assert iterator.has_next() is True
        assert iterator.page_count == 0

    @pytest.mark.parametrize("result", ["42", "['http://api/2']", "True", "{'href': 'x'}"])
    def test_unrecognized_shape(self, make_config, make_transport, make_response, result):
        """Test return values that are not None, str or a request dict are rejected."""
        script = f"""
        def get_next_page_url(url, page, headers):
            return {result}
        """
        transport = make_transport([make_response("x")])
        iterator = CustomPaginationIterator(_config(make_config, script), transport)

        with pytest.raises(ExpressionEvaluationError):
            iterator.next()

    def test_syntax_error(self, make_config, make_transport):
        """Test a script that does not compile fails at construction."""
        script = """
        def get_next_page_url(url, page, headers)
            return None
        """
        with pytest.raises(InvalidConfigurationError, match="syntax error"):
            CustomPaginationIterator(_config(make_config, script), make_transport([]))

    def test_missing_function(self, make_config, make_transport):
        """Test a script without get_next_page_url is rejected before any request."""
        transport = make_transport([])
        with pytest.raises(InvalidConfigurationError, match="get_next_page_url"):
            CustomPaginationIterator(_config(make_config, "x = 1\n"), transport)
        assert transport.requests == []

    def test_failing_module_code(self, make_config, make_transport):
        """Test errors while loading the script are configuration errors."""
        with pytest.raises(InvalidConfigurationError, match="ZeroDivisionError"):
            CustomPaginationIterator(_config(make_config, "1 / 0\n"), make_transport([]))

    def test_unreadable_script_file(self, make_config, make_transport, tmp_path):
        """Test a missing script file is a configuration error."""
        config = make_config(
            pagination_type="custom", custom_script_path=str(tmp_path / "missing.py")
        )
        with pytest.raises(InvalidConfigurationError):
            CustomPaginationIterator(config, make_transport([]))
