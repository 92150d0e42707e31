"""Tests for the restpager command line."""

import json
from unittest.mock import patch

import pytest

from restpager.cli import main
from restpager.pagination.models import Response


@pytest.fixture
def source_file(tmp_path):
    path = tmp_path / "source.yaml"
    path.write_text(
        """
url: "http://api/items"
pagination_type: link_in_response_header
environments:
  broken:
    pagination_type: link_in_response_body
"""
    )
    return str(path)


class ReplayTransport:
    def __init__(self, responses):
        self.responses = list(responses)

    def execute(self, request):
        return self.responses.pop(0)


def _patch_transport(responses):
    transport = ReplayTransport(responses)
    return patch("restpager.transport.UrllibTransport", return_value=transport)


class TestPagesCommand:
    def test_prints_one_line_per_page(self, source_file, capsys):
        responses = [
            Response(200, {"Link": "http://api/items?page=2"}, b"[1]"),
            Response(200, {}, b"[2]"),
        ]
        with _patch_transport(responses):
            exit_code = main(["pages", source_file])

        assert exit_code == 0
        lines = [json.loads(line) for line in capsys.readouterr().out.strip().splitlines()]
        assert [line["number"] for line in lines] == [1, 2]
        assert lines[1]["url"] == "http://api/items?page=2"
        assert lines[0]["bytes"] == 3

    def test_max_pages_and_body(self, source_file, capsys):
        responses = [Response(200, {"Link": "http://api/items?page=2"}, b"[1]")]
        with _patch_transport(responses):
            exit_code = main(["pages", source_file, "--max-pages", "1", "--include-body"])

        assert exit_code == 0
        lines = capsys.readouterr().out.strip().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["body"] == "[1]"

    def test_failure_returns_nonzero(self, source_file):
        with _patch_transport([Response(500, {}, b"")]):
            assert main(["pages", source_file]) == 1

    def test_missing_file(self, tmp_path):
        assert main(["pages", str(tmp_path / "missing.yaml")]) == 1


class TestValidateCommand:
    def test_valid_config(self, source_file, capsys):
        assert main(["validate", source_file]) == 0
        assert "link_in_response_header" in capsys.readouterr().out

    def test_invalid_environment(self, source_file):
        assert main(["validate", source_file, "--env", "broken"]) == 1

    def test_invalid_custom_script(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text(
            """
url: "http://api/items"
pagination_type: custom
custom_script: "x = 1"
"""
        )
        assert main(["validate", str(path)]) == 1


def test_no_command_prints_help():
    assert main([]) == 1
