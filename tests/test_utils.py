import json
from pathlib import Path

import pytest
import requests

from rescript_openapi import utils
from rescript_openapi.utils import (
    DocumentLoaderError,
    load_document,
    load_document_from_url,
    parse_document,
)

FIXTURES = Path(__file__).parent / "fixtures"

DOCUMENT = {"openapi": "3.0.0", "info": {"title": "T", "version": "1"}, "paths": {}}


class FakeResponse:
    def __init__(self, text, content_type="", status_code=200):
        self.text = text
        self.headers = {"content-type": content_type}
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(response=self)


class TestParseDocument:
    def test_json(self):
        assert parse_document('{"a": 1}', "inline", "json") == {"a": 1}

    def test_yaml(self):
        assert parse_document("a: 1\n", "inline", "yaml") == {"a": 1}

    def test_guess_falls_back_to_yaml(self):
        assert parse_document("a: [1, 2]\n", "inline") == {"a": [1, 2]}

    def test_invalid_json(self):
        with pytest.raises(DocumentLoaderError, match="Invalid JSON in inline"):
            parse_document("{oops", "inline", "json")

    def test_invalid_yaml(self):
        with pytest.raises(DocumentLoaderError, match="Invalid YAML"):
            parse_document("a: [1, 2\n", "inline", "yaml")


class TestLoadFromFile:
    def test_json_file(self, tmp_path):
        path = tmp_path / "openapi.json"
        path.write_text(json.dumps(DOCUMENT))
        source, data = load_document(file_path=path)
        assert source == str(path)
        assert data == DOCUMENT

    def test_yaml_file(self, petstore):
        _, data = load_document(file_path=FIXTURES / "petstore.yaml")
        assert data == petstore

    def test_unknown_extension(self, tmp_path):
        path = tmp_path / "openapi.txt"
        path.write_text("info:\n  title: T\n")
        _, data = load_document(file_path=str(path))
        assert data == {"info": {"title": "T"}}

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_document(file_path=tmp_path / "missing.json")

    def test_invalid_json_file(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{")
        with pytest.raises(DocumentLoaderError, match="Invalid JSON"):
            load_document(file_path=path)


class TestLoadFromUrl:
    def test_json_content_type(self, monkeypatch):
        calls = []

        def fake_get(url, timeout):
            calls.append((url, timeout))
            return FakeResponse(json.dumps(DOCUMENT), "application/json")

        monkeypatch.setattr(utils.requests, "get", fake_get)
        source, data = load_document(url="https://example.com/openapi", timeout=5)

        assert source == "https://example.com/openapi"
        assert data == DOCUMENT
        assert calls == [("https://example.com/openapi", 5)]

    def test_format_from_path(self, monkeypatch):
        monkeypatch.setattr(
            utils.requests, "get", lambda url, timeout: FakeResponse("info:\n  title: T\n")
        )
        _, data = load_document_from_url("https://example.com/openapi.yaml")
        assert data == {"info": {"title": "T"}}

    def test_http_error(self, monkeypatch):
        monkeypatch.setattr(
            utils.requests, "get", lambda url, timeout: FakeResponse("", status_code=404)
        )
        with pytest.raises(DocumentLoaderError, match="HTTP error 404"):
            load_document_from_url("https://example.com/openapi.json")

    def test_timeout(self, monkeypatch):
        def fake_get(url, timeout):
            raise requests.exceptions.Timeout()

        monkeypatch.setattr(utils.requests, "get", fake_get)
        with pytest.raises(DocumentLoaderError, match="timeout"):
            load_document_from_url("https://example.com/openapi.json")

    def test_connection_error(self, monkeypatch):
        def fake_get(url, timeout):
            raise requests.exceptions.ConnectionError("refused")

        monkeypatch.setattr(utils.requests, "get", fake_get)
        with pytest.raises(DocumentLoaderError, match="Connection error"):
            load_document_from_url("https://example.com/openapi.json")

    def test_invalid_url(self):
        with pytest.raises(DocumentLoaderError, match="Invalid URL"):
            load_document_from_url("not a url")


class TestLoadDocumentArguments:
    def test_neither(self):
        with pytest.raises(DocumentLoaderError, match="Either file_path or url"):
            load_document()

    def test_both(self, tmp_path):
        with pytest.raises(DocumentLoaderError, match="Cannot specify both"):
            load_document(file_path=tmp_path / "a.json", url="https://example.com/a.json")
