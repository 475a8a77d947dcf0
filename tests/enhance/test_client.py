"""
Tests for enhance.client

The HTTP layer is replaced by a fake session returning real
requests.Response objects.
"""

import base64
import json

import pytest
import requests

from slice_studio.enhance import ClientConfig, Generation, GenerationClient, GenerationError
from slice_studio.enhance.client import normalize_error_message, to_data_url


def make_response(status=200, body=None, content=None):
    response = requests.Response()
    response.status_code = status
    if content is not None:
        response._content = content
    else:
        response._content = json.dumps(body if body is not None else {}).encode("utf-8")
    response.headers["Content-Type"] = "application/json"
    return response


class FakeSession:
    """Records requests and replays queued responses."""

    def __init__(self, *responses):
        self.headers = {}
        self.calls = []
        self._responses = list(responses)

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        result = self._responses.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def config():
    return ClientConfig("https://studio.example.com/", token="secret", request_timeout=5)


class TestGenerationParsing:

    def test_from_dict_when_succeeded_then_output_file_id(self):
        generation = Generation.from_dict({
            "id": 42,
            "status": "succeeded",
            "progress": 1,
            "outputFile": {"id": "file-1"},
            "model": "nano-banana",
        })
        assert generation.id == "42"
        assert generation.succeeded
        assert generation.is_finished
        assert generation.output_file_id == "file-1"
        assert generation.progress == 1.0

    def test_from_dict_when_failed_then_failure_reason_used(self):
        generation = Generation.from_dict({"id": "g", "status": "failed", "failureReason": "nsfw"})
        assert generation.is_finished
        assert not generation.succeeded
        assert generation.error == "nsfw"

    def test_from_dict_when_succeeded_without_file_then_not_succeeded(self):
        assert not Generation.from_dict({"id": "g", "status": "succeeded"}).succeeded


class TestHelpers:

    def test_to_data_url_when_bytes_then_base64_png(self):
        url = to_data_url(b"\x89PNG")
        assert url.startswith("data:image/png;base64,")
        assert base64.b64decode(url.split(",", 1)[1]) == b"\x89PNG"

    def test_normalize_error_message_when_credits_then_balance_message(self):
        assert normalize_error_message("Insufficient credits for model") == "API balance is insufficient"
        assert normalize_error_message("boom") == "boom"


class TestGenerationClient:

    def test_init_when_token_then_bearer_header(self, config):
        session = FakeSession()
        GenerationClient(config, session=session)
        assert session.headers["Authorization"] == "Bearer secret"

    def test_url_when_trailing_slash_in_base_then_joined_once(self, config):
        client = GenerationClient(config, session=FakeSession())
        assert client.url("api/generations") == "https://studio.example.com/api/generations"

    def test_build_file_url_when_options_then_query_string(self, config):
        client = GenerationClient(config, session=FakeSession())
        url = client.build_file_url("f1", download=True, filename="1.png")
        assert url == (
            "https://studio.example.com/api/files/f1?token=secret&download=1&filename=1.png"
        )

    def test_build_file_url_when_anonymous_then_no_query(self):
        client = GenerationClient(ClientConfig("http://localhost:3000"), session=FakeSession())
        assert client.build_file_url("f1") == "http://localhost:3000/api/files/f1"

    def test_generate_image_when_called_then_posts_ordered_references(self, config):
        session = FakeSession(make_response(body={"created": [{"id": "g1", "status": "queued"}]}))
        client = GenerationClient(config, session=session)

        created = client.generate_image(
            prompt="sharpen",
            model="nano-banana",
            image_size="2K",
            aspect_ratio="auto",
            references=[b"a", b"b"],
            reference_file_ids=["stored"],
        )

        assert [g.id for g in created] == ["g1"]
        method, url, kwargs = session.calls[0]
        assert (method, url) == ("POST", "https://studio.example.com/api/generate/image")
        assert kwargs["timeout"] == 5
        payload = kwargs["json"]
        assert payload["imageSize"] == "2K"
        assert payload["batch"] == 1
        assert [ref["type"] for ref in payload["referenceList"]] == ["fileId", "base64", "base64"]
        assert payload["referenceList"][0]["value"] == "stored"
        assert payload["referenceList"][2]["value"] == to_data_url(b"b")

    def test_get_generation_when_ok_then_parsed(self, config):
        session = FakeSession(make_response(body={"id": "g1", "status": "running", "progress": 0.5}))
        generation = GenerationClient(config, session=session).get_generation("g1")
        assert generation.status == "running"
        assert session.calls[0][1].endswith("/api/generations/g1")

    def test_list_generations_when_limit_then_params_sent(self, config):
        session = FakeSession(make_response(body={"items": [{"id": "a"}, {"id": "b"}]}))
        items = GenerationClient(config, session=session).list_generations(limit=2)
        assert [g.id for g in items] == ["a", "b"]
        assert session.calls[0][2]["params"] == {"type": "image", "limit": 2}

    def test_download_file_when_ok_then_raw_bytes(self, config):
        session = FakeSession(make_response(content=b"\x89PNG-data"))
        assert GenerationClient(config, session=session).download_file("f1") == b"\x89PNG-data"

    def test_request_when_http_error_then_message_from_body(self, config):
        session = FakeSession(make_response(status=402, body={"error": "Insufficient credits"}))
        with pytest.raises(GenerationError, match="API balance is insufficient"):
            GenerationClient(config, session=session).get_generation("g1")

    def test_request_when_http_error_without_body_then_status_message(self, config):
        session = FakeSession(make_response(status=500, content=b"<html>"))
        with pytest.raises(GenerationError, match=r"Request failed \(500\)"):
            GenerationClient(config, session=session).get_generation("g1")

    def test_request_when_connection_error_then_generation_error(self, config):
        session = FakeSession(requests.ConnectionError("refused"))
        with pytest.raises(GenerationError, match="failed"):
            GenerationClient(config, session=session).get_generation("g1")

    def test_request_when_invalid_json_then_generation_error(self, config):
        session = FakeSession(make_response(content=b"not json"))
        with pytest.raises(GenerationError, match="invalid JSON"):
            GenerationClient(config, session=session).get_generation("g1")
