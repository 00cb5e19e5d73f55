from __future__ import annotations

import json

import httpx
import pytest

from snapapi_client import (
    ApiError,
    AuthError,
    ClientConfig,
    DecodeError,
    Err,
    ExtractType,
    Ok,
    SnapClient,
    ValidationError,
    create_client,
)

PNG_BYTES = bytes([0x89, 0x50, 0x4E, 0x47, 0x0D, 0x0A, 0x1A, 0x0A, 0x00, 0x01])


class _Recorder:
    def __init__(self, status: int = 200, **kwargs) -> None:
        self.requests: list[httpx.Request] = []
        self.status = status
        self.kwargs = kwargs or {"content": PNG_BYTES}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status, **self.kwargs)

    @property
    def last_body(self) -> dict:
        return json.loads(self.requests[-1].content)


def _client(recorder: _Recorder) -> SnapClient:
    return SnapClient(
        ClientConfig(api_key="sk_test_123", base_url="https://api.example.test"),
        transport=httpx.MockTransport(recorder),
    )


def test_config_requires_api_key() -> None:
    with pytest.raises(ValidationError, match="API key is required"):
        ClientConfig(api_key="  ")


@pytest.mark.parametrize("key", ["sk_live\nabc", "sk_live_ключ", "sk\tlive"])
def test_config_rejects_keys_that_cannot_be_sent(key: str) -> None:
    with pytest.raises(ValidationError, match="invalid characters"):
        ClientConfig(api_key=key)


def test_config_defaults() -> None:
    cfg = ClientConfig(api_key="k")
    assert cfg.base_url == "https://api.snapapi.pics"
    assert cfg.timeout_ms == 60000
    assert cfg.timeout_s == 60.0


def test_screenshot_requires_a_source() -> None:
    rec = _Recorder()
    result = _client(rec).screenshot(format="png")
    assert isinstance(result, Err)
    assert isinstance(result.error, ValidationError)
    assert str(result.error) == "Either url, html, or markdown is required"
    assert rec.requests == []


def test_screenshot_binary_by_default() -> None:
    rec = _Recorder()
    result = _client(rec).screenshot(url="https://example.com", full_page=True, block_ads=True)

    assert result == Ok(PNG_BYTES)
    request = rec.requests[0]
    assert request.method == "POST"
    assert request.url.path == "/v1/screenshot"
    assert rec.last_body == {"url": "https://example.com", "fullPage": True, "blockAds": True}


def test_screenshot_json_mode_returns_parsed_result() -> None:
    payload = {"success": True, "data": "aGVsbG8=", "format": "png", "width": 1280, "height": 800,
               "fileSize": 5, "took": 300, "cached": False, "metadata": {"title": "Example"}}
    rec = _Recorder(200, json=payload)
    result = _client(rec).screenshot({"url": "https://example.com", "responseType": "json", "includeMetadata": True})

    assert result.unwrap()["metadata"]["title"] == "Example"
    assert rec.last_body["responseType"] == "json"


def test_response_type_is_sent_in_canonical_form() -> None:
    rec = _Recorder(200, json={"success": True})
    client = _client(rec)

    assert client.screenshot(url="https://example.com", response_type=" JSON ").unwrap() == {"success": True}
    assert rec.last_body["responseType"] == "json"

    assert client.video(url="https://example.com", response_type="Json").unwrap() == {"success": True}
    assert rec.last_body["responseType"] == "json"


def test_screenshot_rejects_unknown_response_type() -> None:
    rec = _Recorder()
    result = _client(rec).screenshot(url="https://example.com", response_type="xml")
    assert isinstance(result.error, ValidationError)
    assert rec.requests == []


def test_screenshot_helpers_fill_the_source() -> None:
    rec = _Recorder()
    client = _client(rec)

    client.screenshot_from_html("<h1>Hi</h1>", width=800)
    assert rec.last_body == {"width": 800, "html": "<h1>Hi</h1>"}

    client.screenshot_from_markdown("# Title")
    assert rec.last_body == {"markdown": "# Title"}

    client.screenshot_device("https://example.com", "iphone-15-pro", dark_mode=True)
    assert rec.last_body == {"darkMode": True, "url": "https://example.com", "device": "iphone-15-pro"}


def test_pdf_forces_pdf_format_and_binary() -> None:
    rec = _Recorder(200, content=b"%PDF-1.7")
    result = _client(rec).pdf(url="https://example.com", format="png", response_type="json",
                              pdf_options={"page_size": "a4"})

    assert result == Ok(b"%PDF-1.7")
    assert rec.requests[0].url.path == "/v1/pdf"
    assert rec.last_body["format"] == "pdf"
    assert rec.last_body["pdfOptions"] == {"pageSize": "a4"}


def test_pdf_requires_url_or_html() -> None:
    result = _client(_Recorder()).pdf(markdown="# nope")
    assert str(result.error) == "Either url or html is required"


def test_video_requires_url_and_honours_mode() -> None:
    rec = _Recorder(200, json={"success": True, "format": "mp4"})
    client = _client(rec)
    assert isinstance(client.video(format="mp4").error, ValidationError)

    result = client.video(url="https://example.com", scroll=True, scroll_easing="ease_in_out", response_type="json")
    assert result.unwrap() == {"success": True, "format": "mp4"}
    assert rec.last_body["scrollEasing"] == "ease_in_out"
    assert rec.requests[0].url.path == "/v1/video"


def test_batch_submit_and_status() -> None:
    rec = _Recorder(200, json={"success": True, "jobId": "job/1", "status": "pending", "total": 2})
    client = _client(rec)

    assert str(client.batch([]).error) == "URLs array is required"
    assert rec.requests == []

    result = client.batch(["https://a.test", "https://b.test"], webhook_url="https://hook.test")
    assert result.unwrap()["jobId"] == "job/1"
    assert rec.requests[0].url.path == "/v1/screenshot/batch"
    assert rec.last_body == {"webhookUrl": "https://hook.test", "urls": ["https://a.test", "https://b.test"]}

    client.get_batch_status("job/1")
    status_request = rec.requests[-1]
    assert status_request.method == "GET"
    assert status_request.url.raw_path == b"/v1/screenshot/batch/job%2F1"

    assert isinstance(client.get_batch_status(" ").error, ValidationError)


def test_async_screenshot_endpoints() -> None:
    rec = _Recorder(200, json={"jobId": "abc", "status": "queued"})
    client = _client(rec)

    assert client.screenshot_async(url="https://example.com").unwrap()["jobId"] == "abc"
    assert rec.requests[-1].url.path == "/v1/screenshot/async"

    client.get_async_screenshot("abc")
    assert rec.requests[-1].url.path == "/v1/screenshot/async/abc"


def test_extract_shortcuts_and_validation() -> None:
    rec = _Recorder(200, json={"success": True, "content": "# Example", "type": "markdown"})
    client = _client(rec)

    assert client.extract_markdown("https://example.com").unwrap()["content"] == "# Example"
    assert rec.last_body == {"url": "https://example.com", "type": "markdown"}

    client.extract_links("https://example.com")
    assert rec.last_body["type"] == "links"

    client.extract("https://example.com", ExtractType.ARTICLE, clean_output=True)
    assert rec.last_body == {"cleanOutput": True, "url": "https://example.com", "type": "article"}

    calls = len(rec.requests)
    assert str(client.extract(None, "markdown").error) == "URL is required"
    assert isinstance(client.extract("https://example.com", "pdf").error, ValidationError)
    assert isinstance(client.extract("https://example.com").error, ValidationError)
    assert len(rec.requests) == calls


def test_analyze_validation_order() -> None:
    client = _client(_Recorder())
    assert str(client.analyze().error) == "URL is required"
    assert str(client.analyze("https://example.com").error) == "Prompt is required"
    assert str(client.analyze("https://example.com", "Summarize").error) == "Provider is required"
    assert str(client.analyze("https://example.com", "Summarize", "openai").error) == \
        "API key for AI provider is required"
    assert isinstance(client.analyze("https://example.com", "Summarize", "mistral", "sk").error, ValidationError)


def test_analyze_sends_provider_key() -> None:
    rec = _Recorder(200, json={"success": True, "result": "A page.", "provider": "anthropic"})
    result = _client(rec).analyze("https://example.com", "Summarize", "anthropic", "sk-ant", json_schema={"a_b": 1})

    assert result.unwrap()["result"] == "A page."
    assert rec.requests[0].url.path == "/v1/analyze"
    assert rec.last_body == {
        "jsonSchema": {"a_b": 1},
        "url": "https://example.com",
        "prompt": "Summarize",
        "provider": "anthropic",
        "apiKey": "sk-ant",
    }


@pytest.mark.parametrize(
    "method, path",
    [
        ("ping", "/v1/ping"),
        ("get_devices", "/v1/devices"),
        ("get_capabilities", "/v1/capabilities"),
        ("get_usage", "/v1/usage"),
    ],
)
def test_read_only_lookups(method: str, path: str) -> None:
    rec = _Recorder(200, json={"success": True})
    result = getattr(_client(rec), method)()
    assert result == Ok({"success": True})
    assert rec.requests[0].method == "GET"
    assert rec.requests[0].url.path == path
    assert rec.requests[0].content == b""


def test_service_errors_are_normalized() -> None:
    rec = _Recorder(429, json={"error": {"code": "RATE_LIMITED", "message": "too many requests"}})
    result = _client(rec).screenshot(url="https://example.com")
    assert isinstance(result, Err)
    assert isinstance(result.error, ApiError)
    assert result.error.code == "RATE_LIMITED"
    assert result.error.status_code == 429

    rec.status, rec.kwargs = 401, {"text": "nope"}
    result = _client(rec).get_usage()
    assert isinstance(result.error, AuthError)
    assert result.error.code == "UNKNOWN_ERROR"
    assert result.error.message == "HTTP 401"


def test_non_json_success_body_is_decode_error() -> None:
    rec = _Recorder(200, content=b"<html>maintenance</html>")
    result = _client(rec).get_devices()
    assert isinstance(result.error, DecodeError)


def test_unwrap_raises_the_error() -> None:
    rec = _Recorder(500, json={"error": {"code": "RENDER_FAILED", "message": "boom"}})
    with pytest.raises(ApiError, match="boom"):
        _client(rec).screenshot(url="https://example.com").unwrap()


def test_create_client() -> None:
    rec = _Recorder(200, json={"used": 3})
    with create_client("sk_test", base_url="https://api.example.test", timeout_ms=5000,
                       transport=httpx.MockTransport(rec)) as client:
        assert client.config.timeout_ms == 5000
        assert client.get_usage() == Ok({"used": 3})
    assert rec.requests[0].headers["X-Api-Key"] == "sk_test"
