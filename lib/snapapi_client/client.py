from __future__ import annotations

from typing import Any, Mapping, Sequence
from urllib.parse import quote

import httpx

from .config_types import ClientConfig
from .decoding import decode
from .errors import SnapClientError, ValidationError
from .options import dump_body, merge_options
from .result import Err, Result
from .transport import RequestDescriptor, Transport
from .types import AnalyzeProvider, ExtractType, ResponseMode

CallResult = Result[Any, SnapClientError]


def _quote_id(value: str) -> str:
    return quote(str(value).strip(), safe="")


class SnapClient:
    """Client for the SnapAPI screenshot service.

    Every method returns ``Ok(value)`` or ``Err(error)``; nothing is raised
    for validation, transport, service or decode failures. Binary endpoints
    yield ``bytes``, everything else the parsed JSON body.

    Options may be passed as a mapping, as keyword arguments, or both.
    snake_case keys are sent as camelCase::

        client.screenshot(url="https://example.com", full_page=True, response_type="json")
    """

    def __init__(self, cfg: ClientConfig, *, transport: httpx.BaseTransport | None = None):
        self._t = Transport(cfg, transport=transport)

    @property
    def config(self) -> ClientConfig:
        return self._t.config

    def close(self) -> None:
        self._t.close()

    def __enter__(self) -> SnapClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _call(
            self,
            method: str,
            path: str,
            *,
            body: Mapping[str, Any] | None = None,
            mode: ResponseMode = ResponseMode.JSON,
    ) -> CallResult:
        descriptor = RequestDescriptor(
            path=path,
            method=method,
            body=dump_body(body) if body is not None else None,
        )
        return self._t.dispatch(descriptor).and_then(lambda envelope: decode(envelope, mode))

    # --- capture ---
    def screenshot(self, options: Mapping[str, Any] | None = None, **fields: Any) -> CallResult:
        body = merge_options(options, fields)
        if not (body.get("url") or body.get("html") or body.get("markdown")):
            return Err(ValidationError("Either url, html, or markdown is required"))
        try:
            mode = ResponseMode.parse(body.get("responseType"))
        except ValidationError as e:
            return Err(e)
        if "responseType" in body:
            body["responseType"] = mode.value
        return self._call("POST", "/v1/screenshot", body=body, mode=mode)

    def screenshot_from_html(self, html: str, options: Mapping[str, Any] | None = None, **fields: Any) -> CallResult:
        body = merge_options(options, fields)
        body.pop("url", None)
        body["html"] = html
        return self.screenshot(body)

    def screenshot_from_markdown(
            self, markdown: str, options: Mapping[str, Any] | None = None, **fields: Any
    ) -> CallResult:
        body = merge_options(options, fields)
        body.pop("url", None)
        body.pop("html", None)
        body["markdown"] = markdown
        return self.screenshot(body)

    def screenshot_device(
            self, url: str, device: str, options: Mapping[str, Any] | None = None, **fields: Any
    ) -> CallResult:
        body = merge_options(options, fields)
        body.update({"url": url, "device": device})
        return self.screenshot(body)

    def screenshot_async(self, options: Mapping[str, Any] | None = None, **fields: Any) -> CallResult:
        body = merge_options(options, fields)
        if not (body.get("url") or body.get("html") or body.get("markdown")):
            return Err(ValidationError("Either url, html, or markdown is required"))
        return self._call("POST", "/v1/screenshot/async", body=body)

    def get_async_screenshot(self, job_id: str) -> CallResult:
        if not str(job_id or "").strip():
            return Err(ValidationError("Job ID is required"))
        return self._call("GET", f"/v1/screenshot/async/{_quote_id(job_id)}")

    def pdf(self, options: Mapping[str, Any] | None = None, **fields: Any) -> CallResult:
        body = merge_options(options, fields)
        if not (body.get("url") or body.get("html")):
            return Err(ValidationError("Either url or html is required"))
        body["format"] = "pdf"
        return self._call("POST", "/v1/pdf", body=body, mode=ResponseMode.BINARY)

    def video(self, options: Mapping[str, Any] | None = None, **fields: Any) -> CallResult:
        body = merge_options(options, fields)
        if not body.get("url"):
            return Err(ValidationError("URL is required"))
        try:
            mode = ResponseMode.parse(body.get("responseType"))
        except ValidationError as e:
            return Err(e)
        if "responseType" in body:
            body["responseType"] = mode.value
        return self._call("POST", "/v1/video", body=body, mode=mode)

    # --- batch ---
    def batch(
            self,
            urls: Sequence[str] | None = None,
            options: Mapping[str, Any] | None = None,
            **fields: Any,
    ) -> CallResult:
        body = merge_options(options, fields)
        if urls is not None:
            body["urls"] = [urls] if isinstance(urls, str) else list(urls)
        if not body.get("urls"):
            return Err(ValidationError("URLs array is required"))
        return self._call("POST", "/v1/screenshot/batch", body=body)

    def get_batch_status(self, job_id: str) -> CallResult:
        if not str(job_id or "").strip():
            return Err(ValidationError("Job ID is required"))
        return self._call("GET", f"/v1/screenshot/batch/{_quote_id(job_id)}")

    # --- content ---
    def extract(
            self,
            url: str | None = None,
            extract_type: ExtractType | str | None = None,
            options: Mapping[str, Any] | None = None,
            **fields: Any,
    ) -> CallResult:
        body = merge_options(options, fields)
        if url is not None:
            body["url"] = url
        if extract_type is not None:
            body["type"] = extract_type
        if not body.get("url"):
            return Err(ValidationError("URL is required"))
        raw_type = body.get("type")
        if not raw_type:
            return Err(ValidationError("Extract type is required"))
        try:
            body["type"] = ExtractType(raw_type).value
        except ValueError:
            allowed = ", ".join(t.value for t in ExtractType)
            return Err(ValidationError(f"Invalid extract type {raw_type!r}. Use one of: {allowed}."))
        return self._call("POST", "/v1/extract", body=body)

    def extract_markdown(self, url: str) -> CallResult:
        return self.extract(url, ExtractType.MARKDOWN)

    def extract_article(self, url: str) -> CallResult:
        return self.extract(url, ExtractType.ARTICLE)

    def extract_structured(self, url: str) -> CallResult:
        return self.extract(url, ExtractType.STRUCTURED)

    def extract_text(self, url: str) -> CallResult:
        return self.extract(url, ExtractType.TEXT)

    def extract_links(self, url: str) -> CallResult:
        return self.extract(url, ExtractType.LINKS)

    def extract_images(self, url: str) -> CallResult:
        return self.extract(url, ExtractType.IMAGES)

    def extract_metadata(self, url: str) -> CallResult:
        return self.extract(url, ExtractType.METADATA)

    def analyze(
            self,
            url: str | None = None,
            prompt: str | None = None,
            provider: AnalyzeProvider | str | None = None,
            api_key: str | None = None,
            options: Mapping[str, Any] | None = None,
            **fields: Any,
    ) -> CallResult:
        """Ask an AI provider about a page, using the caller's own provider key."""
        body = merge_options(options, fields)
        for key, value in (("url", url), ("prompt", prompt), ("provider", provider), ("apiKey", api_key)):
            if value is not None:
                body[key] = value
        if not body.get("url"):
            return Err(ValidationError("URL is required"))
        if not body.get("prompt"):
            return Err(ValidationError("Prompt is required"))
        if not body.get("provider"):
            return Err(ValidationError("Provider is required"))
        if not body.get("apiKey"):
            return Err(ValidationError("API key for AI provider is required"))
        try:
            body["provider"] = AnalyzeProvider(body["provider"]).value
        except ValueError:
            allowed = ", ".join(p.value for p in AnalyzeProvider)
            return Err(ValidationError(f"Invalid provider {body['provider']!r}. Use one of: {allowed}."))
        return self._call("POST", "/v1/analyze", body=body)

    # --- account / service info ---
    def ping(self) -> CallResult:
        return self._call("GET", "/v1/ping")

    def get_devices(self) -> CallResult:
        return self._call("GET", "/v1/devices")

    def get_capabilities(self) -> CallResult:
        return self._call("GET", "/v1/capabilities")

    def get_usage(self) -> CallResult:
        return self._call("GET", "/v1/usage")


def create_client(api_key: str, **config: Any) -> SnapClient:
    transport = config.pop("transport", None)
    return SnapClient(ClientConfig(api_key=api_key, **config), transport=transport)
