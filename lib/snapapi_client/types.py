from __future__ import annotations

from enum import Enum

from .errors import ValidationError


class ResponseMode(str, Enum):
    BINARY = "binary"
    BASE64 = "base64"
    JSON = "json"

    @classmethod
    def parse(cls, value: str | ResponseMode | None) -> ResponseMode:
        # absent and "binary" are the same mode
        if isinstance(value, cls):
            return value
        if value is None or value == "":
            return cls.BINARY
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            allowed = ", ".join(m.value for m in cls)
            raise ValidationError(f"Invalid responseType {value!r}. Use one of: {allowed}.") from None


class ExtractType(str, Enum):
    MARKDOWN = "markdown"
    TEXT = "text"
    HTML = "html"
    ARTICLE = "article"
    STRUCTURED = "structured"
    LINKS = "links"
    IMAGES = "images"
    METADATA = "metadata"


class AnalyzeProvider(str, Enum):
    OPENAI = "openai"
    ANTHROPIC = "anthropic"


IMAGE_FORMATS = ("png", "jpeg", "webp", "avif", "pdf")
VIDEO_FORMATS = ("mp4", "webm", "gif")

DEVICE_PRESETS = (
    "desktop-1080p", "desktop-1440p", "desktop-4k",
    "macbook-pro-13", "macbook-pro-16", "imac-24",
    "iphone-se", "iphone-12", "iphone-13", "iphone-14", "iphone-14-pro",
    "iphone-15", "iphone-15-pro", "iphone-15-pro-max",
    "ipad", "ipad-mini", "ipad-air", "ipad-pro-11", "ipad-pro-12.9",
    "pixel-7", "pixel-8", "pixel-8-pro",
    "samsung-galaxy-s23", "samsung-galaxy-s24", "samsung-galaxy-tab-s9",
)
