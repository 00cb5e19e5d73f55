from __future__ import annotations

from pathlib import Path
from typing import Any

import typer
from snapapi_client.types import DEVICE_PRESETS, IMAGE_FORMATS, VIDEO_FORMATS

from .. import console
from ..formatting import format_bytes, format_duration_ms
from ..http import client_from_context
from ..results import summarize_payload, unwrap_or_exit


def _read_source(path: Path | None) -> str | None:
    if path is None:
        return None
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        console.err(f"Cannot read {path}: {e}")
        raise typer.Exit(code=2)


def _write_output(data: bytes, out: Path | None, default_name: str) -> None:
    path = out or Path(default_name)
    try:
        path.write_bytes(data)
    except OSError as e:
        console.err(f"Cannot write {path}: {e}")
        raise typer.Exit(code=2)
    console.ok(f"Saved {format_bytes(len(data))} to {path}")


def _print_json_result(data: Any) -> None:
    console.print_json(summarize_payload(data))
    if isinstance(data, dict) and data.get("took") is not None:
        console.info(f"took {format_duration_ms(data.get('took'))}")


def screenshot(
        ctx: typer.Context,
        url: str | None = typer.Argument(None, help="Page URL to capture."),
        html_file: Path | None = typer.Option(None, "--html", help="Render HTML from this file instead of a URL."),
        markdown_file: Path | None = typer.Option(None, "--markdown", help="Render Markdown from this file."),
        fmt: str = typer.Option("png", "--format", help="png, jpeg, webp, avif or pdf."),
        device: str | None = typer.Option(None, "--device", help="Device preset, e.g. iphone-15-pro."),
        width: int | None = typer.Option(None, "--width", help="Viewport width in px."),
        height: int | None = typer.Option(None, "--height", help="Viewport height in px."),
        full_page: bool = typer.Option(False, "--full-page", help="Capture the full scrollable page."),
        dark_mode: bool = typer.Option(False, "--dark-mode", help="Emulate prefers-color-scheme: dark."),
        block_ads: bool = typer.Option(False, "--block-ads", help="Block ads and cookie banners."),
        delay: int | None = typer.Option(None, "--delay", help="Delay before capture in ms."),
        out: Path | None = typer.Option(None, "-o", "--out", help="Output file."),
        json_out: bool = typer.Option(False, "--json", help="Request a JSON result with metadata and print it."),
):
    fmt = fmt.strip().lower()
    if fmt not in IMAGE_FORMATS:
        console.err(f"Invalid format. Use one of: {', '.join(IMAGE_FORMATS)}.")
        raise typer.Exit(code=2)
    if device and device not in DEVICE_PRESETS:
        console.warn(f"Unknown device preset {device!r}; sending it anyway.")

    options: dict[str, Any] = {
        "url": url,
        "html": _read_source(html_file),
        "markdown": _read_source(markdown_file),
        "format": fmt,
        "device": device,
        "width": width,
        "height": height,
        "delay": delay,
    }
    if full_page:
        options["full_page"] = True
    if dark_mode:
        options["dark_mode"] = True
    if block_ads:
        options.update({"block_ads": True, "block_cookie_banners": True})
    if json_out:
        options.update({"response_type": "json", "include_metadata": True})

    client = client_from_context(ctx)
    try:
        data = unwrap_or_exit(client.screenshot(options), action="Screenshot")
    finally:
        client.close()

    if json_out:
        _print_json_result(data)
        return
    _write_output(data, out, f"screenshot.{fmt}")


def pdf(
        ctx: typer.Context,
        url: str | None = typer.Argument(None, help="Page URL to render."),
        html_file: Path | None = typer.Option(None, "--html", help="Render HTML from this file instead of a URL."),
        page_size: str = typer.Option("a4", "--page-size", help="a4, a3, a5, letter, legal or tabloid."),
        landscape: bool = typer.Option(False, "--landscape", help="Landscape orientation."),
        print_background: bool = typer.Option(True, "--background/--no-background", help="Print backgrounds."),
        out: Path | None = typer.Option(None, "-o", "--out", help="Output file."),
):
    options: dict[str, Any] = {
        "url": url,
        "html": _read_source(html_file),
        "pdf_options": {
            "page_size": page_size.strip().lower(),
            "landscape": landscape,
            "print_background": print_background,
        },
    }

    client = client_from_context(ctx)
    try:
        data = unwrap_or_exit(client.pdf(options), action="PDF")
    finally:
        client.close()
    _write_output(data, out, "document.pdf")


def video(
        ctx: typer.Context,
        url: str = typer.Argument(..., help="Page URL to record."),
        fmt: str = typer.Option("mp4", "--format", help="mp4, webm or gif."),
        duration: int | None = typer.Option(None, "--duration", help="Duration in ms (1000-30000)."),
        width: int | None = typer.Option(None, "--width", help="Viewport width in px."),
        height: int | None = typer.Option(None, "--height", help="Viewport height in px."),
        scroll: bool = typer.Option(False, "--scroll", help="Record a scroll animation."),
        scroll_back: bool = typer.Option(False, "--scroll-back", help="Scroll back to the top at the end."),
        out: Path | None = typer.Option(None, "-o", "--out", help="Output file."),
        json_out: bool = typer.Option(False, "--json", help="Request a JSON result and print it."),
):
    fmt = fmt.strip().lower()
    if fmt not in VIDEO_FORMATS:
        console.err(f"Invalid format. Use one of: {', '.join(VIDEO_FORMATS)}.")
        raise typer.Exit(code=2)

    options: dict[str, Any] = {
        "url": url,
        "format": fmt,
        "duration": duration,
        "width": width,
        "height": height,
    }
    if scroll:
        options["scroll"] = True
        options["scroll_back"] = scroll_back or None
    if json_out:
        options["response_type"] = "json"

    client = client_from_context(ctx)
    try:
        data = unwrap_or_exit(client.video(options), action="Video")
    finally:
        client.close()

    if json_out:
        _print_json_result(data)
        return
    _write_output(data, out, f"video.{fmt}")
