from __future__ import annotations

from typing import Any

import typer
from snapapi_client.types import AnalyzeProvider, ExtractType

from .. import console
from ..formatting import format_duration_ms
from ..http import client_from_context
from ..results import unwrap_or_exit


def extract(
        ctx: typer.Context,
        url: str = typer.Argument(..., help="Page URL to extract from."),
        extract_type: ExtractType = typer.Option(ExtractType.MARKDOWN, "--type", help="What to extract."),
        selector: str | None = typer.Option(None, "--selector", help="Only extract from this CSS selector."),
        max_length: int | None = typer.Option(None, "--max-length", help="Truncate content to this many chars."),
        clean: bool = typer.Option(False, "--clean", help="Strip boilerplate from the output."),
        json_out: bool = typer.Option(False, "--json", help="Print the raw JSON result."),
):
    options: dict[str, Any] = {"selector": selector, "max_length": max_length}
    if clean:
        options["clean_output"] = True

    client = client_from_context(ctx)
    try:
        data = unwrap_or_exit(client.extract(url, extract_type, options), action="Extract")
    finally:
        client.close()

    if json_out or not isinstance(data, dict):
        console.print_json(data)
        return

    if extract_type is ExtractType.LINKS and isinstance(data.get("links"), list):
        for link in data["links"]:
            console.print(f"{link.get('href', '')}  {link.get('text', '')}".rstrip(), markup=False)
    elif extract_type is ExtractType.IMAGES and isinstance(data.get("images"), list):
        for image in data["images"]:
            console.print(str(image.get("src", "")), markup=False)
    elif extract_type in (ExtractType.METADATA, ExtractType.STRUCTURED):
        console.print_json(data.get(extract_type.value) or data)
    else:
        console.print(str(data.get("content") or ""), markup=False)
    console.info(f"{data.get('contentLength', '-')} chars, took {format_duration_ms(data.get('took'))}")


def analyze(
        ctx: typer.Context,
        url: str = typer.Argument(..., help="Page URL to analyze."),
        prompt: str = typer.Option(..., "--prompt", help="What to ask about the page."),
        provider: AnalyzeProvider = typer.Option(..., "--provider", help="AI provider."),
        provider_key: str = typer.Option(
            ...,
            "--provider-key",
            envvar="SNAPAPI_PROVIDER_KEY",
            help="API key for the AI provider.",
        ),
        model: str | None = typer.Option(None, "--model", help="Provider model (defaults to the provider's)."),
        include_screenshot: bool = typer.Option(False, "--screenshot", help="Send a screenshot as context."),
        json_out: bool = typer.Option(False, "--json", help="Print the raw JSON result."),
):
    options: dict[str, Any] = {"model": model}
    if include_screenshot:
        options["include_screenshot"] = True

    client = client_from_context(ctx)
    try:
        data = unwrap_or_exit(
            client.analyze(url, prompt, provider, provider_key, options),
            action="Analyze",
        )
    finally:
        client.close()

    if json_out or not isinstance(data, dict):
        console.print_json(data)
        return

    if data.get("structured"):
        console.print_json(data["structured"])
    else:
        console.print(str(data.get("result") or ""), markup=False)
    usage = data.get("usage") or {}
    console.info(
        f"{data.get('provider', provider.value)}/{data.get('model', '-')}, "
        f"{usage.get('totalTokens', '-')} tokens, took {format_duration_ms(data.get('took'))}"
    )
