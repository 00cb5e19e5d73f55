from __future__ import annotations

import os

import typer

from .. import console
from ..config import config_path, default_config, load_config, normalize_base_url, save_config

app = typer.Typer(help="Manage local CLI settings (~/.config/snapapi/config.toml).")


def _mask(value: str) -> str:
    value = (value or "").strip()
    if not value:
        return "(empty)"
    if len(value) <= 8:
        return "****"
    return f"{value[:4]}…{value[-4:]}"


@app.command("init")
def init_settings(
        force: bool = typer.Option(False, "--force", help="Overwrite existing config."),
        api_key: str = typer.Option(
            ...,
            "--api-key",
            prompt="SnapAPI key",
            hide_input=True,
            help="Your SnapAPI key (sk_live_...).",
        ),
        base_url: str | None = typer.Option(None, "--base-url", help="Override the API base URL."),
):
    path = config_path()
    if os.path.exists(path) and not force:
        console.info(f"Config already exists: {path}")
        console.info("Use --force to overwrite.")
        return

    cfg = default_config()
    cfg.auth.api_key = api_key.strip()
    if not cfg.auth.api_key:
        console.err("API key cannot be empty.")
        raise typer.Exit(code=2)
    if base_url is not None:
        cfg.base_url = normalize_base_url(base_url, warn=True) or cfg.base_url
    saved = save_config(cfg)
    console.ok(f"Config written: {saved}")


@app.command("show")
def show_settings():
    cfg = load_config()
    console.print(
        f"base_url={cfg.base_url} timeout_ms={cfg.timeout_ms} api_key={_mask(cfg.auth.api_key)}"
    )


@app.command("get")
def get_setting(
        key: str = typer.Argument(..., help="Setting key (base_url, timeout_ms)."),
):
    cfg = load_config()
    k = key.strip().lower()
    if k == "base_url":
        console.print(cfg.base_url)
        return
    if k == "timeout_ms":
        console.print(str(cfg.timeout_ms))
        return
    console.err(f"Unknown setting: {key}")
    raise typer.Exit(code=2)


@app.command("set")
def set_setting(
        api_key: str | None = typer.Option(None, "--api-key", help="Set API key."),
        base_url: str | None = typer.Option(None, "--base-url", help="Set API base URL."),
        timeout_ms: int | None = typer.Option(None, "--timeout-ms", min=1, help="Set request timeout in ms."),
):
    cfg = load_config()
    if api_key is not None:
        cfg.auth.api_key = api_key.strip()
    if base_url is not None:
        cfg.base_url = normalize_base_url(base_url, warn=True) or cfg.base_url
    if timeout_ms is not None:
        cfg.timeout_ms = int(timeout_ms)
    saved = save_config(cfg)
    console.ok(f"Settings updated: {saved}")
