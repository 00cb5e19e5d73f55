from __future__ import annotations

import typer
from snapapi_client import SnapClient, ValidationError
from snapapi_client.config_types import ClientConfig

from . import console
from .config import (
    ENV_API_KEY,
    AppConfig,
    apply_profile,
    load_config,
    normalize_base_url,
    resolve_api_key,
    resolve_base_url,
)


def make_client(
    cfg: AppConfig,
    *,
    profile: str | None,
    base_url_override: str | None,
    api_key_override: str | None = None,
) -> SnapClient:
    effective_cfg = apply_profile(cfg, profile)
    base_url = normalize_base_url(base_url_override, warn=True) or resolve_base_url(effective_cfg)
    api_key = (api_key_override or "").strip() or resolve_api_key(effective_cfg)

    return SnapClient(
        ClientConfig(
            api_key=api_key,
            base_url=base_url,
            timeout_ms=effective_cfg.timeout_ms,
        )
    )


def client_from_context(ctx: typer.Context) -> SnapClient:
    opts = ctx.obj or {}
    try:
        return make_client(
            load_config(),
            profile=opts.get("profile"),
            base_url_override=opts.get("base_url"),
            api_key_override=opts.get("api_key"),
        )
    except ValidationError as e:
        console.err(f"{e}. Run `snapapi settings set --api-key ...` or set {ENV_API_KEY}.")
        raise typer.Exit(code=2)
