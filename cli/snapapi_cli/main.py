from __future__ import annotations

import typer

from .commands import account_cmd, capture_cmd, content_cmd, settings_cmd
from .commands.batch_cmd import app as batch_app
from .logging_ import setup_logging


def _build_app() -> typer.Typer:
    app = typer.Typer(
        name="snapapi",
        help="SnapAPI CLI: screenshots, PDFs, videos and page extraction.",
        no_args_is_help=True,
    )

    app.add_typer(settings_cmd.app, name="settings")
    app.add_typer(batch_app, name="batch")

    app.command("screenshot")(capture_cmd.screenshot)
    app.command("pdf")(capture_cmd.pdf)
    app.command("video")(capture_cmd.video)
    app.command("extract")(content_cmd.extract)
    app.command("analyze")(content_cmd.analyze)
    app.command("devices")(account_cmd.devices)
    app.command("capabilities")(account_cmd.capabilities)
    app.command("usage")(account_cmd.usage)
    app.command("ping")(account_cmd.ping)

    @app.callback()
    def _main(
            ctx: typer.Context,
            verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logs."),
            profile: str | None = typer.Option(None, "--profile", help="Config profile to use."),
            base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
            api_key: str | None = typer.Option(None, "--api-key", help="Override API key."),
    ):
        setup_logging(verbose)
        ctx.obj = {"profile": profile, "base_url": base_url, "api_key": api_key}

    return app


app = _build_app()
