from __future__ import annotations

from typing import Any

import typer
from rich.table import Table
from snapapi_client.types import IMAGE_FORMATS

from .. import console
from ..formatting import format_duration_ms, format_list_timestamp
from ..http import client_from_context
from ..results import unwrap_or_exit

BATCH_USAGE = """\
Usage:
  snapapi batch submit <url>... [--format png] [--full-page] [--webhook-url URL]
  snapapi batch status <job-id>
"""

app = typer.Typer(help="Batch screenshot jobs.\n\n" + BATCH_USAGE)


@app.command("submit")
def submit_batch(
        ctx: typer.Context,
        urls: list[str] = typer.Argument(..., help="URLs to capture."),
        fmt: str = typer.Option("png", "--format", help="png, jpeg, webp, avif or pdf."),
        full_page: bool = typer.Option(False, "--full-page", help="Capture full pages."),
        webhook_url: str | None = typer.Option(None, "--webhook-url", help="Notify this URL when done."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    fmt = fmt.strip().lower()
    if fmt not in IMAGE_FORMATS:
        console.err(f"Invalid format. Use one of: {', '.join(IMAGE_FORMATS)}.")
        raise typer.Exit(code=2)

    options: dict[str, Any] = {"format": fmt, "webhook_url": webhook_url}
    if full_page:
        options["full_page"] = True

    client = client_from_context(ctx)
    try:
        data = unwrap_or_exit(client.batch(urls, options), action="Batch submit")
    finally:
        client.close()

    if json_out or not isinstance(data, dict):
        console.print_json(data)
        return
    job_id = data.get("jobId")
    console.ok(f"Batch job {job_id} {data.get('status', 'pending')} ({data.get('total', len(urls))} URLs)")
    if job_id:
        console.info(f"Check status: snapapi batch status {job_id}")


@app.command("status")
def batch_status(
        ctx: typer.Context,
        job_id: str = typer.Argument(..., help="Batch job ID."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    client = client_from_context(ctx)
    try:
        data = unwrap_or_exit(client.get_batch_status(job_id), action="Batch status")
    finally:
        client.close()

    if json_out or not isinstance(data, dict):
        console.print_json(data)
        return

    console.print(
        f"job={data.get('jobId', job_id)} status={data.get('status', '-')} "
        f"completed={data.get('completed', 0)}/{data.get('total', '-')} failed={data.get('failed', 0)}"
    )
    console.print(
        f"created={format_list_timestamp(data.get('createdAt'))} "
        f"completed_at={format_list_timestamp(data.get('completedAt'))}"
    )

    results = data.get("results") or []
    if not results:
        return
    table = Table(show_header=True, header_style="bold")
    table.add_column("URL")
    table.add_column("Status")
    table.add_column("Duration")
    table.add_column("Error")
    for item in results:
        table.add_row(
            str(item.get("url", "")),
            str(item.get("status", "")),
            format_duration_ms(item.get("duration")),
            str(item.get("error") or ""),
        )
    console.print(table)
