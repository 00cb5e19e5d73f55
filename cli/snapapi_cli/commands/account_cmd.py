from __future__ import annotations

import typer
from rich.table import Table

from .. import console
from ..formatting import format_list_timestamp
from ..http import client_from_context
from ..results import unwrap_or_exit


def ping(ctx: typer.Context):
    client = client_from_context(ctx)
    try:
        data = unwrap_or_exit(client.ping(), action="Ping")
    finally:
        client.close()
    status = data.get("status") if isinstance(data, dict) else None
    console.ok(f"{client.config.base_url} is reachable ({status or 'ok'})")


def devices(
        ctx: typer.Context,
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    client = client_from_context(ctx)
    try:
        data = unwrap_or_exit(client.get_devices(), action="Devices")
    finally:
        client.close()

    groups = data.get("devices") if isinstance(data, dict) else None
    if json_out or not isinstance(groups, dict):
        console.print_json(data)
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Group")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Viewport")
    table.add_column("Scale")
    table.add_column("Mobile")
    for group, items in groups.items():
        for d in items or []:
            table.add_row(
                str(group),
                str(d.get("id", "")),
                str(d.get("name", "")),
                f"{d.get('width', '-')}x{d.get('height', '-')}",
                str(d.get("deviceScaleFactor", "-")),
                "yes" if d.get("isMobile") else "no",
            )
    console.print(table)
    console.info(f"{data.get('total', table.row_count)} devices")


def capabilities(ctx: typer.Context):
    client = client_from_context(ctx)
    try:
        data = unwrap_or_exit(client.get_capabilities(), action="Capabilities")
    finally:
        client.close()
    console.print_json(data)


def usage(
        ctx: typer.Context,
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    client = client_from_context(ctx)
    try:
        data = unwrap_or_exit(client.get_usage(), action="Usage")
    finally:
        client.close()

    if json_out or not isinstance(data, dict):
        console.print_json(data)
        return
    console.print(
        f"used={data.get('used', '-')} limit={data.get('limit', '-')} remaining={data.get('remaining', '-')} "
        f"resets={format_list_timestamp(data.get('resetAt'))}"
    )
