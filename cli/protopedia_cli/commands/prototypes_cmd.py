from __future__ import annotations

from pathlib import Path

import httpx
import typer
from protopedia_client import ApiError, CancellationError, ListPrototypesParams
from rich.table import Table

from .. import console
from ..config import load_config
from ..http import make_client, run_call


def _build_params(
        user: str | None,
        material: str | None,
        tag: str | None,
        event: str | None,
        event_id: int | None,
        award: str | None,
        prototype_id: int | None,
        status: int | None,
        limit: int | None,
        offset: int | None,
) -> ListPrototypesParams:
    return ListPrototypesParams(
        user_nm=user,
        material_nm=material,
        tag_nm=tag,
        event_nm=event,
        event_id=event_id,
        award_nm=award,
        prototype_id=prototype_id,
        status=status,
        limit=limit,
        offset=offset,
    )


def _verbose(ctx: typer.Context) -> bool:
    return bool((ctx.obj or {}).get("verbose"))


def _fail(action: str, exc: Exception) -> typer.Exit:
    if isinstance(exc, ApiError):
        if exc.status in (401, 403):
            console.err("Unauthorized. Check PROTOPEDIA_API_V2_TOKEN or `protopedia settings set --token`.")
        else:
            console.err(f"Failed to {action}: {exc.status} {exc.status_text} ({exc.message})")
        return typer.Exit(code=2)
    if isinstance(exc, CancellationError):
        console.err(f"Failed to {action}: {exc}")
        return typer.Exit(code=3)
    console.err(f"Failed to {action}: network error: {exc}")
    return typer.Exit(code=4)


def list_prototypes(
        ctx: typer.Context,
        user: str | None = typer.Option(None, "--user", help="Filter by user name."),
        material: str | None = typer.Option(None, "--material", help="Filter by material name."),
        tag: str | None = typer.Option(None, "--tag", help="Filter by tag name."),
        event: str | None = typer.Option(None, "--event", help="Filter by event name."),
        event_id: int | None = typer.Option(None, "--event-id", help="Filter by event ID."),
        award: str | None = typer.Option(None, "--award", help="Filter by award name."),
        prototype_id: int | None = typer.Option(None, "--id", help="Fetch a single prototype by ID."),
        status: int | None = typer.Option(None, "--status", help="Filter by status code."),
        limit: int | None = typer.Option(None, "--limit", help="Max prototypes to return."),
        offset: int | None = typer.Option(None, "--offset", help="Offset for listing."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
        timeout: float | None = typer.Option(None, "--timeout", help="Timeout in seconds (0 disables)."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    params = _build_params(user, material, tag, event, event_id, award, prototype_id, status, limit, offset)
    client = make_client(
        load_config(),
        base_url_override=base_url,
        timeout_override=timeout,
        verbose=_verbose(ctx),
    )

    try:
        data = run_call(lambda token: client.list_prototypes(params, cancel=token))
    except (ApiError, CancellationError, httpx.RequestError) as e:
        raise _fail("list prototypes", e)

    if json_out:
        console.print_json(data)
        return

    results = data.get("results") or []
    console.info(f"count={data.get('count', 0)} shown={len(results)}")

    table = Table(title="Prototypes")
    table.add_column("id", style="bold")
    table.add_column("name")
    table.add_column("team")
    table.add_column("status")
    table.add_column("views", justify="right")
    table.add_column("likes", justify="right")

    for p in results:
        table.add_row(
            str(p.get("id", "-")),
            str(p.get("prototypeNm") or "-"),
            str(p.get("teamNm") or "-"),
            str(p.get("status", "-")),
            str(p.get("viewCount", "-")),
            str(p.get("goodCount", "-")),
        )

    console.console.print(table)


def download_tsv(
        ctx: typer.Context,
        user: str | None = typer.Option(None, "--user", help="Filter by user name."),
        material: str | None = typer.Option(None, "--material", help="Filter by material name."),
        tag: str | None = typer.Option(None, "--tag", help="Filter by tag name."),
        event: str | None = typer.Option(None, "--event", help="Filter by event name."),
        event_id: int | None = typer.Option(None, "--event-id", help="Filter by event ID."),
        award: str | None = typer.Option(None, "--award", help="Filter by award name."),
        prototype_id: int | None = typer.Option(None, "--id", help="Fetch a single prototype by ID."),
        status: int | None = typer.Option(None, "--status", help="Filter by status code."),
        limit: int | None = typer.Option(None, "--limit", help="Max prototypes to return."),
        offset: int | None = typer.Option(None, "--offset", help="Offset for listing."),
        output: Path | None = typer.Option(None, "--output", "-o", help="Write TSV to this file."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
        timeout: float | None = typer.Option(None, "--timeout", help="Timeout in seconds (0 disables)."),
):
    params = _build_params(user, material, tag, event, event_id, award, prototype_id, status, limit, offset)
    client = make_client(
        load_config(),
        base_url_override=base_url,
        timeout_override=timeout,
        verbose=_verbose(ctx),
    )

    try:
        text = run_call(lambda token: client.download_prototypes_tsv(params, cancel=token))
    except (ApiError, CancellationError, httpx.RequestError) as e:
        raise _fail("download TSV", e)

    if output is None:
        console.write_raw(text)
        return
    output.write_text(text, encoding="utf-8")
    console.ok(f"TSV written: {output}")
