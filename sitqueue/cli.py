import asyncio
from collections import Counter
from typing import Annotated, Optional, TypedDict

import typer
from anystore.cli import ErrorHandler
from anystore.io import smart_open, smart_write
from anystore.logging import configure_logging
from rich.console import Console

from sitqueue import __version__
from sitqueue.core.settings import Settings
from sitqueue.factories import get_queue
from sitqueue.model import MutationKind, MutationRecord, RecordAdapter
from sitqueue.queue import MutationQueue
from sitqueue.storage.payloads import FilePayloadStore

settings = Settings()
cli = typer.Typer(
    no_args_is_help=True,
    pretty_exceptions_enable=settings.debug,
    name="Sits offline queue",
)
console = Console(stderr=True)


class State(TypedDict):
    queue: MutationQueue | None


STATE: State = {"queue": None}


def dump_record(record: MutationRecord) -> bytes:
    return RecordAdapter.dump_json(record, by_alias=True) + b"\n"


class Queue(ErrorHandler):
    def __enter__(self) -> MutationQueue:
        super().__enter__()
        if STATE["queue"] is None:
            STATE["queue"] = get_queue()
        return STATE["queue"]


async def _with_queue(queue: MutationQueue, func, *args):
    await queue.initialize()
    try:
        return await func(queue, *args)
    finally:
        await queue.cleanup()


@cli.callback(invoke_without_command=True)
def cli_sitqueue(
    version: Annotated[Optional[bool], typer.Option(..., help="Show version")] = False,
    settings: Annotated[
        Optional[bool], typer.Option(..., help="Show current settings")
    ] = False,
    uri: Annotated[str | None, typer.Option(..., help="Queue store uri (path)")] = None,
):
    if version:
        console.print(__version__)
        raise typer.Exit()
    settings_ = Settings()
    configure_logging(level=settings_.log_level)
    STATE["queue"] = get_queue(uri)
    if settings:
        console.print(settings_)
        console.print(STATE)
        raise typer.Exit()


@cli.command("ls")
def cli_ls(
    kind: Annotated[
        Optional[MutationKind], typer.Option(help="Only show records of this kind")
    ] = None,
    out_uri: Annotated[str, typer.Option("-o")] = "-",
):
    """
    List queued records (photo payloads are not resolved)
    """

    async def _ls(queue: MutationQueue) -> tuple[MutationRecord, ...]:
        return queue.list(kind)

    with Queue() as queue:
        records = asyncio.run(_with_queue(queue, _ls))
        with smart_open(out_uri, "wb") as o:
            o.writelines(dump_record(r) for r in records)


@cli.command("show")
def cli_show(record_id: str, out_uri: Annotated[str, typer.Option("-o")] = "-"):
    """
    Show a queued record with its photo data resolved
    """

    async def _show(queue: MutationQueue) -> MutationRecord | None:
        return await queue.fetch_hydrated(record_id)

    with Queue() as queue:
        record = asyncio.run(_with_queue(queue, _show))
        if record is None:
            console.print(f"[red]Record not found: `{record_id}`[/red]")
            raise typer.Exit(code=1)
        smart_write(out_uri, dump_record(record))


@cli.command("rm")
def cli_rm(record_id: str):
    """
    Remove a queued record and its stored photo
    """

    async def _rm(queue: MutationQueue) -> bool:
        found = queue.get(record_id) is not None
        await queue.remove(record_id)
        return found

    with Queue() as queue:
        if not asyncio.run(_with_queue(queue, _rm)):
            console.print(f"[yellow]Record not found: `{record_id}`[/yellow]")


@cli.command("status")
def cli_status():
    """
    Show queue size per kind and if there is work to drain
    """

    async def _status(queue: MutationQueue) -> dict:
        kinds = Counter(str(r.kind) for r in queue.list())
        return {
            "records": len(queue),
            "kinds": dict(kinds),
            "online": queue.is_online(),
            "has_work_to_drain": queue.has_work_to_drain(),
        }

    with Queue() as queue:
        console.print(asyncio.run(_with_queue(queue, _status)))


@cli.command("payloads")
def cli_payloads(out_uri: Annotated[str, typer.Option("-o")] = "-"):
    """
    List record ids that own a stored photo payload
    """
    with Queue() as queue:
        if not isinstance(queue.payloads, FilePayloadStore):
            console.print("[yellow]Photos are stored inline, no payload store[/yellow]")
            return
        with smart_open(out_uri, "wb") as o:
            o.writelines(f"{i}\n".encode() for i in queue.payloads.iterate_ids())
