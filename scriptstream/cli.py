"""scriptstream CLI — Typer + Rich terminal interface.

Commands: decode, replay, inspect, scripts.
Replays byte streams through the StreamDecoder in arbitrary increments and
shows what each increment released, for debugging token-stream rendering.
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from scriptstream import __version__
from scriptstream.decoder.stream import StreamDecoder
from scriptstream.registry import (
    build_decoder,
    load_decoder_config,
    load_script_table,
    load_scripts,
)
from scriptstream.schemas.decoding import DecodedSegment, DecodeStatus, NormalizationForm
from scriptstream.text import describe_scalars, normalization_report

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    name="scriptstream",
    help="Incremental, script-aware decoding of token byte streams.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ───────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"scriptstream {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v",
        help="Enable debug logging.",
    ),
) -> None:
    """scriptstream — incremental, script-aware decoding of token byte streams."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(name)s %(levelname)s %(message)s", force=True,
        )
    else:
        logging.basicConfig(level=logging.WARNING, force=True)


# ── Helpers ──────────────────────────────────────────────────────

_STATUS_STYLE: dict[DecodeStatus, str] = {
    DecodeStatus.CLEAN: "green",
    DecodeStatus.BOUNDARY_DEFERRED: "yellow",
    DecodeStatus.TERMINAL_CORRUPTION: "bold red",
}


def _make_decoder(form: NormalizationForm | None, scripts: list[str] | None) -> StreamDecoder:
    """Build a decoder from defaults plus CLI overrides, exit on error."""
    try:
        if form is None and not scripts:
            return build_decoder()
        config = load_decoder_config()
        updates: dict[str, object] = {}
        if form is not None:
            updates["normalization"] = form
        if scripts:
            updates["scripts"] = scripts
        return build_decoder(config.model_copy(update=updates))
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error loading configuration:[/red] {e}")
        raise typer.Exit(1) from None


def _split(data: bytes, chunk_size: int) -> list[bytes]:
    return [data[i : i + chunk_size] for i in range(0, len(data), chunk_size)]


def _replay(decoder: StreamDecoder, increments: list[bytes]) -> list[tuple[bytes, DecodedSegment]]:
    rows = [(increment, decoder.feed(increment)) for increment in increments]
    rows.append((b"", decoder.flush()))
    return rows


def _render_segments(rows: list[tuple[bytes, DecodedSegment]], decoder: StreamDecoder) -> None:
    table = Table(title="Decoded Segments", show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Increment", style="cyan")
    table.add_column("Text")
    table.add_column("Status")

    last = len(rows) - 1
    for index, (increment, segment) in enumerate(rows):
        label = "flush" if index == last else str(index + 1)
        table.add_row(
            label,
            increment.hex(" ") or "[dim]—[/dim]",
            Text(segment.text) if segment.text else Text("—", style="dim"),
            Text(segment.status.value, style=_STATUS_STYLE[segment.status]),
        )

    console.print(table)
    stats = decoder.stats
    console.print(
        f"\n[dim]{stats.increments} increments, {stats.bytes_in} bytes, "
        f"{stats.chars_out} chars, {stats.replacements} replacement(s)[/dim]"
    )


def _print_result(rows: list[tuple[bytes, DecodedSegment]], decoder: StreamDecoder) -> None:
    text = "".join(segment.text for _, segment in rows)
    console.print(text, markup=False, highlight=False)
    replacements = decoder.stats.replacements
    if replacements:
        err_console.print(
            f"[yellow]Warning:[/yellow] {replacements} replacement character(s) "
            "inserted for invalid UTF-8"
        )


# ── Commands ─────────────────────────────────────────────────────


@app.command()
def decode(
    path: str = typer.Argument(..., help="File to decode, or '-' for stdin"),
    chunk_size: int = typer.Option(
        1, "--chunk-size", "-c", min=1,
        help="Bytes per increment",
    ),
    segments: bool = typer.Option(
        False, "--segments", "-s",
        help="Show every increment and the text it released",
    ),
    form: NormalizationForm | None = typer.Option(
        None, "--form",
        help="Normalization form (defaults to config)",
    ),
    script: list[str] = typer.Option(
        [], "--script",
        help="Enable lookahead for a registered script (repeatable)",
    ),
) -> None:
    """Replay a byte file through the decoder in fixed-size increments."""
    if path == "-":
        data = typer.get_binary_stream("stdin").read()
    else:
        file_path = Path(path)
        if not file_path.is_file():
            console.print(f"[red]File not found:[/red] {path}")
            raise typer.Exit(1)
        data = file_path.read_bytes()

    decoder = _make_decoder(form, script)
    rows = _replay(decoder, _split(data, chunk_size))
    if segments:
        _render_segments(rows, decoder)
    else:
        _print_result(rows, decoder)


@app.command()
def replay(
    increments: list[str] = typer.Argument(
        ..., help="One hex string per increment, e.g. 'e0 b8' 'aa'",
    ),
    segments: bool = typer.Option(
        True, "--segments/--text",
        help="Show a segment table or only the decoded text",
    ),
    form: NormalizationForm | None = typer.Option(
        None, "--form",
        help="Normalization form (defaults to config)",
    ),
    script: list[str] = typer.Option(
        [], "--script",
        help="Enable lookahead for a registered script (repeatable)",
    ),
) -> None:
    """Feed hex-encoded increments exactly as given."""
    try:
        raw = [bytes.fromhex(item) for item in increments]
    except ValueError as e:
        console.print(f"[red]Invalid hex increment:[/red] {e}")
        raise typer.Exit(1) from None

    decoder = _make_decoder(form, script)
    rows = _replay(decoder, raw)
    if segments:
        _render_segments(rows, decoder)
    else:
        _print_result(rows, decoder)


@app.command()
def inspect(
    text: str = typer.Argument(..., help="Text to inspect"),
) -> None:
    """Show every scalar with its script, role and combining class."""
    try:
        table_data = load_script_table()
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error loading scripts:[/red] {e}")
        raise typer.Exit(1) from None

    table = Table(title="Scalars", show_lines=False)
    table.add_column("Code Point", style="bold cyan")
    table.add_column("Char")
    table.add_column("Name")
    table.add_column("Script", style="dim")
    table.add_column("Role")
    table.add_column("CCC", justify="right")

    for info in describe_scalars(text, table_data):
        table.add_row(
            info.label,
            Text(info.char),
            info.name or "[dim]—[/dim]",
            info.script or "—",
            info.role.value,
            str(info.combining_class),
        )
    console.print(table)

    report = normalization_report(text)
    console.print(
        f"\nNFC length: {report.nfc_length}  NFD length: {report.nfd_length}  "
        f"already NFC: {'yes' if report.is_nfc else 'no'}"
    )


@app.command()
def scripts() -> None:
    """List registered scripts and their combining-table ranges."""
    try:
        registry = load_scripts()
        enabled = set(load_decoder_config().scripts)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error loading scripts:[/red] {e}")
        raise typer.Exit(1) from None

    table = Table(title="Registered Scripts", show_lines=True)
    table.add_column("Key", style="bold cyan")
    table.add_column("Name")
    table.add_column("Block", style="dim")
    table.add_column("Ranges")
    table.add_column("Enabled", justify="center")

    for key, script in registry.items():
        block = (
            f"U+{script.block[0]:04X}-U+{script.block[1]:04X}" if script.block else "—"
        )
        ranges = "\n".join(
            f"U+{r.start:04X}-U+{r.end:04X} {r.role.value}" for r in script.ranges
        )
        table.add_row(
            key,
            script.name,
            block,
            ranges,
            "[green]yes[/green]" if key in enabled else "[dim]no[/dim]",
        )

    console.print(table)
    console.print(f"\n[dim]{len(registry)} scripts registered[/dim]")


if __name__ == "__main__":
    app()
