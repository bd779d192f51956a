from __future__ import annotations

import logging
from pathlib import Path

import msgspec
import typer

from .api import parse_replay_data
from .codec import dumps, dumps_uncompressed, load
from .config import MAX_LZMA_PRESET, MIN_LZMA_PRESET, debug_enabled
from .errors import ReplayError
from .events import ReplayEvent
from .modes import GameMode
from .replay import Replay

app = typer.Typer(add_completion=False, no_args_is_help=True)

_MODE_NAMES: dict[str, GameMode] = {
    "std": GameMode.STD,
    "osu": GameMode.STD,
    "taiko": GameMode.TAIKO,
    "catch": GameMode.CATCH,
    "fruits": GameMode.CATCH,
    "mania": GameMode.MANIA,
}


def _parse_mode(value: str) -> GameMode:
    key = str(value).strip().lower()
    if key.isdigit():
        return GameMode.from_value(int(key))
    mode = _MODE_NAMES.get(key)
    if mode is None:
        available = ", ".join(sorted(_MODE_NAMES))
        raise typer.BadParameter(f"unknown mode {value!r}. Available: {available}")
    return mode


def _load_or_exit(path: Path) -> Replay:
    try:
        return load(path)
    except FileNotFoundError:
        typer.echo(f"replay file not found: {path}", err=True)
        raise typer.Exit(code=1)
    except ReplayError as exc:
        typer.echo(f"failed to read {path}: {exc}", err=True)
        raise typer.Exit(code=1)


def _format_event(event: ReplayEvent) -> str:
    fields = ", ".join(f"{name}={getattr(event, name)!s}" for name in event.__slots__)
    return f"{type(event).__name__}({fields})"


def _format_duration(total_ms: int) -> str:
    minutes, rem = divmod(max(0, int(total_ms)), 60_000)
    seconds, millis = divmod(rem, 1000)
    return f"{minutes}:{seconds:02d}.{millis:03d}"


@app.callback()
def _main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="log codec diagnostics (or set OSRCODEC_DEBUG=1)"),
) -> None:
    """Inspect and rewrite osu! replay (.osr) files."""
    level = logging.DEBUG if verbose or debug_enabled() else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@app.command("info")
def cmd_info(
    replay_file: Path = typer.Argument(..., help="replay file path (.osr)"),
    events: int = typer.Option(5, "--events", min=0, help="number of leading frames to print"),
) -> None:
    """Print a summary of a replay."""
    replay = _load_or_exit(replay_file)

    typer.echo(f"player:     {replay.username}")
    typer.echo(f"mode:       {replay.mode.label}")
    typer.echo(f"version:    {replay.game_version}")
    typer.echo(f"beatmap:    {replay.beatmap_hash}")
    typer.echo(f"replay:     {replay.replay_hash}")
    typer.echo(f"score:      {replay.score} (max combo {replay.max_combo}{', perfect' if replay.perfect else ''})")
    typer.echo(f"mods:       {replay.mods.acronyms} ({int(replay.mods)})")
    typer.echo(
        f"hits:       300={replay.count_300} 100={replay.count_100} 50={replay.count_50} "
        f"geki={replay.count_geki} katu={replay.count_katu} miss={replay.count_miss}"
    )
    typer.echo(f"played:     {replay.timestamp.isoformat()}")
    typer.echo(f"replay id:  {replay.replay_id}")
    if replay.rng_seed is not None:
        typer.echo(f"rng seed:   {replay.rng_seed}")
    if replay.life_bar_graph:
        typer.echo(f"life bar:   {len(replay.life_bar_graph)} states")
    else:
        typer.echo("life bar:   none")
    typer.echo(f"frames:     {replay.event_count} ({_format_duration(replay.duration_ms)})")
    for idx, event in enumerate(replay.replay_data[:events]):
        typer.echo(f"  {idx}: {_format_event(event)}")


@app.command("export")
def cmd_export(
    replay_file: Path = typer.Argument(..., help="replay file path (.osr)"),
    out: Path | None = typer.Option(None, "--out", "-o", help="write JSON here instead of stdout"),
) -> None:
    """Export a replay as JSON."""
    replay = _load_or_exit(replay_file)
    payload = msgspec.json.format(msgspec.json.encode(replay), indent=2)
    if out is None:
        typer.echo(payload.decode("utf-8"))
        return
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(payload + b"\n")
    typer.echo(f"wrote {out}")


@app.command("repack")
def cmd_repack(
    replay_file: Path = typer.Argument(..., help="replay file path (.osr)"),
    out: Path = typer.Argument(..., help="output path"),
    preset: int | None = typer.Option(
        None,
        min=MIN_LZMA_PRESET,
        max=MAX_LZMA_PRESET,
        help="LZMA preset (default: OSRCODEC_LZMA_PRESET or 6)",
    ),
    uncompressed: bool = typer.Option(
        False,
        "--uncompressed",
        help="store frames as raw text (diagnostic; not readable by osu! or by this tool)",
    ),
) -> None:
    """Decode a replay and encode it again."""
    replay = _load_or_exit(replay_file)
    try:
        data = dumps_uncompressed(replay) if uncompressed else dumps(replay, preset=preset)
    except ReplayError as exc:
        typer.echo(f"failed to encode {replay_file}: {exc}", err=True)
        raise typer.Exit(code=1)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(data)
    typer.echo(f"wrote {out} ({len(data)} bytes)")


@app.command("frames")
def cmd_frames(
    payload_file: Path = typer.Argument(..., help="API replay payload (base64 LZMA frame data)"),
    mode: str = typer.Option("std", "--mode", "-m", help="std, taiko, catch, mania or 0-3"),
    decoded: bool = typer.Option(False, "--decoded", help="payload is already base64-decoded"),
    decompressed: bool = typer.Option(False, "--decompressed", help="payload is already plain frame text"),
    events: int = typer.Option(5, "--events", min=0, help="number of leading frames to print"),
) -> None:
    """Parse frame data as returned by the osu! API."""
    game_mode = _parse_mode(mode)
    try:
        payload = payload_file.read_bytes()
    except FileNotFoundError:
        typer.echo(f"payload file not found: {payload_file}", err=True)
        raise typer.Exit(code=1)
    try:
        frames = parse_replay_data(payload, decoded=decoded, decompressed=decompressed, mode=game_mode)
    except ReplayError as exc:
        typer.echo(f"failed to parse {payload_file}: {exc}", err=True)
        raise typer.Exit(code=1)

    total_ms = sum(int(frame.time_delta) for frame in frames)
    typer.echo(f"frames: {len(frames)} ({_format_duration(total_ms)})")
    for idx, frame in enumerate(frames[:events]):
        typer.echo(f"  {idx}: {_format_event(frame)}")


def main(argv: list[str] | None = None) -> None:
    app(prog_name="osrcodec", args=argv)


if __name__ == "__main__":
    main()
