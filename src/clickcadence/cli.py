from __future__ import annotations

import json
import random
import sys

import typer

from .config import load_settings, resolve_env_file
from .core.policies import ClickMode, InvalidRangeError, delay_bounds_ms, next_delay_ms
from .models.interval_config import IntervalConfig
from .runtime.app import build_runtime
from .runtime.console import HELP_TEXT, ConsoleSession


app = typer.Typer(add_completion=False, help="clickcadence: timed synthetic clicks at a regular or jittered cadence")


def _json_print(payload: object) -> None:
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False, default=str))


@app.command()
def run(
    dry_run: bool = typer.Option(False, "--dry-run", help="Count clicks without sending OS input"),
    hotkey: bool = typer.Option(True, "--hotkey/--no-hotkey", help="Listen for the global toggle hotkey"),
) -> None:
    """Start the interactive console surface."""
    settings = load_settings()
    if dry_run:
        settings.action.dry_run = True
    if not hotkey:
        settings.hotkey.enabled = False
    runtime = build_runtime(settings)
    session = ConsoleSession(runtime, echo=typer.echo)
    typer.echo(HELP_TEXT)
    session.run(sys.stdin)


@app.command("config")
def config_cmd() -> None:
    """Print the resolved settings."""
    settings = load_settings()
    env_file = resolve_env_file()
    _json_print(
        {
            "env_file": str(env_file) if env_file else None,
            "settings": settings.model_dump(mode="json"),
        }
    )


@app.command()
def sample(
    mode: ClickMode = typer.Option(ClickMode.JITTER, help="Cadence mode to sample"),
    count: int = typer.Option(20, min=1, max=100_000, help="How many delays to draw"),
    interval: int = typer.Option(100, min=1, help="Regular interval (ms)"),
    min_ms: int = typer.Option(100, "--min", min=1, help="Jitter range lower bound (ms)"),
    max_ms: int = typer.Option(200, "--max", min=1, help="Jitter range upper bound (ms)"),
    jitter: int = typer.Option(50, min=0, help="Extra random band (ms)"),
    seed: int | None = typer.Option(None, help="Seed for a reproducible draw"),
) -> None:
    """Draw delays from the interval policy without clicking."""
    cfg = IntervalConfig(fixed_interval_ms=interval, min_ms=min_ms, max_ms=max_ms, jitter_ms=jitter)
    normalized = False
    try:
        bounds = delay_bounds_ms(cfg, mode)
    except InvalidRangeError:
        cfg = cfg.normalized()
        normalized = True
        bounds = delay_bounds_ms(cfg, mode)
    rng = random.Random(seed)
    delays = [next_delay_ms(cfg, mode, rng) for _ in range(count)]
    _json_print(
        {
            "mode": mode.value,
            "config": cfg.model_dump(),
            "range_normalized": normalized,
            "bounds_ms": list(bounds),
            "observed_min_ms": min(delays),
            "observed_max_ms": max(delays),
            "mean_ms": round(sum(delays) / len(delays), 3),
            "delays_preview": delays[:20],
        }
    )


if __name__ == "__main__":
    app()
