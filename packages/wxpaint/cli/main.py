"""Command-line interface for wxpaint."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import signal
import sys
from pathlib import Path
from typing import Any

from rich.console import Console

from wxpaint.core.api.paintings import GenerationRequest
from wxpaint.core.config.loader import load_app_config
from wxpaint.core.config.models import AppConfig
from wxpaint.core.errors import Cancelled, PaintingError
from wxpaint.core.generation import PollOptions, StatusUpdate
from wxpaint.core.io import LocalFileStorage
from wxpaint.core.paintings import PaintingService
from wxpaint.core.utils.cancellation import CancelToken
from wxpaint.core.utils.logging import configure_logging

console = Console()
logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_CANCELLED = 130


def parse_params(items: list[str] | None) -> dict[str, Any]:
    """Parse ``key=value`` pairs; values are decoded as JSON when they parse.

    Examples:
        >>> parse_params(["steps=30", "style=vivid", "seed=null"])
        {'steps': 30, 'style': 'vivid', 'seed': None}

    Raises:
        ValueError: If an item has no ``=`` or an empty key
    """
    params: dict[str, Any] = {}
    for item in items or []:
        key, sep, raw = item.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ValueError(f"Invalid parameter {item!r}, expected key=value")
        try:
            params[key] = json.loads(raw)
        except ValueError:
            params[key] = raw
    return params


def _poll_options(config: AppConfig, args: argparse.Namespace) -> PollOptions:
    overrides = {
        name: value
        for name, value in (
            ("max_attempts", args.max_attempts),
            ("timeout_s", args.timeout),
            ("interval_s", args.interval),
        )
        if value is not None
    }
    return config.polling.model_copy(update=overrides).to_options()


def _describe(update: StatusUpdate) -> str:
    changes = update.changes()
    if update.files is not None:
        return f"downloaded {len(update.files)}/{len(update.urls or [])} image(s)"
    if update.job_id:
        return f"job_id={update.job_id}"
    if update.status is not None:
        return f"status={update.status.value}"
    return ", ".join(sorted(changes))


def _install_interrupt_handler(token: CancelToken) -> bool:
    """Route Ctrl-C to the cancel token. Returns False where unsupported."""
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, token.cancel, "Interrupted")
    except (NotImplementedError, RuntimeError):
        return False
    return True


def _remove_interrupt_handler() -> None:
    asyncio.get_running_loop().remove_signal_handler(signal.SIGINT)


def _load_config(args: argparse.Namespace) -> AppConfig:
    config = load_app_config(args.config)
    configure_logging(
        level="DEBUG" if args.verbose else config.logging.level,
        format_string=config.logging.format,
        structured=config.logging.structured,
    )
    return config


async def list_models_async(config: AppConfig) -> int:
    """Print the provider's model catalog.

    Returns:
        Exit code
    """
    service = PaintingService.from_config(config)
    try:
        models = await service.list_models()
    except PaintingError as e:
        console.print(f"[red]ERROR: {e}[/red]")
        return EXIT_ERROR
    finally:
        await service.aclose()

    if not models:
        console.print("[yellow]No models available[/yellow]")
        return EXIT_OK
    for model in models:
        tags = f" [dim]({', '.join(sorted(model.tags))})[/dim]" if model.tags else ""
        console.print(f"[bold]{model.id}[/bold]  {model.name}{tags}")
        if model.description:
            console.print(f"    {model.description}")
    return EXIT_OK


async def generate_async(
    config: AppConfig,
    request: GenerationRequest,
    options: PollOptions,
    output_dir: Path,
    cancel_token: CancelToken | None = None,
) -> int:
    """Run one generation, printing progress and the stored files.

    Returns:
        Exit code (130 when cancelled)
    """
    token = cancel_token or CancelToken()
    handler_installed = _install_interrupt_handler(token)
    service = PaintingService.from_config(config, storage=LocalFileStorage(output_dir))

    def on_update(update: StatusUpdate) -> None:
        console.print(f"[dim]• {_describe(update)}[/dim]")

    console.print(f"[bold]🎨 Generating with[/bold] {request.model}")
    try:
        result = await service.generate_and_wait(
            request, cancel_token=token, on_status_update=on_update, options=options
        )
    except Cancelled:
        console.print("[yellow]Cancelled[/yellow]")
        return EXIT_CANCELLED
    except PaintingError as e:
        console.print(f"[red]ERROR: {e}[/red]")
        return EXIT_ERROR
    finally:
        if handler_installed:
            _remove_interrupt_handler()
        await service.aclose()

    if not result.files:
        console.print("[yellow]Generation succeeded but no images were saved[/yellow]")
        for url in result.urls:
            console.print(f"   {url}")
        return EXIT_OK

    console.print(f"[green]✅ Saved {len(result.files)} image(s):[/green]")
    for artifact in result.files:
        console.print(f"   {artifact.storage_path} ({artifact.byte_size} bytes)")
    return EXIT_OK


def run_models(args: argparse.Namespace) -> int:
    try:
        config = _load_config(args)
        config.require_credentials()
    except (OSError, ValueError) as e:
        console.print(f"[red]ERROR: {e}[/red]")
        return EXIT_ERROR
    return asyncio.run(list_models_async(config))


def run_generate(args: argparse.Namespace) -> int:
    try:
        config = _load_config(args)
        config.require_credentials()
        request = GenerationRequest.build(args.model, args.prompt, parse_params(args.param))
        options = _poll_options(config, args)
    except (OSError, ValueError) as e:
        console.print(f"[red]ERROR: {e}[/red]")
        return EXIT_ERROR

    output_dir = Path(args.out or config.output_dir).resolve()
    return asyncio.run(generate_async(config, request, options, output_dir))


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for CLI."""
    p = argparse.ArgumentParser(
        prog="wxpaint",
        description="wxpaint - submit image generations and download the results",
    )
    p.add_argument(
        "--config",
        default=None,
        help="Path to app config (.yaml/.yml/.json, default: config.yaml)",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("models", help="List available models")

    gen = sub.add_parser("generate", help="Generate images and wait for the result")
    gen.add_argument("--model", required=True, help="Model id (see `wxpaint models`)")
    gen.add_argument("--prompt", required=True, help="Prompt text")
    gen.add_argument(
        "--param",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Extra model input (repeatable; JSON values are decoded)",
    )
    gen.add_argument("--out", default=None, help="Output directory (default: from config)")
    gen.add_argument("--max-attempts", type=int, default=None, help="Status polls allowed")
    gen.add_argument("--timeout", type=float, default=None, help="Polling timeout in seconds")
    gen.add_argument("--interval", type=float, default=None, help="Seconds between polls")

    return p


def main(argv: list[str] | None = None) -> None:
    """Main entry point for CLI."""
    p = build_arg_parser()
    args = p.parse_args(argv)

    if args.cmd == "models":
        sys.exit(run_models(args))
    elif args.cmd == "generate":
        sys.exit(run_generate(args))
