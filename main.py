"""CLI entrypoint for meme acquisition and emotion analysis."""

from __future__ import annotations

import argparse
import asyncio
import json
from typing import Optional, Union

from config import get_settings
from core import SessionState, SessionStatus
from orchestrator import SessionController, build_pipeline, clamp_target_count
from outputs import ConsoleSessionView
from utils import ConfigurationError, console, setup_logger


EXIT_CODES = {
    SessionStatus.COMPLETED: 0,
    SessionStatus.COMPLETED_WITH_SHORTFALL: 1,
    SessionStatus.FAILED: 2,
}


def _parse_count(raw: Optional[str], *, clamp: bool) -> Union[int, str]:
    settings = get_settings().acquisition
    if raw is None:
        return settings.default_count
    if clamp:
        return clamp_target_count(raw, settings.min_count, settings.max_count)
    try:
        return int(str(raw).strip())
    except ValueError:
        # Let the pipeline reject it with the user-facing range message
        return str(raw)


def _print_json(state: SessionState) -> None:
    print(json.dumps(state.model_dump(mode="json"), ensure_ascii=False), flush=True)


def _exit_code(state: Optional[SessionState]) -> int:
    if state is None:
        return 2
    return EXIT_CODES.get(state.status, 2)


async def _analyze(args: argparse.Namespace) -> int:
    count = _parse_count(args.count, clamp=args.clamp)
    pipeline = build_pipeline(provider=args.provider, seed=args.seed, pacing_delay=args.pacing)

    async with pipeline:
        if args.json:
            controller = SessionController(pipeline, on_state=_print_json)
            await controller.trigger(count)
            final = await controller.wait()
        else:
            with ConsoleSessionView(console=console) as view:
                controller = SessionController(pipeline, on_state=view.update)
                await controller.trigger(count)
                final = await controller.wait()

    return _exit_code(final)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Meme Emotion Analyzer CLI")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    analyze = sub.add_parser("analyze", help="fetch unique memes and classify them")
    analyze.add_argument("--count", default=None, help="number of memes to analyze (1-10)")
    analyze.add_argument("--clamp", action="store_true", help="clamp --count into range instead of rejecting it")
    analyze.add_argument("--json", action="store_true", help="print one JSON snapshot per line")
    analyze.add_argument("--pacing", type=float, default=None, help="delay between attempts in seconds")
    analyze.add_argument("--provider", default=None, help="classifier provider: mock, http")
    analyze.add_argument("--seed", type=int, default=None, help="seed for the mock classifier")
    return parser


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    general = get_settings().general
    # Root logger: library modules log under their own __name__
    setup_logger(None, level="DEBUG" if args.verbose else general.log_level, log_file=general.log_file)

    code = 0
    if args.command == "analyze":
        try:
            code = asyncio.run(_analyze(args))
        except ConfigurationError as exc:
            console.print(f"[red]Configuration error:[/red] {exc}")
            code = 2
        except KeyboardInterrupt:
            code = 130

    raise SystemExit(code)


if __name__ == "__main__":
    main()
