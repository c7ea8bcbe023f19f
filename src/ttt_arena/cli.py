from __future__ import annotations

import argparse
import asyncio
import logging
import signal
from pathlib import Path

from .config import PLAYER_COUNTS, SessionConfig, load_config
from .session import Console, Session

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ttt-arena", description="Terminal Tic-Tac-Toe")
    p.add_argument(
        "--players",
        type=int,
        choices=PLAYER_COUNTS,
        help="Human players: 0 computer vs computer, 1 human vs computer, 2 human vs human (default: ask)",
    )
    p.add_argument("--delay-ms", type=int, help="Computer thinking delay in milliseconds (default 500)")
    p.add_argument("--seed", type=int, help="Seed for the computer's random moves")
    p.add_argument("--no-clear", action="store_true", help="Don't clear the screen between moves")
    p.add_argument("--config", help="Path to a TOML config file")
    p.add_argument("--log-level", help="Logging level for stderr (default WARNING)")
    return p


def resolve_config(args: argparse.Namespace) -> SessionConfig:
    cfg = SessionConfig()
    if args.config:
        cfg = load_config(Path(args.config).expanduser().resolve())
    if args.delay_ms is not None and args.delay_ms < 0:
        raise ValueError("--delay-ms must be >= 0")
    return cfg.merged(
        players=args.players,
        thinking_delay_ms=args.delay_ms,
        seed=args.seed,
        clear_screen=False if args.no_clear else None,
        log_level=args.log_level.upper() if args.log_level else None,
    )


def configure_logging(level: str) -> None:
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ValueError(f"unknown log level: {level!r}")
    logging.basicConfig(level=value, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


async def _serve(session: Session) -> int:
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, session.interrupt.set)
        installed = True
    except (NotImplementedError, RuntimeError, ValueError):
        # No loop signal support here (e.g. Windows); Ctrl+C arrives as KeyboardInterrupt.
        log.debug("SIGINT handler unavailable; relying on KeyboardInterrupt")
        installed = False
    try:
        return await session.run()
    finally:
        if installed:
            loop.remove_signal_handler(signal.SIGINT)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        cfg = resolve_config(args)
        configure_logging(cfg.log_level)
    except ValueError as e:
        parser.error(str(e))

    session = Session(Console(clear_screen=cfg.clear_screen), cfg)
    try:
        return asyncio.run(_serve(session))
    except KeyboardInterrupt:
        log.info("interrupted")
        return 0


if __name__ == "__main__":
    raise SystemExit(main())
