from __future__ import annotations

import asyncio
import logging
import random
import sys
import threading
from collections.abc import Callable
from typing import TextIO

from .agents.human import HumanAgent
from .agents.random_agent import RandomAgent
from .board import render_cells
from .config import PLAYER_COUNTS, SessionConfig
from .engine import GameEngine, MatchResult
from .game import Marker

log = logging.getLogger(__name__)

BANNER = "Starting Tic Tac Toe game...\n"
PLAYERS_PROMPT = (
    "Enter number of players (0 for computer vs computer, 1 for human vs computer, 2 for human vs human): "
)
CLEAR = "\033[2J\033[H"


class Interrupt:
    """Cancellation token: once set, the running session is abandoned."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    def set(self) -> None:
        self._event.set()

    def is_set(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        await self._event.wait()


class Console:
    """
    Terminal side of a session: prompts, board rendering and messages.

    Blocking reads run on a daemon thread so the event loop keeps ticking and an
    abandoned read (after an interrupt) never holds up process exit.
    """

    def __init__(
        self,
        *,
        clear_screen: bool = True,
        input_fn: Callable[[str], str] = input,
        out: TextIO | None = None,
    ) -> None:
        self.clear_screen = clear_screen
        self._input = input_fn
        self._out = out if out is not None else sys.stdout

    def _print(self, text: str = "") -> None:
        print(text, file=self._out, flush=True)

    async def prompt(self, label: str) -> str:
        loop = asyncio.get_running_loop()
        fut: asyncio.Future[str] = loop.create_future()

        def settle(line: str | None, err: BaseException | None) -> None:
            if fut.done():
                return
            if err is not None:
                fut.set_exception(err)
            else:
                fut.set_result(line or "")

        def worker() -> None:
            try:
                line = self._input(label)
            except Exception as e:  # EOFError, closed stdin, ...
                outcome: tuple[str | None, BaseException | None] = (None, e)
            else:
                outcome = (line, None)
            try:
                loop.call_soon_threadsafe(settle, *outcome)
            except RuntimeError:
                log.debug("event loop closed before input arrived; dropping it")

        threading.Thread(target=worker, daemon=True, name="ttt-input").start()
        return await fut

    async def prompt_participant_count(self) -> int:
        while True:
            raw = await self.prompt(PLAYERS_PROMPT)
            try:
                count = int(raw.strip())
            except ValueError:
                count = -1
            if count in PLAYER_COUNTS:
                return count
            self._print("Please enter 0, 1 or 2.")

    def banner(self) -> None:
        self._print(BANNER)

    def render(self, snapshot: tuple[Marker, ...]) -> None:
        if self.clear_screen and self._out.isatty():
            self._out.write(CLEAR)
        for line in render_cells(snapshot):
            self._print(line)

    def notify(self, text: str) -> None:
        self._print(text)

    def report_result(self, text: str) -> None:
        self._print(text)


class Session:
    def __init__(
        self,
        console: Console,
        config: SessionConfig,
        *,
        interrupt: Interrupt | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.console = console
        self.config = config
        self.interrupt = interrupt if interrupt is not None else Interrupt()
        self.rng = rng if rng is not None else random.Random(config.seed)
        self.result: MatchResult | None = None

    def build_engine(self) -> GameEngine:
        console = self.console
        delay_s = self.config.thinking_delay_s
        return GameEngine(
            interactive=lambda marker: HumanAgent(marker, console.prompt, console.notify),
            computer=lambda marker: RandomAgent(marker, rng=self.rng, delay_s=delay_s),
            render=console.render,
        )

    async def play(self) -> MatchResult:
        players = self.config.players
        if players is None:
            players = await self.console.prompt_participant_count()

        engine = self.build_engine()
        engine.configure(players)
        self.console.banner()
        result = await engine.run()
        self.console.report_result(result.text)
        return result

    async def run(self) -> int:
        """
        Play one game unless interrupted first.

        Returns the process exit status. An interrupt or EOF on stdin ends the game
        quietly, without a result, and still counts as a clean exit.
        """
        game = asyncio.ensure_future(self.play())
        stop = asyncio.ensure_future(self.interrupt.wait())
        try:
            done, _ = await asyncio.wait({game, stop}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            stop.cancel()

        if game not in done:
            log.info("interrupted; abandoning the game")
            game.cancel()
            try:
                await game
            except asyncio.CancelledError:
                pass
            return 0

        try:
            self.result = game.result()
        except EOFError:
            log.info("input closed; ending the game")
        except Exception:
            log.exception("game aborted")
            raise
        return 0
