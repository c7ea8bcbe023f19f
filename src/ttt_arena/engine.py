from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto

from .board import CELLS, Board
from .game import MARKERS, Marker, Move, MoveSource

log = logging.getLogger(__name__)

SourceFactory = Callable[[Marker], MoveSource]
RenderFn = Callable[[tuple[Marker, ...]], None]

IN_PROGRESS_TEXT = "Game is still in progress..."
DRAW_TEXT = "It's a draw!"


class EngineState(Enum):
    AWAITING_CONFIGURATION = auto()
    IN_PROGRESS = auto()
    COMPLETE = auto()


@dataclass(frozen=True, slots=True)
class MoveRecord:
    turn: int
    marker: Marker
    move: Move
    ms: float


@dataclass(frozen=True, slots=True)
class MatchResult:
    winner: Marker | None
    reason: str
    turns: int
    move_history: list[MoveRecord]
    text: str


def win_text(marker: Marker) -> str:
    return f"Player {marker} wins!"


class GameEngine:
    """
    Runs one game of alternating turns between two move sources.

    Player counts map onto sources as:
      - 0: computer vs computer
      - 1: human (X) vs computer (O)
      - 2: human vs human

    X always moves first. The engine awaits exactly one select_move() at a time.
    """

    def __init__(
        self,
        *,
        interactive: SourceFactory,
        computer: SourceFactory,
        board: Board | None = None,
        render: RenderFn | None = None,
    ) -> None:
        self._interactive = interactive
        self._computer = computer
        self._render = render
        self.board = board if board is not None else Board()
        self.state = EngineState.AWAITING_CONFIGURATION
        self.participants: tuple[MoveSource, MoveSource] | None = None
        self.current: MoveSource | None = None
        self.last_mover: MoveSource | None = None
        self.history: list[MoveRecord] = []

    def configure(self, player_count: int) -> None:
        if self.state is not EngineState.AWAITING_CONFIGURATION:
            raise RuntimeError(f"engine already configured (state={self.state.name})")
        first_marker, second_marker = MARKERS
        if player_count == 0:
            first, second = self._computer(first_marker), self._computer(second_marker)
        elif player_count == 1:
            first, second = self._interactive(first_marker), self._computer(second_marker)
        elif player_count == 2:
            first, second = self._interactive(first_marker), self._interactive(second_marker)
        else:
            raise ValueError(f"player count must be 0, 1 or 2, got: {player_count!r}")

        self.participants = (first, second)
        self.current = first
        self.state = EngineState.IN_PROGRESS
        log.info("configured %d human player(s): X=%s O=%s", player_count, _label(first), _label(second))
        if self.board.terminal().is_terminal:
            self.state = EngineState.COMPLETE

    def _other(self, source: MoveSource) -> MoveSource:
        assert self.participants is not None
        first, second = self.participants
        return second if source is first else first

    async def step(self) -> MoveRecord:
        if self.state is not EngineState.IN_PROGRESS:
            raise RuntimeError(f"cannot play a turn in state {self.state.name}")
        source = self.current
        assert source is not None

        t0 = time.perf_counter()
        move = await source.select_move(self.board)
        ms = (time.perf_counter() - t0) * 1000.0

        self.board.place(move, source.marker)
        record = MoveRecord(turn=len(self.history) + 1, marker=source.marker, move=move, ms=ms)
        self.history.append(record)
        self.last_mover = source
        log.debug("turn %d: %s -> %d (%.1f ms)", record.turn, record.marker, move, ms)

        if self.board.has_line() or self.board.is_full():
            self.state = EngineState.COMPLETE
        else:
            self.current = self._other(source)
        return record

    async def run(self, *, max_turns: int = CELLS) -> MatchResult:
        if self.state is EngineState.AWAITING_CONFIGURATION:
            raise RuntimeError("configure() must be called before run()")

        while self.state is EngineState.IN_PROGRESS:
            if len(self.history) >= max_turns:
                raise RuntimeError(f"game did not finish within {max_turns} turns")
            self._show()
            await self.step()
        self._show()

        result = self.result()
        log.info("game over after %d turn(s): %s", result.turns, result.text)
        return result

    def result(self) -> MatchResult:
        terminal = self.board.terminal()
        return MatchResult(
            winner=self._winner(),
            reason=terminal.reason,
            turns=len(self.history),
            move_history=list(self.history),
            text=self.result_text(),
        )

    def _winner(self) -> Marker | None:
        if not self.board.has_line():
            return None
        if self.last_mover is not None:
            return self.last_mover.marker
        # Board handed in already decided; nobody moved in this engine.
        return self.board.winning_marker()

    def result_text(self) -> str:
        winner = self._winner()
        if winner is not None:
            return win_text(winner)
        if self.board.is_full():
            return DRAW_TEXT
        return IN_PROGRESS_TEXT

    def _show(self) -> None:
        if self._render is not None:
            self._render(self.board.snapshot())


def _label(source: MoveSource) -> str:
    return str(getattr(source, "name", type(source).__name__))
