from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from ..board import Board
from ..game import Marker, Move

log = logging.getLogger(__name__)

INVALID_MOVE = "Invalid move. Please enter a number between 1 and 9 corresponding to an empty cell."

Prompt = Callable[[str], Awaitable[str]]


def parse_move(raw: str, board: Board) -> Move | None:
    """Turn a 1-based entry into a 0-based empty cell, or None if unusable."""
    try:
        cell = int(raw.strip()) - 1
    except ValueError:
        return None
    if not (0 <= cell < len(board)) or not board.is_empty(cell):
        return None
    return cell


@dataclass(slots=True)
class HumanAgent:
    marker: Marker
    prompt: Prompt
    notify: Callable[[str], None] = field(default=print)
    name: str = "human"

    async def select_move(self, board: Board) -> Move:
        label = f"Player {self.marker}, enter your move (1-9): "
        while True:
            raw = await self.prompt(label)
            cell = parse_move(raw, board)
            if cell is not None:
                return cell
            log.debug("rejected input %r from player %s", raw, self.marker)
            self.notify(INVALID_MOVE)
