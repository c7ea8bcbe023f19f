from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass, field

from ..board import Board
from ..game import Marker, Move

log = logging.getLogger(__name__)

DEFAULT_DELAY_S = 0.5


@dataclass(slots=True)
class RandomAgent:
    """
    Picks a uniformly random empty cell after a short cosmetic "thinking" pause.

    Draws over all nine cells and redraws on occupied ones; rejection sampling keeps
    the choice uniform over whatever is still empty.
    """

    marker: Marker
    rng: random.Random = field(default_factory=random.Random)
    delay_s: float = DEFAULT_DELAY_S
    name: str = "random"

    async def select_move(self, board: Board) -> Move:
        if board.is_full():
            raise ValueError("no empty cell left to play")
        if self.delay_s > 0:
            await asyncio.sleep(self.delay_s)

        draws = 0
        while True:
            draws += 1
            cell = self.rng.randrange(len(board))
            if board.is_empty(cell):
                log.debug("player %s picked %d after %d draw(s)", self.marker, cell, draws)
                return cell
