from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, TypeAlias, runtime_checkable

if TYPE_CHECKING:
    from .board import Board

Marker: TypeAlias = str  # "X" or "O"
Move: TypeAlias = int  # cell index, 0..8 row-major

EMPTY: Marker = " "
MARKERS: tuple[Marker, Marker] = ("X", "O")


@dataclass(frozen=True, slots=True)
class Terminal:
    is_terminal: bool
    winner: Marker | None  # None == draw / no winner
    reason: str


@runtime_checkable
class MoveSource(Protocol):
    marker: Marker

    async def select_move(self, board: Board) -> Move: ...
