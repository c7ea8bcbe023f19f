from __future__ import annotations

from collections.abc import Iterable, Iterator

from .game import EMPTY, MARKERS, Marker, Move, Terminal

SIZE = 3
CELLS = SIZE * SIZE

LINES: tuple[tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)

_SEPARATOR = "-" * (4 * SIZE + 1)


class Board:
    """
    Fixed 3x3 grid, stored row-major: index = row * 3 + col.

    A cell only ever moves from EMPTY to a marker; place() refuses anything else.
    """

    __slots__ = ("_cells",)

    def __init__(self) -> None:
        self._cells: list[Marker] = [EMPTY] * CELLS

    @classmethod
    def from_cells(cls, cells: Iterable[Marker]) -> Board:
        values = list(cells)
        if len(values) != CELLS:
            raise ValueError(f"board needs {CELLS} cells, got {len(values)}")
        for v in values:
            if v != EMPTY and v not in MARKERS:
                raise ValueError(f"unknown cell value: {v!r}")
        board = cls()
        board._cells = values
        return board

    def __len__(self) -> int:
        return CELLS

    def __getitem__(self, cell: Move) -> Marker:
        return self._cells[cell]

    def __iter__(self) -> Iterator[Marker]:
        return iter(self._cells)

    def __repr__(self) -> str:
        return f"Board({self._cells!r})"

    def snapshot(self) -> tuple[Marker, ...]:
        return tuple(self._cells)

    def is_empty(self, cell: Move) -> bool:
        return self._cells[cell] == EMPTY

    def empty_cells(self) -> list[Move]:
        return [i for i, v in enumerate(self._cells) if v == EMPTY]

    def place(self, cell: Move, marker: Marker) -> None:
        if marker not in MARKERS:
            raise ValueError(f"unknown marker: {marker!r}")
        if not isinstance(cell, int) or not (0 <= cell < CELLS):
            raise ValueError(f"cell out of range: {cell!r}")
        if self._cells[cell] != EMPTY:
            raise ValueError(f"cell {cell} already holds {self._cells[cell]!r}")
        self._cells[cell] = marker

    def winning_marker(self) -> Marker | None:
        cells = self._cells
        for a, b, c in LINES:
            v = cells[a]
            if v != EMPTY and v == cells[b] and v == cells[c]:
                return v
        return None

    def has_line(self) -> bool:
        return self.winning_marker() is not None

    def is_full(self) -> bool:
        return EMPTY not in self._cells

    def terminal(self) -> Terminal:
        w = self.winning_marker()
        if w is not None:
            return Terminal(is_terminal=True, winner=w, reason="win")
        if self.is_full():
            return Terminal(is_terminal=True, winner=None, reason="draw")
        return Terminal(is_terminal=False, winner=None, reason="")

    def render(self) -> list[str]:
        return render_cells(self._cells)


def render_cells(cells: Iterable[Marker]) -> list[str]:
    values = list(cells)
    lines = [_SEPARATOR]
    for r in range(SIZE):
        row = "|" + "".join(f" {values[SIZE * r + c]} |" for c in range(SIZE))
        lines.append(row)
        lines.append(_SEPARATOR)
    return lines
