from __future__ import annotations

import asyncio
import io
import random
import threading

from ttt_arena.agents.human import INVALID_MOVE
from ttt_arena.config import SessionConfig
from ttt_arena.session import BANNER, CLEAR, PLAYERS_PROMPT, Console, Interrupt, Session


class Lines:
    """Synchronous input() stand-in fed from a list."""

    def __init__(self, lines: list[str]) -> None:
        self.lines = list(lines)
        self.labels: list[str] = []

    def __call__(self, label: str) -> str:
        self.labels.append(label)
        if not self.lines:
            raise EOFError
        return self.lines.pop(0)


def _console(lines: list[str]) -> tuple[Console, Lines, io.StringIO]:
    inp = Lines(lines)
    out = io.StringIO()
    return Console(input_fn=inp, out=out), inp, out


def test_prompt_participant_count_retries() -> None:
    console, inp, out = _console(["x", "5", "1"])
    assert asyncio.run(console.prompt_participant_count()) == 1
    assert inp.labels == [PLAYERS_PROMPT] * 3
    assert out.getvalue().count("Please enter 0, 1 or 2.") == 2


def test_render_skips_clear_when_not_a_tty() -> None:
    console, _, out = _console([])
    console.render((" ",) * 9)
    text = out.getvalue()
    assert CLEAR not in text
    assert text.splitlines()[0] == "-------------"
    assert len(text.splitlines()) == 7


def test_human_vs_human_session() -> None:
    console, inp, out = _console(["1", "4", "abc", "2", "5", "3"])
    session = Session(console, SessionConfig(players=2, thinking_delay_ms=0))

    assert asyncio.run(session.run()) == 0

    assert session.result is not None
    assert session.result.text == "Player X wins!"
    text = out.getvalue()
    assert BANNER.strip() in text
    assert INVALID_MOVE in text
    assert text.rstrip().endswith("Player X wins!")
    assert text.count("Player X wins!") == 1
    assert inp.labels[0] == "Player X, enter your move (1-9): "
    assert inp.labels[1] == "Player O, enter your move (1-9): "


def test_prompts_for_player_count_when_unset() -> None:
    console, inp, out = _console(["0"])
    session = Session(console, SessionConfig(thinking_delay_ms=0), rng=random.Random(5))

    assert asyncio.run(session.run()) == 0

    assert inp.labels == [PLAYERS_PROMPT]
    assert session.result is not None
    assert session.result.reason in {"win", "draw"}
    assert session.result.text in out.getvalue()


def test_computer_sessions_are_seeded() -> None:
    def play(seed: int) -> list[int]:
        console, _, _ = _console([])
        session = Session(console, SessionConfig(players=0, thinking_delay_ms=0, seed=seed))
        asyncio.run(session.run())
        assert session.result is not None
        return [r.move for r in session.result.move_history]

    assert play(11) == play(11)


def test_eof_ends_quietly() -> None:
    console, _, out = _console(["1"])
    session = Session(console, SessionConfig(players=2, thinking_delay_ms=0))

    assert asyncio.run(session.run()) == 0

    assert session.result is None
    assert "wins!" not in out.getvalue()
    assert "draw" not in out.getvalue()


def test_interrupt_releases_pending_input() -> None:
    release = threading.Event()
    labels: list[str] = []

    def blocking_input(label: str) -> str:
        labels.append(label)
        release.wait(5)
        return "1"

    out = io.StringIO()
    console = Console(input_fn=blocking_input, out=out)

    async def scenario() -> int:
        interrupt = Interrupt()
        session = Session(console, SessionConfig(players=1, thinking_delay_ms=0), interrupt=interrupt)
        asyncio.get_running_loop().call_later(0.05, interrupt.set)
        code = await session.run()
        assert session.result is None
        return code

    try:
        assert asyncio.run(scenario()) == 0
    finally:
        release.set()

    assert labels == ["Player X, enter your move (1-9): "]
    text = out.getvalue()
    assert "wins!" not in text and "draw" not in text
