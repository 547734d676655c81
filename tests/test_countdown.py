import asyncio

import pytest

from showcaller.core.countdown import CountdownBoard
from showcaller.domain.models import Call
from showcaller.domain.snapshot import Snapshot
from tests.conftest import at, make_snapshot


def test_refresh_formats_show_and_call_countdowns(show, call):
    orphan = Call(id=99, show_id=42, minutes_before=5)
    board = CountdownBoard(lambda: make_snapshot([show], [call, orphan]))

    board.refresh(at("2024-01-01T18:00:00Z"))

    assert board.shows == {1: "2h 0m"}
    assert board.calls == {10: "1:30"}
    assert board.urgency == {10: "soon"}


def test_refresh_after_trigger_shows_zero(show, call):
    board = CountdownBoard(lambda: make_snapshot([show], [call]))
    board.refresh(at("2024-01-01T19:45:00Z"))
    assert board.calls[10] == "0:00"
    assert board.urgency[10] == "past"


def test_refresh_is_noop_while_idle():
    board = CountdownBoard(lambda: Snapshot.empty())
    board.refresh(at("2024-01-01T19:45:00Z"))
    assert board.updated_at is None


@pytest.mark.asyncio
async def test_start_and_stop(show, call):
    board = CountdownBoard(lambda: make_snapshot([show], [call]), interval=60)
    board.start()
    await asyncio.sleep(0.01)
    assert board.running
    assert board.updated_at is not None
    board.stop()
    await asyncio.sleep(0.01)
    assert not board.running
