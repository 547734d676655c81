from __future__ import annotations
import asyncio
from datetime import datetime, UTC

import pytest

from showcaller.core.db import base as db_base
from showcaller.core.db.migrations import migrate_if_needed
from showcaller.domain.models import Show, Call, Group
from showcaller.domain.snapshot import Snapshot


class FakePlatform:
    """Plateforme de notification pilotable: état de permission + réponse au prompt."""

    def __init__(self, supported: bool = True, permission: str = "default", answer: str = "granted",
                 fail_notify: bool = False):
        self.supported = supported
        self._permission = permission
        self.answer = answer
        self.fail_notify = fail_notify
        self.prompts = 0
        self.sent: list[tuple[str, str]] = []

    def permission(self) -> str:
        return self._permission

    async def request_permission(self) -> str:
        self.prompts += 1
        await asyncio.sleep(0.01)
        self._permission = self.answer
        return self._permission

    async def notify(self, title: str, body: str) -> None:
        if self.fail_notify:
            raise RuntimeError("send failed")
        self.sent.append((title, body))


class FakeAudio:
    def __init__(self, fail: bool = False):
        self.plays = 0
        self.fail = fail

    def play(self) -> None:
        self.plays += 1
        if self.fail:
            raise RuntimeError("autoplay blocked")


class RecordingDispatcher:
    def __init__(self, fail: bool = False):
        self.sent: list[tuple[str, str]] = []
        self.fail = fail

    def dispatch(self, title: str, body: str) -> None:
        self.sent.append((title, body))
        if self.fail:
            raise RuntimeError("boom")


def at(s: str) -> datetime:
    return datetime.fromisoformat(s.replace("Z", "+00:00")).astimezone(UTC)


DEFAULT_GROUPS = [
    Group(id=1, name="All", is_custom=0),
    Group(id=2, name="Cast", is_custom=0),
    Group(id=3, name="Crew", is_custom=0),
]


def make_snapshot(shows=(), calls=(), groups=None) -> Snapshot:
    return Snapshot(shows=tuple(shows), calls=tuple(calls),
                    groups=tuple(DEFAULT_GROUPS if groups is None else groups))


@pytest.fixture
def show():
    return Show(id=1, name="Hamlet", start_time="2024-01-01T20:00:00Z")


@pytest.fixture
def call():
    return Call(id=10, show_id=1, minutes_before=30, send_notification=1)


@pytest.fixture
def db(tmp_path):
    db_base.use_database(str(tmp_path / "test.db"))
    migrate_if_needed(db_base.get_conn())
    yield db_base.get_conn()
    db_base.close_conn()
