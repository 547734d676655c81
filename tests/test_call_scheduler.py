import asyncio
from datetime import timedelta

import pytest

from showcaller.core.banners import BannerBoard
from showcaller.core.call_scheduler import CallScheduler
from showcaller.core.dispatcher import NotificationDispatcher
from showcaller.core.permissions import PermissionGate
from showcaller.domain.models import Call, Group, Show
from showcaller.domain.notified import NotifiedSet
from showcaller.domain.snapshot import Snapshot
from tests.conftest import RecordingDispatcher, FakePlatform, FakeAudio, at, make_snapshot


def scheduler_for(snapshot, dispatcher=None, **kw):
    dispatcher = dispatcher or RecordingDispatcher()
    return CallScheduler(lambda: snapshot, dispatcher, NotifiedSet(), **kw), dispatcher


class TestExactDueScenario:

    def test_fires_once_then_never_again(self, show, call):
        sch, disp = scheduler_for(make_snapshot([show], [call]))

        assert sch.tick(at("2024-01-01T19:30:00Z")) == [10]
        assert sch.tick(at("2024-01-01T19:30:05Z")) == []
        assert sch.tick(at("2024-01-01T19:31:00Z")) == []

        assert disp.sent == [("Call: Call Time", "Time to prepare for the show! Your call is now.")]
        assert 10 in sch.notified

    def test_title_carries_group_names(self, show):
        call = Call(id=10, show_id=1, minutes_before=30, send_notification=1,
                    title="Places", group_ids="[2,3]")
        sch, disp = scheduler_for(make_snapshot([show], [call]))

        sch.tick(at("2024-01-01T19:30:00Z"))

        assert disp.sent[0][0] == "Cast, Crew Call: Places"


class TestIdempotence:

    def test_many_ticks_single_dispatch(self, show, call):
        sch, disp = scheduler_for(make_snapshot([show], [call]))
        start = at("2024-01-01T19:29:30Z")
        for i in range(50):
            sch.tick(start + timedelta(seconds=5 * i))
        assert len(disp.sent) == 1

    def test_already_notified_is_skipped(self, show, call):
        sch, disp = scheduler_for(make_snapshot([show], [call]))
        sch.notified.add(10)
        sch.tick(at("2024-01-01T19:30:00Z"))
        assert disp.sent == []

    def test_fresh_scheduler_gets_fresh_set(self, show, call):
        snap = make_snapshot([show], [call])
        a, _ = scheduler_for(snap)
        b, disp_b = scheduler_for(snap)
        a.tick(at("2024-01-01T19:30:00Z"))
        b.tick(at("2024-01-01T19:30:00Z"))
        assert len(disp_b.sent) == 1


class TestToleranceWindow:

    def test_trigger_45s_in_past_fires_once(self, show, call):
        sch, disp = scheduler_for(make_snapshot([show], [call]), tolerance=60)
        now = at("2024-01-01T19:30:45Z")
        assert sch.tick(now) == [10]
        assert sch.tick(now + timedelta(seconds=5)) == []
        assert len(disp.sent) == 1

    def test_never_fires_before_trigger(self, show, call):
        sch, disp = scheduler_for(make_snapshot([show], [call]), tolerance=60)
        trigger = at("2024-01-01T19:30:00Z")
        assert sch.tick(trigger - timedelta(seconds=59)) == []
        assert sch.tick(trigger - timedelta(seconds=30)) == []
        assert sch.tick(trigger - timedelta(seconds=1)) == []
        assert disp.sent == []
        assert sch.tick(trigger) == [10]
        assert len(disp.sent) == 1

    def test_notified_call_5min_past_does_not_refire(self, show, call):
        sch, disp = scheduler_for(make_snapshot([show], [call]))
        sch.tick(at("2024-01-01T19:30:00Z"))
        sch.tick(at("2024-01-01T19:35:00Z"))
        assert len(disp.sent) == 1

    def test_outside_window_is_not_fired(self, show, call):
        sch, disp = scheduler_for(make_snapshot([show], [call]), tolerance=60)
        sch.tick(at("2024-01-01T19:35:00Z"))
        sch.tick(at("2024-01-01T19:20:00Z"))
        assert disp.sent == []
        assert 10 not in sch.notified

    def test_tolerance_is_configurable(self, show, call):
        sch, disp = scheduler_for(make_snapshot([show], [call]), tolerance=600)
        assert sch.tick(at("2024-01-01T19:35:00Z")) == [10]


class TestSkips:

    def test_manual_calls_never_fire(self, show):
        call = Call(id=11, show_id=1, minutes_before=30, send_notification=0)
        sch, disp = scheduler_for(make_snapshot([show], [call]))
        sch.tick(at("2024-01-01T19:30:00Z"))
        assert disp.sent == []

    def test_dangling_show_reference(self, show):
        orphan = Call(id=12, show_id=99, minutes_before=30, send_notification=1)
        sch, disp = scheduler_for(make_snapshot([show], [orphan]))
        for i in range(10):
            assert sch.tick(at("2024-01-01T19:30:00Z") + timedelta(seconds=5 * i)) == []
        assert disp.sent == []
        assert 12 not in sch.notified

    def test_idle_when_not_loaded(self):
        sch, disp = scheduler_for(Snapshot.empty())
        assert sch.tick(at("2024-01-01T19:30:00Z")) == []
        assert sch.last_tick is None

    def test_provider_failure_is_contained(self):
        def broken():
            raise RuntimeError("store offline")

        sch = CallScheduler(broken, RecordingDispatcher(), NotifiedSet())
        assert sch.tick(at("2024-01-01T19:30:00Z")) == []


class TestFailureIsolation:

    def test_malformed_call_does_not_block_others(self, show, call):
        bad = Call.model_construct(id=9, show_id=1, title="", description=None,
                                   minutes_before=30, group_ids=None, send_notification=1)
        sch, disp = scheduler_for(make_snapshot([show], [bad, call]))

        assert sch.tick(at("2024-01-01T19:30:00Z")) == [10]
        assert len(disp.sent) == 1
        assert 9 not in sch.notified

    def test_dispatch_failure_still_marks_notified(self, show, call):
        other = Call(id=20, show_id=1, minutes_before=30, send_notification=1)
        sch, disp = scheduler_for(make_snapshot([show], [call, other]),
                                  dispatcher=RecordingDispatcher(fail=True))

        sch.tick(at("2024-01-01T19:30:00Z"))
        sch.tick(at("2024-01-01T19:30:05Z"))

        assert len(disp.sent) == 2
        assert {10, 20} <= sch.notified.ids()


class TestWithRealDispatcher:

    def test_unsupported_platform_shows_banner(self, show, call):
        banners = BannerBoard()
        audio = FakeAudio()
        dispatcher = NotificationDispatcher(PermissionGate(FakePlatform(supported=False)), banners, audio)
        sch = CallScheduler(lambda: make_snapshot([show], [call]), dispatcher, NotifiedSet())

        sch.tick(at("2024-01-01T19:30:00Z"))
        sch.tick(at("2024-01-01T19:30:05Z"))

        assert audio.plays == 1
        assert [b.title for b in banners.active()] == ["Call: Call Time"]

    def test_custom_group_of_another_show_is_not_resolved(self):
        shows = [Show(id=1, name="A", start_time="2024-01-01T20:00:00Z")]
        groups = [Group(id=1, name="All"), Group(id=5, name="Band", is_custom=1, show_id=2)]
        call = Call(id=10, show_id=1, minutes_before=30, send_notification=1, group_ids=[1, 5])
        sch, disp = scheduler_for(make_snapshot(shows, [call], groups))
        sch.tick(at("2024-01-01T19:30:00Z"))
        assert disp.sent[0][0] == "All Call: Call Time"


class TestTimer:

    @pytest.mark.asyncio
    async def test_loop_ticks_until_stopped(self, show, call):
        ticks = []

        def provider():
            ticks.append(1)
            return make_snapshot([show], [call])

        sch = CallScheduler(provider, RecordingDispatcher(), NotifiedSet(), interval=0.01)
        sch.start()
        sch.start()  # no-op: one timer only
        await asyncio.sleep(0.05)
        assert sch.running
        sch.stop()
        await asyncio.sleep(0)
        seen = len(ticks)
        assert seen >= 2

        await asyncio.sleep(0.05)
        assert len(ticks) == seen
        assert not sch.running

    @pytest.mark.asyncio
    async def test_loop_survives_tick_errors(self):
        calls = []

        def provider():
            calls.append(1)
            raise RuntimeError("boom")

        sch = CallScheduler(provider, RecordingDispatcher(), NotifiedSet(), interval=0.01)
        sch.start()
        await asyncio.sleep(0.05)
        assert sch.running
        sch.stop()
        assert len(calls) >= 2
