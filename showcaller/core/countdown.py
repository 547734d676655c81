from __future__ import annotations
import logging
from datetime import datetime
from discord.ext import tasks

from showcaller.domain.clock import (
    utcnow, remaining, trigger_instant, format_countdown, format_duration, urgency,
)

log = logging.getLogger(__name__)

class CountdownBoard:
    """
    Comptes à rebours d'affichage uniquement (cadence lente, 60 s par défaut).
    Ne déclenche jamais d'alerte: c'est le rôle de CallScheduler.
    """

    def __init__(self, snapshot_provider, interval: float = 60.0, clock=utcnow):
        self.snapshot_provider = snapshot_provider
        self.clock = clock
        self.shows: dict[int, str] = {}
        self.calls: dict[int, str] = {}
        self.urgency: dict[int, str] = {}
        self.updated_at: datetime | None = None
        self._loop = tasks.loop(seconds=interval)(self._tick)

    def refresh(self, now: datetime | None = None) -> None:
        snap = self.snapshot_provider()
        if snap is None or not snap.loaded:
            return
        now = now or self.clock()
        shows, calls, urg = {}, {}, {}
        for show in snap.shows:
            shows[show.id] = format_countdown(remaining(show.start_time, now))
        for call in snap.calls:
            show = snap.show(call.show_id)
            if show is None:
                continue
            trig = trigger_instant(show.start_time, call.minutes_before)
            calls[call.id] = format_duration(remaining(trig, now))
            urg[call.id] = urgency(trig - now)
        self.shows, self.calls, self.urgency = shows, calls, urg
        self.updated_at = now

    async def _tick(self):
        try:
            self.refresh()
        except Exception:
            log.exception("Countdown refresh error")

    @property
    def running(self) -> bool:
        return self._loop.is_running()

    def start(self) -> None:
        if not self._loop.is_running():
            self._loop.start()

    def stop(self) -> None:
        self._loop.cancel()
