from __future__ import annotations
import logging
from dataclasses import dataclass

from showcaller.core.config import settings
from showcaller.core.permissions import PermissionGate
from showcaller.core.banners import BannerBoard
from showcaller.core.audio import AudioCue
from showcaller.core.dispatcher import NotificationDispatcher
from showcaller.core.call_scheduler import CallScheduler
from showcaller.core.countdown import CountdownBoard
from showcaller.domain.notified import NotifiedSet
from showcaller.domain.shows import load_snapshot

log = logging.getLogger(__name__)

@dataclass
class Runtime:
    gate: PermissionGate
    banners: BannerBoard
    audio: AudioCue
    dispatcher: NotificationDispatcher
    notified: NotifiedSet
    scheduler: CallScheduler
    countdown: CountdownBoard

    def start(self) -> None:
        self.scheduler.start()
        self.countdown.start()

    def stop(self) -> None:
        # Sans ça, les deux timers survivent à la vue qui les a lancés
        self.scheduler.stop()
        self.countdown.stop()
        self.banners.clear()

def build_runtime(platform, snapshot_provider=load_snapshot, player=None) -> Runtime:
    gate = PermissionGate(platform)
    banners = BannerBoard(ttl=settings.banner_seconds)
    audio = AudioCue(player=player, enabled=settings.audio_enabled)
    dispatcher = NotificationDispatcher(gate, banners, audio)
    notified = NotifiedSet(persist=settings.persist_notified)
    scheduler = CallScheduler(
        snapshot_provider, dispatcher, notified,
        interval=settings.call_tick_seconds,
        tolerance=settings.call_tolerance_seconds,
    )
    countdown = CountdownBoard(snapshot_provider, interval=settings.countdown_tick_seconds)
    return Runtime(gate, banners, audio, dispatcher, notified, scheduler, countdown)
