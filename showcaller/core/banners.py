from __future__ import annotations
import asyncio, itertools, logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from showcaller.domain.clock import utcnow

log = logging.getLogger(__name__)

@dataclass
class Banner:
    id: int
    title: str
    body: str
    created_at: datetime = field(default_factory=utcnow)

class BannerBoard:
    """
    Bannières in-app pour les plateformes sans notification native.
    Non bloquantes, empilables (aucune fusion), auto-retirées après `ttl` secondes,
    retirables à la main. Les listeners reçoivent ("shown" | "dismissed", banner).
    """

    def __init__(self, ttl: float = 5.0, clock=utcnow):
        self.ttl = float(ttl)
        self.clock = clock
        self._ids = itertools.count(1)
        self._active: dict[int, Banner] = {}
        self._timers: dict[int, asyncio.TimerHandle] = {}
        self._listeners: list = []

    def on_change(self, callback) -> None:
        self._listeners.append(callback)

    def push(self, title: str, body: str) -> Banner:
        b = Banner(id=next(self._ids), title=title, body=body, created_at=self.clock())
        self._active[b.id] = b
        try:
            loop = asyncio.get_running_loop()
            self._timers[b.id] = loop.call_later(self.ttl, self.dismiss, b.id)
        except RuntimeError:
            # Pas de boucle: expiration via expire()
            pass
        self._emit("shown", b)
        return b

    def dismiss(self, banner_id: int) -> bool:
        b = self._active.pop(banner_id, None)
        handle = self._timers.pop(banner_id, None)
        if handle is not None:
            handle.cancel()
        if b is None:
            return False
        self._emit("dismissed", b)
        return True

    def expire(self, now: datetime | None = None) -> int:
        now = now or self.clock()
        limit = timedelta(seconds=self.ttl)
        old = [bid for bid, b in self._active.items() if now - b.created_at >= limit]
        for bid in old:
            self.dismiss(bid)
        return len(old)

    def active(self) -> list[Banner]:
        return list(self._active.values())

    def clear(self) -> None:
        for bid in list(self._active):
            self.dismiss(bid)

    def _emit(self, event: str, banner: Banner) -> None:
        for cb in list(self._listeners):
            try:
                cb(event, banner)
            except Exception:
                log.exception("Banner listener failed (%s #%s)", event, banner.id)

def log_renderer(event: str, banner: Banner) -> None:
    if event == "shown":
        log.warning("🔔 [banner #%s] %s — %s", banner.id, banner.title, banner.body)
    else:
        log.info("[banner #%s] dismissed", banner.id)
