from __future__ import annotations
import asyncio, logging

log = logging.getLogger(__name__)

class NotificationDispatcher:
    """
    Alerte visible pour un call, quel que soit le support de la plateforme:
      1. toujours le bip audio
      2. notification native si supportée ET autorisée
      3. sinon bannière in-app si la plateforme n'a pas de natif du tout
      4. sinon (supporté mais pas autorisé): audio seul
    dispatch() ne lève jamais: une alerte ratée ne doit pas casser le tick.
    """

    def __init__(self, gate, banners, audio):
        self.gate = gate
        self.banners = banners
        self.audio = audio
        self._tasks: set[asyncio.Task] = set()

    def dispatch(self, title: str, body: str) -> None:
        try:
            self.audio.play()
        except Exception:
            log.warning("Audio cue failed", exc_info=True)

        try:
            if self.gate.can_notify_natively():
                self._emit_native(title, body)
                return
            if not self.gate.is_platform_notification_capable():
                self.banners.push(title, body)
                return
            log.debug("Native notifications not granted; audio only for %r", title)
        except Exception:
            log.exception("Notification dispatch failed for %r", title)

    def _emit_native(self, title: str, body: str) -> None:
        coro = self.gate.platform.notify(title, body)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            coro.close()
            log.warning("No running loop; native notification dropped: %r", title)
            return
        # Pas d'await: l'envoi ne doit pas ralentir le tick
        task = loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._on_sent)

    def _on_sent(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            log.error("Native notification failed: %s", exc)

    async def drain(self) -> None:
        """Attend les envois natifs en vol (arrêt propre, tests)."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
