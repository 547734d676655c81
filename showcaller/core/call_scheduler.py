from __future__ import annotations
import asyncio, logging
from datetime import datetime

from showcaller.domain import calls as d_calls
from showcaller.domain.clock import trigger_instant, utcnow
from showcaller.domain.notified import NotifiedSet

log = logging.getLogger(__name__)

class CallScheduler:
    """
    Boucle de vérification des calls (cadence d'alerte, 5 s par défaut).

    A chaque tick: snapshot → pour chaque call auto-notifié, pas encore alerté,
    dont l'instant de déclenchement est dans la fenêtre de tolérance → dispatch
    puis marquage dans le NotifiedSet. Au plus une alerte par call et par session.
    Aucune exception ne sort de tick() ni de la boucle.
    """

    def __init__(self, snapshot_provider, dispatcher, notified: NotifiedSet | None = None, *,
                 interval: float = 5.0, tolerance: float = 60.0, clock=utcnow):
        self.snapshot_provider = snapshot_provider
        self.dispatcher = dispatcher
        self.notified = notified if notified is not None else NotifiedSet()
        self.interval = float(interval)
        self.tolerance = float(tolerance)
        self.clock = clock
        self.last_tick: datetime | None = None
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run())
        log.info("CallScheduler started (interval=%ss, tolerance=%ss)", self.interval, self.tolerance)

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None
            log.info("CallScheduler stopped")

    async def _run(self):
        while True:
            try:
                self.tick()
            except Exception:
                # tick() isole déjà ses erreurs; filet de sécurité pour la boucle
                log.exception("Call scheduler error")
            await asyncio.sleep(self.interval)

    def tick(self, now: datetime | None = None) -> list[int]:
        """Evalue tous les calls une fois. Renvoie les ids alertés pendant ce tick."""
        fired: list[int] = []
        try:
            snap = self.snapshot_provider()
        except Exception:
            log.exception("Call scheduler: snapshot unavailable, tick skipped")
            return fired
        if snap is None or not snap.loaded:
            return fired  # Idle

        now = now or self.clock()
        self.last_tick = now
        for call in snap.calls:
            try:
                if self._evaluate(call, snap, now):
                    fired.append(call.id)
            except Exception:
                # Un call en erreur n'arrête pas les autres; re-tenté au prochain tick
                log.exception("Call scheduler: call %s skipped", getattr(call, "id", "?"))
        return fired

    def _evaluate(self, call, snap, now: datetime) -> bool:
        if not call.auto_notify or call.id in self.notified:
            return False

        show = snap.show(call.show_id)
        if show is None:
            log.debug("Call %s references missing show %s", call.id, call.show_id)
            return False

        trigger = trigger_instant(show.start_time, call.minutes_before)
        if not d_calls.is_due(trigger, now, self.tolerance):
            return False

        names = d_calls.group_names(call, snap.groups_for_show(show.id))
        title = d_calls.compose_title(call, names)
        body = d_calls.compose_body(call)
        log.info("Call %s due (show=%s, trigger=%s): %s", call.id, show.id, trigger.isoformat(), title)
        try:
            self.dispatcher.dispatch(title, body)
        finally:
            # Marqué quoi qu'il arrive: jamais de re-déclenchement
            self.notified.add(call.id)
        return True
