from __future__ import annotations
import logging

log = logging.getLogger(__name__)

class NotifiedSet:
    """
    Ids des calls déjà alertés pendant la session. On n'y retire jamais rien.
    Avec persist=True, chaque ajout est aussi journalisé en base (call_notifications)
    et le journal est relu à la création: un redémarrage ne ré-alerte pas.
    """

    def __init__(self, persist: bool = False):
        self.persist = persist
        self._ids: set[int] = set()
        if persist:
            from showcaller.persistence import notified as repo_notified
            self._ids.update(repo_notified.all_ids())

    def __contains__(self, call_id: int) -> bool:
        return call_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def add(self, call_id: int) -> None:
        if call_id in self._ids:
            return
        self._ids.add(call_id)
        if self.persist:
            from showcaller.persistence import notified as repo_notified
            try:
                repo_notified.record(call_id)
            except Exception:
                # L'id reste marqué en mémoire: pas de re-déclenchement dans la session
                log.exception("NotifiedSet: journalisation échouée pour call=%s", call_id)

    def ids(self) -> frozenset[int]:
        return frozenset(self._ids)
