from __future__ import annotations
import asyncio, logging
from enum import Enum

log = logging.getLogger(__name__)

class PermissionState(str, Enum):
    UNSUPPORTED = "unsupported"   # pas de canal de notification du tout (terminal)
    DEFAULT = "default"           # pas encore demandé
    GRANTED = "granted"           # terminal
    DENIED = "denied"             # terminal: à changer hors-bande (réglages serveur)

class PermissionGate:
    """
    Source unique de vérité pour "peut-on émettre une alerte native maintenant".
    Enveloppe la plateforme (voir core.platforms) qui porte l'état réel.
    """

    def __init__(self, platform):
        self.platform = platform
        self._pending: asyncio.Future | None = None
        self._last: PermissionState | None = None

    @property
    def state(self) -> PermissionState:
        if not self.platform.supported:
            st = PermissionState.UNSUPPORTED
        else:
            st = PermissionState(self.platform.permission())
        if st is not self._last:
            log.info("Notification permission: %s", st.value)
            self._last = st
        return st

    def can_notify_natively(self) -> bool:
        return self.state is PermissionState.GRANTED

    def is_platform_notification_capable(self) -> bool:
        return bool(self.platform.supported)

    async def request_permission(self) -> bool:
        st = self.state
        if st is PermissionState.GRANTED:
            return True
        if st in (PermissionState.DENIED, PermissionState.UNSUPPORTED):
            return False

        # Une seule demande en cours, partagée entre les appelants concurrents
        if self._pending is None or self._pending.done():
            self._pending = asyncio.ensure_future(self._prompt())
        return await asyncio.shield(self._pending)

    async def _prompt(self) -> bool:
        try:
            result = await self.platform.request_permission()
        except Exception:
            log.exception("Notification permission request failed")
            return False
        st = self.state
        log.info("Notification permission request → %s (platform said %s)", st.value, result)
        return st is PermissionState.GRANTED
