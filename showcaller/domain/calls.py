from __future__ import annotations
from datetime import datetime

from .models import Call, Group

DEFAULT_CALL_TITLE = "Call Time"
DEFAULT_CALL_BODY = "Time to prepare for the show! Your call is now."

def is_due(trigger: datetime, now: datetime, tolerance_s: float) -> bool:
    """Dû ou passé depuis moins de `tolerance_s` secondes. Jamais en avance."""
    late = (now - trigger).total_seconds()
    return 0 <= late < float(tolerance_s)
