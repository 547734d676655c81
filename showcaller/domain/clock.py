from __future__ import annotations
from datetime import datetime, timedelta, UTC

ZERO = timedelta(0)

def utcnow() -> datetime:
    return datetime.now(UTC)

def as_utc(dt: datetime) -> datetime:
    """Les dates naïves sont lues comme UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)

def trigger_instant(show_start: datetime, minutes_before: int) -> datetime:
    # Pas de clamp: l'instant peut être dans le passé
    return show_start - timedelta(minutes=int(minutes_before))

def remaining(instant: datetime, now: datetime) -> timedelta:
    return max(ZERO, instant - now)

def format_duration(duration: timedelta) -> str:
    """
    Durée → "H:MM" (heures entières, minutes sur 2 chiffres).
    Exemple: 90 min → "1:30", 0 → "0:00".
    """
    total_min = max(0, int(duration.total_seconds())) // 60
    h, m = divmod(total_min, 60)
    return f"{h}:{m:02d}"

def format_countdown(duration: timedelta) -> str:
    total_min = max(0, int(duration.total_seconds())) // 60
    h, m = divmod(total_min, 60)
    return f"{h}h {m}m"

def format_time_remaining(target: datetime, now: datetime) -> str:
    if target < now:
        return "Past"
    secs = int((target - now).total_seconds())
    days, rest = divmod(secs, 86400)
    hours, rest = divmod(rest, 3600)
    minutes = rest // 60
    if days > 0:
        return f"{days}d {hours}h"
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"

def urgency(delta: timedelta) -> str:
    # delta signé (instant − now)
    hours = delta.total_seconds() / 3600
    if hours < 0:
        return "past"
    if hours < 0.5:
        return "imminent"
    if hours < 2:
        return "soon"
    return "later"
