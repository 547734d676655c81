from __future__ import annotations
import logging

from ..persistence import shows as repo_shows
from ..persistence import calls as repo_calls
from ..persistence import groups as repo_groups
from .models import ShowCreate, CallCreate
from .snapshot import Snapshot

log = logging.getLogger(__name__)

def create_show(name: str, start_time, description: str | None = None, user_id: str = "") -> dict:
    data = ShowCreate(name=name, start_time=start_time, description=description)
    return repo_shows.create(data.name, data.start_time, data.description, user_id)

def list_shows(user_id: str | None = None) -> list[dict]:
    return repo_shows.list_all(None if user_id is None else str(user_id))

def edit_show(show_id: int, name: str | None = None, start_time=None,
              description: str | None = None) -> dict:
    """Champs à None = inchangés. Les calls suivent le nouveau start (trigger dérivé)."""
    cur = repo_shows.get(show_id)
    if cur is None:
        raise ValueError(f"show {show_id} not found")
    data = ShowCreate(
        name=cur["name"] if name is None else name,
        start_time=cur["start_time"] if start_time is None else start_time,
        description=cur["description"] if description is None else description,
    )
    return repo_shows.update(show_id, name=data.name, start_time=data.start_time,
                             description=data.description)

def delete_show(show_id: int) -> None:
    if not repo_shows.delete(show_id):
        raise ValueError(f"show {show_id} not found")
    log.info("show %s supprimé (calls et groupes custom inclus)", show_id)

def _check_groups(data: CallCreate) -> None:
    if repo_shows.get(data.show_id) is None:
        raise ValueError(f"show {data.show_id} not found")
    visible = {g["id"] for g in repo_groups.for_show(data.show_id)}
    unknown = [g for g in data.group_ids if g not in visible]
    if unknown:
        raise ValueError(f"unknown groups for show {data.show_id}: {unknown}")

def add_call(show_id: int, minutes_before: int, group_ids, title: str = "",
             description: str | None = None, send_notification=0) -> dict:
    """Valide (1–180 min, au moins un groupe visible du show) puis enregistre."""
    data = CallCreate(show_id=show_id, title=title, description=description,
                      minutes_before=minutes_before, group_ids=group_ids,
                      send_notification=send_notification)
    _check_groups(data)
    return repo_calls.create(data.show_id, data.title, data.minutes_before, data.group_ids,
                             data.description, data.send_notification)

def edit_call(call_id: int, minutes_before: int | None = None, group_ids=None,
              title: str | None = None, description: str | None = None,
              send_notification=None) -> dict:
    cur = repo_calls.get(call_id)
    if cur is None:
        raise ValueError(f"call {call_id} not found")
    data = CallCreate(
        show_id=cur["show_id"],
        title=cur["title"] if title is None else title,
        description=cur["description"] if description is None else description,
        minutes_before=cur["minutes_before"] if minutes_before is None else minutes_before,
        group_ids=cur["group_ids"] if group_ids is None else group_ids,
        send_notification=cur["send_notification"] if send_notification is None else send_notification,
    )
    _check_groups(data)
    return repo_calls.update(call_id, title=data.title, description=data.description,
                             minutes_before=data.minutes_before, group_ids=data.group_ids,
                             send_notification=data.send_notification)

def delete_call(call_id: int) -> None:
    if not repo_calls.delete(call_id):
        raise ValueError(f"call {call_id} not found")

def add_group(name: str, show_id: int | None = None) -> dict:
    # 0 vient des options Discord vides: groupe global
    show_id = show_id or None
    if not name.strip():
        raise ValueError("group name is required")
    if show_id is not None and repo_shows.get(show_id) is None:
        raise ValueError(f"show {show_id} not found")
    return repo_groups.create(name.strip(), show_id=show_id, is_custom=1)

def rename_group(group_id: int, name: str) -> dict:
    grp = repo_groups.get(group_id)
    if grp is None:
        raise ValueError(f"group {group_id} not found")
    if not grp["is_custom"]:
        raise ValueError(f"default group {grp['name']} cannot be renamed")
    if not name.strip():
        raise ValueError("group name is required")
    return repo_groups.rename(group_id, name.strip())

def delete_group(group_id: int) -> None:
    grp = repo_groups.get(group_id)
    if grp is None:
        raise ValueError(f"group {group_id} not found")
    if not repo_groups.delete(group_id):
        raise ValueError(f"default group {grp['name']} cannot be deleted")

def load_snapshot() -> Snapshot:
    return Snapshot.from_rows(repo_shows.list_all(), repo_calls.list_all(), repo_groups.list_all())
