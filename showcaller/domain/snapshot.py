from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from pydantic import ValidationError

from .models import Show, Call, Group

log = logging.getLogger(__name__)

@dataclass(frozen=True)
class Snapshot:
    """Vue figée shows/calls/groups lue à chaque tick. Jamais modifiée par le cœur."""
    shows: tuple[Show, ...] = ()
    calls: tuple[Call, ...] = ()
    groups: tuple[Group, ...] = ()
    loaded: bool = True
    _shows_by_id: dict[int, Show] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self):
        self._shows_by_id.update({s.id: s for s in self.shows})

    @classmethod
    def empty(cls) -> "Snapshot":
        # État Idle: rien n'est encore chargé
        return cls(loaded=False)

    @classmethod
    def from_rows(cls, shows: Iterable[Mapping], calls: Iterable[Mapping],
                  groups: Iterable[Mapping]) -> "Snapshot":
        return cls(
            shows=tuple(_parse_all(Show, shows)),
            calls=tuple(_parse_all(Call, calls)),
            groups=tuple(_parse_all(Group, groups)),
        )

    def show(self, show_id: int) -> Show | None:
        return self._shows_by_id.get(show_id)

    def groups_for_show(self, show_id: int) -> list[Group]:
        # Groupes par défaut + groupes custom de ce show
        return [g for g in self.groups if g.is_default or g.show_id == show_id]

    def calls_for_show(self, show_id: int) -> list[Call]:
        return sorted((c for c in self.calls if c.show_id == show_id),
                      key=lambda c: c.minutes_before, reverse=True)


def _parse_all(model, rows: Iterable[Mapping]):
    for row in rows:
        if isinstance(row, model):
            yield row
            continue
        try:
            yield model.model_validate(dict(row))
        except ValidationError as e:
            # Ligne ignorée pour ce snapshot, re-tentée au prochain
            log.warning("Snapshot: %s %s ignoré (%s)", model.__name__, dict(row).get("id"), e.errors()[0].get("msg"))
