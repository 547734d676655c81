from __future__ import annotations
import json
from datetime import datetime, UTC
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .clock import as_utc

MIN_MINUTES_BEFORE = 1
MAX_MINUTES_BEFORE = 180

def normalize_group_ids(raw) -> list[int]:
    """
    Unique point de normalisation des group_ids.
    Accepte une liste d'ids ou sa forme JSON stockée en base ("[1,2]").
    Lève ValueError si la valeur est inexploitable.
    """
    if raw is None or raw == "":
        return []
    if isinstance(raw, (bytes, str)):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValueError(f"group_ids is not valid JSON: {raw!r}") from e
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        raw = [raw]
    if not isinstance(raw, (list, tuple, set)):
        raise ValueError(f"group_ids must be a list, got {type(raw).__name__}")
    out: list[int] = []
    for gid in raw:
        if isinstance(gid, bool):
            raise ValueError(f"invalid group id: {gid!r}")
        try:
            out.append(int(gid))
        except (TypeError, ValueError) as e:
            raise ValueError(f"invalid group id: {gid!r}") from e
    return out


class Show(BaseModel):
    id: int
    name: str = ""
    description: Optional[str] = None
    start_time: datetime

    @field_validator("start_time", mode="before")
    @classmethod
    def _epoch_or_iso(cls, v):
        # La base stocke des epoch seconds
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return datetime.fromtimestamp(v, tz=UTC)
        return v

    @field_validator("start_time")
    @classmethod
    def _utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class Group(BaseModel):
    id: int
    name: str
    is_custom: int = 0
    show_id: Optional[int] = None

    @property
    def is_default(self) -> bool:
        return not self.is_custom


class Call(BaseModel):
    id: int
    show_id: int
    title: str = ""
    description: Optional[str] = None
    minutes_before: int
    group_ids: list[int] = Field(default_factory=list)
    send_notification: int = 0

    @field_validator("group_ids", mode="before")
    @classmethod
    def _normalize_groups(cls, v):
        return normalize_group_ids(v)

    @field_validator("send_notification", mode="before")
    @classmethod
    def _flag(cls, v):
        if v is None:
            return 0
        return 1 if v else 0

    @property
    def auto_notify(self) -> bool:
        return bool(self.send_notification)


class ShowCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    start_time: datetime

    @field_validator("start_time")
    @classmethod
    def _utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class CallCreate(BaseModel):
    show_id: int
    title: str = ""
    description: Optional[str] = None
    minutes_before: int = Field(ge=MIN_MINUTES_BEFORE, le=MAX_MINUTES_BEFORE)
    group_ids: list[int] = Field(min_length=1)
    send_notification: int = 0

    @field_validator("group_ids", mode="before")
    @classmethod
    def _normalize_groups(cls, v):
        return normalize_group_ids(v)

    @field_validator("send_notification", mode="before")
    @classmethod
    def _flag(cls, v):
        if v is None:
            return 0
        return 1 if v else 0
