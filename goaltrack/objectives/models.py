"""Objective entity and API payloads."""

import json
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel

from .enums import Cadence, Category, Status, TrackingType
from .ledger import CommentLedger, Ledger

DEFAULT_DURATION = 90  # days


@dataclass
class Objective:
    """A user-defined goal with its progress and comment ledgers."""

    id: str
    user_id: str
    name: str
    category: Category
    tracking_type: TrackingType
    cadence: Cadence
    start_date: date
    duration: int = DEFAULT_DURATION
    status: Status = Status.ACTIVE
    target: Optional[float] = None
    description: Optional[str] = None
    progress: Optional[Ledger] = None
    comments: CommentLedger = field(default_factory=CommentLedger)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        self.category = Category(self.category)
        self.tracking_type = TrackingType(self.tracking_type)
        self.cadence = Cadence(self.cadence)
        self.status = Status(self.status)
        if self.progress is None:
            self.progress = Ledger(self.tracking_type)

    @property
    def end_date(self) -> date:
        """First day after the active window."""
        return self.start_date + timedelta(days=self.duration)

    def is_active_on(self, day: date) -> bool:
        """Whether ``day`` falls inside [start_date, start_date + duration)."""
        return self.start_date <= day < self.end_date

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "description": self.description,
            "category": self.category.value,
            "tracking_type": self.tracking_type.value,
            "cadence": self.cadence.value,
            "target": self.target,
            "status": self.status.value,
            "start_date": self.start_date.isoformat(),
            "duration": self.duration,
            "progress": self.progress.to_json(),
            "comments": self.comments.to_json(),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Objective":
        """Build an objective from a database row, validating both ledgers."""
        tracking_type = TrackingType(row["tracking_type"])
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            name=row["name"],
            description=row["description"],
            category=row["category"],
            tracking_type=tracking_type,
            cadence=row["cadence"],
            target=row["target"],
            status=row["status"],
            start_date=date.fromisoformat(row["start_date"]),
            duration=row["duration"],
            progress=Ledger.from_json(tracking_type, json.loads(row["progress"] or "{}")),
            comments=CommentLedger.from_json(json.loads(row["comments"] or "{}")),
            created_at=datetime.fromisoformat(row["created_at"])
            if row["created_at"]
            else None,
            updated_at=datetime.fromisoformat(row["updated_at"])
            if row["updated_at"]
            else None,
        )


class ObjectiveCreate(BaseModel):
    """Body of POST /api/objectives."""

    name: str
    category: Category
    tracking_type: TrackingType
    cadence: Cadence
    target: Optional[float] = None
    description: Optional[str] = None
    status: Optional[Status] = None
    duration: Optional[int] = None
    start_date: Optional[date] = None
    comments: Optional[dict[str, str]] = None


class ObjectiveUpdate(BaseModel):
    """Body of PUT /api/objectives/{id}; every field is optional."""

    name: Optional[str] = None
    category: Optional[str] = None
    tracking_type: Optional[str] = None
    cadence: Optional[str] = None
    target: Optional[Union[float, str]] = None
    description: Optional[str] = None
    status: Optional[str] = None
    progress: Optional[dict[str, Any]] = None
    comments: Optional[dict[str, Any]] = None
    duration: Optional[Union[int, str]] = None
    start_date: Optional[str] = None


class ProgressUpdate(BaseModel):
    date: Optional[str] = None
    value: Any = None


class StatusUpdate(BaseModel):
    status: Optional[str] = None


class CommentUpdate(BaseModel):
    date: Optional[str] = None
    comment: Optional[str] = None
