from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from syncvision.errors import ValidationError


class TaskStatus(str, Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


REQUIRED_FIELDS = ("title", "description", "dueDate")
OPTIONAL_FIELDS = ("status", "assignedTo")


def _utcnow():
    return datetime.now(timezone.utc)


def parse_due_date(value):
    """Parse ``dueDate`` from an ISO-8601 string or epoch milliseconds.

    Naive values are taken as UTC. Returns an aware UTC datetime.
    """
    if isinstance(value, bool):
        raise ValidationError("Invalid dueDate format")
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            raise ValidationError("Invalid dueDate format") from None
    if not isinstance(value, str):
        raise ValidationError("Invalid dueDate format")

    raw = value.strip()
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        raise ValidationError("Invalid dueDate format") from None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


@dataclass
class Task:
    title: str
    description: str
    due_date: datetime
    status: TaskStatus = TaskStatus.PENDING
    assigned_to: Optional[str] = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    @classmethod
    def from_payload(cls, payload):
        """Build a new Task from a POST /tasks body, rejecting anything off-schema."""
        if not isinstance(payload, dict):
            raise ValidationError("Request body must be a JSON object.")

        if any(not payload.get(name) for name in REQUIRED_FIELDS):
            raise ValidationError("Title, description, and dueDate are required.")

        unknown = sorted(set(payload) - set(REQUIRED_FIELDS) - set(OPTIONAL_FIELDS))
        if unknown:
            raise ValidationError(f"Unknown fields: {', '.join(unknown)}")

        for name in ("title", "description"):
            if not isinstance(payload[name], str):
                raise ValidationError(f"{name} must be a string")

        status = payload.get("status")
        if status is None:
            status = TaskStatus.PENDING
        else:
            try:
                status = TaskStatus(status)
            except ValueError:
                allowed = ", ".join(s.value for s in TaskStatus)
                raise ValidationError(f"status must be one of: {allowed}") from None

        assigned_to = payload.get("assignedTo")
        if assigned_to is not None and not isinstance(assigned_to, str):
            raise ValidationError("assignedTo must be a string")

        now = _utcnow()
        return cls(
            title=payload["title"],
            description=payload["description"],
            due_date=parse_due_date(payload["dueDate"]),
            status=status,
            assigned_to=assigned_to,
            created_at=now,
            updated_at=now,
        )

    def to_document(self):
        doc = {
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "dueDate": self.due_date,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        if self.assigned_to is not None:
            doc["assignedTo"] = self.assigned_to
        return doc
