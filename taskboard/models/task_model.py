from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Optional

STATUSES = ("pending", "completed")
PRIORITIES = ("low", "medium", "high")

DEFAULT_STATUS = "pending"
DEFAULT_PRIORITY = "medium"

# Fields a partial update is allowed to touch
UPDATABLE_FIELDS = (
    "title",
    "date",
    "startTime",
    "endTime",
    "location",
    "category",
    "isStaticSchedule",
    "status",
    "priority",
)


def minutes_of_day(hhmm: str) -> int:
    hours, minutes = hhmm.split(":")
    return int(hours) * 60 + int(minutes)


def compute_duration(start_time: str, end_time: str) -> int:
    """Minutes between two same-day ``HH:MM`` wall-clock times."""
    return minutes_of_day(end_time) - minutes_of_day(start_time)


@dataclass
class Task:
    id: str
    title: str
    date: str  # YYYY-MM-DD
    startTime: str  # HH:MM (24h)
    endTime: str
    category: str
    isStaticSchedule: bool = False
    location: Optional[str] = None
    status: str = DEFAULT_STATUS  # pending | completed
    priority: str = DEFAULT_PRIORITY  # low | medium | high
    duration: int = 0

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Task":
        return cls(
            id=str(row["id"]),
            title=row["title"],
            date=str(row["date"]),
            startTime=str(row["startTime"]),
            endTime=str(row["endTime"]),
            category=row["category"],
            isStaticSchedule=bool(row["isStaticSchedule"]),
            location=row.get("location"),
            status=row["status"],
            priority=row["priority"],
            duration=int(row["duration"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
