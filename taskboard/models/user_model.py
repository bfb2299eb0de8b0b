from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

PLANS = ("basic", "premium")

# Profile fields a signed-in user may change
PROFILE_FIELDS = ("name", "phone", "organization")


@dataclass
class User:
    id: int
    name: str
    email: str
    password: str  # werkzeug hash, never serialized
    plan: str  # basic | premium
    phone: Optional[str] = None
    organization: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "User":
        return cls(
            id=int(row["id"]),
            name=row["name"],
            email=row["email"],
            password=row["password"],
            plan=row["plan"],
            phone=row.get("phone"),
            organization=row.get("organization"),
            created_at=row.get("created_at"),
        )

    def summary(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "email": self.email, "plan": self.plan}

    def profile(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "organization": self.organization,
            "plan": self.plan,
        }
