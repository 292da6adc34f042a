from datetime import datetime, timezone
from timerod.extensions import db
import enum


def utcnow():
    """Naive UTC timestamp, the reference clock for every stored instant."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TimestampMixin:
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, onupdate=utcnow)


class SoftDeleteMixin:
    active = db.Column(db.Boolean, default=True, nullable=False)

    def soft_delete(self):
        self.active = False

    def restore(self):
        self.active = True


class UserRole(enum.Enum):
    ADMIN = "Admin"
    HR = "HR"
    SUPERVISOR = "Supervisor"
    EMPLOYEE = "Employee"
    CAFETERIA = "Cafeteria"


class AttendanceKind(enum.Enum):
    NORMAL = "Normal"
    OVERTIME = "Overtime"
    INCIDENT = "Incident"
    ABSENCE = "Absence"
    HOLIDAY = "Holiday"
    WORKED_REST_DAY = "WorkedRestDay"


def parse_enum(enum_class, raw):
    """
    Resolve an enum member from its value, its name (any case) or its
    1-based position, e.g. "Overtime", "OVERTIME" or 2.
    Returns None when nothing matches.
    """
    if isinstance(raw, enum_class):
        return raw

    members = list(enum_class)
    if isinstance(raw, int) and not isinstance(raw, bool):
        return members[raw - 1] if 1 <= raw <= len(members) else None

    if isinstance(raw, str):
        text = raw.strip()
        if text.isdigit():
            return parse_enum(enum_class, int(text))
        for member in members:
            if text == member.value or text.upper() == member.name:
                return member

    return None
