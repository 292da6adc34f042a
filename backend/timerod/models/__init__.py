from .base import SoftDeleteMixin, TimestampMixin, UserRole, AttendanceKind, parse_enum, utcnow
from .User import User, TokenBlocklist
from .Company import Company
from .Schedule import Schedule
from .Area import Area
from .Employee import Employee
from .AttendanceRecord import AttendanceRecord, hours_between
