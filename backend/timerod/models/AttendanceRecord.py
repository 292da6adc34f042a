from decimal import Decimal
from timerod.extensions import db
from timerod.utils.serialization import to_dict, serialize_value
from .base import AttendanceKind, TimestampMixin

HOURS_PRECISION = Decimal("0.000001")


def hours_between(start, end):
    """Exact elapsed time between two instants in decimal hours."""
    delta = end - start
    seconds = Decimal(delta.days * 86400 + delta.seconds) + Decimal(delta.microseconds) / Decimal(1000000)
    return (seconds / Decimal(3600)).quantize(HOURS_PRECISION)


class AttendanceRecord(db.Model, TimestampMixin):
    __tablename__ = 'attendance_records'
    __table_args__ = (
        db.UniqueConstraint('employee_id', 'date', name='uq_attendance_employee_date'),
    )

    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.Integer, db.ForeignKey('employees.id'), nullable=False, index=True)
    date = db.Column(db.Date, nullable=False, index=True)
    entry_time = db.Column(db.DateTime, nullable=True)
    exit_time = db.Column(db.DateTime, nullable=True)
    kind = db.Column(db.Enum(AttendanceKind, name="attendance_kind"), nullable=False, default=AttendanceKind.NORMAL)
    notes = db.Column(db.Text, nullable=True)
    approved = db.Column(db.Boolean, nullable=False, default=True)
    worked_hours = db.Column(db.Numeric(10, 6), nullable=True)
    late_arrival = db.Column(db.Boolean, nullable=False, default=False)
    late_minutes = db.Column(db.Integer, nullable=True, default=0)
    version = db.Column(db.Integer, nullable=False)

    employee = db.relationship('Employee', back_populates='attendance_records')

    __mapper_args__ = {"version_id_col": version}

    def recompute_worked_hours(self):
        if self.entry_time is not None and self.exit_time is not None:
            self.worked_hours = hours_between(self.entry_time, self.exit_time)
        else:
            self.worked_hours = None
        return self.worked_hours

    def to_dict(self):
        data = to_dict(self)
        employee = self.employee
        company = employee.company if employee else None
        area = employee.area if employee else None
        data.update({
            "employeeFullName": employee.full_name if employee else None,
            "employeeNumber": employee.employee_number if employee else None,
            "companyId": company.id if company else None,
            "companyName": company.name if company else None,
            "areaId": area.id if area else None,
            "areaName": area.name if area else None,
        })
        return data

    def to_report_dict(self):
        employee = self.employee
        return {
            "id": self.id,
            "date": serialize_value(self.date),
            "entryTime": serialize_value(self.entry_time),
            "exitTime": serialize_value(self.exit_time),
            "workedHours": serialize_value(self.worked_hours),
            "lateArrival": self.late_arrival,
            "lateMinutes": self.late_minutes,
            "kind": serialize_value(self.kind),
            "employee": {
                "id": employee.id,
                "employeeNumber": employee.employee_number,
                "fullName": employee.full_name,
                "areaName": employee.area.name if employee.area else None,
                "companyName": employee.company.name if employee.company else None,
            },
        }
