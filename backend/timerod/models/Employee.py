from timerod.extensions import db
from timerod.utils.serialization import to_dict
from .base import SoftDeleteMixin, TimestampMixin


class Employee(db.Model, TimestampMixin, SoftDeleteMixin):
    __tablename__ = 'employees'
    __table_args__ = (
        db.UniqueConstraint('company_id', 'employee_number', name='uq_employee_company_number'),
    )

    id = db.Column(db.Integer, primary_key=True)
    company_id = db.Column(db.Integer, db.ForeignKey('companies.id'), nullable=False)
    area_id = db.Column(db.Integer, db.ForeignKey('areas.id'), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    schedule_id = db.Column(db.Integer, db.ForeignKey('schedules.id'), nullable=True)

    employee_number = db.Column(db.String(50), nullable=False)
    first_name = db.Column(db.String(150), nullable=False)
    last_name = db.Column(db.String(150), nullable=False)
    hire_date = db.Column(db.Date, nullable=True)
    daily_salary = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    position = db.Column(db.String(150), nullable=True)
    biometric_id = db.Column(db.String(100), nullable=True)

    company = db.relationship('Company', back_populates='employees')
    area = db.relationship('Area', back_populates='employees')
    user = db.relationship('User', backref=db.backref('employee', uselist=False))
    schedule = db.relationship('Schedule', back_populates='employees')
    attendance_records = db.relationship('AttendanceRecord', back_populates='employee', lazy=True)

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

    def to_dict(self):
        data = to_dict(self)
        data.update({
            "fullName": self.full_name,
            "companyName": self.company.name if self.company else None,
            "areaName": self.area.name if self.area else None,
            "userName": self.user.full_name if self.user else None,
            "scheduleName": self.schedule.name if self.schedule else None,
        })
        return data
