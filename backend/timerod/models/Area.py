from timerod.extensions import db
from timerod.utils.serialization import to_dict
from .base import SoftDeleteMixin, TimestampMixin


class Area(db.Model, TimestampMixin, SoftDeleteMixin):
    __tablename__ = 'areas'

    id = db.Column(db.Integer, primary_key=True)
    company_id = db.Column(db.Integer, db.ForeignKey('companies.id'), nullable=False)
    name = db.Column(db.String(150), nullable=False)
    description = db.Column(db.String(500), nullable=True)
    supervisor_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    schedule_id = db.Column(db.Integer, db.ForeignKey('schedules.id'), nullable=True)

    company = db.relationship('Company', back_populates='areas')
    supervisor = db.relationship('User', foreign_keys=[supervisor_id])
    schedule = db.relationship('Schedule', back_populates='areas')
    employees = db.relationship('Employee', back_populates='area', lazy=True)

    def to_dict(self):
        data = to_dict(self)
        data.update({
            "companyName": self.company.name if self.company else None,
            "supervisorName": self.supervisor.full_name if self.supervisor else None,
            "scheduleName": self.schedule.name if self.schedule else None,
        })
        return data
