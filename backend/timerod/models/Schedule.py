from timerod.extensions import db
from timerod.utils.serialization import to_dict
from .base import SoftDeleteMixin


class Schedule(db.Model, SoftDeleteMixin):
    __tablename__ = 'schedules'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    entry_time = db.Column(db.Time, nullable=False)
    exit_time = db.Column(db.Time, nullable=False)
    tolerance_minutes = db.Column(db.Integer, default=0, nullable=False)

    areas = db.relationship('Area', back_populates='schedule', lazy=True)
    employees = db.relationship('Employee', back_populates='schedule', lazy=True)

    def to_dict(self):
        return to_dict(self)
