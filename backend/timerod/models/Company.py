from timerod.extensions import db
from timerod.utils.serialization import to_dict
from .base import SoftDeleteMixin, TimestampMixin


class Company(db.Model, TimestampMixin, SoftDeleteMixin):
    __tablename__ = 'companies'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    tax_id = db.Column(db.String(13), nullable=False, unique=True)  # RFC
    address = db.Column(db.String(255), nullable=True)
    settings_json = db.Column(db.Text, nullable=True)

    areas = db.relationship('Area', back_populates='company', lazy=True)
    users = db.relationship('User', back_populates='company', lazy=True)
    employees = db.relationship('Employee', back_populates='company', lazy=True)

    def to_dict(self):
        return to_dict(self)
