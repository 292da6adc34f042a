from werkzeug.security import generate_password_hash, check_password_hash
from timerod.extensions import db
from timerod.utils.serialization import to_dict
from .base import SoftDeleteMixin, TimestampMixin, UserRole, utcnow


class User(db.Model, TimestampMixin, SoftDeleteMixin):
    __tablename__ = 'users'
    __table_args__ = (
        db.UniqueConstraint('company_id', 'email', name='uq_user_company_email'),
    )

    id = db.Column(db.Integer, primary_key=True)
    company_id = db.Column(db.Integer, db.ForeignKey('companies.id'), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    password_hash = db.Column(db.String(512), nullable=False)
    full_name = db.Column(db.String(200), nullable=False)
    role = db.Column(db.Enum(UserRole, name="user_role"), nullable=False, default=UserRole.EMPLOYEE)
    last_login_at = db.Column(db.DateTime, nullable=True)

    company = db.relationship('Company', back_populates='users')

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def to_dict(self):
        data = to_dict(self)
        data["companyName"] = self.company.name if self.company else None
        return data


class TokenBlocklist(db.Model):
    __tablename__ = 'token_blocklist'

    id = db.Column(db.Integer, primary_key=True)
    jti = db.Column(db.String(36), nullable=False, index=True)
    token_type = db.Column(db.String(10), nullable=False, default="access")
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'))
    created_at = db.Column(db.DateTime, default=utcnow)
    expires_at = db.Column(db.DateTime, nullable=False)

    user = db.relationship("User", backref="revoked_tokens")
