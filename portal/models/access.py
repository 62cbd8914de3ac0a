"""AuthorizedCode and ClientSession models."""
from datetime import datetime, timezone
from portal.extensions import db


class AuthorizedCode(db.Model):
    __tablename__ = 'authorized_codes'

    id = db.Column(db.Integer, primary_key=True)
    t_code = db.Column(db.String(50), unique=True, nullable=False)  # always uppercase
    company_name = db.Column(db.String(200))
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))


class ClientSession(db.Model):
    """Audit trail of successful T-code logins."""
    __tablename__ = 'client_sessions'

    id = db.Column(db.Integer, primary_key=True)
    t_code = db.Column(db.String(50), nullable=False, index=True)
    created_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
