"""User and AdminUser models."""
from datetime import datetime, timezone
from portal.extensions import db


def _utcnow():
    return datetime.now(timezone.utc)


class User(db.Model):
    """Credential identity. Having one does not grant admin access."""
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(256))
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)

    admin = db.relationship('AdminUser', backref='user', uselist=False, cascade='all, delete-orphan')


class AdminUser(db.Model):
    __tablename__ = 'admin_users'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), unique=True, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)
