"""PortalSetting model."""
from portal.extensions import db

CALENDAR_SETTING_KEY = 'google_calendar_id'


class PortalSetting(db.Model):
    __tablename__ = 'portal_settings'

    id = db.Column(db.Integer, primary_key=True)
    setting_key = db.Column(db.String(100), unique=True, nullable=False)
    setting_value = db.Column(db.Text)
