"""Models package - Re-exports all models for convenient importing."""
from portal.extensions import db
from portal.models.user import User, AdminUser
from portal.models.access import AuthorizedCode, ClientSession
from portal.models.content import Announcement, Event
from portal.models.feedback import Feedback, FEEDBACK_KINDS
from portal.models.setting import PortalSetting, CALENDAR_SETTING_KEY

__all__ = [
    'db', 'User', 'AdminUser', 'AuthorizedCode', 'ClientSession',
    'Announcement', 'Event', 'Feedback', 'FEEDBACK_KINDS',
    'PortalSetting', 'CALENDAR_SETTING_KEY',
]
