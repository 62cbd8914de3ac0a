"""Admin console controllers.

Each tab of the console is an :class:`AdminView` member bound to a typed
controller. Controllers validate form input and issue one unconditional
gateway call per mutation; concurrent edits are last-write-wins.
"""
import enum
import logging
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from portal.errors import BackendError, NotFound, UnsupportedOperation, ValidationError
from portal.models import (
    Announcement, AuthorizedCode, Event, Feedback, PortalSetting, CALENDAR_SETTING_KEY,
)

logger = logging.getLogger(__name__)


def _text(form, name):
    return (form.get(name) or '').strip()


def _optional(form, name):
    return _text(form, name) or None


class CrudController:
    model = None
    ordering = ()

    def __init__(self, gateway):
        self.gateway = gateway

    def list(self):
        return self.gateway.select(self.model, order_by=self.ordering)

    def get(self, record_id):
        record = self.gateway.get(self.model, record_id)
        if record is None:
            raise NotFound(f'{self.model.__name__} {record_id}')
        return record

    def clean(self, form, instance=None):
        """Turn submitted form data into column values. Raises ValidationError."""
        raise NotImplementedError

    def create(self, form):
        return self.gateway.insert(self.model, self.clean(form))

    def update(self, record_id, form):
        values = self.clean(form, instance=self.get(record_id))
        record = self.gateway.update(self.model, record_id, values)
        if record is None:
            raise NotFound(f'{self.model.__name__} {record_id}')
        return record

    def toggle_active(self, record_id):
        record = self.get(record_id)
        return self.gateway.update(self.model, record_id, {'is_active': not record.is_active})

    def delete(self, record_id):
        if not self.gateway.delete(self.model, record_id):
            raise NotFound(f'{self.model.__name__} {record_id}')


class CodeController(CrudController):
    model = AuthorizedCode
    ordering = ('t_code',)

    def clean(self, form, instance=None):
        t_code = _text(form, 't_code').upper()
        if not t_code:
            raise ValidationError('t_code is required')
        existing = self.gateway.first(AuthorizedCode, t_code=t_code)
        if existing is not None and (instance is None or existing.id != instance.id):
            raise ValidationError(f'duplicate code {t_code}')
        return {'t_code': t_code, 'company_name': _optional(form, 'company_name')}


class AnnouncementController(CrudController):
    model = Announcement
    ordering = ('-priority', '-created_at')

    def clean(self, form, instance=None):
        title = _text(form, 'title')
        content = _text(form, 'content')
        if not title or not content:
            raise ValidationError('title and content are required')
        raw_priority = _text(form, 'priority') or '0'
        try:
            priority = int(raw_priority)
        except ValueError:
            raise ValidationError(f'priority must be an integer, got {raw_priority!r}')
        return {'title': title, 'content': content, 'priority': priority}


class EventController(CrudController):
    model = Event
    ordering = ('starts_at',)

    def __init__(self, gateway, timezone_name='UTC'):
        super().__init__(gateway)
        self.local_tz = ZoneInfo(timezone_name)

    def parse_datetime(self, value):
        """Parse an ISO/``datetime-local`` value; naive input is portal-local time."""
        if not value:
            return None
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            raise ValidationError(f'invalid date: {value!r}')
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=self.local_tz)
        return parsed.astimezone(timezone.utc)

    def clean(self, form, instance=None):
        title = _text(form, 'title')
        starts_at = self.parse_datetime(_text(form, 'starts_at'))
        if not title or starts_at is None:
            raise ValidationError('title and starts_at are required')
        ends_at = self.parse_datetime(_text(form, 'ends_at'))
        if ends_at is not None and ends_at < starts_at:
            raise ValidationError('ends_at must not precede starts_at')
        return {
            'title': title,
            'description': _optional(form, 'description'),
            'location': _optional(form, 'location'),
            'starts_at': starts_at,
            'ends_at': ends_at,
        }


class FeedbackController(CrudController):
    """Feedback is read and deleted by admins, never edited."""

    model = Feedback
    ordering = ('-created_at',)

    def create(self, form):
        raise UnsupportedOperation('feedback is created by clients only')

    def update(self, record_id, form):
        raise UnsupportedOperation('feedback is immutable')

    def toggle_active(self, record_id):
        raise UnsupportedOperation('feedback has no active flag')


class SettingsController:
    def __init__(self, gateway):
        self.gateway = gateway

    def list(self):
        return {s.setting_key: s.setting_value for s in self.gateway.select(PortalSetting)}

    def get(self, key=CALENDAR_SETTING_KEY):
        setting = self.gateway.first(PortalSetting, setting_key=key)
        return setting.setting_value if setting else ''

    def save(self, value, key=CALENDAR_SETTING_KEY):
        return self.gateway.upsert(PortalSetting, 'setting_key', {
            'setting_key': key,
            'setting_value': (value or '').strip(),
        })


class AdminView(enum.Enum):
    CODES = 'codes'
    ANNOUNCEMENTS = 'announcements'
    EVENTS = 'events'
    FEEDBACK = 'feedback'
    SETTINGS = 'settings'

    def controller(self, gateway, timezone_name='UTC'):
        if self is AdminView.EVENTS:
            return EventController(gateway, timezone_name)
        return _CONTROLLERS[self](gateway)

    @property
    def is_crud(self):
        return self is not AdminView.SETTINGS


_CONTROLLERS = {
    AdminView.CODES: CodeController,
    AdminView.ANNOUNCEMENTS: AnnouncementController,
    AdminView.FEEDBACK: FeedbackController,
    AdminView.SETTINGS: SettingsController,
}


def load_dashboard(gateway, timezone_name='UTC'):
    """Load every tab's data. A failing tab is logged and left empty."""
    data = {}
    for view in AdminView:
        try:
            data[view] = view.controller(gateway, timezone_name).list()
        except BackendError:
            logger.warning('Could not load admin view', extra={'view': view.value})
            data[view] = {} if view is AdminView.SETTINGS else []
    return data
