"""Read-only content shown to logged-in clients."""
import logging
from datetime import timezone
from zoneinfo import ZoneInfo

from portal.errors import BackendError
from portal.models import Announcement, Event, PortalSetting, CALENDAR_SETTING_KEY

logger = logging.getLogger(__name__)

ANNOUNCEMENT_ORDER = ('-priority', '-created_at')
EVENT_ORDER = ('starts_at',)
BANNER_LIMIT = 3
UPCOMING_EVENTS_LIMIT = 5

CALENDAR_PLACEHOLDER = 'YOUR_CALENDAR_ID_HERE'
CALENDAR_URL = 'https://calendar.google.com/calendar/appointments/schedules/{}'


def to_local(value, timezone_name):
    """Convert a stored timestamp to portal-local time. Naive values are UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(ZoneInfo(timezone_name))


def list_announcements(gateway, limit=None):
    """Active announcements, most prominent first. Empty on backend failure."""
    try:
        return gateway.select(Announcement, filters={'is_active': True}, order_by=ANNOUNCEMENT_ORDER, limit=limit)
    except BackendError:
        logger.warning('Could not load announcements')
        return []


def list_upcoming_events(gateway, limit=UPCOMING_EVENTS_LIMIT):
    """Active events by start time ascending. Empty on backend failure."""
    try:
        return gateway.select(Event, filters={'is_active': True}, order_by=EVENT_ORDER, limit=limit)
    except BackendError:
        logger.warning('Could not load events')
        return []


def get_calendar_url(gateway):
    """Scheduling link for the configured calendar, or None if unset."""
    try:
        setting = gateway.first(PortalSetting, setting_key=CALENDAR_SETTING_KEY)
    except BackendError:
        logger.warning('Could not load calendar setting')
        return None
    calendar_id = (setting.setting_value or '').strip() if setting else ''
    if not calendar_id or calendar_id == CALENDAR_PLACEHOLDER:
        return None
    return CALENDAR_URL.format(calendar_id)
