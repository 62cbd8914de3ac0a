"""Tests for the announcement, event and calendar read paths."""
from datetime import datetime, timedelta, timezone

from portal.errors import BackendError
from portal.models import PortalSetting, CALENDAR_SETTING_KEY
from portal.services.content import get_calendar_url, list_announcements, list_upcoming_events, to_local

T1 = datetime(2025, 1, 1, 9, 0)
T2 = T1 + timedelta(days=1)
T3 = T1 + timedelta(days=2)


def test_announcements_by_priority_then_recency(gateway, make_announcement):
    make_announcement('high-newer', priority=5, created_at=T2)
    make_announcement('high-older', priority=5, created_at=T1)
    make_announcement('low-newest', priority=1, created_at=T3)

    titles = [a.title for a in list_announcements(gateway)]

    assert titles == ['high-newer', 'high-older', 'low-newest']
    assert [a.title for a in list_announcements(gateway)] == titles


def test_announcements_skip_inactive_and_respect_limit(gateway, make_announcement):
    for i in range(4):
        make_announcement(f'a{i}', priority=i, created_at=T1)
    make_announcement('hidden', priority=99, created_at=T1, is_active=False)

    titles = [a.title for a in list_announcements(gateway, limit=3)]

    assert titles == ['a3', 'a2', 'a1']


def test_events_exclude_inactive_and_sort_by_start(gateway, make_event):
    make_event('march', starts_at=datetime(2025, 3, 1))
    make_event('january', starts_at=datetime(2025, 1, 1), is_active=False)
    make_event('february', starts_at=datetime(2025, 2, 1))

    titles = [e.title for e in list_upcoming_events(gateway)]

    assert titles == ['february', 'march']


def test_single_active_event(gateway, make_event):
    make_event('later', starts_at=datetime(2025, 3, 1))
    make_event('earlier', starts_at=datetime(2025, 1, 1), is_active=False)

    events = list_upcoming_events(gateway)

    assert len(events) == 1
    assert events[0].starts_at == datetime(2025, 3, 1)


def test_failed_reads_leave_lists_empty(gateway, make_announcement, monkeypatch):
    make_announcement()

    def broken_select(*args, **kwargs):
        raise BackendError('down')

    monkeypatch.setattr(gateway, 'select', broken_select)

    assert list_announcements(gateway) == []
    assert list_upcoming_events(gateway) == []


def test_calendar_url(gateway, db):
    assert get_calendar_url(gateway) is None

    setting = PortalSetting(setting_key=CALENDAR_SETTING_KEY, setting_value='YOUR_CALENDAR_ID_HERE')
    db.session.add(setting)
    db.session.commit()
    assert get_calendar_url(gateway) is None

    setting.setting_value = '  '
    db.session.commit()
    assert get_calendar_url(gateway) is None

    setting.setting_value = 'AcZssZ1'
    db.session.commit()
    assert get_calendar_url(gateway) == 'https://calendar.google.com/calendar/appointments/schedules/AcZssZ1'


def test_portal_page_renders_content(client, client_login, make_code, make_announcement, make_event):
    make_code('T1')
    make_announcement('Manutenção programada', priority=2)
    make_event('Webinar de lançamento', location='Online')
    client_login('T1')

    html = client.get('/portal').get_data(as_text=True)

    assert 'Manutenção programada' in html
    assert 'Webinar de lançamento' in html
    assert 'TOTVS Fluig Academy' in html
    assert 'O agendamento estará disponível em breve.' in html


def test_all_announcements_page(client, client_login, make_code, make_announcement):
    make_code('T1')
    for i in range(5):
        make_announcement(f'Comunicado {i}', priority=i)
    client_login('T1')

    html = client.get('/portal/announcements').get_data(as_text=True)

    assert all(f'Comunicado {i}' in html for i in range(5))


def test_to_local_reads_naive_values_as_utc():
    local = to_local(datetime(2025, 3, 1, 17, 0), 'America/Sao_Paulo')

    assert local.replace(tzinfo=None) == datetime(2025, 3, 1, 14, 0)
    assert to_local(datetime(2025, 3, 1, 17, 0, tzinfo=timezone.utc), 'UTC').hour == 17
    assert to_local(None, 'UTC') is None


def test_portal_shows_event_times_in_portal_timezone(client, client_login, make_code, make_event):
    make_code('T1')
    make_event('Webinar', starts_at=datetime(2099, 3, 1, 17, 0), ends_at=datetime(2099, 3, 1, 19, 0))
    client_login('T1')

    html = client.get('/portal').get_data(as_text=True)

    assert '01/03/2099 14:00 - 16:00' in html
    assert '17:00' not in html
