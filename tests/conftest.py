"""
Pytest configuration and fixtures.
"""
from datetime import datetime, timedelta

import pytest

from portal import create_app
from portal.extensions import db as _db
from portal.gateway import Gateway
from portal.models import AdminUser, Announcement, AuthorizedCode, Event, User
from portal.services.credentials import hash_password

T0 = datetime(2025, 1, 1, 12, 0)


@pytest.fixture
def app():
    """App bound to a fresh in-memory database for each test."""
    app = create_app('testing')
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db(app):
    return _db


@pytest.fixture
def gateway(app):
    return Gateway()


@pytest.fixture
def make_code(db):
    def factory(t_code='T12345', is_active=True, company_name=None):
        code = AuthorizedCode(t_code=t_code, is_active=is_active, company_name=company_name)
        db.session.add(code)
        db.session.commit()
        return code
    return factory


@pytest.fixture
def make_user(db):
    def factory(email='admin@example.com', password='S3cret-pass', admin=True):
        user = User(email=email, password_hash=hash_password(password))
        db.session.add(user)
        db.session.flush()
        if admin:
            db.session.add(AdminUser(user_id=user.id))
        db.session.commit()
        return user
    return factory


@pytest.fixture
def make_announcement(db):
    def factory(title='Aviso', priority=0, created_at=T0, is_active=True, content='Conteúdo'):
        item = Announcement(title=title, content=content, priority=priority,
                            created_at=created_at, is_active=is_active)
        db.session.add(item)
        db.session.commit()
        return item
    return factory


@pytest.fixture
def make_event(db):
    def factory(title='Webinar', starts_at=T0 + timedelta(days=30), is_active=True, **kwargs):
        item = Event(title=title, starts_at=starts_at, is_active=is_active, **kwargs)
        db.session.add(item)
        db.session.commit()
        return item
    return factory


@pytest.fixture
def client_login(client):
    """Log the test client in with a T-code."""
    def login(t_code='T12345'):
        return client.post('/', data={'t_code': t_code})
    return login


@pytest.fixture
def admin_login(client):
    def login(email='admin@example.com', password='S3cret-pass'):
        return client.post('/admin/login', data={'email': email, 'password': password})
    return login
