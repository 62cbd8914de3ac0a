"""Tests for the login pages, portal guards and language switching."""
import pytest

from portal.models import ClientSession
from portal.services.credentials import PasswordAuthProvider
from portal.services.session import SessionCodeStore


# ==================== Client login ====================

def test_login_page_renders(client):
    response = client.get('/')

    assert response.status_code == 200
    assert 'Código T' in response.get_data(as_text=True)


def test_lowercase_code_logs_in(client, make_code, gateway):
    make_code('T12345')

    response = client.post('/', data={'t_code': ' t12345 '})

    assert response.status_code == 302
    assert response.headers['Location'].endswith('/portal')
    with client.session_transaction() as sess:
        assert sess[SessionCodeStore.KEY] == 'T12345'
    assert [s.t_code for s in gateway.select(ClientSession)] == ['T12345']


def test_logged_in_client_skips_login_page(client, client_login, make_code):
    make_code()
    client_login()

    response = client.get('/')

    assert response.status_code == 302
    assert response.headers['Location'].endswith('/portal')


@pytest.mark.parametrize('t_code', ['T99999', 'T1'])
def test_unknown_or_inactive_code(client, make_code, t_code):
    make_code('T1', is_active=False)

    html = client.post('/', data={'t_code': t_code}).get_data(as_text=True)

    assert 'Código T não autorizado ou inativo. Verifique com o time Prime.' in html
    with client.session_transaction() as sess:
        assert SessionCodeStore.KEY not in sess


def test_blank_code(client):
    html = client.post('/', data={'t_code': '   '}).get_data(as_text=True)

    assert 'Por favor, informe seu Código T' in html


@pytest.mark.parametrize('path', ['/portal', '/portal/announcements', '/portal/feedback'])
def test_portal_pages_require_client_login(client, path):
    response = client.get(path)

    assert response.status_code == 302
    assert response.headers['Location'].endswith('/')


def test_client_logout(client, client_login, make_code):
    make_code()
    client_login()

    response = client.get('/logout')

    assert response.headers['Location'].endswith('/')
    assert client.get('/portal').status_code == 302


# ==================== Admin login ====================

def test_admin_page_shows_login_form_when_logged_out(client):
    html = client.get('/admin').get_data(as_text=True)

    assert 'name="password"' in html
    assert 'Painel Administrativo' not in html


def test_admin_login_opens_dashboard(client, admin_login, make_user, make_code):
    make_user()
    make_code('T777')

    response = admin_login()
    assert response.headers['Location'].endswith('/admin')

    html = client.get('/admin').get_data(as_text=True)
    assert 'Painel Administrativo' in html
    assert 'admin@example.com' in html
    assert 'T777' in html


def test_non_admin_credential_is_rejected(client, admin_login, make_user):
    make_user('user@example.com', 'pw-123456', admin=False)

    response = admin_login('user@example.com', 'pw-123456')
    html = client.get(response.headers['Location']).get_data(as_text=True)

    assert 'Acesso não autorizado. Apenas administradores podem acessar.' in html
    assert 'Painel Administrativo' not in html
    with client.session_transaction() as sess:
        assert PasswordAuthProvider.USER_KEY not in sess


def test_wrong_password(client, admin_login, make_user):
    make_user()

    response = admin_login(password='nope')
    html = client.get(response.headers['Location']).get_data(as_text=True)

    assert 'E-mail ou senha inválidos.' in html


def test_admin_logout(client, admin_login, make_user):
    make_user()
    admin_login()

    client.post('/admin/logout')

    assert 'Painel Administrativo' not in client.get('/admin').get_data(as_text=True)


def test_admin_session_does_not_grant_portal(client, admin_login, make_user):
    make_user()
    admin_login()

    assert client.get('/portal').status_code == 302


def test_client_session_does_not_grant_admin(client, client_login, make_code):
    make_code()
    client_login()

    response = client.post('/admin/codes/create', data={'t_code': 'T2'})

    assert response.status_code == 302
    assert response.headers['Location'].endswith('/admin')


# ==================== Language ====================

def test_set_language_cookie(client):
    response = client.get('/set_language/en')

    assert 'babel_translation=en' in response.headers['Set-Cookie']


def test_unsupported_language_falls_back_to_default(client):
    response = client.get('/set_language/xx')

    assert 'babel_translation=pt' in response.headers['Set-Cookie']
