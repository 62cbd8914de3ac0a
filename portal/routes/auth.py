"""Authentication routes, per-request session wiring and decorators."""
import logging
from functools import wraps

from flask import Blueprint, current_app, flash, g, redirect, render_template, request, session, url_for
from flask_babel import gettext as _

from portal.gateway import Gateway
from portal.services.credentials import PasswordAuthProvider
from portal.services.session import AuthManager, LoginFailure, SessionCodeStore

auth_bp = Blueprint('auth', __name__)
logger = logging.getLogger(__name__)


# ==================== Per-request session ====================

def build_auth_manager(gateway, store):
    """One AuthManager per request, wired to the cookie session ``store``."""
    provider = PasswordAuthProvider(gateway, store, lifetime=current_app.config['ADMIN_SESSION_LIFETIME'])
    return AuthManager(
        gateway,
        SessionCodeStore(store),
        provider,
        revalidate_on_restore=current_app.config['CLIENT_CODE_REVALIDATE_ON_RESTORE'],
    )


@auth_bp.before_app_request
def load_portal_session():
    g.gateway = Gateway()
    g.auth = build_auth_manager(g.gateway, session)
    g.auth.restore()


@auth_bp.teardown_app_request
def close_portal_session(exc):
    auth = g.pop('auth', None)
    if auth is not None:
        auth.close()


@auth_bp.app_context_processor
def inject_portal_session():
    auth = g.get('auth')
    return dict(portal_session=auth.state if auth else None)


# ==================== Decorators (MUST be defined before routes that use them) ====================

def client_required(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not g.auth.state.client_authenticated:
            return redirect(url_for('auth.login'))
        return f(*args, **kwargs)
    return decorated_function


def admin_required(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not g.auth.state.admin_authenticated:
            return redirect(url_for('admin.dashboard'))
        return f(*args, **kwargs)
    return decorated_function


# ==================== Client (T-code) ====================

@auth_bp.route('/', methods=['GET', 'POST'])
def login():
    if g.auth.state.client_authenticated and request.method == 'GET':
        return redirect(url_for('main.portal_home'))

    if request.method == 'POST':
        t_code = request.form.get('t_code', '')
        if not t_code.strip():
            flash(_('Por favor, informe seu Código T'), 'error')
        elif g.auth.authenticate_client(t_code):
            return redirect(url_for('main.portal_home'))
        else:
            flash(_('Código T não autorizado ou inativo. Verifique com o time Prime.'), 'error')

    return render_template('auth/login.html')


@auth_bp.route('/logout')
def logout():
    g.auth.logout_client()
    return redirect(url_for('auth.login'))


# ==================== Admin (credentials) ====================

LOGIN_FAILURE_MESSAGES = {
    LoginFailure.INVALID_CREDENTIALS: 'E-mail ou senha inválidos.',
    LoginFailure.NOT_AUTHORIZED: 'Acesso não autorizado. Apenas administradores podem acessar.',
    LoginFailure.UNAVAILABLE: 'Erro ao fazer login',
}


@auth_bp.route('/admin/login', methods=['POST'])
def admin_login():
    email = request.form.get('email', '')
    password = request.form.get('password', '')

    result = g.auth.login_admin(email, password)
    if not result.success:
        logger.info('Admin login failed: %s', result.failure.value)
        flash(_(LOGIN_FAILURE_MESSAGES[result.failure]), 'error')
    return redirect(url_for('admin.dashboard'))


@auth_bp.route('/admin/logout', methods=['POST'])
def admin_logout():
    g.auth.logout_admin()
    return redirect(url_for('admin.dashboard'))
