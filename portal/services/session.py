"""Session/Auth manager for the two portal principals.

Clients log in with a T-code; admins log in with a credential *and* must be
members of ``admin_users``. Both axes live in one :class:`PortalSession`
built per request and handed around explicitly.
"""
import enum
import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from portal.errors import BackendError, CredentialError
from portal.models import AdminUser, AuthorizedCode, ClientSession
from portal.services.credentials import SIGNED_IN, Identity

logger = logging.getLogger(__name__)


# ==================== Client code persistence ====================

class CodeStore(Protocol):
    def get(self) -> Optional[str]: ...

    def set(self, code: str) -> None: ...

    def clear(self) -> None: ...


class SessionCodeStore:
    """Keeps the T-code in a session mapping (the Flask cookie session)."""

    KEY = 'prime_client_tcode'

    def __init__(self, session):
        self._session = session

    def get(self):
        return self._session.get(self.KEY)

    def set(self, code):
        self._session[self.KEY] = code

    def clear(self):
        self._session.pop(self.KEY, None)


class MemoryCodeStore:
    def __init__(self, code=None):
        self.code = code

    def get(self):
        return self.code

    def set(self, code):
        self.code = code

    def clear(self):
        self.code = None


# ==================== State ====================

@dataclass
class PortalSession:
    client_authenticated: bool = False
    client_code: Optional[str] = None
    admin_user: Optional[Identity] = None
    is_admin: bool = False
    loading: bool = True

    @property
    def admin_authenticated(self):
        return self.admin_user is not None and self.is_admin


class LoginFailure(enum.Enum):
    INVALID_CREDENTIALS = 'invalid_credentials'
    NOT_AUTHORIZED = 'not_authorized'
    UNAVAILABLE = 'unavailable'


@dataclass(frozen=True)
class AdminLoginResult:
    success: bool
    failure: Optional[LoginFailure] = None


def normalize_code(code):
    return (code or '').strip().upper()


# ==================== Manager ====================

class AuthManager:
    def __init__(self, gateway, codes, provider, revalidate_on_restore=False):
        self.state = PortalSession()
        self._gateway = gateway
        self._codes = codes
        self._provider = provider
        self._revalidate_on_restore = revalidate_on_restore
        self._unsubscribe = provider.on_auth_state_change(self._on_auth_state_change)

    def close(self):
        self._unsubscribe()

    def restore(self):
        """Rebuild both axes from persisted state."""
        code = self._codes.get()
        if code and self._revalidate_on_restore and not self._code_is_active(code):
            logger.info('Stored T-code no longer active, clearing', extra={'t_code': code})
            self._codes.clear()
            code = None
        self.state.client_code = code or None
        self.state.client_authenticated = bool(code)

        try:
            identity = self._provider.get_session()
        except BackendError:
            identity = None
        if identity is not None:
            self.state.admin_user = identity
            self.state.is_admin = self._check_is_admin(identity)
        self.state.loading = False
        return self.state

    # ---- client axis ----

    def authenticate_client(self, code):
        """Log a client in with a T-code.

        Returns False for unknown codes, inactive codes and lookup errors
        alike; callers show one message for all three.
        """
        normalized = normalize_code(code)
        if not normalized:
            return False
        if not self._code_is_active(normalized):
            return False

        try:
            self._gateway.insert(ClientSession, {'t_code': normalized})
        except BackendError:
            logger.warning('Could not record client session', extra={'t_code': normalized})

        self._codes.set(normalized)
        self.state.client_code = normalized
        self.state.client_authenticated = True
        logger.info('Client logged in', extra={'t_code': normalized})
        return True

    def logout_client(self):
        self._codes.clear()
        self.state.client_code = None
        self.state.client_authenticated = False

    # ---- admin axis ----

    def login_admin(self, email, password):
        try:
            identity = self._provider.sign_in_with_password(email, password)
        except CredentialError:
            self._clear_admin()
            return AdminLoginResult(False, LoginFailure.INVALID_CREDENTIALS)
        except BackendError:
            self._clear_admin()
            return AdminLoginResult(False, LoginFailure.UNAVAILABLE)

        if not self._check_is_admin(identity):
            # A valid credential alone never grants the console
            self._provider.sign_out()
            self._clear_admin()
            logger.warning('Non-admin credential rejected', extra={'user_id': identity.id})
            return AdminLoginResult(False, LoginFailure.NOT_AUTHORIZED)

        self.state.admin_user = identity
        self.state.is_admin = True
        logger.info('Admin logged in', extra={'user_id': identity.id})
        return AdminLoginResult(True)

    def logout_admin(self):
        self._provider.sign_out()
        self._clear_admin()

    # ---- internals ----

    def _on_auth_state_change(self, event, identity):
        if event == SIGNED_IN and identity is not None:
            self.state.admin_user = identity
            self.state.is_admin = self._check_is_admin(identity)
        else:
            self._clear_admin()

    def _clear_admin(self):
        self.state.admin_user = None
        self.state.is_admin = False

    def _check_is_admin(self, identity):
        try:
            return self._gateway.first(AdminUser, user_id=identity.id) is not None
        except BackendError:
            return False

    def _code_is_active(self, code):
        try:
            return self._gateway.first(AuthorizedCode, t_code=code, is_active=True) is not None
        except BackendError:
            return False
