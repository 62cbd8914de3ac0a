"""Password credential provider.

Plays the part of the hosted auth subsystem: it checks an email/password pair
against ``users`` and keeps a credential session in a mapping (the signed
Flask session in production). It knows nothing about admin membership;
that check belongs to :mod:`portal.services.session`.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from werkzeug.security import check_password_hash, generate_password_hash

from portal.errors import CredentialError
from portal.models import User

logger = logging.getLogger(__name__)

SIGNED_IN = 'SIGNED_IN'
SIGNED_OUT = 'SIGNED_OUT'


@dataclass(frozen=True)
class Identity:
    """An authenticated credential holder."""

    id: int
    email: str


def hash_password(password):
    return generate_password_hash(password)


class PasswordAuthProvider:
    USER_KEY = 'auth_user_id'
    ISSUED_KEY = 'auth_issued_at'

    def __init__(self, gateway, store, lifetime=timedelta(hours=8), clock=None):
        self._gateway = gateway
        self._store = store
        self._lifetime = lifetime
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._listeners = []

    def on_auth_state_change(self, callback):
        """Register ``callback(event, identity)``. Returns an unsubscribe function."""
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)
        return unsubscribe

    def sign_in_with_password(self, email, password):
        email = (email or '').strip().lower()
        if not email or not password:
            raise CredentialError('Invalid login credentials')

        user = self._gateway.first(User, email=email)
        if user is None or not user.password_hash or not check_password_hash(user.password_hash, password):
            raise CredentialError('Invalid login credentials')

        self._store[self.USER_KEY] = user.id
        self._store[self.ISSUED_KEY] = self._clock().timestamp()
        identity = Identity(id=user.id, email=user.email)
        self._emit(SIGNED_IN, identity)
        return identity

    def sign_out(self):
        had_session = self._store.pop(self.USER_KEY, None) is not None
        self._store.pop(self.ISSUED_KEY, None)
        if had_session:
            self._emit(SIGNED_OUT, None)

    def get_session(self):
        """Return the current identity, expiring stale or orphaned sessions."""
        user_id = self._store.get(self.USER_KEY)
        if user_id is None:
            return None

        issued = self._store.get(self.ISSUED_KEY)
        if issued is None or self._clock().timestamp() - issued > self._lifetime.total_seconds():
            logger.info('Credential session expired', extra={'user_id': user_id})
            self.sign_out()
            return None

        user = self._gateway.get(User, user_id)
        if user is None:
            self.sign_out()
            return None
        return Identity(id=user.id, email=user.email)

    def _emit(self, event, identity):
        for callback in list(self._listeners):
            callback(event, identity)
