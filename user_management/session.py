"""
Dashboard session state.

A browser session starts anonymous, becomes authenticated on login and is
cleared on logout or when its tokens can no longer be refreshed. Feature
code only reads ``request.dashboard_session``; the functions in this module
are the only writers.
"""
import logging
import time

from django.conf import settings
from django.core.cache import cache
from jose import JWTError, jwt

from core.constants import UserRoles
from core.exceptions import ApiError
from core.services import ApiClient, AuthService

logger = logging.getLogger(__name__)

SESSION_KEY = 'dashboard_auth'


class SessionStatus:
    ANONYMOUS = 'anonymous'
    RESOLVING = 'resolving'
    AUTHENTICATED = 'authenticated'


class SessionUser:
    """The signed-in actor as reported by the Accredit API."""

    __slots__ = ('id', 'username', 'email', 'first_name', 'last_name', 'role', 'department')

    def __init__(self, id, username, role, email='', first_name='', last_name='', department=None):
        self.id = id
        self.username = username
        self.role = role
        self.email = email
        self.first_name = first_name
        self.last_name = last_name
        self.department = department

    @classmethod
    def from_dict(cls, data):
        return cls(**{key: data.get(key) for key in cls.__slots__ if key in data})

    def to_dict(self):
        return {key: getattr(self, key) for key in self.__slots__}

    def has_role(self, *roles):
        return self.role in roles

    def get_full_name(self):
        return f"{self.first_name or ''} {self.last_name or ''}".strip() or self.username

    def get_role_display(self):
        try:
            return UserRoles(self.role).label
        except ValueError:
            return self.role

    def __str__(self):
        return f"{self.get_full_name()} ({self.username})"


class DashboardSession:
    __slots__ = ('_status', '_user', '_access_token', '_refresh_token')

    def __init__(self, status, user=None, access_token=None, refresh_token=None):
        self._status = status
        self._user = user
        self._access_token = access_token
        self._refresh_token = refresh_token

    @classmethod
    def anonymous(cls):
        return cls(SessionStatus.ANONYMOUS)

    @classmethod
    def resolving(cls):
        return cls(SessionStatus.RESOLVING)

    @property
    def status(self):
        return self._status

    @property
    def user(self):
        return self._user

    @property
    def access_token(self):
        return self._access_token

    @property
    def refresh_token(self):
        return self._refresh_token

    @property
    def is_authenticated(self):
        return self._status == SessionStatus.AUTHENTICATED and self._user is not None

    @property
    def is_resolving(self):
        return self._status == SessionStatus.RESOLVING

    def __repr__(self):
        return f"<DashboardSession {self._status} user={self._user}>"


def token_expiry(token):
    """Expiry timestamp of a JWT, or None when it cannot be read."""
    try:
        claims = jwt.get_unverified_claims(token)
    except JWTError:
        return None
    exp = claims.get('exp')
    return int(exp) if exp is not None else None


def needs_refresh(token, threshold=None):
    threshold = settings.SESSION_REFRESH_THRESHOLD if threshold is None else threshold
    expiry = token_expiry(token) if token else None
    if expiry is None:
        return True
    return time.time() + threshold >= expiry


def start_session(request, user, tokens):
    # New key on privilege change
    request.session.cycle_key()
    request.session[SESSION_KEY] = {
        'user': dict(user),
        'access': tokens['access'],
        'refresh': tokens['refresh'],
    }
    logger.info(f"Session started for {user['username']} ({user['role']})")
    session = _authenticated(request.session[SESSION_KEY])
    request.dashboard_session = session
    return session


def end_session(request):
    stored = request.session.get(SESSION_KEY)
    request.session.flush()
    request.dashboard_session = DashboardSession.anonymous()
    if stored:
        logger.info(f"Session ended for {stored['user'].get('username')}")


def _authenticated(stored):
    return DashboardSession(
        SessionStatus.AUTHENTICATED,
        user=SessionUser.from_dict(stored['user']),
        access_token=stored['access'],
        refresh_token=stored['refresh'],
    )


def resolve_session(request):
    """Work out the session for this request, refreshing tokens when due."""
    stored = request.session.get(SESSION_KEY)
    if not stored:
        return DashboardSession.anonymous()

    if not needs_refresh(stored['access']):
        return _authenticated(stored)

    refresh_token = stored.get('refresh')
    refresh_expiry = token_expiry(refresh_token) if refresh_token else None
    if refresh_expiry is None or refresh_expiry <= time.time():
        logger.info(f"Session for {stored['user'].get('username')} expired")
        end_session(request)
        return DashboardSession.anonymous()

    lock_key = f"session-refresh:{request.session.session_key}"
    if not cache.add(lock_key, True, timeout=settings.SESSION_REFRESH_LOCK_TIMEOUT):
        # Another request for this browser is refreshing right now
        return DashboardSession.resolving()

    try:
        with ApiClient() as client:
            tokens = AuthService(client).refresh(refresh_token)
    except ApiError as e:
        logger.warning(f"Token refresh failed for {stored['user'].get('username')}: {e.message}")
        end_session(request)
        return DashboardSession.anonymous()
    finally:
        cache.delete(lock_key)

    stored = {**stored, 'access': tokens['access'], 'refresh': tokens['refresh']}
    request.session[SESSION_KEY] = stored
    logger.debug(f"Refreshed tokens for {stored['user'].get('username')}")
    return _authenticated(stored)
