"""
Session management service.

A session is a JWT refresh/access pair issued for a user. Signing in and
out go through Django's ``user_logged_in`` / ``user_logged_out`` signals so
that anything interested in session changes can subscribe with
``on_session_change`` instead of polling.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from django.contrib.auth import get_user_model
from django.contrib.auth.signals import user_logged_in, user_logged_out
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import RefreshToken

from .exceptions import InvalidTokenError
from .user_authentication import authenticate_user
from .user_registration import register_user

logger = logging.getLogger(__name__)

User = get_user_model()

SIGNED_IN = 'signed_in'
SIGNED_OUT = 'signed_out'


@dataclass(frozen=True)
class Session:
    """
    An authenticated user and their tokens.

    ``refresh`` is only set when the session was just opened. A session
    read back from a request carries the access token it was presented with.
    """

    user: User
    refresh: Optional[str]
    access: Optional[str]

    @property
    def tokens(self) -> dict:
        return {'refresh': self.refresh, 'access': self.access}


def _issue_session(user: User) -> Session:
    refresh = RefreshToken.for_user(user)
    return Session(user=user, refresh=str(refresh), access=str(refresh.access_token))


def sign_up(
    *,
    email: str,
    password: str,
    display_name: str = "",
    request=None
) -> Session:
    """
    Register a new account and sign it in.

    Raises:
        UserRegistrationError: If registration fails
    """
    user = register_user(email=email, password=password, display_name=display_name)
    session = _issue_session(user)
    user_logged_in.send(sender=user.__class__, request=request, user=user)
    return session


def sign_in(*, email: str, password: str, request=None) -> Session:
    """
    Authenticate with email and password and open a session.

    Fires ``user_logged_in``, which also updates ``last_login``.

    Raises:
        InvalidCredentialsError: If credentials are invalid
        InactiveAccountError: If account is deactivated
    """
    user = authenticate_user(email=email, password=password)
    session = _issue_session(user)
    user_logged_in.send(sender=user.__class__, request=request, user=user)
    logger.info("User %s signed in", user.id)
    return session


def sign_out(*, user: User, refresh_token: Optional[str] = None, request=None) -> None:
    """
    Close the user's session.

    When a refresh token is given it is blacklisted so it can no longer be
    exchanged for access tokens.

    Raises:
        InvalidTokenError: If the refresh token is malformed, expired or
            issued to another user
    """
    if refresh_token:
        try:
            token = RefreshToken(refresh_token)
        except TokenError:
            raise InvalidTokenError("Invalid token")

        if str(token.get(api_settings.USER_ID_CLAIM)) != str(user.pk):
            raise InvalidTokenError("Invalid token")

        token.blacklist()

    user_logged_out.send(sender=user.__class__, request=request, user=user)
    logger.info("User %s signed out", user.id)


def current_session(user, access_token=None) -> Optional[Session]:
    """
    Describe the session the user is already holding, or None for anonymous.

    Never issues tokens. Only the presented access token is echoed back,
    and ``refresh`` is always None.
    """
    if user is None or not user.is_authenticated or not user.is_active:
        return None
    access = str(access_token) if access_token is not None else None
    return Session(user=user, refresh=None, access=access)


def on_session_change(callback: Callable[[str, User], None]) -> Callable[[], None]:
    """
    Subscribe to sign-in and sign-out events.

    ``callback(event, user)`` is called with ``event`` set to
    ``'signed_in'`` or ``'signed_out'``.

    Returns:
        A function that removes the subscription
    """
    def _signed_in(sender, user, **kwargs):
        callback(SIGNED_IN, user)

    def _signed_out(sender, user, **kwargs):
        callback(SIGNED_OUT, user)

    # Strong references: the closures would otherwise be collected immediately
    user_logged_in.connect(_signed_in, weak=False)
    user_logged_out.connect(_signed_out, weak=False)

    def disconnect() -> None:
        user_logged_in.disconnect(_signed_in)
        user_logged_out.disconnect(_signed_out)

    return disconnect
