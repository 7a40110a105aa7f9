"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    InvalidTokenError,
)
from .user_registration import register_user
from .user_authentication import authenticate_user
from .session_management import (
    Session,
    SIGNED_IN,
    SIGNED_OUT,
    sign_up,
    sign_in,
    sign_out,
    current_session,
    on_session_change,
)

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'UserRegistrationError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'InvalidTokenError',
    # Services
    'register_user',
    'authenticate_user',
    # Sessions
    'Session',
    'SIGNED_IN',
    'SIGNED_OUT',
    'sign_up',
    'sign_in',
    'sign_out',
    'current_session',
    'on_session_change',
]
