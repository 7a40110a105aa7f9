"""User registration service."""

import logging

from django.db import transaction, IntegrityError
from django.contrib.auth import get_user_model

from .exceptions import UserRegistrationError

logger = logging.getLogger(__name__)

User = get_user_model()


@transaction.atomic
def register_user(
    *,
    email: str,
    password: str,
    display_name: str = ""
) -> User:
    """
    Register a new user.

    Args:
        email: User's email address (stored lower-cased)
        password: User's password (will be hashed)
        display_name: Optional display name

    Returns:
        Created User instance

    Raises:
        UserRegistrationError: If the email is missing or already registered
    """
    if not email or not email.strip():
        raise UserRegistrationError("Please enter an email address.")

    email = User.objects.normalize_email(email)
    if User.objects.filter(email=email).exists():
        raise UserRegistrationError("An account with this email already exists.")

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                email=email,
                password=password,
                display_name=display_name
            )
    except IntegrityError:
        # Concurrent registration with the same email
        raise UserRegistrationError("An account with this email already exists.")

    logger.info("Registered user %s", user.id)
    return user
