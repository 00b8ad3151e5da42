"""Services for Identity app."""
import logging

from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError

from .models import User
from .dtos import UserDTO, UserCreate

logger = logging.getLogger(__name__)


def _to_dto(user: User) -> UserDTO:
    return UserDTO(
        id=user.id,
        username=user.username,
        email=user.email,
        phone=user.phone,
        is_active=user.is_active,
    )


def get_user_dto(user_id) -> UserDTO | None:
    try:
        return _to_dto(User.objects.get(id=user_id))
    except User.DoesNotExist:
        return None


def get_user_by_username(username: str) -> User | None:
    return User.objects.filter(username=username).first()


def create_user(payload: UserCreate) -> UserDTO:
    """
    Register a new account.

    Raises:
        ValidationError: if the username is already taken or the password
            fails AUTH_PASSWORD_VALIDATORS.
    """
    username = payload.username.strip()
    if not username:
        raise ValidationError("Username is required")
    if get_user_by_username(username):
        raise ValidationError("Username already exists")

    validate_password(payload.password, user=User(username=username, email=payload.email or ""))

    user = User.objects.create_user(
        username=username,
        email=payload.email or "",
        password=payload.password,
        phone=payload.phone or "",
        is_active=True,
    )
    logger.info(f"Registered user {user.id} ({user.username})")
    return _to_dto(user)
