"""Client-side pre-checks. The identity service stays the authority."""

import re
from typing import Optional

USERNAME_MIN_LENGTH = 3
PASSWORD_MIN_LENGTH = 6

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^1[3-9]\d{9}$")


class ValidationError(ValueError):
    pass


def require(value: Optional[str], message: str) -> None:
    if not value or not value.strip():
        raise ValidationError(message)


def validate_username(username: str) -> None:
    require(username, "Please enter a username")
    if len(username) < USERNAME_MIN_LENGTH:
        raise ValidationError(f"Username must be at least {USERNAME_MIN_LENGTH} characters")


def validate_password(password: str, label: str = "Password") -> None:
    if not password:
        raise ValidationError(f"Please enter a {label.lower()}")
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationError(f"{label} must be at least {PASSWORD_MIN_LENGTH} characters")


def validate_email(email: str) -> None:
    require(email, "Please enter an email address")
    if not EMAIL_RE.match(email):
        raise ValidationError("Invalid email format")


def validate_phone(phone: Optional[str]) -> None:
    """Phone is optional; only a supplied number is checked."""
    if phone and phone.strip() and not PHONE_RE.match(phone.strip()):
        raise ValidationError("Invalid phone number format")


def validate_registration(
    username: str,
    password: str,
    nickname: str,
    email: str,
    email_code: str,
    phone: Optional[str] = None,
) -> None:
    validate_username(username)
    validate_password(password)
    require(nickname, "Please enter a nickname")
    validate_email(email)
    validate_phone(phone)
    require(email_code, "Please enter the email verification code")


def validate_password_change(old_password: str, new_password: str, confirm_password: str) -> None:
    if not old_password:
        raise ValidationError("Please enter your current password")
    validate_password(new_password, label="New password")
    if not confirm_password:
        raise ValidationError("Please confirm the new password")
    if new_password != confirm_password:
        raise ValidationError("The new passwords do not match")
    if old_password == new_password:
        raise ValidationError("The new password must differ from the current one")
