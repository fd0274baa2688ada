from quizbank.errors import ValidationError
from quizbank.utils import is_email

MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_BYTES = 72  # bcrypt input limit


def validate_email(email: str) -> None:
    """Validate an already normalized email address.

    Raises:
        ValidationError: If email is empty or not shaped like an address
    """
    if not email:
        raise ValidationError("Email is required")

    if not is_email(email):
        raise ValidationError(f"Invalid email address: '{email}'")


def validate_password(password: str) -> None:
    """Validate password meets requirements.

    Requirements:
    - No whitespace characters
    - Minimum length of 8 characters
    - At most 72 bytes once UTF-8 encoded

    Raises:
        ValidationError: If password doesn't meet requirements
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")

    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")

    if any(char.isspace() for char in password):
        raise ValidationError("Password cannot contain whitespace characters")
