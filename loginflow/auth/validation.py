"""Client-side checks on the login form."""
from .errors import MissingFieldError, PasswordTooShortError
from .schemas import Credentials

MIN_PASSWORD_LENGTH = 8


def validate(username: str | None, password: str | None) -> Credentials:
    """Turn raw form input into ``Credentials``.

    Raises:
        MissingFieldError: If either field is absent or empty.
        PasswordTooShortError: If the password is shorter than
            ``MIN_PASSWORD_LENGTH`` characters.
    """
    if not username:
        raise MissingFieldError("username")
    if not password:
        raise MissingFieldError("password")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise PasswordTooShortError(MIN_PASSWORD_LENGTH)
    return Credentials(username=username, password=password)
