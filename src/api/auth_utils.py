import os
import secrets
import string
from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import jwt
from passlib.context import CryptContext

SECRET_KEY = os.environ.get("WAVE_SECRET_KEY", "dev-secret-unsafe")
ALGORITHM = "HS256"
GENERATED_SECRET_LENGTH = 64

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

_SECRET_ALPHABET = string.ascii_letters + string.digits + string.punctuation


def get_password_hash(password: str) -> str:
    result: str = pwd_context.hash(password)
    return result


def generate_secret(length: int = GENERATED_SECRET_LENGTH) -> str:
    return "".join(secrets.choice(_SECRET_ALPHABET) for _ in range(length))


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
    now_utc: datetime | None = None,
) -> str:
    """
    Create a signed session token.

    Args:
        data: Claims to encode in the token
        expires_delta: Optional custom expiration delta
        now_utc: Current UTC time (for testing/determinism). Defaults to datetime.now(UTC).
    """
    to_encode = data.copy()
    current_time = now_utc if now_utc is not None else datetime.now(UTC)

    if expires_delta:
        expire = current_time + expires_delta
    else:
        expire = current_time + timedelta(minutes=15)

    # jti keeps tokens minted in the same second distinct
    to_encode.update({"exp": expire, "jti": secrets.token_hex(8)})
    encoded_jwt: str = jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt


def decode_access_token(token: str) -> dict[str, Any] | None:
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        return cast(dict[str, Any], payload)
    except jwt.JWTError:
        return None
