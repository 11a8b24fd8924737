from datetime import timedelta
from typing import Any

from src.api.auth_utils import (
    create_access_token,
    decode_access_token,
    generate_secret,
    get_password_hash,
)


class JWTAuthAdapter:
    """Auth adapter that uses JWT session tokens and passlib (argon2) digests."""

    def hash_password(self, password: str) -> str:
        return get_password_hash(password)

    def generate_secret(self) -> str:
        return generate_secret()

    def create_token(self, subject: str, ttl_minutes: int) -> str:
        return create_access_token({"sub": subject}, timedelta(minutes=ttl_minutes))

    def validate_token(self, token: str) -> Any | None:
        payload = decode_access_token(token)
        return payload.get("sub") if payload else None
