from src.adapters.auth.crypto import JWTAuthAdapter
from src.api.auth_utils import GENERATED_SECRET_LENGTH


def test_hash_is_argon2_digest():
    auth = JWTAuthAdapter()
    pwd = "my-secret-password"
    hashed = auth.hash_password(pwd)

    assert hashed != pwd
    assert hashed.startswith("$argon2")


def test_hashes_are_salted():
    auth = JWTAuthAdapter()
    assert auth.hash_password("password") != auth.hash_password("password")


def test_generated_secrets_are_long_and_distinct():
    auth = JWTAuthAdapter()
    first = auth.generate_secret()
    second = auth.generate_secret()

    assert len(first) == GENERATED_SECRET_LENGTH
    assert first != second


def test_token_round_trip_carries_subject():
    auth = JWTAuthAdapter()
    token = auth.create_token("jane@example.com", 60)

    assert auth.validate_token(token) == "jane@example.com"


def test_tokens_are_unique():
    auth = JWTAuthAdapter()
    assert auth.create_token("uid", 60) != auth.create_token("uid", 60)


def test_tampered_token_is_rejected():
    auth = JWTAuthAdapter()
    token = auth.create_token("jane@example.com", 60)

    assert auth.validate_token(token[:-2] + "xx") is None
    assert auth.validate_token("not-a-token") is None
