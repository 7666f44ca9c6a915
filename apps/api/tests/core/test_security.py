"""
Tests for password hashing and token handling.
"""

from seminar_hub.core.security import (
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)


def test_password_round_trip():
    hashed = hash_password("correct-horse")

    assert hashed != "correct-horse"
    assert verify_password("correct-horse", hashed) is True
    assert verify_password("wrong-horse", hashed) is False


def test_malformed_hash_does_not_verify():
    assert verify_password("anything", "not-a-bcrypt-hash") is False


def test_expired_token_is_rejected():
    token = create_access_token("user-1", expires_minutes=-1)
    assert decode_token(token) is None


def test_tampered_token_is_rejected():
    token = create_access_token("user-1")
    assert decode_token(token[:-2] + "xx") is None
