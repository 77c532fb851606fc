"""Unit tests for password hashing."""

from tasktracker.core.auth.password import hash_password, verify_dummy_password, verify_password


def test_hash_password_uses_argon2id():
    """Test that hashes are Argon2id encoded strings."""
    hashed = hash_password("secret-pass")

    assert hashed.startswith("$argon2id$")
    assert "secret-pass" not in hashed


def test_hash_password_is_salted():
    """Test that hashing the same password twice gives different hashes."""
    assert hash_password("secret-pass") != hash_password("secret-pass")


def test_verify_password_success():
    """Test verifying the correct password."""
    hashed = hash_password("secret-pass")

    assert verify_password("secret-pass", hashed) is True


def test_verify_password_wrong_password():
    """Test verifying a wrong password."""
    hashed = hash_password("secret-pass")

    assert verify_password("admin123", hashed) is False


def test_verify_password_foreign_hash_formats_fail():
    """Test that non-Argon2 hashes never verify, whatever their length."""
    bcrypt_like = "$2b$12$" + "a" * 53

    assert verify_password("admin123", bcrypt_like) is False
    assert verify_password("admin123", "") is False
    assert verify_password("admin123", "admin123") is False


def test_verify_dummy_password_returns_nothing():
    """Test that the dummy verification runs without raising."""
    assert verify_dummy_password("anything") is None
