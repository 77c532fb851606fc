"""Password hashing and verification utilities using Argon2id."""

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

# argon2-cffi defaults follow RFC 9106 low-memory profile (Argon2id, 64 MiB)
_hasher = PasswordHasher()

# Verified against when the account does not exist, so both paths cost the same
_DUMMY_HASH = _hasher.hash("dummy-password-for-timing")


def hash_password(password: str) -> str:
    """
    Hash a password using Argon2id.

    Args:
        password: Plain text password to hash.

    Returns:
        Encoded Argon2 hash string (salt and parameters included).

    Example:
        >>> hashed = hash_password("my_password")
        >>> hashed.startswith("$argon2id$")
        True
    """
    return _hasher.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash.

    Any malformed or foreign hash verifies as False; there is no other path.

    Args:
        plain_password: Plain text password to verify.
        hashed_password: Hashed password to compare against.

    Returns:
        True if password matches, False otherwise.

    Example:
        >>> hashed = hash_password("my_password")
        >>> verify_password("my_password", hashed)
        True
        >>> verify_password("wrong_password", hashed)
        False
    """
    try:
        return _hasher.verify(hashed_password, plain_password)
    except (VerifyMismatchError, VerificationError, InvalidHashError, TypeError, ValueError):
        return False


def verify_dummy_password(plain_password: str) -> None:
    """Burn the same hashing cost as a real verification."""
    verify_password(plain_password, _DUMMY_HASH)
