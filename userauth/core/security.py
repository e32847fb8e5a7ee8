# userauth/core/security.py

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

password_hasher = PasswordHasher()

# Verified against when no user matched, so login timing looks the same either way
_DUMMY_HASH = password_hasher.hash("dummy-password")


def get_password_hash(password: str) -> str:
    return password_hasher.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return password_hasher.verify(hashed_password, plain_password)
    except (VerificationError, InvalidHashError):
        return False


def dummy_verify() -> None:
    verify_password("", _DUMMY_HASH)
