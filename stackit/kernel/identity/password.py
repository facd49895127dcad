"""
Password hashing with bcrypt.
"""

import bcrypt

BCRYPT_ROUNDS = 12


class PasswordHasher:
    """bcrypt hash/verify. bcrypt only reads the first 72 bytes of input."""

    rounds = BCRYPT_ROUNDS

    @staticmethod
    def _encode(password: str) -> bytes:
        return password.encode("utf-8")[:72]

    @classmethod
    def hash(cls, password: str) -> str:
        salt = bcrypt.gensalt(rounds=cls.rounds)
        return bcrypt.hashpw(cls._encode(password), salt).decode("utf-8")

    @classmethod
    def verify(cls, plain_password: str, hashed_password: str) -> bool:
        try:
            return bcrypt.checkpw(cls._encode(plain_password), hashed_password.encode("utf-8"))
        except ValueError:
            # Malformed stored hash
            return False


def hash_password(password: str) -> str:
    """Hash a password."""
    return PasswordHasher.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password."""
    return PasswordHasher.verify(plain_password, hashed_password)
