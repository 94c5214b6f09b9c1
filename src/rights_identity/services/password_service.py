"""Password hashing service using bcrypt.

Provides salted password hashing and verification that never raises on
bad hash input.
"""

import base64
import hashlib

import bcrypt

# bcrypt only looks at the first 72 bytes and rejects NUL bytes
_BCRYPT_MAX_BYTES = 72

# Marks hashes whose input was SHA-256 pre-hashed, so a digest can never
# verify against the hash of a password that bcrypt took verbatim
PREHASHED_PREFIX = "$bcrypt-sha256"


def _needs_prehash(encoded: bytes) -> bool:
    return len(encoded) > _BCRYPT_MAX_BYTES or b"\x00" in encoded


def _prehash(encoded: bytes) -> bytes:
    return base64.b64encode(hashlib.sha256(encoded).digest())


class PasswordHashingService:
    """Service for secure password hashing and verification.

    Uses bcrypt for password hashing with configurable work factor.
    Passwords that bcrypt cannot take verbatim (longer than 72 bytes or
    containing NUL) are SHA-256 pre-hashed, so any valid string hashes.
    Their hashes carry the ``$bcrypt-sha256`` prefix and only such hashes
    apply the pre-hash on verification.

    Examples
    --------
    >>> service = PasswordHashingService()
    >>> hash = service.hash("my_secure_password")
    >>> service.verify("my_secure_password", hash)
    True
    >>> service.verify("wrong_password", hash)
    False
    """

    def __init__(self, rounds: int = 12):
        """Initialize the password hashing service.

        Parameters
        ----------
        rounds
            The bcrypt work factor (log2 of iterations). Default is 12.
        """
        self._rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a plaintext password.

        Parameters
        ----------
        password
            The plaintext password to hash

        Returns
        -------
        The bcrypt hash as a string. Two calls with the same password
        return different hashes because every call draws a new salt.
        """
        encoded = password.encode("utf-8")
        salt = bcrypt.gensalt(rounds=self._rounds)

        if _needs_prehash(encoded):
            hashed = bcrypt.hashpw(_prehash(encoded), salt).decode("utf-8")
            return PREHASHED_PREFIX + hashed

        return bcrypt.hashpw(encoded, salt).decode("utf-8")

    def verify(self, password: str, password_hash: str | None) -> bool:
        """Verify a password against a hash.

        Parameters
        ----------
        password
            The plaintext password to check
        password_hash
            The bcrypt hash to verify against

        Returns
        -------
        True if password matches, False otherwise (including when the
        hash is missing or malformed)
        """
        if not password_hash:
            return False

        candidate = password.encode("utf-8")
        if password_hash.startswith(PREHASHED_PREFIX):
            candidate = _prehash(candidate)
            password_hash = password_hash[len(PREHASHED_PREFIX) :]
        elif _needs_prehash(candidate):
            # Plain hashes only ever come from inputs bcrypt took verbatim;
            # bcrypt would otherwise compare a truncated prefix
            return False

        try:
            return bcrypt.checkpw(candidate, password_hash.encode("utf-8"))
        except (ValueError, TypeError):
            # Invalid hash format
            return False
