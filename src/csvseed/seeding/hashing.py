"""One-way hashing for sensitive columns such as passwords."""

import base64
import hashlib
import hmac
import secrets
from typing import Protocol

PBKDF2_ALGORITHM = "pbkdf2_sha256"
# Every hashed row pays this cost; 100k rounds is tens of milliseconds per
# value. Raise it with --hash-iterations when seeding real credentials.
PBKDF2_ITERATIONS = 100_000


class PasswordHasher(Protocol):
    """Anything that turns a plaintext value into an opaque digest string."""

    def hash(self, plaintext: str) -> str: ...


class Pbkdf2Hasher:
    """PBKDF2-HMAC-SHA256 with a random salt per value.

    Encoded as ``pbkdf2_sha256$<iterations>$<salt>$<digest>``, salt and digest
    in unpadded urlsafe base64.
    """

    def __init__(self, iterations: int = PBKDF2_ITERATIONS, salt_bytes: int = 16):
        if iterations < 1:
            raise ValueError(f"iterations must be positive, got {iterations}")
        self._iterations = iterations
        self._salt_bytes = salt_bytes

    def hash(self, plaintext: str) -> str:
        salt = _b64encode(secrets.token_bytes(self._salt_bytes))
        digest = self._derive(plaintext, salt, self._iterations)
        return f"{PBKDF2_ALGORITHM}${self._iterations}${salt}${digest}"

    def verify(self, plaintext: str, encoded: str) -> bool:
        try:
            algorithm, iterations, salt, digest = encoded.split("$")
            rounds = int(iterations)
        except ValueError:
            return False
        if algorithm != PBKDF2_ALGORITHM:
            return False
        return hmac.compare_digest(self._derive(plaintext, salt, rounds), digest)

    @staticmethod
    def _derive(plaintext: str, salt: str, iterations: int) -> str:
        raw = hashlib.pbkdf2_hmac(
            "sha256", plaintext.encode("utf-8"), salt.encode("ascii"), iterations
        )
        return _b64encode(raw)


def _b64encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")
