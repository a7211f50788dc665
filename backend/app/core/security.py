# backend/app/core/security.py
import base64
import hashlib
import hmac
from functools import lru_cache

from cryptography.fernet import Fernet, InvalidToken

from app.core.config import settings


def hash_api_key(api_key: str) -> str:
    """Hash an API key for storage using SHA-256 with pepper."""
    pepper = settings.secret_key.encode()
    return hmac.new(pepper, api_key.encode(), hashlib.sha256).hexdigest()


class DecryptionError(ValueError):
    """Ciphertext could not be decrypted with the configured key."""
    pass


class SecretCipher:
    """Symmetric encryption for secrets stored at rest (LeetCode sessions)."""

    def __init__(self, key: str | bytes):
        self._fernet = Fernet(key)

    @classmethod
    def from_secret(cls, secret: str) -> "SecretCipher":
        """Derive a Fernet key from an arbitrary application secret."""
        digest = hashlib.sha256(secret.encode()).digest()
        return cls(base64.urlsafe_b64encode(digest))

    def encrypt(self, plaintext: str) -> str:
        return self._fernet.encrypt(plaintext.encode()).decode()

    def decrypt(self, ciphertext: str) -> str:
        try:
            return self._fernet.decrypt(ciphertext.encode()).decode()
        except InvalidToken as e:
            raise DecryptionError("Invalid or corrupted ciphertext") from e


@lru_cache
def get_cipher() -> SecretCipher:
    if settings.encryption_key:
        return SecretCipher(settings.encryption_key)
    return SecretCipher.from_secret(settings.secret_key)
