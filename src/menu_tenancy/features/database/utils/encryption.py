"""Descriptor encryption utilities.

Stored connection descriptors embed database credentials. When an
application key is configured the registry keeps them Fernet-encrypted.
"""

import base64
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from ....core.exceptions import EncryptionError

_SALT = b'MenuTenancyDescriptors'
_ITERATIONS = 100000


class DescriptorEncryption:
    """Handle encryption and decryption of stored connection descriptors."""

    def __init__(self, encryption_key: str):
        if not encryption_key:
            raise EncryptionError("init", "encryption key cannot be empty")
        self.cipher = self._get_cipher(encryption_key)

    @staticmethod
    def _get_cipher(key_string: str) -> Fernet:
        """Derive a Fernet key from the configured string with PBKDF2."""
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=_SALT,
            iterations=_ITERATIONS,
        )
        derived_key = base64.urlsafe_b64encode(kdf.derive(key_string.encode('utf-8')))
        return Fernet(derived_key)

    def encrypt(self, value: str) -> str:
        if not value:
            return ""
        return self.cipher.encrypt(value.encode('utf-8')).decode('utf-8')

    def decrypt(self, token: str) -> str:
        """Decrypt a stored value.

        Raises:
            EncryptionError: If the token was not produced with this key
        """
        if not token:
            return ""
        try:
            return self.cipher.decrypt(token.encode('utf-8')).decode('utf-8')
        except InvalidToken as e:
            raise EncryptionError("decrypt", "invalid token or wrong key") from e

    @staticmethod
    def is_encrypted(value: str) -> bool:
        # Fernet tokens start with 'gAAAAA'
        return bool(value) and value.startswith('gAAAAA')

    def reveal(self, value: str) -> str:
        """Decrypt if the value looks encrypted, otherwise return it as stored."""
        return self.decrypt(value) if self.is_encrypted(value) else value


def build_encryption(key: Optional[str]) -> Optional[DescriptorEncryption]:
    return DescriptorEncryption(key) if key else None
