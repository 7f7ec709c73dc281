# core/crypto.py

"""
Field-level encryption for the record store.

Values of the sensitive fields are JSON-encoded and encrypted with
AES-256-CBC using the OpenSSL passphrase envelope:

    base64( b"Salted__" + salt[8] + ciphertext )

with key and IV derived by EVP_BytesToKey (MD5, one round). This is the
same format the browser front end has always written into the sheet, so
historical values decrypt unchanged.

This obscures values against casual inspection of the sheet. It is not a
security boundary: the passphrase is shared by every install that does not
override ENCRYPTION_KEY.
"""

import base64
import binascii
import hashlib
import json
import os
from typing import Any, Iterable, Optional

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from core.config import settings
from core.logging_config import get_logger


logger = get_logger("crypto")

SALT_HEADER = b"Salted__"
SALT_SIZE = 8
KEY_SIZE = 32
IV_SIZE = 16
BLOCK_SIZE = 16


def evp_bytes_to_key(passphrase: bytes, salt: bytes, key_size: int = KEY_SIZE, iv_size: int = IV_SIZE):
    """OpenSSL EVP_BytesToKey with MD5 and a single iteration."""
    derived = b""
    block = b""
    while len(derived) < key_size + iv_size:
        block = hashlib.md5(block + passphrase + salt).digest()
        derived += block
    return derived[:key_size], derived[key_size:key_size + iv_size]


class FieldCipher:
    """Encrypts/decrypts the configured sensitive fields of a record."""

    def __init__(self, passphrase: str, sensitive_fields: Iterable[str]):
        self._passphrase = passphrase.encode("utf-8")
        self.sensitive_fields = frozenset(sensitive_fields)

    # -------------------------------------------------
    # Single values
    # -------------------------------------------------
    def encrypt_value(self, value: Any) -> str:
        if value is None:
            return ""

        plaintext = json.dumps(value, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
        salt = os.urandom(SALT_SIZE)
        key, iv = evp_bytes_to_key(self._passphrase, salt)

        padder = padding.PKCS7(BLOCK_SIZE * 8).padder()
        padded = padder.update(plaintext) + padder.finalize()

        encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
        ciphertext = encryptor.update(padded) + encryptor.finalize()

        return base64.b64encode(SALT_HEADER + salt + ciphertext).decode("ascii")

    def decrypt_value(self, value: Any) -> Any:
        """
        Decrypt a stored value.

        Anything that is not a valid envelope under this passphrase
        (legacy plaintext, a value written with another key, garbage)
        comes back unchanged instead of raising.
        """
        if not isinstance(value, str) or not value:
            return value

        plaintext = self._open_envelope(value)
        if not plaintext:
            return value

        try:
            return json.loads(plaintext)
        except ValueError:
            # Encrypted without JSON encoding by an older client
            return plaintext

    def _open_envelope(self, value: str) -> Optional[str]:
        try:
            raw = base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError):
            return None

        if not raw.startswith(SALT_HEADER):
            return None

        body = raw[len(SALT_HEADER) + SALT_SIZE:]
        if not body or len(body) % BLOCK_SIZE:
            return None

        salt = raw[len(SALT_HEADER):len(SALT_HEADER) + SALT_SIZE]
        key, iv = evp_bytes_to_key(self._passphrase, salt)

        try:
            decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
            padded = decryptor.update(body) + decryptor.finalize()

            unpadder = padding.PKCS7(BLOCK_SIZE * 8).unpadder()
            data = unpadder.update(padded) + unpadder.finalize()
            return data.decode("utf-8")
        except (ValueError, UnicodeDecodeError):
            logger.debug("Value looks like an envelope but does not open with this key")
            return None

    # -------------------------------------------------
    # Whole records
    # -------------------------------------------------
    def encrypt_record(self, record: dict) -> dict:
        return {
            key: self.encrypt_value(val) if self._is_sensitive(key) else val
            for key, val in record.items()
        }

    def decrypt_record(self, record: dict) -> dict:
        return {
            key: self.decrypt_value(val) if self._is_sensitive(key) else val
            for key, val in record.items()
        }

    def _is_sensitive(self, key: str) -> bool:
        # The id is never encrypted
        return key != "id" and key in self.sensitive_fields


def get_field_cipher() -> FieldCipher:
    return FieldCipher(settings.ENCRYPTION_KEY, settings.SENSITIVE_FIELDS)
