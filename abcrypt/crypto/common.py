from __future__ import annotations

import binascii
from dataclasses import dataclass

from Crypto.Cipher import AES
from Crypto.Util.Padding import pad, unpad

from abcrypt.registry import Registry
from abcrypt.crypto.keysource import KeySource
from abcrypt.crypto.exceptions import PaddingError, InvalidLengthError, InvalidEncodingError
from utils.constants import KEY_SIZE, IV_SIZE, BLOCK_SIZE, DEFAULT_IV

@dataclass(frozen=True)
class Cryptor:
    """
    AES-256-CBC with PKCS7 padding under one fixed key and IV.

    Two cryptors with the same key and IV are interchangeable.
    A successful `decrypt` only means the padding validated: with a wrong key
    the last byte still forms a valid one-byte pad about once in 256 tries.
    """
    key: bytes
    iv: bytes = DEFAULT_IV

    def __post_init__(self) -> None:
        if len(self.key) != KEY_SIZE:
            raise InvalidLengthError(KEY_SIZE, len(self.key))
        if len(self.iv) != IV_SIZE:
            raise InvalidLengthError(IV_SIZE, len(self.iv))
        object.__setattr__(self, "key", bytes(self.key))
        object.__setattr__(self, "iv", bytes(self.iv))

    def __repr__(self) -> str:
        # keep key material out of tracebacks and logs
        return f"Cryptor(key=<{KEY_SIZE} bytes>, iv={'default' if self.iv == DEFAULT_IV else '<custom>'})"

    @classmethod
    def new_custom(cls, key: bytes, iv: bytes | None = None) -> Cryptor:
        return cls(key, DEFAULT_IV if iv is None else iv)

    @classmethod
    def from_hex(cls, key: str, iv: str | None = None) -> Cryptor:
        key_bytes = cls.decode_hex(key)
        iv_bytes = None if iv is None else cls.decode_hex(iv)
        return cls.new_custom(key_bytes, iv_bytes)

    @classmethod
    def from_registry(cls, category: str, game: str, registry: Registry) -> Cryptor:
        key, iv = KeySource(registry).resolve(game, category)
        return cls(key, iv)

    @staticmethod
    def decode_hex(s: str) -> bytes:
        try:
            return binascii.unhexlify(s.strip())
        except (binascii.Error, ValueError):
            raise InvalidEncodingError(s)

    def encrypt(self, data: bytes | bytearray) -> bytes:
        cipher = AES.new(self.key, AES.MODE_CBC, iv=self.iv)
        return cipher.encrypt(pad(data, BLOCK_SIZE, style="pkcs7"))

    def decrypt(self, data: bytes | bytearray) -> bytes:
        if not data or len(data) % BLOCK_SIZE != 0:
            raise PaddingError(f"Decryption failed (Padding Error). Data length {len(data)} is not a positive multiple of {BLOCK_SIZE}.")

        cipher = AES.new(self.key, AES.MODE_CBC, iv=self.iv)
        try:
            return unpad(cipher.decrypt(data), BLOCK_SIZE, style="pkcs7")
        except ValueError:
            raise PaddingError()
