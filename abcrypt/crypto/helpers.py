from __future__ import annotations

from dataclasses import dataclass, field

from abcrypt.registry import Registry
from abcrypt.crypto.common import Cryptor
from abcrypt.crypto.autodetect import try_decrypt_all

@dataclass(frozen=True)
class GameSelector:
    game: str
    category: str

    def __str__(self) -> str:
        return f"{self.game.lower()} - {self.category.lower()}"

@dataclass(frozen=True)
class RawKeySelector:
    """Key and optional IV given by the caller, as hex strings or raw bytes."""
    key: str | bytes = field(repr=False)
    iv: str | bytes | None = field(default=None, repr=False)

    def __str__(self) -> str:
        return "custom key"

Selector = GameSelector | RawKeySelector

def obtain_cryptor(selector: Selector, registry: Registry | None = None) -> Cryptor:
    match selector:
        case GameSelector(game=game, category=category):
            if registry is None:
                registry = Registry.default()
            return Cryptor.from_registry(category, game, registry)
        case RawKeySelector(key=key, iv=iv):
            key = Cryptor.decode_hex(key) if isinstance(key, str) else key
            iv = Cryptor.decode_hex(iv) if isinstance(iv, str) else iv
            return Cryptor.new_custom(key, iv)
    raise TypeError(f"Unknown selector: {selector!r}")

def encrypt(selector: Selector, data: bytes | bytearray, registry: Registry | None = None) -> bytes:
    return obtain_cryptor(selector, registry).encrypt(data)

def decrypt(selector: Selector, data: bytes | bytearray, registry: Registry | None = None) -> bytes:
    return obtain_cryptor(selector, registry).decrypt(data)

def auto_detect(data: bytes | bytearray, registry: Registry | None = None) -> tuple[bytes, str, str]:
    if registry is None:
        registry = Registry.default()
    return try_decrypt_all(data, registry)
