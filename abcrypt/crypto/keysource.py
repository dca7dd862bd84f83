import binascii
from typing import Iterator

from abcrypt.registry import Registry, CryptoEntry
from abcrypt.crypto.exceptions import UnsupportedCombinationError, InvalidLengthError
from utils.constants import logger, KEY_SIZE, IV_SIZE, DEFAULT_IV
from utils.extras import mask_hex

def decode_hex_strict(s: str) -> bytes:
    """
    Decode a hex string, returning empty bytes when it is not valid hex.
    Malformed strings are never reinterpreted as raw ASCII, they fall through to the length checks instead.
    """
    try:
        return binascii.unhexlify(s)
    except (binascii.Error, ValueError):
        return b""

def decode_entry(entry: CryptoEntry) -> tuple[bytes, bytes]:
    key = decode_hex_strict(entry.key)
    if len(key) != KEY_SIZE:
        raise InvalidLengthError(KEY_SIZE, len(key))

    if entry.iv is None:
        return key, DEFAULT_IV

    iv = decode_hex_strict(entry.iv)
    if len(iv) != IV_SIZE:
        raise InvalidLengthError(IV_SIZE, len(iv))
    return key, iv

class KeySource:
    def __init__(self, registry: Registry) -> None:
        self.registry = registry

    def resolve(self, game: str, category: str) -> tuple[bytes, bytes]:
        entry = self.registry.get(game, category)
        if entry is None:
            raise UnsupportedCombinationError(category, game)
        return decode_entry(entry)

    def candidates(self) -> Iterator[tuple[str, str, bytes, bytes]]:
        """Every usable (game, category, key, iv), in sorted order. Invalid entries are skipped."""
        for game, category, entry in self.registry.entries():
            try:
                key, iv = decode_entry(entry)
            except InvalidLengthError as e:
                logger.debug(f"Skipping {game} - {category} ({mask_hex(entry.key)}): {e.message}")
                continue
            yield game, category, key, iv
