from abcrypt.registry import Registry
from abcrypt.crypto.common import Cryptor
from abcrypt.crypto.keysource import KeySource
from abcrypt.crypto.exceptions import AutoDetectionFailedError, PaddingError
from utils.constants import logger

def try_decrypt_all(data: bytes | bytearray, registry: Registry) -> tuple[bytes, str, str]:
    """
    Brute-force `data` against every usable registry entry and return `(plaintext, category, game)`
    for the first one whose padding validates.

    Candidates are tried sorted by game then category, so the result is reproducible
    when more than one entry happens to validate. A match is probable, not proven.
    """
    logger.debug(f"Starting brute-force decryption on {len(data)} bytes")

    for game, category, key, iv in KeySource(registry).candidates():
        logger.debug(f"Trying combination: {game} - {category}")
        cryptor = Cryptor(key, iv)
        try:
            decrypted = cryptor.decrypt(data)
        except PaddingError:
            continue

        logger.debug(f"Key found! Combination: {game} - {category}")
        return decrypted, category, game

    logger.debug("No valid key found after trying all combinations.")
    raise AutoDetectionFailedError()
