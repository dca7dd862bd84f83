from abcrypt.registry import Registry, CryptoEntry, DEFAULT_KEYS

from abcrypt.crypto import (
    CryptoError, UnsupportedCombinationError, InvalidLengthError,
    PaddingError, InvalidEncodingError, AutoDetectionFailedError,
    KeySource, Cryptor, try_decrypt_all,
    GameSelector, RawKeySelector, encrypt, decrypt, auto_detect
)
