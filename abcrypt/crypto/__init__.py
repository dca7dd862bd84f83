from .exceptions import (
    CryptoError, UnsupportedCombinationError, InvalidLengthError,
    PaddingError, InvalidEncodingError, AutoDetectionFailedError
)
from .keysource import KeySource, decode_hex_strict
from .common import Cryptor
from .autodetect import try_decrypt_all
from .helpers import GameSelector, RawKeySelector, obtain_cryptor, encrypt, decrypt, auto_detect
from .file_crypt import Crypt_File, Option, BatchResult
