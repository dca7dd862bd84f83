class CryptoError(Exception):
    """Exception raised for errors relating to decrypting or encrypting."""
    def __init__(self, message: str) -> None:
        self.message = message

class UnsupportedCombinationError(CryptoError):
    """Exception raised when the registry has no entry for a (game, category) pair."""
    def __init__(self, category: str, game: str) -> None:
        self.category = category
        self.game = game
        super().__init__(
            f"Unsupported combination: The file category '{category}' is not available (or unknown) for the game '{game}'."
        )

class InvalidLengthError(CryptoError):
    """Exception raised when a decoded key or IV has the wrong byte count."""
    def __init__(self, expected: int, got: int) -> None:
        self.expected = expected
        self.got = got
        super().__init__(f"Invalid Key/IV length: Expected {expected} bytes, got {got}.")

class PaddingError(CryptoError):
    """Exception raised when PKCS7 padding does not validate after decryption.
    This is the usual outcome of decrypting with the wrong key or IV."""
    def __init__(self, message: str = "Decryption failed (Padding Error). This usually means the Key or IV is incorrect for this file.") -> None:
        super().__init__(message)

class InvalidEncodingError(CryptoError):
    """Exception raised when a caller-supplied key or IV is not a hex string."""
    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"Invalid Hex String: {value!r}")

class AutoDetectionFailedError(CryptoError):
    """Exception raised when no registry entry decrypts the data."""
    def __init__(self) -> None:
        super().__init__(
            "Auto-detection failed: Unable to find a matching key. The file might be corrupted, or it belongs to an unsupported game version."
        )
