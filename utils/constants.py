import os
import logging.config
from utils.conversions import mb_to_bytes

VERSION = "v1.2.0"

# LOGGER
def setup_logger(path: str, logger_type: str, level: str) -> logging.Logger:
    dirname = os.path.dirname(path)

    if dirname and not os.path.exists(dirname):
        os.makedirs(dirname)
    if not os.path.exists(path):
        with open(path, "w"):
            ...

    logger = logging.getLogger(logger_type)

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "detailed": {
                "format": "[%(levelname)s|%(module)s|L%(lineno)d] %(asctime)s: %(message)s",
                "datefmt": "%Y-%m-%d - %H:%M:%S%z"
            }
        },
        "handlers": {
            logger_type: {
                "class": "logging.handlers.RotatingFileHandler",
                "level": level,
                "formatter": "detailed",
                "filename": path,
                "maxBytes": 25 * 1024 * 1024,
                "backupCount": 3
            }
        },
        "loggers": {
            logger_type: {
                "level": level,
                "handlers": [
                    logger_type
                ]
            }
        }
    }
    logging.config.dictConfig(config=logging_config)

    return logger

def enable_console_logging(logger: logging.Logger) -> None:
    """Raise the logger to DEBUG and mirror records to stderr, used by `--verbose`."""
    logger.setLevel(logging.DEBUG)
    for handler in logger.handlers:
        handler.setLevel(logging.DEBUG)
    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    logger.addHandler(console)

# CONFIG
LOG_PATH = os.getenv("ABCRYPT_LOG_PATH", os.path.join("logs", "abcrypt.log"))
LOG_LEVEL = os.getenv("ABCRYPT_LOG_LEVEL", "ERROR").upper()
CONFIG_PATH = os.getenv("ABCRYPT_CONFIG", "config.toml")

logger = setup_logger(LOG_PATH, "ABCRYPT_LOGS", LOG_LEVEL)

# CRYPTO
KEY_SIZE = 32 # AES-256
IV_SIZE = BLOCK_SIZE = 16
DEFAULT_IV = bytes(IV_SIZE) # legacy titles ship with a zero IV

# FILES
SUFFIX_ENCRYPTED = "_encrypted"
SUFFIX_DECRYPTED = "_decrypted"
FILESIZE_MAX = mb_to_bytes(512)
RANDOMSTRING_LENGTH = 10
