"""
Tool to identify which game and file category a file belongs to, intended for debugging purposes.
Nothing is written, the file is only decrypted in memory.
"""

import sys
import os
from sys import argv
from os.path import isfile

rootdir = os.path.dirname(os.path.dirname(__file__))
sys.path.append(rootdir)
from dotenv import load_dotenv
load_dotenv()

from abcrypt.registry import Registry
from abcrypt.crypto import AutoDetectionFailedError, try_decrypt_all
from utils.constants import CONFIG_PATH

def identify(filepath: str, registry: Registry) -> tuple[str, str, int] | None:
    with open(filepath, "rb") as f:
        data = f.read()
    try:
        plaintext, category, game = try_decrypt_all(data, registry)
    except AutoDetectionFailedError:
        return None
    return game, category, len(plaintext)

def main() -> None:
    filepath = argv[1]
    config_path = argv[2] if len(argv) > 2 else CONFIG_PATH

    if not isfile(filepath):
        print(f"{filepath} is not a file.")
        sys.exit(1)

    registry = Registry.load_or_default(config_path)
    match identify(filepath, registry):
        case None:
            print(f"{filepath}: no matching key among {len(registry)} entries.")
            sys.exit(1)
        case (game, category, size):
            print(f"{filepath}: {game} - {category} ({size} bytes decrypted).")

def print_usage() -> None:
    print(f"USAGE: python {argv[0]} <filepath> [config]")

if __name__ == "__main__":
    argc = len(argv)
    if (argc - 1) < 1:
        print_usage()
        sys.exit()
    main()
