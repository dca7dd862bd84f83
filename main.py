from dotenv import load_dotenv
load_dotenv()

import argparse
import asyncio
import sys

from abcrypt.registry import Registry
from abcrypt.crypto import CryptoError, GameSelector, RawKeySelector, obtain_cryptor
from abcrypt.crypto.file_crypt import Crypt_File, Option
from utils.constants import VERSION, CONFIG_PATH, logger, enable_console_logging
from utils.exceptions import ConfigError, FileError

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="abcrypt",
        description="Encrypt and decrypt legacy Angry Birds asset and save files."
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (("encrypt", "Encrypt file"), ("decrypt", "Decrypt file")):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("-g", "--game", metavar="GAME_NAME", help="game, e.g. classic, seasons, starwarsii")
        sub.add_argument("-c", "--category", metavar="FILE_TYPE", help="file category, e.g. native, save, downloaded")
        sub.add_argument("-k", "--key", metavar="HEX", help="custom 32 byte key as hex, instead of game/category")
        sub.add_argument("--iv", metavar="HEX", help="custom 16 byte IV as hex (default: all zero)")
        if name == "decrypt":
            sub.add_argument("-a", "--auto", action="store_true", help="try every known key until one fits")
        sub.add_argument("-i", "--input", metavar="INPUT", required=True, help="file or directory")
        sub.add_argument("-o", "--output", metavar="OUTPUT", help="output file or directory")
        sub.add_argument("--config", metavar="PATH", default=None, help=f"TOML file with extra keys (default: {CONFIG_PATH})")
        sub.add_argument("-v", "--verbose", action="store_true")
        sub.add_argument("--no-progress", action="store_true", help="do not draw a progress bar")

    sub = subparsers.add_parser("list", help="List known games and file categories")
    sub.add_argument("--config", metavar="PATH", default=None)
    sub.add_argument("-v", "--verbose", action="store_true")
    return parser

def validate_args(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    auto = getattr(args, "auto", False)
    named = args.game is not None or args.category is not None

    if sum((auto, named, args.key is not None)) != 1:
        parser.error("choose exactly one of --game/--category, --key" + (" or --auto" if args.command == "decrypt" else ""))
    if named and (args.game is None or args.category is None):
        parser.error("--game and --category must be given together")
    if args.iv is not None and args.key is None:
        parser.error("--iv requires --key")

def obtain_selector(args: argparse.Namespace) -> GameSelector | RawKeySelector | None:
    if getattr(args, "auto", False):
        return None
    if args.key is not None:
        return RawKeySelector(args.key, args.iv)
    return GameSelector(args.game, args.category)

def list_games(registry: Registry) -> None:
    for game in sorted(registry.games):
        print(f"{game}: {', '.join(registry.categories(game))}")

def run(args: argparse.Namespace) -> int:
    # a --config path that does not exist is an error, the default path may be absent
    registry = Registry.load_or_default(args.config or CONFIG_PATH, required=args.config is not None)

    if args.command == "list":
        list_games(registry)
        return 0

    option = Option.ENCRYPT if args.command == "encrypt" else Option.DECRYPT
    selector = obtain_selector(args)
    cryptor = None if selector is None else obtain_cryptor(selector, registry)
    logger.debug(f"{option.value} with {selector or 'auto-detection'}")

    result = asyncio.run(Crypt_File.process_batch(
        args.input, args.output, option, cryptor, registry, show_progress=not args.no_progress
    ))

    for filepath, (category, game) in result.detected.items():
        print(f"{filepath}: detected {game} - {category}")
    for filepath, message in result.failed:
        print(f"{filepath}: {message}", file=sys.stderr)
    print(f"{option.value} {len(result.done)} file(s), {len(result.failed)} failed.")
    return 0 if result.ok else 1

def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command != "list":
        validate_args(parser, args)
    if args.verbose:
        enable_console_logging(logger)

    try:
        return run(args)
    except (CryptoError, ConfigError, FileError) as e:
        logger.error(e.message)
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    except OSError as e:
        logger.exception(f"{e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

def cli() -> None:
    sys.exit(main())

if __name__ == "__main__":
    cli()
