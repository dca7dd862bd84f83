from __future__ import annotations

import os
import aiofiles
import aiofiles.os
from dataclasses import dataclass, field
from enum import Enum

from rich.progress import (BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn, TimeRemainingColumn)

from abcrypt.registry import Registry
from abcrypt.crypto.common import Cryptor
from abcrypt.crypto.autodetect import try_decrypt_all
from abcrypt.crypto.exceptions import CryptoError
from utils.constants import logger, FILESIZE_MAX, RANDOMSTRING_LENGTH, SUFFIX_DECRYPTED, SUFFIX_ENCRYPTED
from utils.conversions import bytes_to_mb
from utils.exceptions import FileError
from utils.extras import generate_random_string

class Option(Enum):
    DECRYPT = "Decrypted"
    ENCRYPT = "Encrypted"

    @property
    def suffix(self) -> str:
        return SUFFIX_DECRYPTED if self is Option.DECRYPT else SUFFIX_ENCRYPTED

    @property
    def description(self) -> str:
        return "Decrypting files" if self is Option.DECRYPT else "Encrypting files"

@dataclass
class BatchResult:
    done: list[str] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)
    detected: dict[str, tuple[str, str]] = field(default_factory=dict) # path -> (category, game)

    @property
    def ok(self) -> bool:
        return not self.failed

class Crypt_File:
    @staticmethod
    async def obtain_files(path: str, files: list[str] | None = None) -> list[str]:
        if files is None:
            # first run so check if a file is given
            if await aiofiles.os.path.isfile(path):
                return [path]
            if not await aiofiles.os.path.isdir(path):
                raise FileError(f"{path} is not a file or directory!")
            files = []

        filelist = sorted(await aiofiles.os.listdir(path))

        for entry in filelist:
            entry_path = os.path.join(path, entry)

            if await aiofiles.os.path.isfile(entry_path):
                files.append(entry_path)
            elif await aiofiles.os.path.isdir(entry_path):
                await Crypt_File.obtain_files(entry_path, files)

        return files

    @staticmethod
    def default_output(path: str, option: Option, is_dir: bool) -> str:
        """`save.dat` -> `save_decrypted.dat`, `saves/` -> `saves_decrypted/`."""
        path = path.rstrip("/\\") or path
        if is_dir:
            return path + option.suffix
        root, ext = os.path.splitext(path)
        return root + option.suffix + ext

    @staticmethod
    async def read_file(filepath: str) -> bytes:
        size = await aiofiles.os.path.getsize(filepath)
        if size > FILESIZE_MAX:
            raise FileError(f"{filepath} is too large ({bytes_to_mb(size)} MB)!")

        async with aiofiles.open(filepath, "rb") as f:
            return await f.read()

    @staticmethod
    async def write_file(filepath: str, data: bytes) -> None:
        """Write through a temporary sibling file so an existing file (the input, possibly) is replaced atomically."""
        dirname = os.path.dirname(filepath)
        if dirname:
            await aiofiles.os.makedirs(dirname, exist_ok=True)
        if await aiofiles.os.path.isdir(filepath):
            raise FileError(f"{filepath} is a directory!")

        temp_filepath = os.path.join(dirname, generate_random_string(RANDOMSTRING_LENGTH))
        try:
            async with aiofiles.open(temp_filepath, "wb") as f:
                await f.write(data)
            await aiofiles.os.replace(temp_filepath, filepath)
        except OSError:
            if await aiofiles.os.path.exists(temp_filepath):
                await aiofiles.os.remove(temp_filepath)
            raise

    @staticmethod
    async def encrypt_file(filepath: str, out_filepath: str, cryptor: Cryptor) -> None:
        plaintext = await Crypt_File.read_file(filepath)
        await Crypt_File.write_file(out_filepath, cryptor.encrypt(plaintext))
        logger.info(f"Encrypted {filepath} -> {out_filepath}")

    @staticmethod
    async def decrypt_file(filepath: str, out_filepath: str, cryptor: Cryptor) -> None:
        ciphertext = await Crypt_File.read_file(filepath)
        # decrypt before touching the output so a bad key leaves nothing behind
        plaintext = cryptor.decrypt(ciphertext)
        await Crypt_File.write_file(out_filepath, plaintext)
        logger.info(f"Decrypted {filepath} -> {out_filepath}")

    @staticmethod
    async def auto_decrypt_file(filepath: str, out_filepath: str, registry: Registry) -> tuple[str, str]:
        ciphertext = await Crypt_File.read_file(filepath)
        plaintext, category, game = try_decrypt_all(ciphertext, registry)
        await Crypt_File.write_file(out_filepath, plaintext)
        logger.info(f"Decrypted {filepath} -> {out_filepath} (detected {game} - {category})")
        return category, game

    @staticmethod
    async def process_batch(
        input_path: str,
        output_path: str | None,
        option: Option,
        cryptor: Cryptor | None,
        registry: Registry | None = None,
        show_progress: bool = True
    ) -> BatchResult:
        """
        Encrypt or decrypt a file or every file below a directory.
        With `cryptor` set to None each file is decrypted by auto-detection against `registry`.
        Per-file crypto and I/O errors are collected in the result, the batch carries on.
        """
        if cryptor is None:
            assert option is Option.DECRYPT
            if registry is None:
                registry = Registry.default()

        files = await Crypt_File.obtain_files(input_path)
        is_dir = await aiofiles.os.path.isdir(input_path)
        if output_path is None:
            output_path = Crypt_File.default_output(input_path, option, is_dir)
        elif not is_dir and await aiofiles.os.path.isdir(output_path):
            output_path = os.path.join(output_path, os.path.basename(input_path))

        result = BatchResult()
        if not files:
            logger.warning(f"No files found in {input_path}.")
            return result

        columns = (SpinnerColumn(), TextColumn("[bold blue]{task.description}"), BarColumn(bar_width=60), "[progress.percentage]{task.percentage:>6.2f}%", TextColumn("{task.completed}/{task.total}"), TimeElapsedColumn(), "•", TimeRemainingColumn())
        progress = Progress(*columns, disable=not show_progress)
        with progress:
            task_id = progress.add_task(option.description, total=len(files))

            for filepath in files:
                out_filepath = output_path if not is_dir else os.path.join(output_path, os.path.relpath(filepath, input_path))
                try:
                    match option:
                        case Option.ENCRYPT:
                            await Crypt_File.encrypt_file(filepath, out_filepath, cryptor)
                        case Option.DECRYPT if cryptor is None:
                            result.detected[filepath] = await Crypt_File.auto_decrypt_file(filepath, out_filepath, registry)
                        case Option.DECRYPT:
                            await Crypt_File.decrypt_file(filepath, out_filepath, cryptor)
                except (CryptoError, FileError) as e:
                    logger.error(f"{filepath}: {e.message}")
                    result.failed.append((filepath, e.message))
                except OSError as e:
                    logger.exception(f"{filepath}: {e}")
                    result.failed.append((filepath, str(e)))
                else:
                    result.done.append(out_filepath)
                progress.advance(task_id)

        return result
