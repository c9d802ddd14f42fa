"""Utility functions for lockdown management."""

import configparser
import os
import subprocess
import tempfile
from pathlib import Path
from typing import Tuple

from .exceptions import LockdownError, StoreReadError, StoreWriteError
from ..logging_utility import logger


def run_command(cmd: list[str]) -> Tuple[str, str]:
    """
    Run shell command and return output.

    Args:
        cmd: Command as list of strings

    Returns:
        Tuple of (stdout, stderr)
    """
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=True)
        return result.stdout, result.stderr
    except subprocess.CalledProcessError as e:
        raise LockdownError(f"Command failed: {' '.join(cmd)}\n{e.stderr}")


def read_ini(path: Path) -> configparser.ConfigParser:
    """
    Read an INI file, treating a missing file as empty.

    Args:
        path: File to read

    Returns:
        ConfigParser, empty if the file does not exist

    Raises:
        StoreReadError: if the file exists but cannot be read or parsed
    """
    config = configparser.ConfigParser(interpolation=None)
    try:
        with open(path, encoding="utf-8") as f:
            config.read_file(f)
    except FileNotFoundError:
        return config
    except (OSError, UnicodeDecodeError, configparser.Error) as e:
        logger.error(f"Failed to read {path}: {e}")
        raise StoreReadError(f"Failed to read {path}: {e}") from e
    return config


def read_ini_for_update(path: Path) -> configparser.ConfigParser:
    """
    Read an INI file that is about to be rewritten.

    Raises:
        StoreWriteError: if the existing contents cannot be read, so they are
            never replaced by an empty file
    """
    try:
        return read_ini(path)
    except StoreReadError as e:
        raise StoreWriteError(str(e)) from e


def write_ini_atomically(config: configparser.ConfigParser, path: Path) -> None:
    """
    Replace path with the serialised config in a single rename.

    Args:
        config: Parser to serialise
        path: Destination file

    Raises:
        StoreWriteError: if the file cannot be written
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                config.write(f)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise
    except OSError as e:
        logger.error(f"Failed to write {path}: {e}")
        raise StoreWriteError(f"Failed to write {path}: {e}") from e
