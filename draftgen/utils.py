from __future__ import annotations

import datetime as dt
import email.utils
import os
import shutil
from pathlib import Path
from typing import Callable, TypeVar

from .errors import BuildError

T = TypeVar("T", int, float)

TRUE_WORDS = frozenset({"1", "true", "yes", "y", "on"})


def parse_bool(value: object) -> bool:
    """Read a config flag written as a bool, a number or a word like ``yes``."""
    if isinstance(value, str):
        return value.strip().lower() in TRUE_WORDS
    if isinstance(value, (bool, int, float)):
        return bool(value)
    return False


def _parse_number(value: object, cast: Callable[[str], T], default: T) -> T:
    if value is None or isinstance(value, bool):
        return default
    try:
        return cast(str(value).strip())
    except ValueError:
        return default


def parse_int(value: object, default: int) -> int:
    return _parse_number(value, int, default)


def parse_float(value: object, default: float) -> float:
    return _parse_number(value, float, default)


def join_url(base: str, path: str) -> str:
    parts = [part for part in (base.rstrip("/"), path.lstrip("/")) if part]
    return "/".join(parts)


def rfc822_date(value: dt.datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=dt.timezone.utc)
    return email.utils.format_datetime(value.astimezone(dt.timezone.utc), usegmt=True)


def replace_output_dir(staging_dir: Path, output_dir: Path, protected: Path) -> None:
    """Swap a fully written staging directory into place as ``output_dir``."""
    if output_dir.exists():
        output_resolved = output_dir.resolve()
        protected_resolved = protected.resolve()
        if output_resolved == protected_resolved or output_resolved in protected_resolved.parents:
            raise BuildError(f"Refusing to replace {output_dir}: it contains {protected}.")
        if output_dir.is_dir():
            shutil.rmtree(output_dir)
        else:
            output_dir.unlink()
    staging_dir.rename(output_dir)


def make_public_dir(path: Path) -> None:
    """Give ``path`` the mode a plain ``mkdir`` would under the current umask."""
    mask = os.umask(0)
    os.umask(mask)
    path.chmod(0o777 & ~mask)
