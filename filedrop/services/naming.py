import hashlib
import os
import random
import time
import uuid
from enum import Enum
from typing import Optional

RANDOM_UPPER_BOUND = 10**9


class NamingStrategy(str, Enum):
    """Ways of building the unique part of a generated filename"""
    TIMESTAMP_RANDOM = "timestamp-random"
    UUID = "uuid"
    CONTENT_HASH = "content-hash"


def _now_ms() -> int:
    return int(time.time() * 1000)


def _random_draw() -> int:
    return random.randint(0, RANDOM_UPPER_BOUND)


def extract_extension(original_filename: Optional[str]) -> str:
    """
    Return the extension of a client-supplied filename, verbatim.

    Only the basename is considered and the last dot wins, so
    ``archive.tar.GZ`` gives ``.GZ``. Names without a dot, or whose only
    dot is the leading one (``.bashrc``), have no extension.
    """
    if not original_filename:
        return ""
    basename = os.path.basename(original_filename.replace("\\", "/"))
    return os.path.splitext(basename)[1]


def unique_suffix(
    strategy: NamingStrategy,
    content: bytes = b"",
    digest: Optional[str] = None,
) -> str:
    strategy = NamingStrategy(strategy)
    if strategy is NamingStrategy.TIMESTAMP_RANDOM:
        return f"{_now_ms()}-{_random_draw()}"
    if strategy is NamingStrategy.UUID:
        return uuid.uuid4().hex
    # Streamed uploads hash their chunks beforehand and pass the digest in
    return digest or hashlib.sha256(content).hexdigest()


def generate_filename(
    field_name: str,
    original_filename: Optional[str],
    strategy: NamingStrategy = NamingStrategy.TIMESTAMP_RANDOM,
    content: bytes = b"",
    digest: Optional[str] = None,
) -> str:
    """Build ``<field>-<suffix><ext>`` for a new upload"""
    suffix = unique_suffix(strategy, content, digest)
    return f"{field_name}-{suffix}{extract_extension(original_filename)}"


def disambiguate(filename: str, attempt: int) -> str:
    """Append ``-<attempt>`` to the stem of an already taken filename"""
    if attempt <= 0:
        return filename
    stem, ext = os.path.splitext(filename)
    return f"{stem}-{attempt}{ext}"
