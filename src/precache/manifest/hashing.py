from __future__ import annotations

import hashlib
from collections.abc import Iterable
from pathlib import Path

from precache.canonical import md5_hex

_CHUNK_SIZE = 1024 * 1024


def file_md5(path: Path) -> str:
    digest = hashlib.md5(usedforsecurity=False)
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def combine_digests(digests: Iterable[str]) -> str:
    """Hash of the sorted, separator-free concatenation of ``digests``.

    Sorting makes the result independent of enumeration order; adding or
    removing a member changes the concatenated input.
    """

    return md5_hex("".join(sorted(digests)))
