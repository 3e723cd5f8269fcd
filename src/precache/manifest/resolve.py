from __future__ import annotations

import os
import re
from glob import glob
from pathlib import Path

from precache.errors import PatternError

_DRIVE_PREFIX = re.compile(r"^[A-Za-z]:/")


def validate_pattern(pattern: str) -> str:
    """Return ``pattern`` normalized to forward slashes, or raise ``PatternError``."""

    if not pattern or not pattern.strip():
        raise PatternError(pattern, "empty pattern")
    normalized = pattern.replace("\\", "/")
    if normalized.startswith("/") or _DRIVE_PREFIX.match(normalized):
        raise PatternError(pattern, "pattern must be relative to the root")
    for segment in normalized.split("/"):
        if segment == "..":
            raise PatternError(pattern, "pattern may not leave the root")
        if _has_unterminated_class(segment):
            raise PatternError(pattern, "unterminated character class")
    return normalized


def _has_unterminated_class(segment: str) -> bool:
    index = 0
    while index < len(segment):
        if segment[index] == "[":
            # "[]]" and "[!]]" treat the first "]" as a literal member
            close = index + 1
            if close < len(segment) and segment[close] == "!":
                close += 1
            if close < len(segment) and segment[close] == "]":
                close += 1
            end = segment.find("]", close)
            if end == -1:
                return True
            index = end + 1
            continue
        index += 1
    return False


def ensure_readable_dir(root: Path) -> None:
    if not root.exists():
        raise FileNotFoundError(f"root directory not found: {root}")
    if not root.is_dir():
        raise NotADirectoryError(f"root is not a directory: {root}")
    with os.scandir(root):
        pass


def resolve_pattern(root: Path, pattern: str) -> list[Path]:
    """Return the regular files under ``root`` matching ``pattern``.

    ``**`` as a whole segment spans directories; inside a segment it acts as
    ``*``. Wildcards skip dot-files. The result is sorted by posix relpath so
    callers never see filesystem enumeration order.
    """

    normalized = validate_pattern(pattern)
    ensure_readable_dir(root)
    matches = glob(normalized, root_dir=root, recursive=True)
    files = [root / match for match in set(matches)]
    files = [path for path in files if path.is_file()]
    return sorted(files, key=lambda item: item.relative_to(root).as_posix())
