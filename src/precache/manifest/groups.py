from __future__ import annotations

import logging
from pathlib import Path

from precache.config import Limits
from precache.manifest.hashing import combine_digests, file_md5
from precache.manifest.models import FileGroup, GroupDecision, GroupSummary, ResolvedFile
from precache.manifest.resolve import resolve_pattern

logger = logging.getLogger(__name__)


def resolve_files(root: Path, pattern: str) -> list[ResolvedFile]:
    resolved: list[ResolvedFile] = []
    for path in resolve_pattern(root, pattern):
        resolved.append(
            ResolvedFile(
                relpath=path.relative_to(root).as_posix(),
                size=path.stat().st_size,
                digest=file_md5(path),
            )
        )
    return resolved


def summarize_group(root: Path, group: FileGroup) -> GroupSummary:
    files = resolve_files(root, group.pattern)
    return GroupSummary(
        name=group.name,
        fingerprint=combine_digests(item.digest for item in files),
        files=tuple(files),
        cumulative_size=sum(item.size for item in files),
    )


def within_limits(summary: GroupSummary, limits: Limits) -> bool:
    return (
        summary.cumulative_size <= limits.max_bytes
        and summary.file_count <= limits.max_files
    )


def decide(summary: GroupSummary, limits: Limits) -> GroupDecision:
    accepted = within_limits(summary, limits)
    if accepted:
        logger.info(
            "group added name=%s files=%s bytes=%s",
            summary.name,
            summary.file_count,
            summary.cumulative_size,
        )
    else:
        logger.warning(
            "group skipped name=%s files=%s bytes=%s max_files=%s max_bytes=%s",
            summary.name,
            summary.file_count,
            summary.cumulative_size,
            limits.max_files,
            limits.max_bytes,
        )
    return GroupDecision(
        name=summary.name,
        accepted=accepted,
        file_count=summary.file_count,
        cumulative_size=summary.cumulative_size,
        fingerprint=summary.fingerprint,
    )
