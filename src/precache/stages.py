from __future__ import annotations

import logging
import shutil
from pathlib import Path

from precache.config import BuildConfig

logger = logging.getLogger(__name__)


def copy_helpers(config: BuildConfig) -> list[Path]:
    """Copy the worker helper scripts into the dev tree."""

    source = config.helpers_path
    if not source.is_dir():
        logger.info("helpers copy skipped missing=%s", source)
        return []
    target = config.copied_helpers_path
    target.mkdir(parents=True, exist_ok=True)
    copied: list[Path] = []
    for path in sorted(source.glob("*.js")):
        if not path.is_file():
            continue
        dest = target / path.name
        shutil.copy2(path, dest)
        copied.append(dest)
    logger.info("helpers copied count=%s target=%s", len(copied), target)
    return copied


def copy_dev_to_dist(config: BuildConfig) -> int:
    source = config.dev_path
    if not source.is_dir():
        raise FileNotFoundError(f"dev directory not found: {source}")
    target = config.dist_path
    count = 0
    for path in sorted(source.rglob("*")):
        rel = path.relative_to(source)
        if not path.is_file() or any(part.startswith(".") for part in rel.parts):
            continue
        dest = target / rel
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(path, dest)
        count += 1
    logger.info("dev copied files=%s source=%s target=%s", count, source, target)
    return count


def clean(config: BuildConfig) -> list[Path]:
    removed: list[Path] = []
    for path in (config.dist_path, config.copied_helpers_path):
        if path.is_dir():
            shutil.rmtree(path)
            removed.append(path)
    logger.info("clean complete removed=%s", [str(path) for path in removed])
    return removed
