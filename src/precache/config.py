from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from precache.manifest.models import FileGroup

# Safeguards against precaching huge asset sets, either in bytes or in raw
# number of files. A 15MB image picked up by a pattern should not be fetched
# on every first visit.
MAXIMUM_CACHE_SIZE_IN_BYTES = 1024 * 1024
MAXIMUM_FILES_IN_CACHE = 100

CONFIG_FILENAME = "precache.json"
DEFAULT_PLACEHOLDER = "<%= cacheOptions %>"

# Each entry is a separate logical cache: any change to a matching file
# expires the whole group. Patterns are relative to the dist directory.
DEFAULT_FILE_SETS: dict[str, str] = {
    "css": "css/**.css",
    "html": "**.html",
    "images": "images/**.*",
    "js": "js/**.js",
}


class Limits(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    max_bytes: int = Field(default=MAXIMUM_CACHE_SIZE_IN_BYTES, gt=0)
    max_files: int = Field(default=MAXIMUM_FILES_IN_CACHE, gt=0)


class BuildConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    root: Path = Field(default_factory=Path.cwd)
    dev_dir: Path = Path("app")
    dist_dir: Path = Path("dist")
    helpers_dir: Path = Path("service-worker-helpers")
    template: Path = Path("service-worker-helpers/service-worker.tmpl")
    output_name: str = "service-worker.js"
    placeholder: str = Field(default=DEFAULT_PLACEHOLDER, min_length=1)
    limits: Limits = Field(default_factory=Limits)
    file_sets: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_FILE_SETS))

    @field_validator("file_sets")
    @classmethod
    def _check_group_names(cls, value: dict[str, str]) -> dict[str, str]:
        for name in value:
            if not name.strip():
                raise ValueError("file set names must be non-empty")
        return value

    @field_validator("output_name")
    @classmethod
    def _check_output_name(cls, value: str) -> str:
        if not value or "/" in value or "\\" in value:
            raise ValueError(f"output_name must be a plain file name: {value!r}")
        return value

    def _under_root(self, path: Path) -> Path:
        return path if path.is_absolute() else self.root / path

    @property
    def dev_path(self) -> Path:
        return self._under_root(self.dev_dir)

    @property
    def dist_path(self) -> Path:
        return self._under_root(self.dist_dir)

    @property
    def helpers_path(self) -> Path:
        return self._under_root(self.helpers_dir)

    @property
    def copied_helpers_path(self) -> Path:
        return self.dev_path / "service-worker-helpers"

    @property
    def template_path(self) -> Path:
        return self._under_root(self.template)

    @property
    def output_path(self) -> Path:
        return self.dist_path / self.output_name

    def groups(self) -> list[FileGroup]:
        return [
            FileGroup(name=name, pattern=self.file_sets[name])
            for name in sorted(self.file_sets)
        ]


def default_config(root: Path | None = None) -> BuildConfig:
    return BuildConfig(root=root or Path.cwd())


def load_config(
    root: Path | None = None,
    config_file: Path | None = None,
    *,
    max_bytes: int | None = None,
    max_files: int | None = None,
) -> BuildConfig:
    """Merge defaults, the JSON config file, environment and explicit overrides.

    A missing ``precache.json`` in the root is fine; a missing ``config_file``
    passed explicitly raises ``FileNotFoundError``.
    """

    base = root or Path.cwd()
    data: dict[str, Any] = {}
    path = config_file or base / CONFIG_FILENAME
    if config_file is not None or path.exists():
        raw = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            raise ValueError(f"config file must hold a JSON object: {path}")
        data.update(raw)
    data["root"] = base

    dist_env = os.getenv("PRECACHE_DIST_DIR", "").strip()
    if dist_env:
        data["dist_dir"] = dist_env

    raw_limits = data.get("limits") or {}
    if not isinstance(raw_limits, dict):
        raise ValueError(f"limits must be a JSON object: {path}")
    limits = dict(raw_limits)
    bytes_env = os.getenv("PRECACHE_MAX_BYTES", "").strip()
    files_env = os.getenv("PRECACHE_MAX_FILES", "").strip()
    if bytes_env:
        limits["max_bytes"] = bytes_env
    if files_env:
        limits["max_files"] = files_env
    if max_bytes is not None:
        limits["max_bytes"] = max_bytes
    if max_files is not None:
        limits["max_files"] = max_files
    data["limits"] = limits

    return BuildConfig.model_validate(data)
