from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class FileGroup(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    pattern: str


class ResolvedFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    relpath: str
    size: int
    digest: str


class GroupSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    fingerprint: str
    files: tuple[ResolvedFile, ...] = ()
    cumulative_size: int = 0

    @property
    def file_count(self) -> int:
        return len(self.files)

    @property
    def paths(self) -> list[str]:
        return [item.relpath for item in self.files]


class GroupDecision(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    accepted: bool
    file_count: int
    cumulative_size: int
    fingerprint: str


class ManifestEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    fingerprint: str
    paths: tuple[str, ...] = ()

    def as_literal(self) -> list[object]:
        return [self.name, self.fingerprint, list(self.paths)]


class Manifest(BaseModel):
    model_config = ConfigDict(frozen=True)

    entries: tuple[ManifestEntry, ...] = ()

    def as_literal(self) -> list[list[object]]:
        return [entry.as_literal() for entry in self.entries]

    def names(self) -> list[str]:
        return [entry.name for entry in self.entries]
