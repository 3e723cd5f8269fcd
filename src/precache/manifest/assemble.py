from __future__ import annotations

from collections.abc import Iterable

from precache.canonical import canonical_json_str
from precache.manifest.models import GroupSummary, Manifest, ManifestEntry


def assemble_manifest(summaries: Iterable[GroupSummary]) -> Manifest:
    """Build the manifest from accepted groups, ordered by group name.

    Paths inside an entry are sorted as well, so identical inputs always give
    identical entries.
    """

    entries = [
        ManifestEntry(
            name=summary.name,
            fingerprint=summary.fingerprint,
            paths=tuple(sorted(summary.paths)),
        )
        for summary in sorted(summaries, key=lambda item: item.name)
    ]
    return Manifest(entries=tuple(entries))


def serialize_manifest(manifest: Manifest) -> str:
    # Nested arrays only: the worker update check reacts to any byte change,
    # so no mapping whose key order could drift is ever emitted.
    return canonical_json_str(manifest.as_literal())
