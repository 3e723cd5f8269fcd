from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from precache.config import BuildConfig
from precache.manifest.assemble import assemble_manifest, serialize_manifest
from precache.manifest.groups import decide, summarize_group
from precache.manifest.models import GroupDecision, GroupSummary, Manifest
from precache.manifest.resolve import ensure_readable_dir
from precache.template import check_placeholder, load_template, render_template, write_script

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerateResult:
    manifest: Manifest
    decisions: list[GroupDecision]
    script: str
    output_path: Path


def build_manifest(config: BuildConfig) -> tuple[Manifest, list[GroupDecision]]:
    root = config.dist_path
    ensure_readable_dir(root)
    accepted: list[GroupSummary] = []
    decisions: list[GroupDecision] = []
    for group in config.groups():
        summary = summarize_group(root, group)
        decision = decide(summary, config.limits)
        decisions.append(decision)
        if decision.accepted:
            accepted.append(summary)
    return assemble_manifest(accepted), decisions


def generate(config: BuildConfig) -> GenerateResult:
    """Regenerate the worker script from the current dist tree.

    Every group is recomputed from disk. Any pattern, filesystem or template
    failure propagates before the output file is touched.
    """

    logger.info("generate start dist=%s groups=%s", config.dist_path, len(config.file_sets))
    template_text = load_template(config.template_path)
    check_placeholder(template_text, config.placeholder)
    manifest, decisions = build_manifest(config)
    literal = serialize_manifest(manifest)
    script = render_template(template_text, literal, config.placeholder)
    output_path = write_script(config.output_path, script)
    logger.info(
        "generate complete output=%s accepted=%s skipped=%s",
        output_path,
        ",".join(manifest.names()) or "-",
        len(decisions) - len(manifest.entries),
    )
    return GenerateResult(
        manifest=manifest,
        decisions=decisions,
        script=script,
        output_path=output_path,
    )
