from __future__ import annotations

import logging
from pathlib import Path

import pytest

from precache.canonical import md5_hex
from precache.config import BuildConfig, Limits, default_config
from precache.errors import PatternError, TemplateError
from precache.generator import build_manifest, generate
from precache.manifest.models import Manifest, ManifestEntry

TEMPLATE = "var cacheOptions = <%= cacheOptions %>;\nself.addEventListener('install', install);\n"


def _entry(manifest: Manifest, name: str) -> ManifestEntry | None:
    return next((entry for entry in manifest.entries if entry.name == name), None)


def _write(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)


def _project(root: Path, *, reverse: bool = False, images: int = 150) -> BuildConfig:
    files: list[tuple[str, bytes]] = [
        ("css/a.css", b"X" * 500),
        ("css/b.css", b"Y" * 500),
        ("index.html", b"<html></html>"),
        ("about.html", b"<html>about</html>"),
        ("js/app.js", b"console.log('app');"),
    ]
    files += [(f"images/img{index:03d}.png", bytes([index % 251]) * 10 * 1024) for index in range(images)]
    if reverse:
        files.reverse()
    for relpath, data in files:
        _write(root / "dist" / relpath, data)
    _write(root / "service-worker-helpers" / "service-worker.tmpl", TEMPLATE.encode())
    return default_config(root)


def test_generate_writes_expected_manifest(tmp_path: Path) -> None:
    config = _project(tmp_path)
    result = generate(config)

    assert result.output_path == tmp_path / "dist" / "service-worker.js"
    assert result.manifest.names() == ["css", "html", "js"]
    css = _entry(result.manifest, "css")
    assert css is not None
    assert css.paths == ("css/a.css", "css/b.css")
    assert css.fingerprint == md5_hex(
        "".join(sorted([md5_hex(b"X" * 500), md5_hex(b"Y" * 500)]))
    )
    html = _entry(result.manifest, "html")
    assert html is not None
    assert html.paths == ("about.html", "index.html")

    text = result.output_path.read_text(encoding="utf-8")
    assert text.startswith('var cacheOptions = [["css","' + css.fingerprint + '",["css/a.css","css/b.css"]],')
    assert "images/" not in text
    assert "<%=" not in text


def test_generate_reports_skipped_group(tmp_path: Path) -> None:
    result = generate(_project(tmp_path))
    decisions = {decision.name: decision for decision in result.decisions}
    assert [decision.name for decision in result.decisions] == ["css", "html", "images", "js"]
    assert not decisions["images"].accepted
    assert decisions["images"].file_count == 150
    assert decisions["images"].cumulative_size == 150 * 10 * 1024
    assert decisions["css"].accepted


def test_output_is_byte_identical_across_runs_and_trees(tmp_path: Path) -> None:
    first = generate(_project(tmp_path / "one"))
    second = generate(_project(tmp_path / "two", reverse=True))
    again = generate(_project(tmp_path / "one"))
    assert first.output_path.read_bytes() == second.output_path.read_bytes()
    assert first.output_path.read_bytes() == again.output_path.read_bytes()


def test_generated_script_is_not_part_of_any_group(tmp_path: Path) -> None:
    config = _project(tmp_path)
    first = generate(config).output_path.read_bytes()
    second = generate(config).output_path.read_bytes()
    assert first == second


def test_change_affects_only_owning_group(tmp_path: Path) -> None:
    config = _project(tmp_path, images=3)
    before = {entry.name: entry.fingerprint for entry in generate(config).manifest.entries}
    _write(tmp_path / "dist" / "js" / "app.js", b"console.log('app!');")
    after = {entry.name: entry.fingerprint for entry in generate(config).manifest.entries}
    assert before["js"] != after["js"]
    assert {k: v for k, v in before.items() if k != "js"} == {
        k: v for k, v in after.items() if k != "js"
    }


def test_small_images_group_is_included(tmp_path: Path) -> None:
    result = generate(_project(tmp_path, images=3))
    assert result.manifest.names() == ["css", "html", "images", "js"]


def test_empty_group_is_emitted_with_empty_hash(tmp_path: Path) -> None:
    config = _project(tmp_path, images=0)
    manifest, _decisions = build_manifest(config)
    images = _entry(manifest, "images")
    assert images is not None
    assert images.paths == ()
    assert images.fingerprint == md5_hex(b"")


def test_tight_limits_drop_groups(tmp_path: Path) -> None:
    config = _project(tmp_path, images=0).model_copy(
        update={"limits": Limits(max_bytes=600, max_files=100)}
    )
    manifest, _decisions = build_manifest(config)
    assert "css" not in manifest.names()
    assert "html" in manifest.names()


def test_missing_template_writes_nothing(tmp_path: Path) -> None:
    config = _project(tmp_path)
    (tmp_path / "service-worker-helpers" / "service-worker.tmpl").unlink()
    with pytest.raises(TemplateError):
        generate(config)
    assert not config.output_path.exists()


def test_bad_pattern_writes_nothing(tmp_path: Path) -> None:
    config = _project(tmp_path).model_copy(
        update={"file_sets": {"css": "css/*.css", "broken": "../*.js"}}
    )
    with pytest.raises(PatternError):
        generate(config)
    assert not config.output_path.exists()


def test_failure_keeps_previous_output(tmp_path: Path) -> None:
    config = _project(tmp_path)
    previous = generate(config).output_path.read_bytes()
    _write(tmp_path / "service-worker-helpers" / "service-worker.tmpl", b"no placeholder")
    with pytest.raises(TemplateError):
        generate(config)
    assert config.output_path.read_bytes() == previous


def test_missing_dist_raises_os_error(tmp_path: Path) -> None:
    _write(tmp_path / "service-worker-helpers" / "service-worker.tmpl", TEMPLATE.encode())
    config = default_config(tmp_path)
    with pytest.raises(FileNotFoundError):
        generate(config)
    assert not config.output_path.exists()


def test_generate_logs_accepted_group_names(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.INFO, logger="precache.generator"):
        generate(_project(tmp_path))
    assert "accepted=css,html,js skipped=1" in caplog.text
