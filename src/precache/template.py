from __future__ import annotations

import logging
import os
import stat
import tempfile
from pathlib import Path

from precache.errors import TemplateError

logger = logging.getLogger(__name__)


def load_template(path: Path) -> str:
    try:
        return path.read_bytes().decode("utf-8")
    except FileNotFoundError as exc:
        raise TemplateError(f"template not found: {path}") from exc
    except UnicodeDecodeError as exc:
        raise TemplateError(f"template is not valid utf-8: {path}") from exc
    except OSError as exc:
        raise TemplateError(f"template unreadable: {path}: {exc}") from exc


def check_placeholder(template_text: str, placeholder: str) -> None:
    count = template_text.count(placeholder)
    if count != 1:
        raise TemplateError(
            f"template must contain placeholder {placeholder!r} exactly once, found {count}"
        )


def render_template(template_text: str, literal: str, placeholder: str) -> str:
    check_placeholder(template_text, placeholder)
    return template_text.replace(placeholder, literal)


def _target_mode(path: Path) -> int:
    # mkstemp creates 0600; keep the existing mode or fall back to the umask default
    if path.exists():
        return stat.S_IMODE(path.stat().st_mode)
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def write_script(path: Path, text: str) -> Path:
    """Write ``text`` to ``path`` atomically; on failure nothing is left behind."""

    tmp_name: str | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        os.chmod(tmp_name, _target_mode(path))
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as exc:
        raise TemplateError(f"failed to write {path}: {exc}") from exc
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
    logger.info("script written path=%s bytes=%s", path, len(text.encode("utf-8")))
    return path
