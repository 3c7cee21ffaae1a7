from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional

from .config import DEFAULT_ANNOTATION, MARKUP_FILE, SCRIPT_FILE, STYLESHEET_FILE
from .types import ArtifactBundle, ArtifactLoadError

log = logging.getLogger(__name__)


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ArtifactLoadError(f"cannot read artifact {path}: {exc}") from exc


def read_annotation(path: Optional[Path]) -> str:
    """Pass-through batch annotation; absent file means the default text."""
    if path is None or not path.exists():
        if path is not None:
            log.warning("annotation file %s not found; using default annotation", path)
        return DEFAULT_ANNOTATION
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ArtifactLoadError(f"cannot read annotation {path}: {exc}") from exc


def load_artifacts(artifact_dir: str | Path, annotation_path: Optional[Path] = None) -> ArtifactBundle:
    base = Path(artifact_dir)
    bundle = ArtifactBundle(
        markup=_read(base / MARKUP_FILE),
        stylesheet=_read(base / STYLESHEET_FILE),
        script=_read(base / SCRIPT_FILE),
        annotation=read_annotation(annotation_path),
    )
    log.info("loaded artifact from %s (%d/%d/%d chars)", base,
             len(bundle.markup), len(bundle.stylesheet), len(bundle.script))
    return bundle
