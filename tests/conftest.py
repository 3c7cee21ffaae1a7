from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from harness_core.config import HarnessSettings
from harness_core.types import (
    ArtifactSlice,
    BehaviorParams,
    Category,
    ReportType,
    RubricEntry,
    TagParams,
)

FIXTURE_DIR = Path(__file__).resolve().parent / "fixtures" / "calculator"


def build_artifact_dir(
    target: Path,
    *,
    markup: str | None = None,
    stylesheet: str | None = None,
    script: str | None = None,
) -> Path:
    """Copy the calculator fixture into `target`, optionally replacing parts."""

    target.mkdir(parents=True, exist_ok=True)
    for name in ("index.html", "style.css", "script.js"):
        shutil.copy(FIXTURE_DIR / name, target / name)
    if markup is not None:
        (target / "index.html").write_text(markup, encoding="utf-8")
    if stylesheet is not None:
        (target / "style.css").write_text(stylesheet, encoding="utf-8")
    if script is not None:
        (target / "script.js").write_text(script, encoding="utf-8")
    return target


def build_settings(tmp_path: Path, **overrides) -> HarnessSettings:
    values = dict(
        artifact_dir=tmp_path / "src",
        report_dir=tmp_path / "out",
        remote_enabled=False,
        remote_timeout_sec=2.0,
        annotation_path=None,
    )
    values.update(overrides)
    return HarnessSettings(**values)


def build_rubric(include_behavior: bool = False) -> list[RubricEntry]:
    entries = [
        RubricEntry(
            name="Head Tags Test",
            category=Category.STRUCTURAL,
            params=TagParams(tags=("title", "link")),
            artifact=ArtifactSlice.MARKUP,
        ),
        RubricEntry(
            name="Footer Tag Test",
            category=Category.STRUCTURAL,
            params=TagParams(tags=("footer",)),
            artifact=ArtifactSlice.MARKUP,
            report_type=ReportType.EXCEPTION,
        ),
    ]
    if include_behavior:
        entries.append(
            RubricEntry(
                name="Theme Toggle Test",
                category=Category.BEHAVIORAL,
                params=BehaviorParams(behavior="toggle_theme"),
                artifact=ArtifactSlice.SCRIPT,
            )
        )
    return entries


@pytest.fixture
def artifact_dir(tmp_path) -> Path:
    return build_artifact_dir(tmp_path / "src")


@pytest.fixture
def settings(tmp_path, artifact_dir) -> HarnessSettings:
    return build_settings(tmp_path, artifact_dir=artifact_dir)


@pytest.fixture
def fixture_markup() -> str:
    return (FIXTURE_DIR / "index.html").read_text(encoding="utf-8")


@pytest.fixture
def fixture_script() -> str:
    return (FIXTURE_DIR / "script.js").read_text(encoding="utf-8")


@pytest.fixture
def wired_script() -> str:
    return (FIXTURE_DIR / "wired_script.js").read_text(encoding="utf-8")
