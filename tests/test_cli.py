from __future__ import annotations

from app_cli.run_checks import main
from tests.conftest import build_artifact_dir


def test_cli_completes_with_failures(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    art = build_artifact_dir(tmp_path / "src", markup="<p>no head here</p>")
    out = tmp_path / "reports"
    code = main(["--artifact-dir", str(art), "--report-dir", str(out), "--no-remote"])
    assert code == 0
    boundary = (out / "output_boundary_revised.txt").read_text(encoding="utf-8")
    assert "HTML Tags Test=FAIL" in boundary
    assert (out / "output_exception_revised.txt").exists()


def test_cli_fatal_load_returns_one(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    code = main(["--artifact-dir", str(tmp_path / "missing"), "--report-dir", str(tmp_path), "--no-remote"])
    assert code == 1


def test_cli_bad_rubric_returns_one(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    art = build_artifact_dir(tmp_path / "src")
    rubric = tmp_path / "rubric.json"
    rubric.write_text("{not json", encoding="utf-8")
    code = main(["--artifact-dir", str(art), "--rubric", str(rubric), "--no-remote"])
    assert code == 1
