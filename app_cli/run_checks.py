from __future__ import annotations
import argparse, logging, pathlib, sys
from dataclasses import replace
from typing import Optional, Sequence

from harness_core.config import load_config, settings_from_config
from harness_core.orchestrator import Harness
from harness_core.types import ArtifactLoadError, RubricError


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Check a web front-end against the rubric and publish results.")
    ap.add_argument("--artifact-dir", help="directory holding index.html, style.css and script.js")
    ap.add_argument("--report-dir", help="where XML reports and ledgers are written")
    ap.add_argument("--rubric", help="JSON rubric file (default: built-in rubric)")
    ap.add_argument("--url", help="results collection endpoint")
    ap.add_argument("--no-remote", action="store_true", help="skip the remote results endpoint")
    ap.add_argument("--timeout", type=float, help="seconds to wait for each remote submission")
    ap.add_argument("--config", default="harness.json", help="optional JSON config file")
    ap.add_argument("-v", "--verbose", action="store_true")
    return ap


def main(argv: Optional[Sequence[str]] = None) -> int:
    a = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if a.verbose else logging.INFO, format="[%(levelname)s] %(message)s")

    settings = settings_from_config(load_config(a.config))
    overrides: dict = {}
    if a.artifact_dir: overrides["artifact_dir"] = pathlib.Path(a.artifact_dir)
    if a.report_dir: overrides["report_dir"] = pathlib.Path(a.report_dir)
    if a.rubric: overrides["rubric_path"] = pathlib.Path(a.rubric)
    if a.url: overrides["results_url"] = a.url
    if a.no_remote: overrides["remote_enabled"] = False
    if a.timeout is not None: overrides["remote_timeout_sec"] = a.timeout
    settings = replace(settings, **overrides)

    try:
        Harness(settings).run()
    except (ArtifactLoadError, RubricError) as exc:
        logging.error("run aborted: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
