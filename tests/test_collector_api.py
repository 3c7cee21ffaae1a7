from __future__ import annotations

import importlib
import io
import os
import sys

from fastapi.testclient import TestClient

from harness_core import emitters
from harness_core.orchestrator import Harness
from harness_core.normalizer import normalize
from harness_core.types import Category, ReportBatch, ReportType, Verdict
from tests.conftest import build_rubric, build_settings, build_artifact_dir


_DEF_MODULES = ["api.storage", "api.app"]


def _reload_app(tmp_path) -> tuple[object, object]:
    os.environ["DATA_DIR"] = str(tmp_path)
    for name in _DEF_MODULES:
        if name in sys.modules:
            importlib.reload(sys.modules[name])
        else:
            __import__(name)
    return sys.modules["api.storage"], sys.modules["api.app"]


def _wire(name="HTML Tags Test") -> dict:
    rec = normalize({"html": Verdict.PASS}, name, Category.STRUCTURAL, ReportType.BOUNDARY)
    return ReportBatch.single(rec, annotation="note").to_wire()


def test_push_store_list_delete(tmp_path):
    storage, app_module = _reload_app(tmp_path / "data")
    client = TestClient(app_module.app)

    payload = _wire()
    (rid,) = payload["testCaseResults"]
    resp = client.post("/v1/mfa-results/push", json=payload)
    assert resp.status_code == 200
    assert resp.json() == {"ok": True, "stored": [rid]}
    assert (storage.RESULTS_DIR / f"{rid}.json").exists()

    listed = client.get("/results").json()["results"]
    assert [r["id"] for r in listed] == [rid]
    assert listed[0]["status"] == "Passed"
    assert client.get("/results", params={"method_type": "functional"}).json()["results"] == []

    stored = client.get(f"/results/{rid}").json()
    assert stored["customData"] == "note"
    assert stored["testCaseResults"][rid]["methodName"] == "HTML Tags Test"

    assert client.delete(f"/results/{rid}").status_code == 200
    assert client.get(f"/results/{rid}").status_code == 404
    assert client.delete(f"/results/{rid}").status_code == 404


def test_push_rejects_bad_shape(tmp_path):
    _storage, app_module = _reload_app(tmp_path / "data")
    client = TestClient(app_module.app)

    assert client.post("/v1/mfa-results/push", json={"testCaseResults": {}}).status_code == 422
    bad = _wire()
    rid = next(iter(bad["testCaseResults"]))
    bad["testCaseResults"][rid]["status"] = "Maybe"
    assert client.post("/v1/mfa-results/push", json=bad).status_code == 422
    over = _wire()
    rid = next(iter(over["testCaseResults"]))
    over["testCaseResults"][rid]["earnedScore"] = 5
    assert client.post("/v1/mfa-results/push", json=over).status_code == 422


def test_harness_reports_into_collector(tmp_path, monkeypatch):
    _storage, app_module = _reload_app(tmp_path / "data")
    client = TestClient(app_module.app)

    def via_client(url, json=None, headers=None, timeout=None):
        return client.post("/v1/mfa-results/push", json=json, headers=headers)

    monkeypatch.setattr(emitters.requests, "post", via_client)
    art = build_artifact_dir(tmp_path / "src")
    settings = build_settings(tmp_path, artifact_dir=art, remote_enabled=True)
    summary = Harness(settings, build_rubric(), out=io.StringIO()).run()

    assert all(not e.sink_errors for e in summary.entries)
    listed = client.get("/results").json()["results"]
    assert {r["id"] for r in listed} == {e.record.id for e in summary.entries}
    assert {r["methodName"]: r["status"] for r in listed} == {
        "Head Tags Test": "Passed",
        "Footer Tag Test": "Failed",
    }
