"""File-backed persistence for result batches received by the collector.

Each pushed batch is stored as one JSON document under ``DATA_DIR/results``
and summarised in ``results_index.json`` so listings do not have to open
every file.
"""

from __future__ import annotations

import json
import os
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional


DATA_ROOT = Path(os.getenv("DATA_DIR", "data")).resolve()
RESULTS_DIR = DATA_ROOT / "results"
RESULT_INDEX_PATH = DATA_ROOT / "results_index.json"

_LOCK = threading.Lock()


def _ensure_dirs() -> None:
    RESULTS_DIR.mkdir(parents=True, exist_ok=True)


def _read_json(path: Path, default: Any) -> Any:
    if not path.exists():
        return default
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return default


def _write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
    tmp.replace(path)


def utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def save_result(result_id: str, batch: Dict[str, Any], metadata: Dict[str, Any]) -> None:
    """Persist one pushed batch and its index metadata."""

    _ensure_dirs()
    with _LOCK:
        index: Dict[str, Dict[str, Any]] = _read_json(RESULT_INDEX_PATH, {})
        index[result_id] = metadata
        _write_json(RESULT_INDEX_PATH, index)
    _write_json(RESULTS_DIR / f"{result_id}.json", batch)


def load_result(result_id: str) -> Optional[Dict[str, Any]]:
    return _read_json(RESULTS_DIR / f"{result_id}.json", None)


def delete_result(result_id: str) -> bool:
    removed = False
    with _LOCK:
        index: Dict[str, Dict[str, Any]] = _read_json(RESULT_INDEX_PATH, {})
        if result_id in index:
            index.pop(result_id, None)
            _write_json(RESULT_INDEX_PATH, index)
            removed = True
    (RESULTS_DIR / f"{result_id}.json").unlink(missing_ok=True)
    return removed


def list_results(method_type: Optional[str] = None) -> List[Dict[str, Any]]:
    index: Dict[str, Dict[str, Any]] = _read_json(RESULT_INDEX_PATH, {})
    out: List[Dict[str, Any]] = []
    for rid, meta in index.items():
        if method_type and meta.get("methodType") != method_type:
            continue
        item = {"id": rid}
        item.update({k: v for k, v in meta.items() if k != "id"})
        out.append(item)
    out.sort(key=lambda r: r.get("receivedAt", ""))
    return out
