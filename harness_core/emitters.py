# harness_core/emitters.py
from __future__ import annotations
import logging
import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict
from xml.dom import minidom

import requests

from .config import HarnessSettings
from .types import ReportBatch, ResultRecord, Status

log = logging.getLogger(__name__)

_SPACE_RX = re.compile(r"\s+")


def _slug(text: str) -> str:
    return _SPACE_RX.sub("-", str(text).strip().lower())


# -------- structured report ----------
def render_xml(record: ResultRecord) -> str:
    root = ET.Element("test-cases")
    case = ET.SubElement(root, "case")
    # test-case-type carries the status text, as the existing report consumers expect
    ET.SubElement(case, "test-case-type").text = record.status.value
    ET.SubElement(case, "name").text = record.name
    ET.SubElement(case, "status").text = record.status.value
    raw = ET.tostring(root, encoding="unicode")
    return minidom.parseString(raw).toprettyxml(indent="  ")


class XmlReportEmitter:
    name = "xml"

    def __init__(self, settings: HarnessSettings) -> None:
        self.report_dir = Path(settings.report_dir)
        self.pattern = settings.report_file_pattern

    def path_for(self, record: ResultRecord) -> Path:
        filename = self.pattern.format(category=_slug(record.report_type.value), name=_slug(record.name))
        return self.report_dir / filename

    def emit(self, batch: ReportBatch) -> Path:
        record = batch.only()
        out = self.path_for(record)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(render_xml(record), encoding="utf-8")
        return out


# -------- plaintext ledgers ----------
def ledger_line(record: ResultRecord) -> str:
    return f"{record.name}={'PASS' if record.status is Status.PASSED else 'FAIL'}\n"


class LedgerEmitter:
    name = "ledger"

    def __init__(self, settings: HarnessSettings) -> None:
        self.settings = settings

    def emit(self, batch: ReportBatch) -> Path:
        record = batch.only()
        path = self.settings.ledger_path(record.report_type)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as f:
            f.write(ledger_line(record))
        return path


# -------- remote collection endpoint ----------
class RemoteEmitter:
    name = "remote"

    def __init__(self, settings: HarnessSettings) -> None:
        self.url = settings.results_url
        self.timeout = settings.remote_timeout_sec

    def emit(self, batch: ReportBatch) -> Dict[str, object] | str:
        """POST the batch; transport errors and non-2xx responses raise."""
        resp = requests.post(
            self.url,
            json=batch.to_wire(),
            headers={"Content-Type": "application/json"},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        try:
            body = resp.json()
        except ValueError:
            body = resp.text
        log.info("%s server response: %s", batch.only().name, body)
        return body


__all__ = ["XmlReportEmitter", "LedgerEmitter", "RemoteEmitter", "render_xml", "ledger_line"]
