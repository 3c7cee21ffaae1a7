"""Rubric definitions: the built-in calculator rubric and a JSON loader."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Mapping, Sequence

from .behaviors import BEHAVIORS
from .types import (
    ArtifactSlice,
    AttributeParams,
    BehaviorParams,
    Category,
    CheckParams,
    ReportType,
    RubricEntry,
    RubricError,
    StyleParams,
    StyleRule,
    TagParams,
)


def _style(selector: str, **props: str) -> StyleRule:
    return StyleRule(selector=selector, properties=tuple((k.replace("_", "-"), v) for k, v in props.items()))


# Execution and report order is list order.
DEFAULT_RUBRIC: List[RubricEntry] = [
    RubricEntry(
        name="HTML Tags Test",
        category=Category.STRUCTURAL,
        params=TagParams(tags=("html", "head", "title", "link", "body", "div", "button", "label", "input", "p", "script")),
        artifact=ArtifactSlice.MARKUP,
        report_type=ReportType.BOUNDARY,
    ),
    RubricEntry(
        name="Link Tag Attribute Test",
        category=Category.STRUCTURAL,
        params=AttributeParams(tag="link", attributes=("rel", "href")),
        artifact=ArtifactSlice.MARKUP,
        report_type=ReportType.BOUNDARY,
    ),
    RubricEntry(
        name="Script Tag Attribute Test",
        category=Category.STRUCTURAL,
        params=AttributeParams(tag="script", attributes=("src",)),
        artifact=ArtifactSlice.MARKUP,
        report_type=ReportType.BOUNDARY,
    ),
    RubricEntry(
        name="Input Tag Attribute Test",
        category=Category.STRUCTURAL,
        params=AttributeParams(tag="input", attributes=("type",)),
        artifact=ArtifactSlice.MARKUP,
        report_type=ReportType.BOUNDARY,
    ),
    RubricEntry(
        name="testToggleTheme Functionality Test",
        category=Category.BEHAVIORAL,
        params=BehaviorParams(behavior="toggle_theme"),
        artifact=ArtifactSlice.SCRIPT,
        report_type=ReportType.FUNCTIONAL,
    ),
    RubricEntry(
        name="testCalculateBill Functionality Test",
        category=Category.BEHAVIORAL,
        params=BehaviorParams(behavior="calculate_emi"),
        artifact=ArtifactSlice.SCRIPT,
        report_type=ReportType.FUNCTIONAL,
    ),
    RubricEntry(
        name="CSS File Style Test",
        category=Category.STRUCTURAL,
        params=StyleParams(rules=(
            _style("body", font_family="Arial, sans-serif", background_color="#f0f0f0"),
            _style(".container", background="#fff", max_width="400px", padding="25px"),
            _style("h2", text_align="center"),
            _style(".dark-mode", background_color="#2b2b2b", color="#fff"),
        )),
        artifact=ArtifactSlice.STYLESHEET,
        report_type=ReportType.BOUNDARY,
    ),
]

_DEFAULT_SLICE = {
    "tags": ArtifactSlice.MARKUP,
    "attributes": ArtifactSlice.MARKUP,
    "styles": ArtifactSlice.STYLESHEET,
    "behavior": ArtifactSlice.SCRIPT,
}


def _strings(raw: Any, where: str) -> tuple[str, ...]:
    if isinstance(raw, str) or not isinstance(raw, Sequence):
        raise RubricError(f"{where}: expected a list of strings")
    return tuple(str(x) for x in raw)


def _coerce_params(raw: Mapping[str, Any], where: str) -> CheckParams:
    kind = str(raw.get("kind") or "").strip().lower()
    if kind == "tags":
        return TagParams(tags=_strings(raw.get("tags"), f"{where}.tags"))
    if kind == "attributes":
        if not raw.get("tag"):
            raise RubricError(f"{where}: attribute check needs a 'tag'")
        return AttributeParams(tag=str(raw["tag"]), attributes=_strings(raw.get("attributes"), f"{where}.attributes"))
    if kind == "styles":
        rules = []
        for idx, rule in enumerate(raw.get("rules") or [], start=1):
            if not isinstance(rule, Mapping) or "selector" not in rule:
                raise RubricError(f"{where}.rules[{idx}]: missing 'selector'")
            props = rule.get("properties") or {}
            if not isinstance(props, Mapping):
                raise RubricError(f"{where}.rules[{idx}]: 'properties' must be an object")
            rules.append(StyleRule(selector=str(rule["selector"]),
                                   properties=tuple((str(k), str(v)) for k, v in props.items())))
        return StyleParams(rules=tuple(rules))
    if kind == "behavior":
        name = str(raw.get("behavior") or "")
        if name not in BEHAVIORS:
            raise RubricError(f"{where}: unknown behavior {name!r}; known: {', '.join(sorted(BEHAVIORS))}")
        return BehaviorParams(behavior=name)
    raise RubricError(f"{where}: unsupported check kind {kind!r}")


def _enum(cls, raw: Any, where: str):
    try:
        return cls(str(raw).strip().lower())
    except ValueError:
        allowed = ", ".join(m.value for m in cls)
        raise RubricError(f"{where}: {raw!r} is not one of {allowed}") from None


def coerce_entries(raw_entries: Sequence[Mapping[str, Any]]) -> List[RubricEntry]:
    entries: List[RubricEntry] = []
    for idx, item in enumerate(raw_entries, start=1):
        where = f"Rubric entry #{idx}"
        if not isinstance(item, Mapping) or "name" not in item or "check" not in item:
            raise RubricError(f"{where} is missing required 'name' or 'check' fields")
        if not isinstance(item["check"], Mapping):
            raise RubricError(f"{where}: 'check' must be an object")
        params = _coerce_params(item["check"], f"{where} ({item['name']})")
        category = _enum(Category, item.get("category", "behavioral" if params.kind == "behavior" else "structural"),
                         f"{where}.category")
        artifact = _enum(ArtifactSlice, item["artifact"], f"{where}.artifact") if "artifact" in item \
            else _DEFAULT_SLICE[params.kind]
        report_type = _enum(ReportType, item["report_type"], f"{where}.report_type") if item.get("report_type") else None
        entries.append(RubricEntry(name=str(item["name"]), category=category, params=params,
                                   artifact=artifact, report_type=report_type))
    if not entries:
        raise RubricError("Rubric must include at least one entry")
    return entries


def load_rubric(path: str | Path) -> List[RubricEntry]:
    path = Path(path)
    if not path.exists():
        raise RubricError(f"Rubric file not found: {path}")
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise RubricError(f"Rubric file is not valid JSON: {path}: {exc}") from exc
    if isinstance(raw, Mapping):
        if "entries" not in raw:
            raise RubricError("Rubric JSON must contain an 'entries' array")
        return coerce_entries(raw["entries"])
    if isinstance(raw, list):
        return coerce_entries(raw)
    raise RubricError("Rubric file must be a list or an object with an 'entries' list")
