from __future__ import annotations
import re
from typing import Iterable, Sequence

from .markup import MarkupIndex
from .types import CheckOutcome, StyleRule, Verdict


def _verdict(ok: bool) -> Verdict:
    return Verdict.PASS if ok else Verdict.FAIL


def check_tags(markup: str, tags: Iterable[str]) -> CheckOutcome:
    """One verdict per required tag: pass iff the parsed markup holds at least one."""
    index = MarkupIndex(markup)
    return {tag: _verdict(index.has_tag(tag)) for tag in tags}


def check_attributes(markup: str, tag: str, attributes: Iterable[str]) -> CheckOutcome:
    """Pass per attribute iff some `tag` element carries it; the value is ignored."""
    elements = MarkupIndex(markup).by_tag(tag)
    return {attr: _verdict(any(el.has_attr(attr) for el in elements)) for attr in attributes}


# -------- stylesheet rules ----------
def _block_rx(selector: str) -> re.Pattern[str]:
    return re.compile(r"(?<![\w.#-])" + re.escape(selector.strip()) + r"\s*\{([^}]*)\}")


def _declaration_rx(prop: str, value: str) -> re.Pattern[str]:
    value_rx = r"\s*".join(re.escape(part) for part in value.split())
    return re.compile(r"(?<![\w-])" + re.escape(prop.strip()) + r"\s*:\s*" + value_rx + r"\s*(?:;|$)")


def find_block(stylesheet: str, selector: str) -> str | None:
    # first occurrence only; later blocks for the same selector are ignored
    match = _block_rx(selector).search(stylesheet or "")
    return match.group(1) if match else None


def check_styles(stylesheet: str, rules: Sequence[StyleRule]) -> CheckOutcome:
    """One verdict per selector; a selector without a block fails as a whole."""
    out: CheckOutcome = {}
    for rule in rules:
        block = find_block(stylesheet, rule.selector)
        if block is None:
            out[rule.selector] = Verdict.FAIL
            continue
        body = block.strip()
        ok = all(_declaration_rx(prop, value).search(body) for prop, value in rule.properties)
        out[rule.selector] = _verdict(ok)
    return out


def check_behavior(script: str, behavior: str, *, timeout_ms: int | None = None) -> CheckOutcome:
    from .behaviors import run_behavior
    return run_behavior(script, behavior, timeout_ms=timeout_ms)


__all__ = ["check_tags", "check_attributes", "check_styles", "check_behavior", "find_block"]
