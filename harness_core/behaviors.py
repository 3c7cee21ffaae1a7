"""Behavioral checks: a fixture, an entry point, and an independent oracle.

Each behavior builds its own minimal markup, drives the artifact through the
same global functions the page buttons use, and compares the resulting state
with a value computed here, not read back from the artifact.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from .dom_host import ScriptHost
from .types import CheckOutcome, RubricError, Verdict


# -------- oracle helpers ----------
def emi(principal: float, annual_rate_pct: float, months: int) -> float:
    r = annual_rate_pct / 12 / 100
    if r == 0:
        return principal / months
    growth = (1 + r) ** months
    return principal * r * growth / (growth - 1)


def js_round(x: float) -> int:
    # Math.round semantics: halves go up, unlike round()
    return math.floor(x + 0.5)


def format_en_in(n: int) -> str:
    """Group digits the way `Number.toLocaleString('en-IN')` does: 12,34,567."""
    sign = "-" if n < 0 else ""
    digits = str(abs(int(n)))
    if len(digits) <= 3:
        return sign + digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return sign + ",".join(groups + [tail])


# -------- fixtures ----------
THEME_FIXTURE = """
<!DOCTYPE html>
<body class="light-mode">
  <button id="lightBtn">Light</button>
  <button id="darkBtn">Dark</button>
</body>
"""

CALCULATOR_FIXTURE = """
<!DOCTYPE html>
<body>
  <input id="loanAmount" value="1000000" />
  <input id="interestRate" value="10" />
  <input id="interestRateSlider" value="10" />
  <input id="loanTenure" value="1" />
  <input id="startDate" type="date" />
  <span id="emiOutput">-</span>
  <span id="interestOutput">-</span>
  <span id="paymentOutput">-</span>
  <button id="calculateBtn">Calculate EMI</button>
  <button id="clearBtn">Clear</button>
  <button id="yearBtn"></button>
  <button id="monthBtn"></button>
</body>
"""

CLEAR_FIXTURE = """
<!DOCTYPE html>
<body>
  <input id="loanAmount" value="500000" />
  <input id="interestRate" value="12" />
  <input id="interestRateSlider" value="12" />
  <input id="loanTenure" value="3" />
  <input id="startDate" type="date" value="2024-01-01" />
  <span id="emiOutput">16,607</span>
  <span id="interestOutput">97,858</span>
  <span id="paymentOutput">5,97,858</span>
  <button id="calculateBtn">Calculate EMI</button>
  <button id="clearBtn">Clear</button>
  <button id="yearBtn"></button>
  <button id="monthBtn"></button>
</body>
"""


@dataclass(frozen=True)
class Behavior:
    name: str
    fixture: str
    run: Callable[[ScriptHost], CheckOutcome]


def _ok(flag: bool) -> Verdict:
    return Verdict.PASS if flag else Verdict.FAIL


def _toggle_theme(host: ScriptHost) -> CheckOutcome:
    host.invoke("toggleTheme", "dark")
    snap = host.snapshot()
    classes = snap["body"]["className"].split()
    return {"toggleTheme": _ok("dark-mode" in classes)}


def _calculate_emi(host: ScriptHost) -> CheckOutcome:
    host.invoke("calculateEMI")
    shown = host.snapshot()["elements"].get("emiOutput", {}).get("text")
    expected = format_en_in(js_round(emi(1_000_000, 10, 12)))
    return {"calculateEMI": _ok(shown == expected)}


def _clear_fields(host: ScriptHost) -> CheckOutcome:
    host.invoke("clearFields")
    els = host.snapshot()["elements"]
    outputs = ("emiOutput", "interestOutput", "paymentOutput")
    inputs = ("loanAmount", "interestRate", "loanTenure")
    cleared = all(els.get(i, {}).get("text") == "-" for i in outputs)
    emptied = all(els.get(i, {}).get("value") == "" for i in inputs)
    return {"clearFields": _ok(cleared and emptied)}


BEHAVIORS: Dict[str, Behavior] = {
    "toggle_theme": Behavior("toggle_theme", THEME_FIXTURE, _toggle_theme),
    "calculate_emi": Behavior("calculate_emi", CALCULATOR_FIXTURE, _calculate_emi),
    "clear_fields": Behavior("clear_fields", CLEAR_FIXTURE, _clear_fields),
}


def run_behavior(script: str, behavior: str, *, timeout_ms: Optional[int] = None) -> CheckOutcome:
    found = BEHAVIORS.get(behavior)
    if found is None:
        raise RubricError(f"unknown behavior: {behavior!r}")
    with ScriptHost(found.fixture, timeout_ms=timeout_ms) as host:
        host.inject(script)
        return found.run(host)
