from __future__ import annotations
import uuid
from typing import Mapping

from .config import EMPTY_OUTCOME_POLICY
from .types import (
    Category,
    EmptyOutcomePolicy,
    ReportType,
    ResultRecord,
    Status,
    Verdict,
)


def _new_id() -> str:
    return str(uuid.uuid4())


def is_passing(outcome: Mapping[str, Verdict], policy: EmptyOutcomePolicy = EMPTY_OUTCOME_POLICY) -> bool:
    """True iff no verdict is fail. An empty outcome is decided by `policy`."""
    if not outcome:
        return policy is EmptyOutcomePolicy.VACUOUS_PASS
    return all(Verdict(v) is Verdict.PASS for v in outcome.values())


def normalize(
    outcome: Mapping[str, Verdict],
    name: str,
    category: Category,
    report_type: ReportType,
    *,
    empty_policy: EmptyOutcomePolicy = EMPTY_OUTCOME_POLICY,
) -> ResultRecord:
    passed = is_passing(outcome, empty_policy)
    return ResultRecord(
        id=_new_id(),
        name=name,
        category=category,
        report_type=report_type,
        max_score=1,
        earned_score=1 if passed else 0,
        status=Status.PASSED if passed else Status.FAILED,
        mandatory=True,
        error_message="",
    )


def error_record(name: str, category: Category, report_type: ReportType, exc: BaseException) -> ResultRecord:
    """Failed record for an entry whose check could not complete."""
    message = f"{type(exc).__name__}: {exc}" if str(exc) else type(exc).__name__
    return ResultRecord(
        id=_new_id(),
        name=name,
        category=category,
        report_type=report_type,
        max_score=1,
        earned_score=0,
        status=Status.FAILED,
        mandatory=True,
        error_message=message,
    )
