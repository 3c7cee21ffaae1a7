from __future__ import annotations

from harness_core.normalizer import error_record, is_passing, normalize
from harness_core.types import (
    Category,
    EmptyOutcomePolicy,
    ReportBatch,
    ReportType,
    Status,
    Verdict,
)


def test_any_fail_marks_record_failed():
    rec = normalize({"a": Verdict.PASS, "b": Verdict.FAIL}, "Tags", Category.STRUCTURAL, ReportType.BOUNDARY)
    assert rec.status is Status.FAILED
    assert rec.earned_score == 0
    assert rec.max_score == 1
    assert rec.mandatory is True
    assert rec.error_message == ""


def test_all_pass_marks_record_passed():
    rec = normalize({"a": Verdict.PASS}, "Tags", Category.STRUCTURAL, ReportType.BOUNDARY)
    assert rec.status is Status.PASSED
    assert rec.earned_score == 1


def test_rederivation_differs_only_by_id():
    outcome = {"x": Verdict.FAIL}
    first = normalize(outcome, "n", Category.BEHAVIORAL, ReportType.FUNCTIONAL)
    second = normalize(outcome, "n", Category.BEHAVIORAL, ReportType.FUNCTIONAL)
    assert first.id != second.id
    assert first.model_dump(exclude={"id"}) == second.model_dump(exclude={"id"})
    assert outcome == {"x": Verdict.FAIL}


def test_empty_outcome_policy():
    assert is_passing({}, EmptyOutcomePolicy.VACUOUS_PASS) is True
    assert is_passing({}, EmptyOutcomePolicy.FAIL) is False
    rec = normalize({}, "n", Category.STRUCTURAL, ReportType.BOUNDARY, empty_policy=EmptyOutcomePolicy.FAIL)
    assert rec.status is Status.FAILED


def test_error_record_carries_message():
    rec = error_record("n", Category.BEHAVIORAL, ReportType.FUNCTIONAL, ValueError("bad input"))
    assert rec.status is Status.FAILED
    assert rec.earned_score == 0
    assert rec.error_message == "ValueError: bad input"


def test_batch_wire_shape():
    rec = normalize({"a": Verdict.PASS}, "Link Test", Category.STRUCTURAL, ReportType.BOUNDARY)
    wire = ReportBatch.single(rec, annotation="note").to_wire()
    assert wire["customData"] == "note"
    assert wire["testCaseResults"] == {
        rec.id: {
            "methodName": "Link Test",
            "methodType": "boundary",
            "actualScore": 1,
            "earnedScore": 1,
            "status": "Passed",
            "isMandatory": True,
            "errorMessage": "",
        }
    }
