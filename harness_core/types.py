from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, Field


class HarnessError(RuntimeError):
    """Base class for environment-level failures raised by the harness."""


class ArtifactLoadError(HarnessError):
    pass


class HostError(HarnessError):
    pass


class RubricError(HarnessError, ValueError):
    pass


class Verdict(str, Enum):
    PASS = "pass"
    FAIL = "fail"


class Category(str, Enum):
    STRUCTURAL = "structural"
    BEHAVIORAL = "behavioral"


class ReportType(str, Enum):
    FUNCTIONAL = "functional"
    BOUNDARY = "boundary"
    EXCEPTION = "exception"


class ArtifactSlice(str, Enum):
    MARKUP = "markup"
    STYLESHEET = "stylesheet"
    SCRIPT = "script"


class Status(str, Enum):
    PASSED = "Passed"
    FAILED = "Failed"


class EmptyOutcomePolicy(str, Enum):
    VACUOUS_PASS = "vacuous_pass"
    FAIL = "fail"


CheckOutcome = Dict[str, Verdict]


# ---- checker parameters (one variant per checker kind) ----
@dataclass(frozen=True)
class TagParams:
    tags: Tuple[str, ...]
    kind: Literal["tags"] = "tags"


@dataclass(frozen=True)
class AttributeParams:
    tag: str
    attributes: Tuple[str, ...]
    kind: Literal["attributes"] = "attributes"


@dataclass(frozen=True)
class StyleRule:
    selector: str
    properties: Tuple[Tuple[str, str], ...]


@dataclass(frozen=True)
class StyleParams:
    rules: Tuple[StyleRule, ...]
    kind: Literal["styles"] = "styles"


@dataclass(frozen=True)
class BehaviorParams:
    behavior: str
    kind: Literal["behavior"] = "behavior"


CheckParams = Union[TagParams, AttributeParams, StyleParams, BehaviorParams]

_DEFAULT_REPORT_TYPE = {
    Category.STRUCTURAL: ReportType.BOUNDARY,
    Category.BEHAVIORAL: ReportType.FUNCTIONAL,
}


@dataclass(frozen=True)
class RubricEntry:
    name: str
    category: Category
    params: CheckParams
    artifact: ArtifactSlice
    report_type: Optional[ReportType] = None

    @property
    def reporting(self) -> ReportType:
        return self.report_type or _DEFAULT_REPORT_TYPE[self.category]


@dataclass(frozen=True)
class ArtifactBundle:
    markup: str
    stylesheet: str
    script: str
    annotation: str = ""

    def select(self, part: ArtifactSlice) -> str:
        return getattr(self, part.value)


# ---- normalized results ----
class ResultRecord(BaseModel):
    id: str
    name: str
    category: Category
    report_type: ReportType
    max_score: int = 1
    earned_score: int = 0
    status: Status = Status.FAILED
    mandatory: bool = True
    error_message: str = ""

    def to_wire(self) -> Dict[str, object]:
        return {
            "methodName": self.name,
            "methodType": self.report_type.value,
            "actualScore": self.max_score,
            "earnedScore": self.earned_score,
            "status": self.status.value,
            "isMandatory": self.mandatory,
            "errorMessage": self.error_message,
        }


class ReportBatch(BaseModel):
    records: Dict[str, ResultRecord] = Field(default_factory=dict)
    annotation: str = ""

    @classmethod
    def single(cls, record: ResultRecord, annotation: str = "") -> "ReportBatch":
        return cls(records={record.id: record}, annotation=annotation)

    def only(self) -> ResultRecord:
        return next(iter(self.records.values()))

    def to_wire(self) -> Dict[str, object]:
        return {
            "testCaseResults": {rid: rec.to_wire() for rid, rec in self.records.items()},
            "customData": self.annotation,
        }


@dataclass
class EntryReport:
    entry: RubricEntry
    record: ResultRecord
    outcome: CheckOutcome = field(default_factory=dict)
    sink_errors: Dict[str, str] = field(default_factory=dict)
    published: bool = False


@dataclass
class RunSummary:
    entries: List[EntryReport] = field(default_factory=list)

    @property
    def passed(self) -> int:
        return sum(1 for e in self.entries if e.record.status is Status.PASSED)

    @property
    def failed(self) -> int:
        return sum(1 for e in self.entries if e.record.status is Status.FAILED and not e.record.error_message)

    @property
    def errored(self) -> int:
        return sum(1 for e in self.entries if e.record.error_message)
