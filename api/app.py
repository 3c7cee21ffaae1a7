from __future__ import annotations
from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel, Field
import logging, typing as t

from .storage import (
    delete_result,
    list_results,
    load_result,
    save_result,
    utcnow_iso,
)

log = logging.getLogger(__name__)

app = FastAPI(title="Artifact Results Collector")


@app.get("/")
def root():
    return {"status": "ok", "service": "artifact-results-collector"}


# ---- Schemas (wire shape posted by harness_core.emitters.RemoteEmitter) ----
class TestCaseResult(BaseModel):
    methodName: str
    methodType: str
    actualScore: int = 1
    earnedScore: int = Field(ge=0)
    status: t.Literal["Passed", "Failed"]
    isMandatory: bool = True
    errorMessage: str = ""


class ResultsPush(BaseModel):
    testCaseResults: dict[str, TestCaseResult]
    customData: str = ""


# ---- Health ----
@app.get("/health")
def health():
    return {"stored_results": len(list_results())}


@app.post("/v1/mfa-results/push")
def push_results(payload: ResultsPush):
    if not payload.testCaseResults:
        raise HTTPException(422, "testCaseResults must contain at least one result")
    for rid, res in payload.testCaseResults.items():
        if res.earnedScore > res.actualScore:
            raise HTTPException(422, f"result {rid}: earnedScore exceeds actualScore")
    received = utcnow_iso()
    stored: list[str] = []
    for rid, res in payload.testCaseResults.items():
        body = {"testCaseResults": {rid: res.model_dump()}, "customData": payload.customData}
        metadata = {
            "methodName": res.methodName,
            "methodType": res.methodType,
            "status": res.status,
            "receivedAt": received,
        }
        save_result(rid, body, metadata)
        stored.append(rid)
    log.info("stored %d result(s)", len(stored))
    return {"ok": True, "stored": stored}


@app.get("/results")
def get_results(method_type: str | None = Query(None, description="Filter by methodType")):
    return {"results": list_results(method_type)}


@app.get("/results/{result_id}")
def get_result(result_id: str):
    result = load_result(result_id)
    if not result:
        raise HTTPException(404, "result not found")
    return result


@app.delete("/results/{result_id}")
def delete_result_endpoint(result_id: str):
    if not delete_result(result_id):
        raise HTTPException(404, "result not found")
    return {"ok": True}
