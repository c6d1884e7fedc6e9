"""FastAPI application exposing the invoice engine."""
from __future__ import annotations

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .paginator import InvalidPageSizeError
from .pipeline import prepare_from_request
from .schemas import ConsistencyReport, InvoiceComputation, InvoiceRequest
from .validator import InvoiceConsistencyChecker

app = FastAPI(title="Invoice Engine", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _compute(request: InvoiceRequest) -> InvoiceComputation:
    try:
        return prepare_from_request(request)
    except InvalidPageSizeError as exc:
        raise HTTPException(status_code=422, detail=str(exc))


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/compute", response_model=InvoiceComputation, response_model_by_alias=True)
def compute(request: InvoiceRequest):
    return _compute(request)


@app.post("/check", response_model=ConsistencyReport, response_model_by_alias=True)
def check(request: InvoiceRequest):
    computation = _compute(request)
    return InvoiceConsistencyChecker(tolerance=get_settings().tolerance).check(computation)
