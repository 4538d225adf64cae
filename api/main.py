from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import date
import logging
import math
from typing import List, Literal

from fastapi import FastAPI, File, Query, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.responses import Response

from api.schemas import MetaRangesResponse, TrackerFiltersModel, UploadResponse, UploadStatusModel
from earnings import settings
from earnings.context import prepare_context
from earnings.errors import InvalidFilterError
from earnings.export import export_weekly_report
from earnings.filters import RANGES, TrackerFilters, normalize_filters
from earnings.ingest import EntryStore
from earnings.metrics_breakdown import compute_breakdown
from earnings.metrics_cycles import compute_cycle_progress
from earnings.metrics_overview import compute_overview

logger = logging.getLogger(__name__)

store = EntryStore()


@asynccontextmanager
async def lifespan(_: FastAPI):
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    status = store.load_file(settings.INITIAL_CSV_PATH)
    logger.info("Initial load: %s", status.message)
    yield


app = FastAPI(title="Earnings Tracker API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _filters_from_model(model: TrackerFiltersModel) -> TrackerFilters:
    return normalize_filters(model.model_dump())


def _context(filters: TrackerFilters) -> dict:
    entries, weeks = store.snapshot()
    return prepare_context(filters, entries, weeks)


def _json(data: object) -> JSONResponse:
    """Return JSON with NaN and infinite floats encoded as null."""

    def _safe_float(value: float) -> float | None:
        if math.isnan(value) or math.isinf(value):
            return None
        return value

    return JSONResponse(content=jsonable_encoder(data, custom_encoder={float: _safe_float}))


def _error(exc: Exception, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": str(exc), "type": type(exc).__name__})


@app.get("/meta/ranges")
def meta_ranges():
    return MetaRangesResponse(
        ranges=list(RANGES),
        default_range=settings.DEFAULT_TIME_RANGE,
        default_goal_hours_per_week=settings.DEFAULT_GOAL_HOURS_PER_WEEK,
        default_page_size=settings.DEFAULT_PAGE_SIZE,
    )


@app.get("/meta/status")
def meta_status():
    entries, weeks = store.snapshot()
    return _json({"entry_count": len(entries), "week_count": len(weeks)})


@app.post("/upload")
async def upload(files: List[UploadFile] = File(...)):
    statuses: List[UploadStatusModel] = []
    # One file at a time: each upload is merged against the previous result.
    for file in files:
        try:
            payload = await file.read()
        except Exception as exc:
            logger.exception("reading %s failed", file.filename)
            statuses.append(UploadStatusModel(ok=False, message=f"Error reading file: {exc}", source=file.filename))
            continue
        status = await run_in_threadpool(store.upload_bytes, payload, source=file.filename)
        statuses.append(UploadStatusModel(**asdict(status)))
    entries, weeks = store.snapshot()
    return UploadResponse(statuses=statuses, entry_count=len(entries), week_count=len(weeks))


@app.post("/overview")
def overview(filters: TrackerFiltersModel):
    try:
        f = _filters_from_model(filters)
        return _json(compute_overview(f, _context(f)))
    except InvalidFilterError as exc:
        return _error(exc, 400)
    except Exception as exc:
        logger.exception("overview failed")
        return _error(exc, 500)


@app.post("/breakdown")
def breakdown(
    filters: TrackerFiltersModel,
    view: Literal["weekly", "daily"] = Query(default="weekly"),
):
    try:
        f = _filters_from_model(filters)
        return _json(compute_breakdown(f, _context(f), view=view))
    except InvalidFilterError as exc:
        return _error(exc, 400)
    except Exception as exc:
        logger.exception("breakdown failed")
        return _error(exc, 500)


@app.post("/cycles")
def cycles(filters: TrackerFiltersModel):
    try:
        f = _filters_from_model(filters)
        return _json(compute_cycle_progress(f, _context(f)))
    except InvalidFilterError as exc:
        return _error(exc, 400)
    except Exception as exc:
        logger.exception("cycles failed")
        return _error(exc, 500)


@app.post("/export/weekly")
def export_weekly(filters: TrackerFiltersModel):
    try:
        f = _filters_from_model(filters)
    except InvalidFilterError as exc:
        return _error(exc, 400)
    _, weeks = store.snapshot()
    result = export_weekly_report(list(weeks), f.goal_hours_per_week, today=date.today())
    if not result.ok:
        return _json({"ok": False, "message": result.message})
    return Response(
        content=result.content.encode("utf-8"),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={result.filename}"},
    )
