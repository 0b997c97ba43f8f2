from __future__ import annotations

import logging
import math

import numpy as np
import pandas as pd
from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from api.schemas import (
    CategoryChanged,
    CellClicked,
    FieldChanged,
    MetaFieldsResponse,
    SelectionEventRequest,
    SelectionEventResponse,
    SelectionModel,
)
from tipsdash.dashboard import compute_dashboard
from tipsdash.data import CATEGORY_FIELDS, NUMERIC_FIELDS, load_dashboard_data
from tipsdash.metrics_bar import compute_bar
from tipsdash.metrics_heatmap import compute_heatmap
from tipsdash.metrics_scatter import compute_scatter
from tipsdash.selection import (
    SelectionState,
    click_cell,
    dependent_outputs,
    normalize_selection,
    select_category,
    select_field,
)
from tipsdash.stats import compute_correlation_matrix, compute_grouped_average


app = FastAPI(title="Tips Dashboard API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class DataUnavailable(RuntimeError):
    pass


def _selection_from_model(model: SelectionModel) -> SelectionState:
    return normalize_selection(model.model_dump())


def _tips() -> pd.DataFrame:
    data_ctx = load_dashboard_data()
    tips = data_ctx.get("tips")
    if tips is None:
        raise DataUnavailable(data_ctx.get("error") or "tips data is not loaded")
    return tips


def _json(data: object) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
            },
        )
    )


def _error(exc: Exception, status_code: int = 500) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": str(exc), "type": type(exc).__name__})


@app.get("/meta/fields", response_model=MetaFieldsResponse)
def meta_fields():
    return MetaFieldsResponse(numeric_fields=list(NUMERIC_FIELDS), category_fields=list(CATEGORY_FIELDS))


@app.get("/meta/status")
def meta_status():
    data_ctx = load_dashboard_data()
    tips = data_ctx.get("tips")
    return _json(
        {
            "loaded": tips is not None,
            "rows": int(len(tips)) if tips is not None else 0,
            "files": data_ctx.get("files", []),
            "error": data_ctx.get("error"),
        }
    )


@app.post("/heatmap")
def heatmap(selection: SelectionModel):
    try:
        return _json(compute_heatmap(_tips(), _selection_from_model(selection)))
    except DataUnavailable as exc:
        return _error(exc, 503)
    except Exception as exc:
        logger.exception("heatmap failed")
        return _error(exc)


@app.post("/bar")
def bar(selection: SelectionModel):
    try:
        return _json(compute_bar(_tips(), _selection_from_model(selection)))
    except DataUnavailable as exc:
        return _error(exc, 503)
    except Exception as exc:
        logger.exception("bar failed")
        return _error(exc)


@app.post("/scatter")
def scatter(selection: SelectionModel):
    try:
        return _json(compute_scatter(_tips(), _selection_from_model(selection)))
    except DataUnavailable as exc:
        return _error(exc, 503)
    except Exception as exc:
        logger.exception("scatter failed")
        return _error(exc)


@app.post("/dashboard")
def dashboard(selection: SelectionModel):
    try:
        return _json(compute_dashboard(_tips(), _selection_from_model(selection)))
    except DataUnavailable as exc:
        return _error(exc, 503)
    except Exception as exc:
        logger.exception("dashboard failed")
        return _error(exc)


@app.post("/selection/events", response_model=SelectionEventResponse)
def selection_event(request: SelectionEventRequest):
    prev = _selection_from_model(request.selection)
    event = request.event
    try:
        if isinstance(event, CategoryChanged):
            curr = select_category(prev, event.category)
        elif isinstance(event, FieldChanged):
            curr = select_field(prev, event.field)
        elif isinstance(event, CellClicked):
            curr = click_cell(prev, event.row, event.column)
        else:
            raise ValueError(f"unsupported event: {event!r}")
    except ValueError as exc:
        return _error(exc, 422)

    return SelectionEventResponse(
        selection=SelectionModel(
            target_category=curr.target_category,
            active_field=curr.active_field,
            selected_cell=curr.selected_cell,
        ),
        invalidated=sorted(dependent_outputs(prev, curr)),
    )


@app.get("/export/{page}")
def export_page(page: str, target_category: str = "sex", active_field: str = "tip"):
    try:
        tips = _tips()
    except DataUnavailable as exc:
        return _error(exc, 503)

    filename = f"{page}.csv"
    if page == "tips":
        export_df = tips
    elif page == "correlation":
        export_df = compute_correlation_matrix(tips).rename_axis("field").reset_index()
    elif page == "bar":
        selection = normalize_selection({"target_category": target_category, "active_field": active_field})
        export_df = compute_grouped_average(tips, selection.target_category, selection.active_field)
        filename = f"bar_{selection.target_category}_{selection.active_field}.csv"
    else:
        return _error(ValueError(f"unknown export page: {page}"), 404)

    csv_bytes = export_df.to_csv(index=False).encode("utf-8")
    return Response(content=csv_bytes, media_type="text/csv", headers={"Content-Disposition": f"attachment; filename={filename}"})
