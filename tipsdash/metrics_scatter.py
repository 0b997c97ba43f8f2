from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, Optional

import pandas as pd

from tipsdash.charts import SCATTER_LAYOUT, ChartLayout, scatter_chart, to_vega_spec
from tipsdash.scales import build_linear_scale
from tipsdash.selection import SelectionState, scatter_fields

AXIS_TICKS = 5


def _upper(series: pd.Series) -> float:
    top = series.max(skipna=True)
    return 0.0 if pd.isna(top) else float(top)


def compute_scatter(
    table: Optional[pd.DataFrame],
    selection: SelectionState,
    *,
    layout: ChartLayout = SCATTER_LAYOUT,
) -> Dict[str, Any]:
    pair = scatter_fields(selection)
    loaded = table is not None and not table.empty
    empty = {"selection": asdict(selection), "loaded": loaded, "fields": None, "title": None, "points": [], "charts": {}}
    if not loaded or pair is None:
        return empty

    x_field, y_field = pair
    xs = pd.to_numeric(table[x_field], errors="coerce")
    ys = pd.to_numeric(table[y_field], errors="coerce")

    x = build_linear_scale([0, _upper(xs)], [0, layout.inner_width])
    y = build_linear_scale([0, _upper(ys)], [layout.inner_height, 0])

    points = [
        {"x": float(a), "y": float(b), "cx": x(a), "cy": y(b)}
        for a, b in zip(xs.tolist(), ys.tolist())
    ]

    chart = scatter_chart(points, x_field, y_field, list(x.domain), list(y.domain))
    return {
        "selection": asdict(selection),
        "loaded": True,
        "fields": [x_field, y_field],
        "title": f"Scatterplot between {x_field} and {y_field}",
        "x_domain": list(x.domain),
        "y_domain": list(y.domain),
        "x_ticks": x.ticks(AXIS_TICKS),
        "y_ticks": y.ticks(AXIS_TICKS),
        "points": points,
        "charts": {"scatter": to_vega_spec(chart)},
    }
