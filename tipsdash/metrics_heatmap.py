from __future__ import annotations

import math
from dataclasses import asdict
from typing import Any, Dict, Optional

import pandas as pd

from tipsdash.charts import HEATMAP_LAYOUT, ChartLayout, heatmap_chart, to_vega_spec
from tipsdash.data import NUMERIC_FIELDS
from tipsdash.scales import build_band_scale, build_color_bar_scale, build_color_scale
from tipsdash.selection import SelectionState
from tipsdash.stats import compute_correlation_matrix, correlation_extent, correlation_records

LEGEND_TICKS = 10
CELL_PADDING = 0.01


def format_correlation(value: Optional[float]) -> str:
    if value is None or math.isnan(value):
        return "N/A"
    return f"{value:.2f}"


def compute_heatmap(
    table: Optional[pd.DataFrame],
    selection: SelectionState,
    *,
    layout: ChartLayout = HEATMAP_LAYOUT,
) -> Dict[str, Any]:
    if table is None or table.empty:
        return {"selection": asdict(selection), "loaded": False, "fields": [], "cells": [], "legend": {}, "charts": {}}

    fields = list(NUMERIC_FIELDS)
    matrix = compute_correlation_matrix(table, fields)
    extent = correlation_extent(matrix)
    color = build_color_scale(*(extent or (None, None)))
    color_bar = build_color_bar_scale(*(extent or (None, None)))

    x = build_band_scale(fields, [0, layout.inner_width], CELL_PADDING)
    y = build_band_scale(fields, [layout.inner_height, 0], CELL_PADDING)

    cells = []
    for rec in correlation_records(matrix):
        cells.append(
            {
                **rec,
                "x": x(rec["column"]),
                "y": y(rec["row"]),
                "width": x.bandwidth,
                "height": y.bandwidth,
                "fill": color(rec["value"]),
                "label": format_correlation(rec["value"]),
                "selected": selection.selected_cell == (rec["row"], rec["column"]),
            }
        )

    # Legend runs top to bottom from max to min, so stops come from the mirrored scale.
    legend_ticks = color_bar.ticks(LEGEND_TICKS)
    legend = {
        "domain": list(color_bar.domain),
        "stops": [
            {"offset": i / LEGEND_TICKS, "value": t, "color": color_bar(t)}
            for i, t in enumerate(legend_ticks)
        ],
        "labels": [
            {"value": t, "label": f"{t:.2f}", "y": layout.inner_height - i * layout.inner_height / LEGEND_TICKS}
            for i, t in enumerate(legend_ticks)
        ],
        "max_label": f"{color_bar.domain[1]:.2f}",
    }

    chart = heatmap_chart(cells, fields, list(color.domain), list(color.range))
    return {
        "selection": asdict(selection),
        "loaded": True,
        "fields": fields,
        "matrix": matrix.to_numpy().tolist(),
        "extent": list(extent) if extent else None,
        "color": {"domain": list(color.domain), "range": list(color.range)},
        "cells": cells,
        "legend": legend,
        "charts": {"heatmap": to_vega_spec(chart)},
    }
