from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, Optional

import pandas as pd

from tipsdash.charts import BAR_LAYOUT, ChartLayout, bar_chart, to_vega_spec
from tipsdash.scales import build_band_scale, build_linear_scale
from tipsdash.selection import SelectionState
from tipsdash.stats import compute_grouped_average

BAR_PADDING = 0.1


def compute_bar(
    table: Optional[pd.DataFrame],
    selection: SelectionState,
    *,
    layout: ChartLayout = BAR_LAYOUT,
) -> Dict[str, Any]:
    category_field = selection.target_category
    value_field = selection.active_field
    axis = {"x_label": category_field, "y_label": f"{value_field} (Average)"}
    if table is None or table.empty:
        return {"selection": asdict(selection), "loaded": False, "axis": axis, "bars": [], "charts": {}}

    agg = compute_grouped_average(table, category_field, value_field)
    categories = agg["category"].tolist()
    # NaN group means are ignored here; all-NaN leaves a [0, 0] domain.
    top = agg["value"].max(skipna=True)
    top = 0.0 if pd.isna(top) else float(top)

    x = build_band_scale(categories, [0, layout.inner_width], BAR_PADDING)
    y = build_linear_scale([0, top], [layout.inner_height, 0], nice=True)

    bars = []
    for rec in agg.to_dict(orient="records"):
        value = rec["value"]
        bar_y = y(value)
        bars.append(
            {
                "category": rec["category"],
                "value": value,
                "count": int(rec["count"]),
                "x": x(rec["category"]),
                "y": bar_y,
                "width": x.bandwidth,
                "height": layout.inner_height - bar_y,
            }
        )

    chart = bar_chart(bars, category_field, value_field, list(y.domain))
    return {
        "selection": asdict(selection),
        "loaded": True,
        "axis": axis,
        "y_domain": list(y.domain),
        "y_ticks": y.ticks(10),
        "bandwidth": x.bandwidth,
        "bars": bars,
        "charts": {"bar": to_vega_spec(chart)},
    }
