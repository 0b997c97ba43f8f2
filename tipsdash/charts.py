from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

import altair as alt
import pandas as pd

alt.data_transformers.disable_max_rows()

POINT_COLOR = "steelblue"


@dataclass(frozen=True)
class Margin:
    top: int = 30
    right: int = 30
    bottom: int = 30
    left: int = 30


@dataclass(frozen=True)
class ChartLayout:
    width: int
    height: int
    margin: Margin = field(default_factory=Margin)

    @property
    def inner_width(self) -> int:
        return self.width - self.margin.left - self.margin.right

    @property
    def inner_height(self) -> int:
        return self.height - self.margin.top - self.margin.bottom


HEATMAP_LAYOUT = ChartLayout(300, 300, Margin(30, 30, 30, 30))
BAR_LAYOUT = ChartLayout(500, 300, Margin(20, 20, 50, 50))
SCATTER_LAYOUT = ChartLayout(1000, 300, Margin(30, 30, 60, 60))


def to_vega_spec(chart: alt.TopLevelMixin) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def heatmap_chart(cells: List[Dict[str, Any]], fields: List[str], color_domain: List[float], color_range: List[str]) -> alt.LayerChart:
    df = pd.DataFrame(cells, columns=["row", "column", "row_index", "column_index", "value", "label"])
    cell_pick = alt.selection_point(name="cell", fields=["row", "column"], on="click", empty=False)
    base = alt.Chart(df).encode(
        x=alt.X("column:N", title=None, sort=fields, axis=alt.Axis(labelAngle=0, ticks=False, domain=False)),
        y=alt.Y("row:N", title=None, sort=list(reversed(fields)), axis=alt.Axis(ticks=False, domain=False)),
    )
    rect = (
        base.mark_rect(stroke="black")
        .encode(
            color=alt.Color(
                "value:Q",
                title="r",
                scale=alt.Scale(domain=color_domain, range=color_range, interpolate="rgb"),
            ),
            strokeWidth=alt.condition(cell_pick, alt.value(2), alt.value(0)),
            tooltip=[
                alt.Tooltip("row:N", title="Row"),
                alt.Tooltip("column:N", title="Column"),
                alt.Tooltip("value:Q", title="Correlation", format=".2f"),
            ],
        )
        .add_params(cell_pick)
    )
    text = base.mark_text(baseline="middle", align="center", color="black").encode(text="label:N")
    return (rect + text).properties(width=HEATMAP_LAYOUT.inner_width, height=HEATMAP_LAYOUT.inner_height)


def bar_chart(bars: List[Dict[str, Any]], category_field: str, value_field: str, y_domain: List[float]) -> alt.Chart:
    categories = [str(b["category"]) for b in bars]
    df = pd.DataFrame(bars, columns=["category", "value", "count"])
    df["category"] = categories
    hover = alt.selection_point(fields=["category"], on="mouseover", empty="all")
    return (
        alt.Chart(df)
        .mark_bar()
        .encode(
            x=alt.X("category:N", title=category_field, sort=categories, axis=alt.Axis(labelAngle=0, grid=False)),
            y=alt.Y(
                "value:Q",
                title=f"{value_field} (Average)",
                scale=alt.Scale(domain=y_domain, nice=False),
                axis=alt.Axis(gridDash=[4, 4], domain=False, ticks=False),
            ),
            opacity=alt.condition(hover, alt.value(1), alt.value(0.6)),
            tooltip=[
                alt.Tooltip("category:N", title=category_field),
                alt.Tooltip("value:Q", title="Average", format=".2f"),
                alt.Tooltip("count:Q", title="Records"),
            ],
        )
        .add_params(hover)
        .properties(width=BAR_LAYOUT.inner_width, height=BAR_LAYOUT.inner_height)
    )


def scatter_chart(points: List[Dict[str, Any]], x_field: str, y_field: str, x_domain: List[float], y_domain: List[float]) -> alt.Chart:
    df = pd.DataFrame(points, columns=["x", "y"])
    return (
        alt.Chart(df)
        .mark_circle(size=78, color=POINT_COLOR, opacity=0.8)
        .encode(
            x=alt.X("x:Q", title=x_field, scale=alt.Scale(domain=x_domain, nice=False), axis=alt.Axis(tickCount=5)),
            y=alt.Y("y:Q", title=y_field, scale=alt.Scale(domain=y_domain, nice=False), axis=alt.Axis(tickCount=5)),
            tooltip=[alt.Tooltip("x:Q", title=x_field), alt.Tooltip("y:Q", title=y_field)],
        )
        .properties(width=SCATTER_LAYOUT.inner_width, height=SCATTER_LAYOUT.inner_height)
    )
