from __future__ import annotations

import pytest

from tipsdash.charts import BAR_LAYOUT, HEATMAP_LAYOUT, SCATTER_LAYOUT
from tipsdash.dashboard import compute_dashboard
from tipsdash.metrics_bar import compute_bar
from tipsdash.metrics_heatmap import compute_heatmap, format_correlation
from tipsdash.metrics_scatter import compute_scatter
from tipsdash.scales import HIGH_COLOR, LOW_COLOR
from tipsdash.selection import SelectionState, click_cell, select_category


def test_heatmap_cells(tips):
    payload = compute_heatmap(tips, SelectionState())
    assert payload["loaded"] is True
    assert payload["fields"] == ["tip", "total_bill", "size"]
    assert len(payload["cells"]) == 9

    step = HEATMAP_LAYOUT.inner_width / (3 - 0.01 + 0.02)
    first = payload["cells"][0]
    assert first["row"] == "tip" and first["column"] == "tip"
    assert first["label"] == "1.00"
    assert first["width"] == pytest.approx(step * 0.99)
    # rows run bottom-up, so the first row sits lowest
    assert first["y"] > payload["cells"][3]["y"]
    assert payload["charts"]["heatmap"]["layer"]


def test_heatmap_fill_spans_the_color_range(tips):
    payload = compute_heatmap(tips, SelectionState())
    lo, hi = payload["extent"]
    fills = {c["value"]: c["fill"] for c in payload["cells"]}
    assert fills[hi] == HIGH_COLOR
    assert fills[lo] == LOW_COLOR
    assert payload["legend"]["domain"] == [lo, hi]
    assert payload["legend"]["stops"][0]["offset"] == 0


def test_heatmap_marks_zero_variance_as_not_available(linear_table):
    payload = compute_heatmap(linear_table, click_cell(SelectionState(), 0, 1))
    by_pair = {(c["row"], c["column"]): c for c in payload["cells"]}
    assert by_pair[("tip", "size")]["label"] == "N/A"
    assert by_pair[("tip", "size")]["fill"] is None
    assert by_pair[("tip", "total_bill")]["label"] == "1.00"
    assert by_pair[("tip", "total_bill")]["selected"] is True


def test_format_correlation():
    assert format_correlation(0.456) == "0.46"
    assert format_correlation(float("nan")) == "N/A"
    assert format_correlation(None) == "N/A"


def test_bar_geometry(tips):
    payload = compute_bar(tips, SelectionState())
    assert payload["axis"] == {"x_label": "sex", "y_label": "tip (Average)"}
    assert [b["category"] for b in payload["bars"]] == ["Female", "Male"]
    assert [b["count"] for b in payload["bars"]] == [2, 6]
    assert payload["y_domain"] == [0.0, 3.5]

    male = payload["bars"][1]
    assert male["value"] == pytest.approx(3.265)
    assert male["height"] == pytest.approx(BAR_LAYOUT.inner_height * 3.265 / 3.5)
    assert male["y"] + male["height"] == pytest.approx(BAR_LAYOUT.inner_height)
    assert male["width"] == pytest.approx(payload["bandwidth"])
    assert payload["charts"]["bar"]["mark"]


def test_bar_follows_category_change(tips):
    payload = compute_bar(tips, select_category(SelectionState(), "day"))
    assert [b["category"] for b in payload["bars"]] == ["Sun", "Sat", "Thur", "Fri"]
    assert sum(b["count"] for b in payload["bars"]) == len(tips)


def test_scatter_waits_for_a_cell(tips):
    payload = compute_scatter(tips, SelectionState())
    assert payload["fields"] is None
    assert payload["points"] == []


def test_scatter_points(tips):
    payload = compute_scatter(tips, click_cell(SelectionState(), 0, 1))
    assert payload["fields"] == ["tip", "total_bill"]
    assert payload["title"] == "Scatterplot between tip and total_bill"
    assert payload["x_domain"] == [0.0, pytest.approx(4.08)]
    assert payload["y_domain"] == [0.0, pytest.approx(27.2)]
    assert len(payload["points"]) == len(tips)

    widest = max(payload["points"], key=lambda p: p["x"])
    assert widest["cx"] == pytest.approx(SCATTER_LAYOUT.inner_width)
    tallest = max(payload["points"], key=lambda p: p["y"])
    assert tallest["cy"] == pytest.approx(0)


def test_dashboard_recomputes_everything(tips):
    out = compute_dashboard(tips, click_cell(SelectionState(), 2, 1))
    assert out["loaded"] is True
    assert out["rows"] == len(tips)
    assert out["heatmap"]["loaded"] and out["bar"]["loaded"]
    assert out["scatter"]["fields"] == ["size", "total_bill"]


def test_dashboard_without_table():
    out = compute_dashboard(None, SelectionState())
    assert out["loaded"] is False
    assert out["heatmap"] is None and out["bar"] is None and out["scatter"] is None
    assert compute_bar(None, SelectionState())["bars"] == []
    assert compute_heatmap(None, SelectionState())["cells"] == []


def test_bar_with_blank_category_builds_a_chart(blank_sex_tips):
    payload = compute_bar(blank_sex_tips, SelectionState())
    assert [b["category"] for b in payload["bars"]] == ["N/A", "Male"]
    assert payload["charts"]["bar"]["encoding"]["x"]["sort"] == ["N/A", "Male"]
    assert all(b["x"] is not None for b in payload["bars"])


def test_scatter_on_empty_table_is_not_loaded(tips):
    selection = click_cell(SelectionState(), 0, 1)
    payload = compute_scatter(tips.iloc[0:0], selection)
    assert payload["loaded"] is False
    assert payload["points"] == []
    assert compute_scatter(None, selection)["loaded"] is False
