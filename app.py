import logging
from contextlib import contextmanager
from typing import Any, Dict, Optional

import streamlit as st

from tipsdash import charts
from tipsdash.dashboard import compute_dashboard
from tipsdash.data import CATEGORY_FIELDS, NUMERIC_FIELDS, load_dashboard_data
from tipsdash.selection import SelectionState, click_cell, select_category, select_field

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

FIELD_LABELS = {"tip": "Tip", "total_bill": "Total Bill", "size": "Size"}
CATEGORY_LABELS = {"sex": "Sex", "smoker": "Smoker", "day": "Day", "time": "Time"}


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;margin-bottom: 8px;}
        .legend-row {display: flex;align-items: center;gap: 6px;font-size: 0.8rem;color: #374151;}
        .legend-swatch {width: 14px;height: 14px;border-radius: 2px;display: inline-block;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(target, title: str):
    container = target.container()
    container.markdown(f"<div class='card-title'>{title}</div>", unsafe_allow_html=True)
    body = container.container()
    with body:
        yield body


def get_selection() -> SelectionState:
    if "selection" not in st.session_state:
        st.session_state["selection"] = SelectionState()
    return st.session_state["selection"]


def set_selection(state: SelectionState) -> None:
    st.session_state["selection"] = state


def picked_cell(event: Any) -> Optional[Dict[str, str]]:
    if not event:
        return None
    picked = (event.get("selection") or {}).get("cell") or []
    return picked[0] if picked else None


# ---------- Panels (each draws into the target it is given) ----------
def render_bar(target, payload: Dict[str, Any]) -> None:
    with card(target, "Average by category"):
        if not payload or not payload.get("bars"):
            st.info("No data for this selection.")
            return
        chart = charts.bar_chart(payload["bars"], payload["axis"]["x_label"], payload["selection"]["active_field"], payload["y_domain"])
        st.altair_chart(chart, use_container_width=True)


def render_heatmap(target, payload: Dict[str, Any]) -> Optional[Dict[str, str]]:
    with card(target, "Correlation Matrix"):
        if not payload or not payload.get("cells"):
            st.info("Correlation matrix unavailable.")
            return None
        color = payload["color"]
        chart = charts.heatmap_chart(payload["cells"], payload["fields"], color["domain"], color["range"])
        event = st.altair_chart(chart, on_select="rerun", selection_mode="cell", key="heatmap")
        legend_html = "".join(
            f"<div class='legend-row'><span class='legend-swatch' style='background:{s['color']}'></span>{s['value']:.2f}</div>"
            for s in payload["legend"]["stops"]
        )
        st.markdown(legend_html, unsafe_allow_html=True)
        if any(c["label"] == "N/A" for c in payload["cells"]):
            st.caption("N/A: a field has zero variance or non-numeric values.")
        return picked_cell(event)


def render_scatter(target, payload: Dict[str, Any]) -> None:
    with card(target, payload.get("title") or "Scatterplot"):
        if not payload or not payload.get("fields"):
            st.info("Click a cell in the correlation matrix to compare two fields.")
            return
        x_field, y_field = payload["fields"]
        chart = charts.scatter_chart(payload["points"], x_field, y_field, payload["x_domain"], payload["y_domain"])
        st.altair_chart(chart, use_container_width=True)


# ---------- UI setup ----------
st.set_page_config(page_title="Tips Dashboard", layout="wide")
inject_base_styles()
st.title("Restaurant Tips Dashboard")

data_ctx = load_dashboard_data()
tips = data_ctx.get("tips")
if tips is None:
    st.error(f"Could not load the tips data: {data_ctx.get('error')}")
    st.stop()

selection = get_selection()
top = st.columns([1, 2, 1])
with top[1]:
    category = st.selectbox(
        "Select Target",
        options=CATEGORY_FIELDS,
        index=CATEGORY_FIELDS.index(selection.target_category),
        format_func=lambda c: CATEGORY_LABELS.get(c, c),
    )
if category != selection.target_category:
    selection = select_category(selection, category)
    set_selection(selection)

left, right = st.columns(2)
with left:
    field = st.radio(
        "Numeric field",
        options=NUMERIC_FIELDS,
        index=NUMERIC_FIELDS.index(selection.active_field),
        format_func=lambda f: FIELD_LABELS.get(f, f),
        horizontal=True,
    )
if field != selection.active_field:
    selection = select_field(selection, field)
    set_selection(selection)

derived = compute_dashboard(tips, selection)
render_bar(left, derived["bar"])
cell = render_heatmap(right, derived["heatmap"])

if cell and cell.get("row") in NUMERIC_FIELDS and cell.get("column") in NUMERIC_FIELDS:
    clicked = click_cell(selection, NUMERIC_FIELDS.index(cell["row"]), NUMERIC_FIELDS.index(cell["column"]))
    if clicked != selection:
        selection = clicked
        set_selection(selection)
        derived = compute_dashboard(tips, selection)

render_scatter(st.container(), derived["scatter"])
