from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Literal, Optional, Set, Tuple

from tipsdash.data import CATEGORY_FIELDS, NUMERIC_FIELDS

Panel = Literal["bar", "scatter"]

DEFAULT_CATEGORY = "sex"
DEFAULT_FIELD = "tip"


@dataclass(frozen=True)
class SelectionState:
    target_category: str = DEFAULT_CATEGORY
    active_field: str = DEFAULT_FIELD
    selected_cell: Optional[Tuple[str, str]] = None


def _pick(value: object, allowed: list[str], default: str) -> str:
    if value is None:
        return default
    s = str(value).strip().lower()
    return s if s in allowed else default


def normalize_selection(raw: Optional[dict]) -> SelectionState:
    raw = raw or {}
    target_category = _pick(raw.get("target_category"), CATEGORY_FIELDS, DEFAULT_CATEGORY)
    active_field = _pick(raw.get("active_field"), NUMERIC_FIELDS, DEFAULT_FIELD)

    selected_cell = None
    cell = raw.get("selected_cell")
    if cell and len(cell) == 2:
        a = _pick(cell[0], NUMERIC_FIELDS, "")
        b = _pick(cell[1], NUMERIC_FIELDS, "")
        if a and b:
            selected_cell = (a, b)

    return SelectionState(target_category=target_category, active_field=active_field, selected_cell=selected_cell)


# ---------------- Events ----------------
def select_category(state: SelectionState, category: str) -> SelectionState:
    if category not in CATEGORY_FIELDS:
        raise ValueError(f"unknown category field: {category!r}")
    return replace(state, target_category=category)


def select_field(state: SelectionState, field: str) -> SelectionState:
    if field not in NUMERIC_FIELDS:
        raise ValueError(f"unknown numeric field: {field!r}")
    return replace(state, active_field=field)


def click_cell(state: SelectionState, row: int, column: int) -> SelectionState:
    """Record a heatmap click by matrix position (row, column)."""
    n = len(NUMERIC_FIELDS)
    if not (0 <= row < n and 0 <= column < n):
        raise ValueError(f"cell ({row}, {column}) is outside the {n}x{n} matrix")
    return replace(state, selected_cell=(NUMERIC_FIELDS[row], NUMERIC_FIELDS[column]))


def scatter_fields(state: SelectionState) -> Optional[Tuple[str, str]]:
    return state.selected_cell


def dependent_outputs(prev: SelectionState, curr: SelectionState) -> Set[Panel]:
    out: Set[Panel] = set()
    if prev.target_category != curr.target_category or prev.active_field != curr.active_field:
        out.add("bar")
    if prev.selected_cell != curr.selected_cell:
        out.add("scatter")
    return out
