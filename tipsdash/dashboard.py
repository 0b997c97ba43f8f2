"""Everything the page shows, derived from the table and the current selection.

`compute_dashboard` is called again after every selection change and always
recomputes all panels; nothing derived from a selection is cached.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, Optional

import pandas as pd

from tipsdash.metrics_bar import compute_bar
from tipsdash.metrics_heatmap import compute_heatmap
from tipsdash.metrics_scatter import compute_scatter
from tipsdash.selection import SelectionState


def compute_dashboard(table: Optional[pd.DataFrame], selection: SelectionState) -> Dict[str, Any]:
    if table is None:
        return {"selection": asdict(selection), "loaded": False, "rows": 0, "heatmap": None, "bar": None, "scatter": None}

    return {
        "selection": asdict(selection),
        "loaded": True,
        "rows": int(len(table)),
        "heatmap": compute_heatmap(table, selection),
        "bar": compute_bar(table, selection),
        "scatter": compute_scatter(table, selection),
    }
