"""Core (UI-agnostic) tips dashboard logic.

This package contains:
- data loading (CSV -> pandas)
- statistics (correlation matrix, grouped averages)
- scales (linear, band, color) for renderers
- selection state and its transitions
- panel compute functions (JSON-serializable payloads)
- chart helpers (Altair -> Vega-Lite spec dict)
"""
