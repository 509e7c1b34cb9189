"""Shared helpers for the weekly safety dashboards."""

from __future__ import annotations

from typing import Any, List, Mapping, Tuple

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from dashboard_components.violations import ViolationSummary

HR_STYLE = "<hr style='border: 1px solid #808080;'>"

BAR_COLOR = "#F44336"

DATAFRAME_HEADER_HEIGHT = 38
DATAFRAME_ROW_HEIGHT = 35
DATAFRAME_BASE_PADDING = 16
DATAFRAME_MIN_ROWS = 1
DATAFRAME_MAX_HEIGHT = 900

FIX_CHECKLIST: Tuple[str, ...] = (
    "Create `data/manifest.json` listing the weekly JSON filenames",
    "Confirm weekly JSON files exist inside `data/`",
    "File names are case-sensitive and must include `.json`",
)


def calculate_dataframe_height(
    df: pd.DataFrame | None,
    *,
    row_height: int = DATAFRAME_ROW_HEIGHT,
    header_height: int = DATAFRAME_HEADER_HEIGHT,
    base_padding: int = DATAFRAME_BASE_PADDING,
    min_rows: int = DATAFRAME_MIN_ROWS,
    max_height: int | None = DATAFRAME_MAX_HEIGHT,
) -> int:
    """Estimate a reasonable height for Streamlit dataframes based on row count."""
    if row_height <= 0:
        row_height = DATAFRAME_ROW_HEIGHT
    if min_rows < 1:
        min_rows = DATAFRAME_MIN_ROWS

    row_count = 0 if df is None or df.empty else len(df)
    height = header_height + base_padding + (max(row_count, min_rows) * row_height)

    if max_height is not None:
        height = min(height, max_height)

    return int(height)


def render_dataframe(df: pd.DataFrame, *, max_height: int | None = DATAFRAME_MAX_HEIGHT, **st_kwargs: Any):
    """Render a dataframe with an auto-calculated height to reduce excessive scrolling."""
    return st.dataframe(
        df,
        use_container_width=True,
        height=calculate_dataframe_height(df, max_height=max_height),
        **st_kwargs,
    )


def render_divider() -> None:
    """Render a horizontal divider to keep the layout consistent."""
    st.markdown(HR_STYLE, unsafe_allow_html=True)


def render_summary_metrics(summary: ViolationSummary) -> None:
    col1, col2, col3 = st.columns(3)
    col1.metric("📌 Total Events", f"{summary.total}")
    col2.metric("🚨 Violations", f"{summary.violations}")
    col3.metric("✅ Non-Violations", f"{summary.non_violations}")


def sorted_categories(counts: Mapping[Any, int]) -> Tuple[List[str], List[int]]:
    """Category labels in alphabetical order with their matching counts."""
    names = sorted(counts, key=lambda name: (str(name).casefold(), str(name)))
    return [str(name) for name in names], [int(counts[name]) for name in names]


def build_bar_chart(
    counts: Mapping[Any, int],
    title: str,
    *,
    tickangle: int = -45,
    tick_size: int = 10,
    bottom_margin: int = 160,
) -> go.Figure:
    names, values = sorted_categories(counts)
    fig = go.Figure(go.Bar(x=names, y=values, marker=dict(color=BAR_COLOR)))
    fig.update_layout(
        title=title,
        plot_bgcolor="white",
        margin=dict(l=60, r=20, t=60, b=bottom_margin),
        title_x=0.05,
        yaxis=dict(title="Violations", showgrid=True, gridcolor="lightgray"),
    )
    fig.update_xaxes(tickangle=tickangle, tickfont=dict(size=tick_size), automargin=True, showgrid=False)
    return fig


def render_violation_charts(summary: ViolationSummary, label: str) -> None:
    col1, col2 = st.columns(2)

    with col1:
        fig_da = build_bar_chart(
            summary.per_associate,
            f"Violation Count per Delivery Associate – {label}",
        )
        st.plotly_chart(fig_da, use_container_width=True)

    with col2:
        fig_metric = build_bar_chart(
            summary.per_metric_type,
            f"Violation Count per Metric Type – {label}",
            tickangle=-30,
            tick_size=11,
            bottom_margin=130,
        )
        st.plotly_chart(fig_metric, use_container_width=True)


def format_error_message(path: str, error: Exception) -> str:
    lines: List[str] = [
        "**Dashboard could not load a required file.**",
        "",
        f"Tried to load: `{path}`",
        "",
        f"Error: `{error}`",
        "",
        "**Fix checklist:**",
    ]
    lines.extend(f"- {item}" for item in FIX_CHECKLIST)
    return "\n".join(lines)
