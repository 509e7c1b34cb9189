"""Weekly safety violations view."""

from __future__ import annotations

from typing import Any, Callable, List, Optional, Set

import streamlit as st

from dashboard_components.controller import DashboardController, SessionContext
from dashboard_components.export import XLSX_MIME
from dashboard_components.violations import (
    GRAND_TOTAL_LABEL,
    DetailGrouping,
    ViolationSummary,
    group_record_table,
)
from dashboard_components.weekly import Dataset
from dashboards.shared import (
    format_error_message,
    render_dataframe,
    render_divider,
    render_summary_metrics,
    render_violation_charts,
)
from settings import Settings

SESSION_KEY = "safety_dashboard_context"
WEEK_SELECT_KEY = "week_select"


class StreamlitDashboardUI:
    """Streamlit rendering for :class:`DashboardController`."""

    def __init__(self) -> None:
        self._error_slot = st.empty()
        self._expand_all: Optional[Callable[[], None]] = None
        self._collapse_all: Optional[Callable[[], None]] = None

    def bind_actions(self, expand_all: Callable[[], None], collapse_all: Callable[[], None]) -> None:
        self._expand_all = expand_all
        self._collapse_all = collapse_all

    def week_selector(self, datasets: List[Dataset], selected_file: str) -> str:
        files = [dataset.file for dataset in datasets]
        labels = {dataset.file: dataset.label for dataset in datasets}

        # A manifest edit can drop the remembered week.
        if st.session_state.get(WEEK_SELECT_KEY) not in files:
            st.session_state.pop(WEEK_SELECT_KEY, None)

        st.sidebar.subheader("Weekly Filters")
        return st.sidebar.selectbox(
            "Select Week",
            files,
            index=files.index(selected_file),
            format_func=lambda file: labels.get(file, file),
            key=WEEK_SELECT_KEY,
        )

    def render_source_title(self, label: str, filename: str) -> None:
        st.caption(f"Data Source: {label} ({filename})")

    def render_summary(self, summary: ViolationSummary) -> None:
        render_summary_metrics(summary)
        render_divider()

    def render_charts(self, summary: ViolationSummary, label: str) -> None:
        render_violation_charts(summary, label)
        render_divider()

    def render_table(
        self,
        grouping: DetailGrouping,
        collapsed: Set[Any],
        on_toggle: Callable[[Any], None],
    ) -> None:
        st.subheader("📄 Violation Details")

        col_expand, col_collapse, _ = st.columns([1, 1, 4])
        if self._expand_all is not None:
            col_expand.button("Expand All", key="expand_all", on_click=self._expand_all)
        if self._collapse_all is not None:
            col_collapse.button("Collapse All", key="collapse_all", on_click=self._collapse_all)

        if not grouping.groups:
            st.info("No review events recorded for this week.")

        for idx, group in enumerate(grouping.groups):
            is_collapsed = group.associate in collapsed
            arrow = "▶" if is_collapsed else "▼"
            st.button(
                f"{arrow} {group.header}",
                key=f"group_toggle_{idx}",
                on_click=on_toggle,
                args=(group.associate,),
            )
            if is_collapsed:
                continue
            render_dataframe(group_record_table(group), max_height=None)
            st.markdown(f"{group.subtotal_label}: **{group.subtotal}**")

        render_divider()
        st.markdown(f"**{GRAND_TOTAL_LABEL}: {grouping.grand_total}**")

    def render_export(self, data: Optional[bytes], file_name: str) -> None:
        if data is None:
            return
        st.download_button(
            label="💾 Download Excel",
            data=data,
            file_name=file_name,
            mime=XLSX_MIME,
        )

    def render_error(self, path: str, error: Exception) -> None:
        self._error_slot.error(format_error_message(path, error))

    def clear_error(self) -> None:
        self._error_slot.empty()


def _session_context() -> SessionContext:
    if SESSION_KEY not in st.session_state:
        st.session_state[SESSION_KEY] = SessionContext()
    return st.session_state[SESSION_KEY]


def render_weekly_dashboard(settings: Settings) -> None:
    st.title("🦺 Weekly Safety Violations Dashboard")
    render_divider()

    ui = StreamlitDashboardUI()
    controller = DashboardController(ui, settings, _session_context())
    ui.bind_actions(expand_all=controller.expand_all, collapse_all=controller.collapse_all)

    if not controller.initialize():
        st.warning("Weekly data is not available.")
