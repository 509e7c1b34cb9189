"""Selection state and orchestration for the weekly safety dashboard.

The controller never talks to Streamlit directly. It drives an object that
implements :class:`DashboardUI`, so the load/aggregate/group flow can be
exercised with a recording fake.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Protocol, Set

from dashboard_components.export import EXPORT_FILE_NAME, export_detail_table
from dashboard_components.loaders import (
    DatasetLoadError,
    ManifestLoadError,
    load_dataset,
    load_manifest,
)
from dashboard_components.violations import (
    DetailGrouping,
    ViolationSummary,
    group_details,
    prepare_violation_frame,
    summarize_violations,
)
from dashboard_components.weekly import Dataset, build_datasets, find_dataset, latest_dataset
from settings import Settings

logger = logging.getLogger(__name__)


class DashboardUI(Protocol):
    def week_selector(self, datasets: List[Dataset], selected_file: str) -> str: ...

    def render_source_title(self, label: str, filename: str) -> None: ...

    def render_summary(self, summary: ViolationSummary) -> None: ...

    def render_charts(self, summary: ViolationSummary, label: str) -> None: ...

    def render_table(
        self,
        grouping: DetailGrouping,
        collapsed: Set[Any],
        on_toggle: Callable[[Any], None],
    ) -> None: ...

    def render_export(self, data: bytes, file_name: str) -> None: ...

    def render_error(self, path: str, error: Exception) -> None: ...

    def clear_error(self) -> None: ...


@dataclass
class SessionContext:
    datasets: List[Dataset] = field(default_factory=list)
    selected_file: Optional[str] = None
    summary: Optional[ViolationSummary] = None
    grouping: Optional[DetailGrouping] = None
    collapsed_groups: Set[Any] = field(default_factory=set)


class DashboardController:
    def __init__(self, ui: DashboardUI, settings: Settings, context: Optional[SessionContext] = None) -> None:
        self.ui = ui
        self.settings = settings
        self.context = context if context is not None else SessionContext()

    def initialize(self) -> bool:
        """Load the manifest, pick the active week and render it."""
        self.ui.clear_error()
        try:
            files = load_manifest(self.settings.manifest_file)
        except ManifestLoadError as exc:
            logger.error("Manifest load failed for %s: %s", exc.path, exc)
            self.ui.render_error(exc.path, exc)
            return False

        datasets = build_datasets(files)
        self.context.datasets = datasets

        default_file = self.context.selected_file
        if find_dataset(datasets, default_file) is None:
            default_file = latest_dataset(datasets).file

        choice = self.ui.week_selector(datasets, default_file)
        if find_dataset(datasets, choice) is None:
            logger.warning("Ignoring selection %r, not listed in the manifest", choice)
            choice = default_file

        self.select_week(choice)
        return True

    def select_week(self, filename: str) -> SessionContext:
        """Load one week and replace every derived view with it.

        On failure the previous summary and grouping stay in place; only the
        error panel changes.
        """
        self.ui.clear_error()

        dataset = find_dataset(self.context.datasets, filename)
        label = dataset.label if dataset else filename
        self.ui.render_source_title(label, filename)

        try:
            records = load_dataset(self.settings.data_dir, filename)
        except DatasetLoadError as exc:
            logger.error("Dataset load failed for %s: %s", exc.path, exc)
            self.ui.render_error(exc.path, exc)
            self.render_current_view()
            return self.context

        frame = prepare_violation_frame(records)
        summary = summarize_violations(frame)
        grouping = group_details(frame)

        collapsed = self.context.collapsed_groups
        if filename != self.context.selected_file:
            collapsed = set()

        self.context.selected_file = filename
        self.context.summary, self.context.grouping, self.context.collapsed_groups = (
            summary,
            grouping,
            collapsed,
        )
        logger.info(
            "Rendered %s: %d events, %d violations",
            filename,
            summary.total,
            summary.violations,
        )

        self.render_current_view()
        return self.context

    def render_current_view(self) -> None:
        if self.context.summary is None or self.context.grouping is None:
            return
        dataset = find_dataset(self.context.datasets, self.context.selected_file)
        label = dataset.label if dataset else str(self.context.selected_file)

        self.ui.render_summary(self.context.summary)
        self.ui.render_charts(self.context.summary, label)
        self.ui.render_table(self.context.grouping, self.context.collapsed_groups, self.toggle_group)
        self.ui.render_export(self.export_current_view(), EXPORT_FILE_NAME)

    def toggle_group(self, associate: Any) -> None:
        if associate in self.context.collapsed_groups:
            self.context.collapsed_groups.discard(associate)
        else:
            self.context.collapsed_groups.add(associate)

    def expand_all(self) -> None:
        self.context.collapsed_groups = set()

    def collapse_all(self) -> None:
        if self.context.grouping is None:
            return
        self.context.collapsed_groups = set(self.context.grouping.associates)

    def export_current_view(self) -> Optional[bytes]:
        if self.context.grouping is None:
            return None
        return export_detail_table(self.context.grouping)
