"""Tests for DashboardController selection flow

Uses a recording UI in place of Streamlit.
"""

import pytest

from dashboard_components.controller import DashboardController, SessionContext
from dashboard_components.export import EXPORT_FILE_NAME
from dashboard_components.loaders import (
    DatasetFetchError,
    DatasetShapeError,
    ManifestEmptyError,
    ManifestFetchError,
)
from settings import Settings


class RecordingUI:
    """Captures every render call the controller makes"""

    def __init__(self, choice=None):
        self.choice = choice
        self.selector_calls = []
        self.titles = []
        self.summaries = []
        self.charts = []
        self.tables = []
        self.exports = []
        self.errors = []
        self.clears = 0

    def week_selector(self, datasets, selected_file):
        self.selector_calls.append(([dataset.file for dataset in datasets], selected_file))
        return self.choice if self.choice is not None else selected_file

    def render_source_title(self, label, filename):
        self.titles.append((label, filename))

    def render_summary(self, summary):
        self.summaries.append(summary)

    def render_charts(self, summary, label):
        self.charts.append((summary, label))

    def render_table(self, grouping, collapsed, on_toggle):
        self.tables.append((grouping, set(collapsed), on_toggle))

    def render_export(self, data, file_name):
        self.exports.append((data, file_name))

    def render_error(self, path, error):
        self.errors.append((path, error))

    def clear_error(self):
        self.clears += 1


@pytest.fixture
def settings(data_dir):
    return Settings(data_dir=data_dir, manifest_file=data_dir / "manifest.json")


@pytest.fixture
def ui():
    return RecordingUI()


# Test initialize()


def test_initialize_selects_latest_week(settings, ui):
    controller = DashboardController(ui, settings)

    assert controller.initialize() is True
    assert ui.selector_calls == [(["safety-2025-w01.json", "safety-2025-w02.json"], "safety-2025-w02.json")]
    assert controller.context.selected_file == "safety-2025-w02.json"
    assert controller.context.summary.total == 7
    assert ui.titles == [("Week 02 — 2025", "safety-2025-w02.json")]
    assert ui.charts[-1][1] == "Week 02 — 2025"
    assert ui.errors == []


def test_initialize_uses_selector_choice(settings):
    ui = RecordingUI(choice="safety-2025-w01.json")
    controller = DashboardController(ui, settings)
    controller.initialize()

    summary = controller.context.summary
    assert (summary.total, summary.violations, summary.non_violations) == (2, 1, 1)
    assert [group.associate for group in controller.context.grouping.groups] == ["A", "B"]


def test_initialize_ignores_selection_outside_manifest(settings):
    ui = RecordingUI(choice="not-listed.json")
    controller = DashboardController(ui, settings)
    controller.initialize()

    assert controller.context.selected_file == "safety-2025-w02.json"


def test_initialize_remembers_previous_selection(settings, ui):
    context = SessionContext(selected_file="safety-2025-w01.json")
    DashboardController(ui, settings, context).initialize()

    assert ui.selector_calls[0][1] == "safety-2025-w01.json"


def test_initialize_missing_manifest_shows_error(data_dir, ui):
    manifest = data_dir / "missing.json"
    controller = DashboardController(ui, Settings(data_dir=data_dir, manifest_file=manifest))

    assert controller.initialize() is False
    path, error = ui.errors[0]
    assert path == str(manifest)
    assert isinstance(error, ManifestFetchError)
    assert ui.charts == []
    assert ui.selector_calls == []


def test_initialize_empty_manifest_shows_error(data_dir, ui, write_json):
    write_json(data_dir / "manifest.json", [])
    controller = DashboardController(ui, Settings(data_dir=data_dir, manifest_file=data_dir / "manifest.json"))

    assert controller.initialize() is False
    assert isinstance(ui.errors[0][1], ManifestEmptyError)


# Test select_week()


def test_select_week_failure_keeps_previous_view(settings, ui, caplog):
    controller = DashboardController(ui, settings)
    controller.initialize()
    previous_summary = controller.context.summary
    previous_grouping = controller.context.grouping

    with caplog.at_level("ERROR"):
        controller.select_week("safety-2025-w09.json")

    path, error = ui.errors[-1]
    assert path == str(settings.data_dir / "safety-2025-w09.json")
    assert isinstance(error, DatasetFetchError)
    assert "safety-2025-w09.json" in caplog.text
    assert controller.context.summary is previous_summary
    assert controller.context.grouping is previous_grouping
    assert controller.context.selected_file == "safety-2025-w02.json"
    assert ui.summaries[-1] is previous_summary


def test_select_week_clears_error_first(settings, ui):
    controller = DashboardController(ui, settings)
    controller.initialize()
    clears = ui.clears

    controller.select_week("safety-2025-w01.json")
    assert ui.clears == clears + 1


def test_select_week_recovers_after_failure(settings, ui):
    controller = DashboardController(ui, settings)
    controller.initialize()
    controller.select_week("safety-2025-w09.json")

    controller.select_week("safety-2025-w01.json")
    assert controller.context.selected_file == "safety-2025-w01.json"
    assert controller.context.summary.total == 2


def test_select_week_renders_export(settings, ui):
    controller = DashboardController(ui, settings)
    controller.initialize()

    data, file_name = ui.exports[-1]
    assert file_name == EXPORT_FILE_NAME
    assert data[:2] == b"PK"


# Test expand/collapse state


def test_collapse_and_expand_all(settings, ui):
    controller = DashboardController(ui, settings)
    controller.initialize()

    controller.collapse_all()
    assert controller.context.collapsed_groups == set(controller.context.grouping.associates)

    controller.expand_all()
    assert controller.context.collapsed_groups == set()


def test_toggle_group(settings, ui):
    controller = DashboardController(ui, settings)
    controller.initialize()
    on_toggle = ui.tables[-1][2]

    on_toggle("Bob")
    assert controller.context.collapsed_groups == {"Bob"}
    on_toggle("Bob")
    assert controller.context.collapsed_groups == set()


def test_collapse_state_survives_rerender_but_resets_on_week_change(settings, ui):
    controller = DashboardController(ui, settings)
    controller.initialize()
    controller.toggle_group("Bob")

    controller.select_week("safety-2025-w02.json")
    assert ui.tables[-1][1] == {"Bob"}

    controller.select_week("safety-2025-w01.json")
    assert controller.context.collapsed_groups == set()


def test_collapse_all_without_data_is_noop(settings, ui):
    controller = DashboardController(ui, settings)
    controller.collapse_all()
    assert controller.context.collapsed_groups == set()


def test_export_current_view_before_selection(settings, ui):
    assert DashboardController(ui, settings).export_current_view() is None


def test_select_week_with_nested_field_shows_error(data_dir, ui, write_json):
    write_json(data_dir / "manifest.json", ["s-2025-w01.json"])
    write_json(data_dir / "s-2025-w01.json", [{"Delivery Associate": {"name": "A"}}])
    controller = DashboardController(ui, Settings(data_dir=data_dir, manifest_file=data_dir / "manifest.json"))

    assert controller.initialize() is True
    path, error = ui.errors[-1]
    assert path == str(data_dir / "s-2025-w01.json")
    assert isinstance(error, DatasetShapeError)
    assert controller.context.summary is None
    assert ui.charts == []
