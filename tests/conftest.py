"""
Pytest configuration and shared fixtures

Provides sample review events and temporary data directories with a manifest.
"""

import json

import pytest


@pytest.fixture
def sample_records():
    """Two-associate week: A has one violation, B an approved dispute"""
    return [
        {"Date": "1/1", "Delivery Associate": "A", "Metric Type": "Speeding", "Review Details": "None"},
        {"Date": "1/2", "Delivery Associate": "B", "Metric Type": "Speeding", "Review Details": "Dispute Approved"},
    ]


@pytest.fixture
def mixed_records():
    """Week with ties, missing fields and every review status"""
    return [
        {"Date": "1/1", "Delivery Associate": "Zed", "Metric Type": "Speeding", "Review Details": "Dispute Denied"},
        {"Date": "1/1", "Delivery Associate": "Amy", "Metric Type": "Seatbelt Off", "Review Details": "Dispute Closed"},
        {"Date": "1/2", "Delivery Associate": "", "Metric Type": "Speeding"},
        {"Date": "1/2", "Delivery Associate": "Zed", "Metric Type": None, "Review Details": "Dispute Approved"},
        {"Date": "1/3", "Delivery Associate": "Bob", "Metric Type": "Distraction", "Review Details": "None"},
        {"Date": "1/3", "Delivery Associate": "Bob", "Metric Type": "Distraction", "Review Details": "Dispute Denied"},
        {"Date": "1/4", "Metric Type": "Speeding", "Review Details": "Pending"},
    ]


def _write_json(path, payload):
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f)


@pytest.fixture
def write_json():
    """Write a JSON payload to a path"""
    return _write_json


@pytest.fixture
def data_dir(tmp_path, sample_records, mixed_records):
    """Data directory with a manifest listing two valid weeks"""
    directory = tmp_path / "data"
    directory.mkdir()
    _write_json(directory / "manifest.json", {"files": ["safety-2025-w02.json", "safety-2025-w01.json"]})
    _write_json(directory / "safety-2025-w01.json", sample_records)
    _write_json(directory / "safety-2025-w02.json", mixed_records)
    return directory
