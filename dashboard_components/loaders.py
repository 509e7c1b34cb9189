from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

from dashboard_components.violations import RECORD_COLUMNS

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class DashboardLoadError(Exception):
    """A required manifest or weekly file could not be loaded."""

    def __init__(self, path: PathLike, message: str) -> None:
        super().__init__(message)
        self.path = str(path)


class ManifestLoadError(DashboardLoadError):
    pass


class ManifestFetchError(ManifestLoadError):
    pass


class ManifestShapeError(ManifestLoadError):
    pass


class ManifestEmptyError(ManifestLoadError):
    pass


class DatasetLoadError(DashboardLoadError):
    pass


class DatasetFetchError(DatasetLoadError):
    pass


class DatasetShapeError(DatasetLoadError):
    pass


def read_json(path: PathLike) -> Any:
    """Read and decode a JSON file, raising ``OSError``/``ValueError`` on failure."""
    with open(path, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _fetch(path: Path, error_cls: type) -> Any:
    if not path.exists():
        raise error_cls(path, f"File not found: {path}")
    try:
        return read_json(path)
    except json.JSONDecodeError as exc:
        raise error_cls(path, f"Invalid JSON in {path}: {exc}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise error_cls(path, f"Unable to read {path}: {exc}") from exc


def _is_file_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


def load_manifest(manifest_path: PathLike) -> List[str]:
    """Return the weekly filenames listed in the manifest.

    The manifest is either a bare list of filenames or an object with a
    ``files`` list.
    """
    path = Path(manifest_path)
    payload = _fetch(path, ManifestFetchError)

    if isinstance(payload, dict) and "files" in payload:
        files = payload["files"]
    else:
        files = payload

    if not _is_file_list(files):
        raise ManifestShapeError(path, f"{path.name} must be an array OR {{ files: [...] }} of filenames")
    if not files:
        raise ManifestEmptyError(path, f"{path.name} is empty")

    logger.info("Loaded manifest %s with %d weekly files", path, len(files))
    return list(files)


def dataset_path(data_dir: PathLike, filename: str) -> Path:
    return Path(data_dir) / filename


def load_dataset(data_dir: PathLike, filename: str) -> List[Dict[str, Any]]:
    """Return the review events of one weekly file; a single object becomes a one-element list."""
    path = dataset_path(data_dir, filename)
    payload = _fetch(path, DatasetFetchError)

    if isinstance(payload, dict):
        records = [payload]
    elif isinstance(payload, list):
        records = payload
    else:
        raise DatasetShapeError(path, f"{filename} must contain a record object or a list of records")

    if not all(isinstance(record, dict) for record in records):
        raise DatasetShapeError(path, f"{filename} contains entries that are not record objects")

    for index, record in enumerate(records):
        nested = [col for col in RECORD_COLUMNS if isinstance(record.get(col), (dict, list))]
        if nested:
            raise DatasetShapeError(
                path, f"{filename} record {index} has non-text values for: {', '.join(nested)}"
            )

    logger.debug("Loaded %d records from %s", len(records), path)
    return records
