from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Iterable, List, NamedTuple, Optional

WEEK_PATTERN = re.compile(r"(\d{4}).*?w(\d{1,2})", re.ASCII)


class WeekInfo(NamedTuple):
    year: int
    week: int


@dataclass(frozen=True)
class Dataset:
    file: str
    label: str
    sort_key: float


def parse_week_info(filename: str) -> Optional[WeekInfo]:
    """Extract the (year, week) pair from names like ``amft-safety-2025-w01.json``."""
    match = WEEK_PATTERN.search(filename.lower())
    if not match:
        return None

    year = int(match.group(1))
    week = int(match.group(2))
    if not year or week < 1 or week > 53:
        return None

    return WeekInfo(year, week)


def week_label(filename: str) -> str:
    info = parse_week_info(filename)
    if info is None:
        return f"Unknown Week ({filename})"
    return f"Week {info.week:02d} — {info.year}"


def sort_key_for_week(filename: str) -> float:
    # year * 100 + week stays ordered only while week numbers fit in two digits.
    info = parse_week_info(filename)
    if info is None:
        return math.inf
    return info.year * 100 + info.week


def build_datasets(files: Iterable[str]) -> List[Dataset]:
    """Turn manifest entries into datasets ordered oldest to newest."""
    datasets = [
        Dataset(file=file, label=week_label(file), sort_key=sort_key_for_week(file))
        for file in files
    ]
    datasets.sort(key=lambda dataset: dataset.sort_key)
    return datasets


def latest_dataset(datasets: List[Dataset]) -> Optional[Dataset]:
    if not datasets:
        return None
    return datasets[-1]


def find_dataset(datasets: Iterable[Dataset], filename: Optional[str]) -> Optional[Dataset]:
    for dataset in datasets:
        if dataset.file == filename:
            return dataset
    return None
