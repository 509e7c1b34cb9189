"""Violation classification, weekly summary counts and the per-associate detail grouping."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Union

import pandas as pd

UNKNOWN = "(Unknown)"
DEFAULT_REVIEW = "None"
DISPUTE_APPROVED = "Dispute Approved"

VIOLATION_STATUSES = ("None", "Dispute Denied", "Dispute Closed")

VIOLATION_LABEL = "Yes - Violation"
NO_VIOLATION_LABEL = "No - Violation (Dispute Approved)"

RECORD_COLUMNS = (
    "Date",
    "Delivery Associate",
    "Metric Type",
    "Metric Subtype",
    "Review Details",
)

DETAIL_RECORD_COLUMNS = [
    "Date",
    "Delivery Associate",
    "Metric Type",
    "Metric Subtype",
    "Violation",
]

DETAIL_TABLE_COLUMNS = ["Group", *DETAIL_RECORD_COLUMNS]

GRAND_TOTAL_LABEL = "GRAND TOTAL (Yes - Violation only)"

RecordsInput = Union[pd.DataFrame, Iterable[Mapping[str, Any]]]


@dataclass
class ViolationSummary:
    total: int = 0
    violations: int = 0
    non_violations: int = 0
    per_associate: Dict[Any, int] = field(default_factory=dict)
    per_metric_type: Dict[Any, int] = field(default_factory=dict)


@dataclass
class AssociateGroup:
    associate: Any
    records: pd.DataFrame
    subtotal: int

    @property
    def header(self) -> str:
        return f"{self.associate} — Violations: {self.subtotal}"

    @property
    def subtotal_label(self) -> str:
        return f"Subtotal – {self.associate} (counts Yes - Violation only)"


@dataclass
class DetailGrouping:
    groups: List[AssociateGroup] = field(default_factory=list)
    grand_total: int = 0

    @property
    def associates(self) -> List[Any]:
        return [group.associate for group in self.groups]


def is_violation(review_status: Any) -> bool:
    """Only the three enumerated statuses count; anything unrecognized does not."""
    return review_status in VIOLATION_STATUSES


def review_label(review_status: Any) -> str:
    # Display framing differs from is_violation: every status other than an
    # approved dispute reads as a violation.
    if review_status == DISPUTE_APPROVED:
        return NO_VIOLATION_LABEL
    return VIOLATION_LABEL


def _is_missing(value: Any) -> bool:
    return value is None or (pd.api.types.is_scalar(value) and pd.isna(value))


def _or_unknown(value: Any) -> Any:
    if _is_missing(value) or not value:
        return UNKNOWN
    return value


def _or_default_review(value: Any) -> Any:
    return DEFAULT_REVIEW if _is_missing(value) else value


def _or_blank(value: Any) -> Any:
    return "" if _is_missing(value) else value


def prepare_violation_frame(records: RecordsInput) -> pd.DataFrame:
    """Normalize raw review events and attach the ``Violation`` and ``Review Label`` columns."""
    if isinstance(records, pd.DataFrame):
        if "Violation" in records.columns and "Review Label" in records.columns:
            return records
        df = records.copy()
    else:
        df = pd.DataFrame([dict(record) for record in records], dtype=object)

    for col in RECORD_COLUMNS:
        if col not in df.columns:
            df[col] = None

    df["Delivery Associate"] = df["Delivery Associate"].map(_or_unknown).astype(object)
    df["Metric Type"] = df["Metric Type"].map(_or_unknown).astype(object)
    df["Review Details"] = df["Review Details"].map(_or_default_review).astype(object)
    for col in ("Date", "Metric Subtype"):
        df[col] = df[col].map(_or_blank).astype(object)

    df["Violation"] = df["Review Details"].map(is_violation).astype(bool)
    df["Review Label"] = df["Review Details"].map(review_label).astype(object)
    return df


def _count_by(series: pd.Series) -> Dict[Any, int]:
    return {key: int(count) for key, count in series.value_counts(sort=False).items()}


def summarize_violations(records: RecordsInput) -> ViolationSummary:
    df = prepare_violation_frame(records)
    violating = df[df["Violation"]]

    total = len(df)
    violations = len(violating)
    return ViolationSummary(
        total=total,
        violations=violations,
        non_violations=total - violations,
        per_associate=_count_by(violating["Delivery Associate"]),
        per_metric_type=_count_by(violating["Metric Type"]),
    )


def group_details(records: RecordsInput) -> DetailGrouping:
    """Group events by associate, most violations first.

    ``groupby(sort=False)`` keeps first-appearance order and ``list.sort`` is
    stable, so associates with equal subtotals stay in the order they first
    appear in the input.
    """
    df = prepare_violation_frame(records)

    groups: List[AssociateGroup] = []
    for associate, group_df in df.groupby("Delivery Associate", sort=False):
        groups.append(
            AssociateGroup(
                associate=associate,
                records=group_df.reset_index(drop=True),
                subtotal=int(group_df["Violation"].sum()),
            )
        )

    groups.sort(key=lambda group: group.subtotal, reverse=True)
    return DetailGrouping(groups=groups, grand_total=sum(group.subtotal for group in groups))


def group_record_table(group: AssociateGroup) -> pd.DataFrame:
    """Display rows for one associate, with the review status replaced by its label."""
    table = group.records[["Date", "Delivery Associate", "Metric Type", "Metric Subtype", "Review Label"]]
    table = table.rename(columns={"Review Label": "Violation"})
    table.index = range(1, len(table) + 1)
    return table


def build_detail_rows(grouping: DetailGrouping) -> pd.DataFrame:
    """Flatten the grouping into the rendered table: header, records and subtotal per group, then the grand total."""
    rows: List[Dict[str, Any]] = []
    blank = {col: "" for col in DETAIL_TABLE_COLUMNS}

    for group in grouping.groups:
        rows.append({**blank, "Group": group.header})
        for _, record in group.records.iterrows():
            rows.append(
                {
                    **blank,
                    "Date": record["Date"],
                    "Delivery Associate": record["Delivery Associate"],
                    "Metric Type": record["Metric Type"],
                    "Metric Subtype": record["Metric Subtype"],
                    "Violation": record["Review Label"],
                }
            )
        rows.append({**blank, "Group": group.subtotal_label, "Violation": group.subtotal})

    rows.append({**blank, "Group": GRAND_TOTAL_LABEL, "Violation": grouping.grand_total})
    return pd.DataFrame(rows, columns=DETAIL_TABLE_COLUMNS)
