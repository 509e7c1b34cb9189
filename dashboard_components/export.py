from __future__ import annotations

import io

import pandas as pd

from dashboard_components.violations import DetailGrouping, build_detail_rows

EXPORT_FILE_NAME = "Weekly_Safety_Violations.xlsx"
EXPORT_SHEET_NAME = "Violations"
XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def export_detail_table(grouping: DetailGrouping) -> bytes:
    """Serialize the full detail table, collapsed groups included, to an xlsx workbook."""
    table = build_detail_rows(grouping)
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        table.to_excel(writer, sheet_name=EXPORT_SHEET_NAME, index=False)
    return buffer.getvalue()
