from __future__ import annotations

import io
from pathlib import Path
from typing import BinaryIO, Iterable, Union

from openpyxl import Workbook

from seo_insight.domain.models import KeywordRecord

SHEET_TITLE = "Keywords"
COLUMN_WIDTHS = {"A": 30, "B": 20, "C": 60}


def write_xlsx(records: Iterable[KeywordRecord], target: Union[str, Path, BinaryIO]) -> None:
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    ws.append(["Keyword", "Metrica", "Dettagli"])
    for r in records:
        ws.append([r.keyword, r.metric, r.details])

    for col, width in COLUMN_WIDTHS.items():
        ws.column_dimensions[col].width = width

    wb.save(target)


def xlsx_bytes(records: Iterable[KeywordRecord]) -> bytes:
    buf = io.BytesIO()
    write_xlsx(records, buf)
    return buf.getvalue()
