from __future__ import annotations

import csv
import io
from typing import Iterable, TextIO

from seo_insight.domain.models import KeywordRecord

HEADER_LINE = "Keyword,Metrica,Dettagli"


def write_csv(records: Iterable[KeywordRecord], fp: TextIO) -> None:
    """Plain header line, then every field double-quoted with embedded quotes doubled."""
    fp.write(HEADER_LINE + "\n")
    writer = csv.writer(fp, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerows([r.keyword, r.metric, r.details] for r in records)


def csv_bytes(records: Iterable[KeywordRecord]) -> bytes:
    buf = io.StringIO()
    write_csv(records, buf)
    return buf.getvalue().encode("utf-8")
