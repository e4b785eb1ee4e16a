from datetime import date
from typing import Optional

from seo_insight.services.prompt_builder import AnalysisStage

from .csv_export import csv_bytes, write_csv
from .xlsx_export import xlsx_bytes, write_xlsx

FILENAME_PREFIXES = {
    AnalysisStage.CURRENT_TRAFFIC: "current_traffic",
    AnalysisStage.POTENTIAL_GAP: "potential_opportunities",
}


def export_filename(stage: AnalysisStage, extension: str, today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"{FILENAME_PREFIXES[stage]}_keywords_{today.isoformat()}.{extension}"


__all__ = [
    "csv_bytes",
    "export_filename",
    "write_csv",
    "write_xlsx",
    "xlsx_bytes",
]
