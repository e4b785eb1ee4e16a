######## models.py
########

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


@dataclass(frozen=True)
class KeywordRecord:
    keyword: str
    metric: str                 # e.g. "Traffico Stimato (Alto)"
    details: str


class AnalysisState(str, Enum):
    IDLE = "IDLE"
    ANALYZING_CURRENT = "ANALYZING_CURRENT"
    ANALYZING_POTENTIAL = "ANALYZING_POTENTIAL"
    COMPLETE = "COMPLETE"
    ERROR = "ERROR"

    @property
    def is_active(self) -> bool:
        return self in (AnalysisState.ANALYZING_CURRENT, AnalysisState.ANALYZING_POTENTIAL)


@dataclass(frozen=True)
class AnalysisRun:
    url: str = ""
    current_keywords: Tuple[KeywordRecord, ...] = field(default_factory=tuple)
    potential_keywords: Tuple[KeywordRecord, ...] = field(default_factory=tuple)
    error: Optional[str] = None
