from .errors import KeywordAnalysisError, ModelInvocationError, ResponseParseError
from .models import AnalysisRun, AnalysisState, KeywordRecord

__all__ = [
    "AnalysisRun",
    "AnalysisState",
    "KeywordRecord",
    "KeywordAnalysisError",
    "ModelInvocationError",
    "ResponseParseError",
]
