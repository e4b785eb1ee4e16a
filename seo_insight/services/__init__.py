from .keyword_analysis import KeywordAnalysisService
from .prompt_builder import AnalysisStage, build_prompt
from .response_extractor import extract_keywords
from .url_normalization import SchemePrefixUrlNormalizer, UrlNormalizer

__all__ = [
    "AnalysisStage",
    "KeywordAnalysisService",
    "SchemePrefixUrlNormalizer",
    "UrlNormalizer",
    "build_prompt",
    "extract_keywords",
]
