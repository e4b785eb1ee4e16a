class KeywordAnalysisError(Exception):
    """Base class for failures inside one analysis stage."""


class ModelInvocationError(KeywordAnalysisError):
    """The model call failed or produced no text."""


class ResponseParseError(KeywordAnalysisError):
    """
    The model answered, but the text is not a JSON array of keyword records.
    raw_text is kept for diagnostics only and never shown to the user.
    """

    def __init__(self, message: str, raw_text: str):
        super().__init__(message)
        self.raw_text = raw_text
