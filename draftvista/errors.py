class DraftVistaError(Exception):
    """Base class for errors raised by the analysis pipeline."""


class ConfigurationError(DraftVistaError):
    """Missing credential or an oracle client that was never constructed."""


class InputError(DraftVistaError, ValueError):
    """Request is missing something the analysis needs (file, URL, comments)."""


class ExtractionError(DraftVistaError):
    """Text could not be pulled out of the uploaded manuscript."""


class UnsupportedFileType(ExtractionError):
    def __init__(self, message: str, extension: str = ""):
        super().__init__(message)
        self.extension = extension


class NoReadableText(ExtractionError):
    pass


class ScrapeError(DraftVistaError):
    """Raised inside the journal scraper; always converted to fallback metadata."""


class AnalysisError(DraftVistaError):
    """Oracle failure that survived the retry budget and was not judged transient."""

    def __init__(self, message: str, category: str = "analysis-failed"):
        super().__init__(message)
        self.category = category
