"""Exception types raised inside the scraping pipeline.

Only :class:`DeadlineExceeded` ever reaches callers of
:class:`~form_scraper.ocr.document_processor.DocumentProcessor`; the
others mark degraded paths that the dispatcher recovers from.
"""


class FormScraperError(Exception):
    """Base class for all form scraper errors."""


class UnsupportedFormat(FormScraperError):
    """The declared content type is not one the dispatcher recognizes."""


class ExtractionFailure(FormScraperError):
    """A PDF or word-processing container could not be read."""


class OCRError(FormScraperError):
    """The recognition engine failed in a way that cannot be retried."""


class DeadlineExceeded(FormScraperError):
    """The caller-supplied time budget ran out mid-document."""
