"""Detection of supporting documents a form asks the applicant to attach.

Scans text against a fixed keyword table. Patterns are tried from most
to least specific and every match is masked out of the text, so
"passport size photo" is not also reported as a plain "passport".
"""

import re
from dataclasses import dataclass

from form_scraper.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_ACCEPTED_FORMATS: tuple[str, ...] = ("pdf", "jpg", "jpeg", "png")
DEFAULT_MAX_SIZE_BYTES = 5 * 1024 * 1024


@dataclass(frozen=True)
class DocumentPattern:
    """One row of the required-document table."""

    pattern: re.Pattern[str]
    name: str
    type: str
    description: str


@dataclass(frozen=True)
class RequiredDocumentEntry:
    """A supporting document the form requires."""

    id: str
    name: str
    type: str
    description: str
    required: bool = True
    accepted_formats: tuple[str, ...] = DEFAULT_ACCEPTED_FORMATS
    max_size_bytes: int = DEFAULT_MAX_SIZE_BYTES

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "description": self.description,
            "required": self.required,
            "accepted_formats": list(self.accepted_formats),
            "max_size_bytes": self.max_size_bytes,
        }


def _p(regex: str) -> re.Pattern[str]:
    return re.compile(regex, re.IGNORECASE)


# Most specific first: earlier rows mask text from later ones.
DOCUMENT_PATTERNS: tuple[DocumentPattern, ...] = (
    DocumentPattern(
        _p(r"passport[\s-]*(?:size[d]?[\s-]*)?photo(?:graph)?s?"),
        "Passport Size Photo",
        "other",
        "Recent passport-sized photograph",
    ),
    DocumentPattern(_p(r"passport"), "Passport", "passport", "Valid passport document"),
    DocumentPattern(
        _p(r"\bpan\s*card"), "PAN Card", "pan-card", "Permanent Account Number card"
    ),
    DocumentPattern(
        _p(r"aadhaa?r"), "Aadhaar Card", "citizenship", "Aadhaar identification card"
    ),
    DocumentPattern(
        _p(r"voter\s*id"), "Voter ID", "voter-id", "Voter identification card"
    ),
    DocumentPattern(
        _p(r"driving\s*licen[cs]e|driver'?s\s*licen[cs]e"),
        "Driving License",
        "driving-license",
        "Valid driving license",
    ),
    DocumentPattern(
        _p(r"photo\s*id"),
        "Photo ID",
        "other",
        "Government-issued photo identification",
    ),
    DocumentPattern(
        _p(r"\b(?:national\s*)?id(?:entity)?\s*card"),
        "National ID Card",
        "citizenship",
        "Government-issued identity card",
    ),
    DocumentPattern(
        _p(r"birth\s*certificate"),
        "Birth Certificate",
        "other",
        "Official birth certificate",
    ),
    DocumentPattern(
        _p(r"address\s*proof|proof\s*of\s*address"),
        "Address Proof",
        "other",
        "Document verifying residential address",
    ),
    DocumentPattern(
        _p(r"income\s*certificate"),
        "Income Certificate",
        "other",
        "Certificate of income",
    ),
    DocumentPattern(
        _p(r"bank\s*statement"),
        "Bank Statement",
        "other",
        "Recent bank account statement",
    ),
    DocumentPattern(
        _p(r"utility\s*bill"),
        "Utility Bill",
        "other",
        "Electricity/water bill for address proof",
    ),
)


class RequiredDocumentExtractor:
    """Finds required supporting documents mentioned in form text.

    Args:
        patterns: Keyword table, most specific first.
        accepted_formats: File extensions accepted for every entry.
        max_size_bytes: Upload size limit for every entry.
    """

    def __init__(
        self,
        patterns: tuple[DocumentPattern, ...] = DOCUMENT_PATTERNS,
        accepted_formats: tuple[str, ...] | list[str] = DEFAULT_ACCEPTED_FORMATS,
        max_size_bytes: int = DEFAULT_MAX_SIZE_BYTES,
    ) -> None:
        self.patterns = patterns
        self.accepted_formats = tuple(accepted_formats)
        self.max_size_bytes = max_size_bytes

    def extract(self, text: str) -> list[RequiredDocumentEntry]:
        """Return one entry per document type mentioned in ``text``.

        Args:
            text: Full document text.

        Returns:
            Entries in table order.
        """
        remaining = text
        entries: list[RequiredDocumentEntry] = []

        for index, doc in enumerate(self.patterns):
            if not doc.pattern.search(remaining):
                continue
            remaining = doc.pattern.sub(
                lambda m: " " * len(m.group(0)), remaining
            )
            entries.append(
                RequiredDocumentEntry(
                    id=f"doc_{index}",
                    name=doc.name,
                    type=doc.type,
                    description=doc.description,
                    required=True,
                    accepted_formats=self.accepted_formats,
                    max_size_bytes=self.max_size_bytes,
                )
            )

        logger.info("Found %d required documents", len(entries))
        return entries
