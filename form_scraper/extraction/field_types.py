"""Field candidates plus the keyword heuristics that type and flag them."""

import re
from dataclasses import dataclass
from enum import StrEnum


class FieldType(StrEnum):
    """Input types a form field can be rendered as."""

    TEXT = "text"
    EMAIL = "email"
    TEL = "tel"
    DATE = "date"
    TEXTAREA = "textarea"
    SELECT = "select"
    CHECKBOX = "checkbox"
    NUMBER = "number"
    RADIO = "radio"


@dataclass
class FieldCandidate:
    """A tentative form field produced by one pattern strategy."""

    label: str
    type: FieldType
    required: bool = False
    options: list[str] | None = None


# Checked in order; the first rule with a keyword inside the label wins.
_TYPE_RULES: list[tuple[tuple[str, ...], FieldType]] = [
    (("email",), FieldType.EMAIL),
    (("phone", "mobile", "contact"), FieldType.TEL),
    (("date", "birth", "dob"), FieldType.DATE),
    (("address", "description", "details"), FieldType.TEXTAREA),
    (("gender", "category", "select"), FieldType.SELECT),
    (("agree", "accept", "confirm"), FieldType.CHECKBOX),
    (("number", "age", "pin", "code"), FieldType.NUMBER),
]

_REQUIRED_MARKERS = ("*", "required", "mandatory", "(req)", "必須")

_TRAILING_LABEL_NOISE_RE = re.compile(r"[\s:*_]+$")
_LEADING_LABEL_NOISE_RE = re.compile(r"^[\s*]+")
_PUNCTUATION_ONLY_RE = re.compile(r"^[_\-:\s*]+$")

MIN_LABEL_LENGTH = 3
MAX_LABEL_LENGTH = 99


def classify_field_type(label: str) -> FieldType:
    """Infer a field's input type from keywords in its label.

    >>> classify_field_type("Email Address")
    <FieldType.EMAIL: 'email'>
    """
    lower = label.lower()
    for keywords, field_type in _TYPE_RULES:
        if any(keyword in lower for keyword in keywords):
            return field_type
    return FieldType.TEXT


def is_required(label: str, line: str = "") -> bool:
    """Check the label and its source line for a required marker."""
    combined = f"{label} {line}".lower()
    return any(marker in combined for marker in _REQUIRED_MARKERS)


def clean_label(text: str) -> str:
    """Strip trailing colons, asterisks, underscores and leading asterisks."""
    text = _TRAILING_LABEL_NOISE_RE.sub("", text)
    return _LEADING_LABEL_NOISE_RE.sub("", text).strip()


def is_valid_label(label: str) -> bool:
    return (
        MIN_LABEL_LENGTH <= len(label) <= MAX_LABEL_LENGTH
        and not _PUNCTUATION_ONLY_RE.match(label)
    )
