"""Turns inferred candidates into final field descriptors and sections.

Fields are grouped into fixed-size windows in document order. Positions
are synthesized placeholders, not geometry recovered from the page.
"""

from dataclasses import asdict, dataclass

from form_scraper.utils.logger import get_logger

from .field_types import FieldCandidate, FieldType

logger = get_logger(__name__)

FIRST_SECTION_TITLE = "Personal Information"

_ROW_HEIGHT = 50
_FIELD_WIDTH = 100
_FIELD_HEIGHT = 40

_FORMAT_HINTS: dict[FieldType, str] = {
    FieldType.EMAIL: "Enter a valid email address",
    FieldType.TEL: "Enter a phone number with area code",
    FieldType.DATE: "Enter a date",
    FieldType.NUMBER: "Enter digits only",
}


@dataclass(frozen=True)
class FieldPosition:
    """Sequential layout placeholder for a field."""

    page: int
    x: int
    y: int
    width: int
    height: int


@dataclass(frozen=True)
class FormFieldDescriptor:
    """A final, deduplicated form field."""

    id: str
    label: str
    type: FieldType
    section_id: str
    position: FieldPosition
    required: bool
    options: tuple[str, ...] | None = None
    validation_hint: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "label": self.label,
            "type": self.type.value,
            "section_id": self.section_id,
            "position": asdict(self.position),
            "required": self.required,
            "options": list(self.options) if self.options is not None else None,
            "validation_hint": self.validation_hint,
        }


@dataclass(frozen=True)
class Section:
    """An ordered group of fields."""

    id: str
    title: str
    order: int
    field_ids: tuple[str, ...]

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "title": self.title,
            "order": self.order,
            "field_ids": list(self.field_ids),
        }


def section_title(number: int) -> str:
    return FIRST_SECTION_TITLE if number == 1 else f"Section {number}"


def validation_hint(candidate: FieldCandidate) -> str | None:
    if candidate.required:
        return f"{candidate.label} is required"
    return _FORMAT_HINTS.get(candidate.type)


def build_descriptors(
    candidates: list[FieldCandidate], fields_per_section: int = 5
) -> list[FormFieldDescriptor]:
    """Assign ids, sections and placeholder positions to candidates.

    Args:
        candidates: Deduplicated candidates in document order.
        fields_per_section: Window size used to assign ``section_id``.

    Returns:
        Field descriptors in the same order.
    """
    descriptors: list[FormFieldDescriptor] = []
    for index, candidate in enumerate(candidates):
        section_number = index // fields_per_section + 1
        descriptors.append(
            FormFieldDescriptor(
                id=f"field_{index + 1}",
                label=candidate.label,
                type=candidate.type,
                section_id=f"section_{section_number}",
                position=FieldPosition(
                    page=1,
                    x=0,
                    y=index * _ROW_HEIGHT,
                    width=_FIELD_WIDTH,
                    height=_FIELD_HEIGHT,
                ),
                required=candidate.required,
                options=tuple(candidate.options) if candidate.options else None,
                validation_hint=validation_hint(candidate),
            )
        )
    return descriptors


def group_sections(
    fields: list[FormFieldDescriptor], fields_per_section: int = 5
) -> list[Section]:
    """Group fields into fixed-size sections.

    Args:
        fields: Field descriptors in order.
        fields_per_section: Maximum fields per section.

    Returns:
        Sections numbered from 1; the first is titled
        ``"Personal Information"``, the rest ``"Section N"``.
    """
    sections: list[Section] = []
    for start in range(0, len(fields), fields_per_section):
        number = start // fields_per_section + 1
        window = fields[start : start + fields_per_section]
        sections.append(
            Section(
                id=f"section_{number}",
                title=section_title(number),
                order=number,
                field_ids=tuple(f.id for f in window),
            )
        )
    logger.info("Grouped %d fields into %d sections", len(fields), len(sections))
    return sections
