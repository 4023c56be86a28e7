"""Line-level pattern strategies for form-field inference.

Each strategy looks at one line (plus read-only context about the
surrounding lines) and either proposes a single :class:`FieldCandidate`
or declines. The inference engine evaluates strategies in list order
and keeps the first match, so precedence is the order of
:func:`default_strategies`.
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass

from .field_types import (
    MAX_LABEL_LENGTH,
    FieldCandidate,
    FieldType,
    classify_field_type,
    clean_label,
    is_required,
    is_valid_label,
)

# Common labels on identity and civil-registration forms.
KNOWN_FIELD_LABELS: tuple[str, ...] = (
    "LAST NAME",
    "FIRST NAME",
    "MIDDLE NAME",
    "SURNAME",
    "GIVEN NAME",
    "DATE OF BIRTH",
    "PLACE OF BIRTH",
    "GENDER",
    "SEX",
    "ADDRESS",
    "MAILING ADDRESS",
    "COMPLETE MAILING ADDRESS",
    "RESIDENTIAL ADDRESS",
    "OCCUPATION",
    "PRESENT OCCUPATION",
    "WORK ADDRESS",
    "EMAIL",
    "EMAIL ADD",
    "E-MAIL",
    "MOBILE",
    "MOBILE NO",
    "TEL NO",
    "TELEPHONE",
    "FATHER",
    "MOTHER",
    "SPOUSE",
    "WIFE",
    "HUSBAND",
    "CITIZENSHIP",
    "NATIONALITY",
    "CIVIL STATUS",
    "MARITAL STATUS",
    "PASSPORT",
    "ID",
    "OR NO",
    "SRV NO",
)

_KNOWN_LABEL_RE = re.compile(
    r"(?<![A-Z0-9])(?:"
    + "|".join(
        re.escape(label) for label in sorted(KNOWN_FIELD_LABELS, key=len, reverse=True)
    )
    + r")(?![A-Z0-9])"
)
_INSTRUCTION_WORDS = ("PLEASE", "PROVIDE")
_MAX_KEYWORD_LINE_LENGTH = 150

_BLANK_RUN_RE = re.compile(r"_{2,}")
_CHECKBOX_RE = re.compile(r"\[\s*\]|[☐□]")
_RADIO_RE = re.compile(r"\(\s*\)|[○◯]")
_COLON_LABEL_RE = re.compile(r"^[A-Za-z\s/()]+$")
_MAX_COLON_VALUE_LENGTH = 50


@dataclass(frozen=True)
class LineContext:
    """Read-only view of where a line sits in the document.

    Attributes:
        lines: All non-empty, stripped lines of the document.
        index: Position of the current line in ``lines``.
        previous: Candidate produced by the line directly above, if any.
        taken_labels: Casefolded labels of the candidates before
            ``previous``.
    """

    lines: Sequence[str]
    index: int
    previous: FieldCandidate | None = None
    taken_labels: frozenset[str] = frozenset()

    def following(self, limit: int) -> Sequence[str]:
        return self.lines[self.index + 1 : self.index + 1 + limit]

    @property
    def previous_line(self) -> str | None:
        return self.lines[self.index - 1] if self.index > 0 else None


@dataclass
class StrategyMatch:
    """A strategy's proposal for the current line.

    Attributes:
        candidate: The proposed field.
        consumed: Number of lines used, including the current one.
        replaces_previous: Whether the candidate supersedes the one
            produced by the line directly above.
    """

    candidate: FieldCandidate
    consumed: int = 1
    replaces_previous: bool = False


def has_choice_marker(line: str) -> bool:
    return bool(_CHECKBOX_RE.search(line) or _RADIO_RE.search(line))


def _option_text(line: str, marker_re: re.Pattern[str]) -> str:
    text = _BLANK_RUN_RE.sub(" ", marker_re.sub(" ", line))
    return clean_label(" ".join(text.split()))


def _split_radio_line(line: str) -> tuple[str, list[str]]:
    """Split a radio line into the caption before its first marker and its options.

    ``Sex ( ) Male ( ) Female`` gives ``("Sex", ["Male", "Female"])``. A
    marker written after its text (``Male ( )``) yields that text as the
    only option.
    """
    parts = [clean_label(" ".join(part.split())) for part in _RADIO_RE.split(line)]
    lead, options = parts[0], [part for part in parts[1:] if part]
    if not options and lead:
        return "", [lead]
    return lead, options


def _is_heading(candidate: FieldCandidate, line: str | None) -> bool:
    """Whether a candidate reads as a bare caption rather than a fill-in field."""
    if line is None or candidate.options is not None:
        return False
    if candidate.type in (FieldType.CHECKBOX, FieldType.RADIO):
        return False
    if _BLANK_RUN_RE.search(line):
        return False
    return ":" not in line or line.rstrip().endswith(":")


def _text_candidate(label: str, line: str) -> FieldCandidate:
    return FieldCandidate(
        label=label,
        type=classify_field_type(label),
        required=is_required(label, line),
    )


class PatternStrategy:
    """Base class for line strategies."""

    name = "pattern"

    def try_match(self, line: str, context: LineContext) -> StrategyMatch | None:
        raise NotImplementedError


class BlankLineStrategy(PatternStrategy):
    """``Label: ______`` - the text before a run of underscores."""

    name = "blank-line"

    def try_match(self, line: str, context: LineContext) -> StrategyMatch | None:
        if has_choice_marker(line):
            return None
        match = _BLANK_RUN_RE.search(line)
        if not match:
            return None
        label = clean_label(line[: match.start()])
        if not is_valid_label(label):
            return None
        return StrategyMatch(_text_candidate(label, line))


class KnownKeywordStrategy(PatternStrategy):
    """Lines mentioning a well-known form label such as ``DATE OF BIRTH``.

    Bilingual labels (``LAST NAME / APELYIDO``) keep only the part before
    the first slash; a value after a colon is dropped.
    """

    name = "known-keyword"

    def try_match(self, line: str, context: LineContext) -> StrategyMatch | None:
        upper = line.upper()
        if len(line) >= _MAX_KEYWORD_LINE_LENGTH or has_choice_marker(line):
            return None
        if any(word in upper for word in _INSTRUCTION_WORDS):
            return None
        if not _KNOWN_LABEL_RE.search(upper):
            return None

        label = line.split("/", 1)[0].split(":", 1)[0]
        label = clean_label(label)
        if not is_valid_label(label):
            return None
        return StrategyMatch(_text_candidate(label, line))


class ColonDelimitedStrategy(PatternStrategy):
    """``Label: value`` lines whose value is short or missing."""

    name = "colon-delimited"

    def try_match(self, line: str, context: LineContext) -> StrategyMatch | None:
        if ":" not in line or "http" in line or "//" in line:
            return None
        if has_choice_marker(line):
            return None

        raw_label, value = line.split(":", 1)
        label = clean_label(raw_label)
        if not is_valid_label(label) or not _COLON_LABEL_RE.match(label):
            return None
        if len(value.strip()) >= _MAX_COLON_VALUE_LENGTH:
            return None
        return StrategyMatch(_text_candidate(label, line))


class CheckboxStrategy(PatternStrategy):
    """``[ ] I agree`` style tick boxes."""

    name = "checkbox"

    def try_match(self, line: str, context: LineContext) -> StrategyMatch | None:
        if not _CHECKBOX_RE.search(line):
            return None
        label = _option_text(line, _CHECKBOX_RE)
        if not label or len(label) > MAX_LABEL_LENGTH:
            return None
        return StrategyMatch(
            FieldCandidate(
                label=label,
                type=FieldType.CHECKBOX,
                required=is_required(label, line),
            )
        )


class RadioGroupStrategy(PatternStrategy):
    """``( ) Option`` lines, grouped with the radio lines that follow.

    A group of two or more options becomes one radio field labeled
    ``Select <label>``. The label comes from text in front of the first
    marker (``Sex ( ) Male ( ) Female``), or else from a plain heading
    candidate on the line directly above (``Gender``), which the group
    then replaces. A heading whose label an earlier field already uses
    is left alone. A lone option degrades to a checkbox.

    Args:
        lookahead: Maximum number of following lines to collect.
    """

    name = "radio-group"

    def __init__(self, lookahead: int = 4) -> None:
        self.lookahead = lookahead

    def try_match(self, line: str, context: LineContext) -> StrategyMatch | None:
        if not _RADIO_RE.search(line):
            return None
        lead, options = _split_radio_line(line)
        if not options or len(options[0]) > MAX_LABEL_LENGTH:
            return None
        first = options[0]

        consumed = 1
        for next_line in context.following(self.lookahead):
            if not _RADIO_RE.search(next_line):
                break
            next_lead, next_options = _split_radio_line(next_line)
            # a caption in front of the markers starts a new group
            if next_lead and next_options:
                break
            consumed += 1
            options.extend(next_options)

        if len(options) < 2:
            return StrategyMatch(
                FieldCandidate(
                    label=first,
                    type=FieldType.CHECKBOX,
                    required=is_required(first, line),
                )
            )

        if is_valid_label(lead):
            return StrategyMatch(
                FieldCandidate(
                    label=f"Select {lead}",
                    type=FieldType.RADIO,
                    required=is_required(lead, line),
                    options=options,
                ),
                consumed=consumed,
            )

        heading = context.previous
        if (
            heading is not None
            and _is_heading(heading, context.previous_line)
            and heading.label.casefold() not in context.taken_labels
        ):
            return StrategyMatch(
                FieldCandidate(
                    label=f"Select {heading.label}",
                    type=FieldType.RADIO,
                    required=heading.required or is_required(first, line),
                    options=options,
                ),
                consumed=consumed,
                replaces_previous=True,
            )

        return StrategyMatch(
            FieldCandidate(
                label=f"Select {first}",
                type=FieldType.RADIO,
                required=is_required(first, line),
                options=options,
            ),
            consumed=consumed,
        )


def default_strategies(radio_lookahead: int = 4) -> list[PatternStrategy]:
    """Return the strategies in priority order."""
    return [
        BlankLineStrategy(),
        KnownKeywordStrategy(),
        ColonDelimitedStrategy(),
        CheckboxStrategy(),
        RadioGroupStrategy(lookahead=radio_lookahead),
    ]
