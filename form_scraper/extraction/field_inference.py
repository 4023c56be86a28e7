"""Deterministic form-field inference from extracted document text.

Runs an ordered list of line strategies over the text, deduplicates the
resulting candidates by label, and falls back to looser heuristics (or
a default field set) so the output is never empty.
"""

import re

from form_scraper.utils.logger import get_logger

from .field_types import FieldCandidate, FieldType, classify_field_type
from .strategies import LineContext, PatternStrategy, default_strategies

logger = get_logger(__name__)

_LOOSE_MARKER_RE = re.compile(r"[:?]")

DEFAULT_FIELDS: tuple[tuple[str, FieldType], ...] = (
    ("Full Name", FieldType.TEXT),
    ("Date of Birth", FieldType.DATE),
    ("Email Address", FieldType.EMAIL),
    ("Phone Number", FieldType.TEL),
    ("Address", FieldType.TEXTAREA),
)


def split_lines(text: str) -> list[str]:
    """Split text into stripped, non-empty lines."""
    return [line.strip() for line in text.splitlines() if line.strip()]


def deduplicate(candidates: list[FieldCandidate]) -> list[FieldCandidate]:
    """Keep the first candidate for each case-insensitive label."""
    seen: set[str] = set()
    unique: list[FieldCandidate] = []
    for candidate in candidates:
        key = candidate.label.casefold()
        if key in seen:
            continue
        seen.add(key)
        unique.append(candidate)
    return unique


class FieldInferenceEngine:
    """Infers form-field candidates from plain text without any LLM.

    Args:
        strategies: Line strategies in priority order. Defaults to
            :func:`default_strategies`.
        max_loose_fields: Cap on fields produced by the loose fallback.
        radio_lookahead: Lines a radio group may extend below its first
            option; only used when ``strategies`` is not given.
    """

    def __init__(
        self,
        strategies: list[PatternStrategy] | None = None,
        max_loose_fields: int = 10,
        radio_lookahead: int = 4,
    ) -> None:
        self.strategies = (
            strategies
            if strategies is not None
            else default_strategies(radio_lookahead=radio_lookahead)
        )
        self.max_loose_fields = max_loose_fields

    def infer(self, text: str) -> list[FieldCandidate]:
        """Infer an ordered, deduplicated, non-empty list of candidates.

        Args:
            text: Unified document text.

        Returns:
            Field candidates in document order.
        """
        lines = split_lines(text)
        logger.info("Inferring fields from %d lines", len(lines))

        candidates = self._scan(lines)
        if not candidates:
            logger.warning("No fields matched any strategy, using loose fallback")
            candidates = self._loose_candidates(lines)
        if not candidates:
            logger.warning("Loose fallback found nothing, using default fields")
            candidates = self._default_candidates()

        unique = deduplicate(candidates)
        logger.info(
            "Inferred %d fields (%d before deduplication)",
            len(unique),
            len(candidates),
        )
        return unique

    def _scan(self, lines: list[str]) -> list[FieldCandidate]:
        candidates: list[FieldCandidate] = []
        previous: FieldCandidate | None = None
        index = 0

        while index < len(lines):
            line = lines[index]
            earlier = candidates[:-1] if previous is not None else candidates
            context = LineContext(
                lines=lines,
                index=index,
                previous=previous,
                taken_labels=frozenset(c.label.casefold() for c in earlier),
            )
            previous = None

            for strategy in self.strategies:
                match = strategy.try_match(line, context)
                if match is None:
                    continue
                if match.replaces_previous and candidates:
                    candidates.pop()
                candidates.append(match.candidate)
                previous = match.candidate
                logger.debug(
                    "Line %d matched %s: %r", index + 1, strategy.name, match.candidate.label
                )
                index += max(1, match.consumed) - 1
                break

            index += 1

        return candidates

    def _loose_candidates(self, lines: list[str]) -> list[FieldCandidate]:
        candidates: list[FieldCandidate] = []
        for line in lines:
            if ":" not in line and not line.endswith("?"):
                continue
            label = _LOOSE_MARKER_RE.sub("", line).strip()
            if not label:
                continue
            candidates.append(
                FieldCandidate(label=label, type=classify_field_type(label))
            )
            if len(candidates) >= self.max_loose_fields:
                break
        return candidates

    @staticmethod
    def _default_candidates() -> list[FieldCandidate]:
        return [FieldCandidate(label=label, type=ftype) for label, ftype in DEFAULT_FIELDS]
