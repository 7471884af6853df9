"""
Sentence-level style highlighting ("Hemingway" analysis).

The text is split into paragraphs and punctuation-delimited pseudo-sentences.
Each pseudo-sentence gets a complexity tier from its word count, and two kinds
of inner spans are marked: adverbs (tokens ending in "ly") and passive voice
(a to-be auxiliary followed by a token ending in "ed").

Inner spans are resolved into a flat, non-overlapping list first and then
composited with the sentence tier in a single pass, so every output run
carries exactly one (tier, mark) pair and renderers never need nested styles.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Tuple

from rich.markup import escape
from rich.text import Text

from ..config.constants import HARD_SENTENCE_WORDS, VERY_HARD_SENTENCE_WORDS


class Tier(str, Enum):
    """Complexity tier of a pseudo-sentence."""

    NONE = "none"
    HARD = "hard"
    VERY_HARD = "very-hard"

    @classmethod
    def for_word_count(cls, word_count: int) -> 'Tier':
        if word_count > VERY_HARD_SENTENCE_WORDS:
            return cls.VERY_HARD
        if word_count > HARD_SENTENCE_WORDS:
            return cls.HARD
        return cls.NONE


class Mark(str, Enum):
    """Inner span classification inside a sentence."""

    ADVERB = "adverb"
    PASSIVE = "passive"


# Display colors. Marks win over the tier color for the runs they cover.
TIER_COLORS = {
    Tier.NONE: None,
    Tier.HARD: "yellow",
    Tier.VERY_HARD: "red",
}
MARK_COLORS = {
    Mark.ADVERB: "blue",
    Mark.PASSIVE: "green",
}

# Higher priority wins when two spans overlap
MARK_PRIORITY = {
    Mark.PASSIVE: 2,
    Mark.ADVERB: 1,
}

SENTENCE_RE = re.compile(r"[^.!?]*[.!?]+|[^.!?]+")
ADVERB_RE = re.compile(r"\b\w+ly\b", re.IGNORECASE)
PASSIVE_RE = re.compile(r"\b(?:am|are|is|was|were|be|been|being)\b\s+\w+ed\b", re.IGNORECASE)

COLOR_KEY = (
    "[u]COLOR KEY[/u]\n"
    "[blue]• Adverbs[/blue]\n"
    "[green]• Passive Voice[/green]\n"
    f"[yellow]• Hard Sentence (>{HARD_SENTENCE_WORDS} words)[/yellow]\n"
    f"[red]• Very Hard Sentence (>{VERY_HARD_SENTENCE_WORDS} words)[/red]"
)


@dataclass(frozen=True)
class Span:
    start: int
    end: int
    mark: Mark


@dataclass(frozen=True)
class Segment:
    """A run of output text with a single style."""

    text: str
    tier: Tier = Tier.NONE
    mark: Optional[Mark] = None

    @property
    def color(self) -> Optional[str]:
        if self.mark is not None:
            return MARK_COLORS[self.mark]
        return TIER_COLORS[self.tier]

    @property
    def style_class(self) -> str:
        """prompt_toolkit style class for this run."""
        if self.mark is not None:
            return f"class:analysis.{self.mark.value}"
        if self.tier is not Tier.NONE:
            return f"class:analysis.{self.tier.value}"
        return ""


@dataclass(frozen=True)
class Sentence:
    """A classified pseudo-sentence."""

    text: str
    word_count: int
    tier: Tier
    spans: Tuple[Span, ...]


class HighlightedText:
    """Result of highlight(): flat segments plus the per-sentence classification."""

    def __init__(self, segments: List[Segment], sentences: List[Sentence]):
        self.segments = segments
        self.sentences = sentences

    @property
    def plain(self) -> str:
        return "".join(segment.text for segment in self.segments)

    def to_markup(self) -> str:
        """Render as Rich markup, one flat tag per styled run."""
        parts = []
        for segment in self.segments:
            text = escape(segment.text)
            color = segment.color
            parts.append(f"[{color}]{text}[/{color}]" if color else text)
        return "".join(parts)

    def to_fragments(self) -> List[Tuple[str, str]]:
        """Render as prompt_toolkit formatted text."""
        return [(segment.style_class, segment.text) for segment in self.segments]

    def classification(self) -> List[Tuple[Tier, Tuple[Tuple[str, Mark], ...]]]:
        """Tier and marked substrings of every sentence, in order."""
        return [
            (s.tier, tuple((s.text[span.start:span.end], span.mark) for span in s.spans))
            for s in self.sentences
        ]

    def count(self, mark: Mark) -> int:
        return sum(1 for s in self.sentences for span in s.spans if span.mark is mark)

    def count_tier(self, tier: Tier) -> int:
        return sum(1 for s in self.sentences if s.tier is tier)

    def __str__(self) -> str:
        return self.to_markup()


def split_sentences(paragraph: str) -> List[str]:
    """
    Greedy punctuation-based segmentation.

    Each unit is a run of non-terminators followed by terminators, so every
    character of the paragraph lands in exactly one unit.
    """
    return SENTENCE_RE.findall(paragraph)


def find_spans(sentence: str) -> List[Span]:
    """Adverb and passive spans, resolved to a sorted non-overlapping list."""
    candidates = [Span(m.start(), m.end(), Mark.ADVERB) for m in ADVERB_RE.finditer(sentence)]
    candidates += [Span(m.start(), m.end(), Mark.PASSIVE) for m in PASSIVE_RE.finditer(sentence)]

    # Highest priority first, then leftmost; keep a span only if it is free
    candidates.sort(key=lambda s: (-MARK_PRIORITY[s.mark], s.start))
    chosen: List[Span] = []
    for span in candidates:
        if all(span.end <= other.start or span.start >= other.end for other in chosen):
            chosen.append(span)
    return sorted(chosen, key=lambda s: s.start)


def classify_sentence(text: str) -> Sentence:
    word_count = len(text.split())
    return Sentence(
        text=text,
        word_count=word_count,
        tier=Tier.for_word_count(word_count),
        spans=tuple(find_spans(text)),
    )


def _composite(sentence: Sentence) -> Iterator[Segment]:
    """Lay the inner spans over the sentence tier in one pass."""
    cursor = 0
    for span in sentence.spans:
        if span.start > cursor:
            yield Segment(sentence.text[cursor:span.start], sentence.tier)
        yield Segment(sentence.text[span.start:span.end], sentence.tier, span.mark)
        cursor = span.end
    if cursor < len(sentence.text):
        yield Segment(sentence.text[cursor:], sentence.tier)


def highlight(text: str) -> HighlightedText:
    """
    Classify every pseudo-sentence of text.

    Paragraphs (split on newline) are emitted one per line; blank paragraphs
    become blank lines. Within a paragraph sentences are stripped of
    surrounding whitespace and separated by a single space.
    """
    segments: List[Segment] = []
    sentences: List[Sentence] = []

    for paragraph in text.split("\n"):
        if not paragraph.strip():
            segments.append(Segment("\n"))
            continue

        first = True
        for unit in split_sentences(paragraph):
            unit = unit.strip()
            if not unit:
                continue
            if not first:
                segments.append(Segment(" "))
            first = False

            sentence = classify_sentence(unit)
            sentences.append(sentence)
            segments.extend(_composite(sentence))
        segments.append(Segment("\n"))

    return HighlightedText(segments, sentences)


def strip_markup(markup: str) -> str:
    """Remove Rich markup produced by HighlightedText.to_markup()."""
    return Text.from_markup(markup).plain
