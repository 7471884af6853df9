"""Automated Readability Index scoring."""

import math
from dataclasses import dataclass


# Grade -> reading age. Anything past grade 13 is adult material.
AGE_RANGES = {
    1: "5-6",
    2: "6-7",
    3: "7-8",
    4: "8-9",
    5: "9-10",
    6: "10-11",
    7: "11-12",
    8: "12-13",
    9: "13-14",
    10: "14-15",
    11: "15-16",
    12: "16-17",
    13: "17-18",
}
ADULT_AGE_RANGE = "18+ (Adult)"

SENTENCE_TERMINATORS = ".!?"


@dataclass(frozen=True)
class TextStatistics:
    """Raw counts feeding the readability formula."""

    chars: int
    words: int
    sentences: int

    @property
    def chars_per_word(self) -> float:
        return self.chars / self.words

    @property
    def words_per_sentence(self) -> float:
        return self.words / self.sentences


@dataclass(frozen=True)
class Readability:
    """Grade level plus the matching reading-age label."""

    grade: int
    age_range: str

    @property
    def summary(self) -> str:
        return f"Reading Age: {self.age_range} (Grade {self.grade})"

    def __str__(self) -> str:
        return self.summary


def text_statistics(text: str) -> TextStatistics:
    """
    Count words, sentences and characters.

    Sentences are a tally of terminator characters, so "..." counts as
    three. Words and sentences are floored to 1 to keep the ratios defined.
    """
    words = len(text.split()) or 1
    sentences = sum(text.count(t) for t in SENTENCE_TERMINATORS) or 1
    chars = sum(1 for ch in text if not ch.isspace())
    return TextStatistics(chars=chars, words=words, sentences=sentences)


def age_range_for(grade: int) -> str:
    return AGE_RANGES.get(grade, ADULT_AGE_RANGE)


def score(text: str) -> Readability:
    """
    Score text with the Automated Readability Index.

    ari = 4.71 * chars/words + 0.5 * words/sentences - 21.43, rounded up
    and clamped to a minimum grade of 1.
    """
    stats = text_statistics(text)
    ari = 4.71 * stats.chars_per_word + 0.5 * stats.words_per_sentence - 21.43
    grade = max(1, math.ceil(ari))
    return Readability(grade=grade, age_range=age_range_for(grade))


def calculate_readability(text: str) -> str:
    """Readability summary line, e.g. 'Reading Age: 5-6 (Grade 1)'."""
    return score(text).summary
