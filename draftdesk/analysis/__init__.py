"""Prose analysis: readability scoring, style highlighting and spell check."""
from .readability import Readability, TextStatistics, score, text_statistics, calculate_readability
from .highlight import HighlightedText, Segment, Tier, Mark, highlight, strip_markup, COLOR_KEY
from .spellcheck import SpellChecker, SpellReport

__all__ = [
    'Readability', 'TextStatistics', 'score', 'text_statistics', 'calculate_readability',
    'HighlightedText', 'Segment', 'Tier', 'Mark', 'highlight', 'strip_markup', 'COLOR_KEY',
    'SpellChecker', 'SpellReport',
]
