"""Dictionary-backed spell check policy."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Set

from ..config.constants import SPELL_DISPLAY_LIMIT
from ..errors import FileIOError
from ..utils.logging import get_logger


logger = get_logger("spellcheck")


def normalize_token(raw: str) -> str:
    """Strip non-alphanumeric edges and lower-case a whitespace token."""
    start, end = 0, len(raw)
    while start < end and not raw[start].isalnum():
        start += 1
    while end > start and not raw[end - 1].isalnum():
        end -= 1
    return raw[start:end].lower()


@dataclass
class SpellReport:
    """Distinct unknown words, in the order they first appear."""

    unknown: List[str] = field(default_factory=list)

    @property
    def clean(self) -> bool:
        return not self.unknown

    def render(self, limit: int = SPELL_DISPLAY_LIMIT) -> str:
        if self.clean:
            return "No misspellings found!"

        lines = ["Potential misspellings:", ""]
        lines += [f"- {word}" for word in self.unknown[:limit]]
        remaining = len(self.unknown) - limit
        if remaining > 0:
            lines.append(f"+{remaining} more")
        return "\n".join(lines)


class SpellChecker:
    """Checks text against a case-insensitive word list loaded on first use."""

    def __init__(self, dictionary_path: Path, words: Optional[Set[str]] = None):
        """
        Args:
            dictionary_path: Newline-delimited word list, one word per line
            words: Preloaded word set (skips the file)
        """
        self.dictionary_path = Path(dictionary_path)
        self.words: Set[str] = set(words) if words is not None else set()
        self.loaded = words is not None

    def load(self) -> None:
        """
        Load the dictionary once.

        Raises:
            FileIOError: If the word list cannot be read; a later call retries
        """
        if self.loaded:
            return

        try:
            with open(self.dictionary_path, encoding='utf-8') as f:
                words = {line.strip().lower() for line in f}
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not load dictionary {self.dictionary_path}: {e}")
            raise FileIOError(f"Could not load '{self.dictionary_path.name}'.") from e

        words.discard("")
        self.words = words
        self.loaded = True
        logger.info(f"Loaded {len(words)} dictionary words from {self.dictionary_path}")

    def is_known(self, token: str) -> bool:
        """Known verbatim, or as a plural with one trailing 's'."""
        if token in self.words:
            return True
        return token.endswith("s") and token[:-1] in self.words

    def check(self, text: str) -> SpellReport:
        self.load()

        report = SpellReport()
        seen: Set[str] = set()
        for raw in text.split():
            token = normalize_token(raw)
            if not token or token in seen:
                continue
            if not self.is_known(token):
                seen.add(token)
                report.unknown.append(token)
        return report
