"""Project data models."""
from typing import List, Dict, Any
from pydantic import AliasChoices, BaseModel, Field

from ..config.constants import (
    DEFAULT_CHAPTER_TITLE,
    DEFAULT_WIKI_TITLE,
)


class Chapter(BaseModel):
    """A chapter of the manuscript with its scene notes and word goal."""

    title: str = Field(
        "",
        description="Chapter title",
        validation_alias=AliasChoices('title', 'Title')
    )
    content: str = Field(
        "",
        description="Chapter prose",
        validation_alias=AliasChoices('content', 'Content')
    )
    notes: str = Field(
        "",
        description="Scene ideas, plot points and reminders",
        validation_alias=AliasChoices('notes', 'Notes')
    )
    target: int = Field(
        0,
        ge=0,
        description="Word-count goal (0 means no goal)",
        validation_alias=AliasChoices('target', 'Target')
    )

    @property
    def word_count(self) -> int:
        return len(self.content.split())


class WikiEntry(BaseModel):
    """A story bible entry (character, location, ...)."""

    title: str = Field(
        "",
        description="Entry title",
        validation_alias=AliasChoices('title', 'Title')
    )
    content: str = Field(
        "",
        description="Free-form reference text",
        validation_alias=AliasChoices('content', 'Content')
    )


def default_wiki() -> List[WikiEntry]:
    """The wiki a project gets when none was stored."""
    return [WikiEntry(title=DEFAULT_WIKI_TITLE)]


class Project(BaseModel):
    """The unit of persistence: ordered chapters plus the story bible."""

    chapters: List[Chapter] = Field(
        default_factory=lambda: [Chapter(title=DEFAULT_CHAPTER_TITLE)],
        min_length=1,
        description="Ordered chapters"
    )
    wiki: List[WikiEntry] = Field(
        default_factory=default_wiki,
        min_length=1,
        description="Ordered story bible entries"
    )

    @classmethod
    def new(cls) -> "Project":
        """Create the starting project for a fresh session."""
        return cls()

    @property
    def total_word_count(self) -> int:
        return sum(chapter.word_count for chapter in self.chapters)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the current on-disk schema."""
        return self.model_dump(mode='json')
