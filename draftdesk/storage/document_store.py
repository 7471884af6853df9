"""In-memory document model: chapters, wiki entries and the live editing surfaces."""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Protocol, Union

from ..config.constants import NEW_CHAPTER_TITLE, NEW_WIKI_TITLE
from ..errors import InvalidOperation, UserError
from ..models import Chapter, Project, WikiEntry
from ..utils.logging import get_logger


logger = get_logger("store")


class Surface(Protocol):
    """An editable text area. Its text is the source of truth until flushed."""

    text: str


@dataclass
class TextSurface:
    """Plain in-memory surface (used headless and in tests)."""

    text: str = ""


@dataclass
class Surfaces:
    """The three document surfaces the editor can display."""

    main: Surface = field(default_factory=TextSurface)
    notes: Surface = field(default_factory=TextSurface)
    wiki: Surface = field(default_factory=TextSurface)


class Direction(int, Enum):
    """Adjacent-swap direction for reordering."""

    EARLIER = -1
    LATER = 1

    @classmethod
    def parse(cls, value: str) -> 'Direction':
        value = value.lower()
        if value in ('up', 'earlier', 'prev', '<'):
            return cls.EARLIER
        if value in ('down', 'later', 'next', '>'):
            return cls.LATER
        raise UserError(f"Unknown direction '{value}' (use up or down)")


Entry = Union[Chapter, WikiEntry]


class DocumentStore:
    """
    Owns the project, the current indices and the surfaces bound to them.

    Every operation that repoints a surface flushes the live text into the
    model first and loads the new entry afterwards.
    """

    def __init__(self, project: Optional[Project] = None, surfaces: Optional[Surfaces] = None):
        self.project = project or Project.new()
        self.surfaces = surfaces or Surfaces()
        self.chapter_index = 0
        self.wiki_index = 0
        self.load_surfaces()

    # ---- access -------------------------------------------------------

    @property
    def chapters(self) -> List[Chapter]:
        return self.project.chapters

    @property
    def wiki(self) -> List[WikiEntry]:
        return self.project.wiki

    def active_chapter(self) -> Chapter:
        return self.chapters[self.chapter_index]

    def active_wiki(self) -> WikiEntry:
        return self.wiki[self.wiki_index]

    def chapter_word_count(self) -> int:
        """Live word count of the main surface."""
        return len(self.surfaces.main.text.split())

    # ---- flush / load -------------------------------------------------

    def flush(self) -> None:
        """Copy the live surface text into the entries they display."""
        chapter = self.active_chapter()
        chapter.content = self.surfaces.main.text
        chapter.notes = self.surfaces.notes.text
        self.active_wiki().content = self.surfaces.wiki.text

    def load_surfaces(self) -> None:
        """Point every surface at the current entries (no flush)."""
        self.load_chapter_surfaces()
        self.load_wiki_surface()

    def load_chapter_surfaces(self) -> None:
        chapter = self.active_chapter()
        self.surfaces.main.text = chapter.content
        self.surfaces.notes.text = chapter.notes

    def load_wiki_surface(self) -> None:
        self.surfaces.wiki.text = self.active_wiki().content

    def bind_surfaces(self, surfaces: Surfaces) -> None:
        """Move the live text onto new surfaces (e.g. when the UI starts)."""
        self.flush()
        self.surfaces = surfaces
        self.load_surfaces()

    def replace_project(self, project: Project) -> None:
        """Swap in a freshly loaded project. The old live text is discarded."""
        self.project = project
        self.chapter_index = 0
        self.wiki_index = 0
        self.load_surfaces()
        logger.debug(f"Project replaced: {len(project.chapters)} chapters, {len(project.wiki)} wiki entries")

    # ---- chapters -----------------------------------------------------

    def switch_chapter(self, index: int) -> None:
        self._check_index(self.chapters, index, "chapter")
        self.flush()
        self.chapter_index = index
        self.load_chapter_surfaces()

    def create_chapter(self, title: Optional[str] = None) -> int:
        """Append a chapter and make it current. Returns its index."""
        self.flush()
        self.chapters.append(Chapter(title=title or NEW_CHAPTER_TITLE))
        self.chapter_index = len(self.chapters) - 1
        self.load_chapter_surfaces()
        return self.chapter_index

    def check_chapter_deletable(self, index: int) -> None:
        self._check_deletable(self.chapters, index, "chapter")

    def delete_chapter(self, index: int) -> None:
        self.check_chapter_deletable(index)
        self.flush()
        del self.chapters[index]
        self.chapter_index = self._index_after_delete(index, self.chapter_index, len(self.chapters))
        self.load_chapter_surfaces()
        logger.info(f"Deleted chapter {index + 1}; current is now {self.chapter_index + 1}")

    def rename_chapter(self, index: int, name: str) -> None:
        self._check_index(self.chapters, index, "chapter")
        self.chapters[index].title = self._clean_name(name)

    def move_chapter(self, index: int, direction: Direction) -> bool:
        """Swap chapter with its neighbour. Returns False at a boundary."""
        self.flush()
        moved, self.chapter_index = self._swap(self.chapters, index, direction, self.chapter_index, "chapter")
        return moved

    def set_target(self, index: int, target: int) -> None:
        self._check_index(self.chapters, index, "chapter")
        if target < 0:
            raise UserError("Target must be zero or a positive word count")
        self.chapters[index].target = target

    # ---- wiki ---------------------------------------------------------

    def switch_wiki(self, index: int) -> None:
        self._check_index(self.wiki, index, "wiki entry")
        self.flush()
        self.wiki_index = index
        self.load_wiki_surface()

    def create_wiki(self, title: Optional[str] = None) -> int:
        self.flush()
        self.wiki.append(WikiEntry(title=title or NEW_WIKI_TITLE))
        self.wiki_index = len(self.wiki) - 1
        self.load_wiki_surface()
        return self.wiki_index

    def check_wiki_deletable(self, index: int) -> None:
        self._check_deletable(self.wiki, index, "wiki entry")

    def delete_wiki(self, index: int) -> None:
        self.check_wiki_deletable(index)
        self.flush()
        del self.wiki[index]
        self.wiki_index = self._index_after_delete(index, self.wiki_index, len(self.wiki))
        self.load_wiki_surface()
        logger.info(f"Deleted wiki entry {index + 1}; current is now {self.wiki_index + 1}")

    def rename_wiki(self, index: int, name: str) -> None:
        self._check_index(self.wiki, index, "wiki entry")
        self.wiki[index].title = self._clean_name(name)

    def move_wiki(self, index: int, direction: Direction) -> bool:
        self.flush()
        moved, self.wiki_index = self._swap(self.wiki, index, direction, self.wiki_index, "wiki entry")
        return moved

    # ---- shared helpers -----------------------------------------------

    @staticmethod
    def _check_index(entries: List[Entry], index: int, kind: str) -> None:
        if not 0 <= index < len(entries):
            raise UserError(f"Invalid {kind}: {index + 1} (have {len(entries)})")

    def _check_deletable(self, entries: List[Entry], index: int, kind: str) -> None:
        if len(entries) <= 1:
            raise InvalidOperation(f"Cannot delete the only {kind}.")
        self._check_index(entries, index, kind)

    @staticmethod
    def _index_after_delete(deleted: int, current: int, new_length: int) -> int:
        if deleted < current:
            return current - 1
        if deleted == current and current >= new_length:
            return new_length - 1
        return current

    def _swap(self, entries: List[Entry], index: int, direction: Direction, current: int, kind: str):
        """Swap entries[index] with its neighbour; the current index follows its entry."""
        self._check_index(entries, index, kind)
        other = index + direction.value
        if not 0 <= other < len(entries):
            return False, current

        entries[index], entries[other] = entries[other], entries[index]
        if current == index:
            current = other
        elif current == other:
            current = index
        return True, current

    @staticmethod
    def _clean_name(name: str) -> str:
        name = " ".join(name.split())
        if not name:
            raise UserError("Name cannot be empty")
        return name
