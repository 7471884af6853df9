"""Editor session: command surface, autosave and status messages."""
import asyncio
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Union

from ..analysis import COLOR_KEY, SpellChecker, strip_markup
from ..config import Settings, get_settings
from ..config.constants import (
    ANALYSIS_HELP_TEXT,
    DEFAULT_HELP_TEXT,
    NOTES_HELP_TEXT,
    PROJECT_SUFFIX,
    WIKI_HELP_TEXT,
)
from ..errors import DraftDeskError, UserError
from ..orchestration import View, ViewController
from ..storage import DocumentStore, Direction, PersistenceManager, Surfaces, with_default_suffix
from ..utils.logging import get_logger
from .themes import Theme, get_theme


@dataclass
class Notice:
    """A message the user must acknowledge."""

    title: str
    message: str
    level: str = "info"

    @property
    def is_error(self) -> bool:
        return self.level == "error"


@dataclass
class Confirmation:
    """A destructive action waiting for an explicit yes."""

    prompt: str
    action: Callable[[], Optional[Notice]]


class UiAction(str, Enum):
    """Requests the rendering layer fulfils itself."""

    SHOW_HELP = "show_help"
    SHOW_CHAPTERS = "show_chapters"
    QUIT = "quit"


@dataclass(frozen=True)
class AutosaveRequest:
    """Enqueued by the autosave ticker."""


@dataclass(frozen=True)
class ExpireStatus:
    """Enqueued when a status flash runs out."""

    token: int


CommandResult = Union[Notice, Confirmation, UiAction, None]
InboxRequest = Union[AutosaveRequest, ExpireStatus]


class EditorSession:
    """
    Owns all editor state and executes commands against it.

    Background timers never touch state directly; they put requests on the
    inbox and process_inbox() applies them on the event loop that also runs
    the UI.
    """

    def __init__(self, settings: Optional[Settings] = None, surfaces: Optional[Surfaces] = None):
        """
        Initialize editor session.

        Args:
            settings: Settings to use (defaults to get_settings())
            surfaces: Editable surfaces to bind (defaults to in-memory ones)
        """
        self.settings = settings or get_settings()
        self.logger = get_logger("session")

        self.store = DocumentStore(surfaces=surfaces)
        self.views = ViewController(self.store, target_width=self.settings.target_width)
        self.persistence = PersistenceManager()
        self.spellchecker = SpellChecker(self.settings.dictionary_path)
        self.theme: Theme = get_theme(self.settings.theme)

        self.current_path: Optional[Path] = None
        self.running = True
        self.pending: Optional[Confirmation] = None

        self.status_message: Optional[str] = None
        self._status_token = 0

        self.inbox: "asyncio.Queue[InboxRequest]" = asyncio.Queue()
        self.on_change: Callable[[], None] = lambda: None

        self.commands = {
            'quit': self.quit,
            'exit': self.quit,
            'help': self.show_help,
            'wordcount': self.word_count,
            'chapters': self.show_chapters,
            'list': self.show_chapters,
            'save': self.save_command,
            'open': self.open_command,
            'load': self.open_command,
            'export': self.export_command,
            'search': self.search,
            'replace': self.replace,
            'target': self.set_target,
            'spellcheck': self.spellcheck,
            'spell': self.spellcheck,
            'theme': self.change_theme,
            'notes': self.toggle_notes,
            'analyze': self.analyze,
            'center': self.toggle_centered,
            'focus': self.toggle_focus,
            'wiki': self.wiki_command,
            'chapter': self.chapter_command,
        }

        self.logger.info("EditorSession initialized")

    # ---- dispatch -----------------------------------------------------

    def execute(self, line: str) -> CommandResult:
        """
        Run one command-bar line.

        Errors from the command are turned into error notices; the state is
        left as it was before the command.
        """
        parts = line.strip().split()
        if not parts:
            return None

        verb, args = parts[0].lower(), parts[1:]
        self.logger.debug(f"Command: {verb} {args}")

        try:
            handler = self.commands.get(verb)
            if handler is None:
                raise UserError(f"Unknown command: {verb}. Type 'help' for commands.")
            result = handler(args)
        except DraftDeskError as e:
            self.logger.warning(f"Command '{verb}' failed: {e.message}")
            return Notice(e.title, e.message, level="error")

        if isinstance(result, Confirmation):
            self.pending = result
        return result

    def resolve_confirmation(self, confirmed: bool) -> Optional[Notice]:
        """Run (or drop) the pending destructive action."""
        pending, self.pending = self.pending, None
        if pending is None or not confirmed:
            return None

        try:
            return pending.action()
        except DraftDeskError as e:
            self.logger.warning(f"Confirmed action failed: {e.message}")
            return Notice(e.title, e.message, level="error")

    # ---- inbox (single writer) ------------------------------------------

    async def autosave_ticker(self, interval: Optional[float] = None):
        """Periodically request an autosave once a file name is known."""
        interval = interval or self.settings.autosave_interval
        while True:
            await asyncio.sleep(interval)
            if self.current_path is not None:
                self.inbox.put_nowait(AutosaveRequest())

    async def process_inbox(self):
        """Apply queued requests one at a time."""
        while True:
            request = await self.inbox.get()
            try:
                self.handle_request(request)
            finally:
                self.inbox.task_done()
            self.on_change()

    def handle_request(self, request: InboxRequest) -> None:
        if isinstance(request, AutosaveRequest):
            self.autosave()
        elif isinstance(request, ExpireStatus):
            if request.token == self._status_token:
                self.status_message = None
        else:
            raise TypeError(f"Unknown inbox request: {request!r}")

    def autosave(self) -> bool:
        """Save to the current file. Failures are logged, never shown."""
        if self.current_path is None:
            return False

        try:
            self.store.flush()
            path = self.persistence.save(self.current_path, self.store.project)
        except DraftDeskError as e:
            self.logger.warning(f"Autosave failed: {e.message}")
            return False

        self.flash_status(f" [Autosaved to {path.name} at {datetime.now().strftime('%H:%M:%S')}] ")
        return True

    def flash_status(self, message: str) -> None:
        """Show a transient status message that expires on its own."""
        self._status_token += 1
        self.status_message = message

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop (headless use): the message stays until replaced
            return
        loop.call_later(
            self.settings.status_flash_seconds,
            self.inbox.put_nowait,
            ExpireStatus(self._status_token)
        )

    # ---- display helpers ----------------------------------------------

    def status_text(self) -> str:
        if self.status_message:
            return self.status_message
        return {
            View.MAIN: DEFAULT_HELP_TEXT,
            View.NOTES: NOTES_HELP_TEXT,
            View.WIKI: WIKI_HELP_TEXT,
            View.ANALYSIS: ANALYSIS_HELP_TEXT,
        }[self.views.view]

    def title_text(self) -> str:
        index = self.store.chapter_index
        chapter = self.store.active_chapter()
        view = self.views.view
        if view is View.WIKI:
            return f"STORY BIBLE - {self.store.active_wiki().title}"
        if view is View.ANALYSIS:
            return "ANALYSIS MODE"
        title = f"draftdesk - Chapter {index + 1}: {chapter.title}"
        if view is View.NOTES:
            title += " (NOTES)"
        return title

    def progress_text(self) -> str:
        """Word count, with progress towards the chapter goal in the main view."""
        if self.views.view is View.ANALYSIS:
            return " Read-Only "

        words = len(self.views.active_text().split())
        target = self.store.active_chapter().target
        if self.views.view is View.MAIN and target > 0:
            percent = int(words / target * 100)
            return f"{words} / {target} ({percent}%)"
        return str(words)

    # ---- file operations ----------------------------------------------

    def open_file(self, path: Union[str, Path]) -> Notice:
        """Load a project; the current state is only replaced on success."""
        path = with_default_suffix(path, PROJECT_SUFFIX)
        project = self.persistence.load(path)

        self.store.replace_project(project)
        self.views.reset()
        self.current_path = path
        self.logger.info(f"Opened {path}")
        return Notice("Success", f"Loaded {path}")

    def save_file(self, path: Optional[Union[str, Path]] = None) -> Notice:
        if path is None:
            if self.current_path is None:
                raise UserError("Please provide a filename: 'save <name>'")
            path = self.current_path

        self.store.flush()
        saved = self.persistence.save(path, self.store.project)
        self.current_path = saved
        return Notice("Success", f"Saved to {saved}")

    # ---- command handlers ---------------------------------------------

    def quit(self, args: List[str]) -> UiAction:
        self.logger.info("Quit requested")
        self.running = False
        return UiAction.QUIT

    def show_help(self, args: List[str]) -> UiAction:
        return UiAction.SHOW_HELP

    def show_chapters(self, args: List[str]) -> UiAction:
        self.store.flush()
        return UiAction.SHOW_CHAPTERS

    def word_count(self, args: List[str]) -> Notice:
        text = self.views.active_text()
        words = len(text.split())
        lines = text.count("\n") + 1 if text else 0
        return Notice("Stats", f"Words: {words}\nChars: {len(text)}\nLines: {lines}")

    def save_command(self, args: List[str]) -> Notice:
        name = " ".join(args)
        return self.save_file(self.settings.resolve_path(name) if name else None)

    def open_command(self, args: List[str]) -> Notice:
        if not args:
            raise UserError("Usage: open <file>")
        return self.open_file(self.settings.resolve_path(" ".join(args)))

    def export_command(self, args: List[str]) -> Notice:
        if not args:
            raise UserError("Usage: export <file>")
        self.store.flush()
        path = self.persistence.export(self.settings.resolve_path(" ".join(args)), self.store.project)
        return Notice("Success", f"Exported to {path}")

    def search(self, args: List[str]) -> Notice:
        if not args:
            raise UserError("Usage: search <term>")
        term = " ".join(args)
        count = self.views.active_text().count(term)
        return Notice("Search", f"Found {count} of '{term}'")

    def replace(self, args: List[str]) -> Notice:
        if len(args) != 2:
            raise UserError("Usage: replace <old> <new>")
        if self.views.view is View.ANALYSIS:
            raise UserError("The analysis view is read-only. Press Esc to return to the editor.")

        old, new = args
        text = self.views.active_text()
        count = text.count(old)
        self.views.set_active_text(text.replace(old, new))
        return Notice("Replace", f"Replaced '{old}' with '{new}' ({count} found)")

    def set_target(self, args: List[str]) -> Notice:
        target = 0
        if args:
            target = self._parse_int(args[0], "Usage: target [words]")
        self.store.set_target(self.store.chapter_index, target)
        return Notice("Target", f"Target: {target}" if target > 0 else "Target removed.")

    def spellcheck(self, args: List[str]) -> Notice:
        report = self.spellchecker.check(self.views.active_text())
        title = "Spell Check" if report.clean else "Spell Check Results"
        return Notice(title, report.render(self.settings.spell_display_limit))

    def change_theme(self, args: List[str]) -> None:
        if not args:
            raise UserError("Usage: theme <dark|light|retro>")
        self.theme = get_theme(args[0])
        self.flash_status(f" Theme: {self.theme.name} ")
        return None

    def toggle_notes(self, args: List[str]) -> None:
        self.views.toggle_notes()
        return None

    def toggle_centered(self, args: List[str]) -> None:
        self.views.toggle_centered()
        return None

    def toggle_focus(self, args: List[str]) -> None:
        self.views.toggle_focus()
        return None

    def analyze(self, args: List[str]) -> Notice:
        if self.views.view is not View.MAIN:
            raise UserError("Analysis runs on the chapter text. Return to the main editor first.")

        self.views.enter_analysis()
        report = self.views.state.analysis
        return Notice("Readability Report", f"{report.readability}\n\n{strip_markup(COLOR_KEY)}")

    def switch_chapter(self, index: int) -> None:
        self.store.switch_chapter(index)
        self._leave_analysis()

    def _leave_analysis(self) -> None:
        """Chapter edits return to the main editor once they have succeeded."""
        if self.views.view is View.ANALYSIS:
            self.views.cancel()

    def move_chapter(self, index: int, direction: Direction) -> bool:
        return self.store.move_chapter(index, direction)

    def select_wiki(self, index: int) -> None:
        self.views.select_wiki(index)

    def move_wiki(self, index: int, direction: Direction) -> bool:
        return self.store.move_wiki(index, direction)

    def chapter_command(self, args: List[str]) -> CommandResult:
        """chapter new [title] | delete [n] | rename [n] <name> | move [n] up|down"""
        if not args:
            raise UserError("Usage: chapter new|delete|rename|move ...")

        sub, rest = args[0].lower(), args[1:]
        if sub not in ('new', 'delete', 'rename', 'move'):
            raise UserError(f"Unknown chapter command: {sub}")

        if sub == 'new':
            index = self.store.create_chapter(" ".join(rest) or None)
            self._leave_analysis()
            self.flash_status(f" Created chapter {index + 1} ")
            return None

        index, rest = self._take_index(rest, self.store.chapter_index)

        if sub == 'delete':
            self.store.check_chapter_deletable(index)
            self._leave_analysis()

            def delete() -> None:
                self.store.delete_chapter(index)
                self.flash_status(f" Deleted chapter {index + 1} ")

            return Confirmation(f"Delete Chapter {index + 1}?", delete)

        if sub == 'rename':
            if not rest:
                raise UserError("Usage: chapter rename [index] <name>")
            self.store.rename_chapter(index, " ".join(rest))
        else:
            if len(rest) != 1:
                raise UserError("Usage: chapter move [index] up|down")
            self.store.move_chapter(index, Direction.parse(rest[0]))

        self._leave_analysis()
        return None

    def wiki_command(self, args: List[str]) -> CommandResult:
        """wiki | wiki new [name] | wiki delete | wiki rename <name>"""
        if not args:
            self.views.toggle_wiki()
            return None

        sub, name = args[0].lower(), " ".join(args[1:])

        if sub == 'new':
            if self.views.view is not View.WIKI:
                self.views.toggle_wiki()
            index = self.store.create_wiki(name or None)
            self.views.select_wiki(index)
            return None

        if sub == 'delete':
            index = self.store.wiki_index
            self.store.check_wiki_deletable(index)
            title = self.store.active_wiki().title

            def delete() -> None:
                self.store.delete_wiki(index)
                self.flash_status(f" Deleted wiki entry '{title}' ")

            return Confirmation(f"Delete wiki entry '{title}'?", delete)

        if sub == 'rename':
            if not name:
                raise UserError("Usage: wiki rename <name>")
            self.store.rename_wiki(self.store.wiki_index, name)
            return None

        raise UserError(f"Unknown wiki command: {sub}")

    # ---- parsing helpers ----------------------------------------------

    @staticmethod
    def _parse_int(value: str, usage: str) -> int:
        try:
            return int(value)
        except ValueError:
            raise UserError(usage) from None

    @staticmethod
    def _take_index(args: List[str], default: int):
        """Consume a leading 1-based index, if present."""
        if args:
            try:
                return int(args[0]) - 1, args[1:]
            except ValueError:
                pass
        return default, args
