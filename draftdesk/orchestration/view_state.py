"""View state machine for the editor."""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from ..analysis import HighlightedText, Readability, highlight, score
from ..config.constants import DEFAULT_PADDING, TARGET_WIDTH
from ..storage.document_store import DocumentStore
from ..utils.logging import get_logger


logger = get_logger("views")


class View(str, Enum):
    """Which surface occupies the editor body."""

    MAIN = "main"
    NOTES = "notes"
    ANALYSIS = "analysis"   # Read-only
    WIKI = "wiki"           # Two panes: entry list + content

    @property
    def display_name(self) -> str:
        return self.value.upper()


class WikiFocus(str, Enum):
    """Which wiki pane has the keyboard."""

    LIST = "list"
    CONTENT = "content"

    def toggled(self) -> 'WikiFocus':
        return WikiFocus.CONTENT if self is WikiFocus.LIST else WikiFocus.LIST


class ViewEvent(str, Enum):
    """Inputs to the transition function."""

    TOGGLE_NOTES = "toggle_notes"
    TOGGLE_WIKI = "toggle_wiki"
    ENTER_ANALYSIS = "enter_analysis"
    CANCEL = "cancel"
    TOGGLE_WIKI_FOCUS = "toggle_wiki_focus"
    SELECT_WIKI_ENTRY = "select_wiki_entry"


@dataclass(frozen=True)
class AnalysisReport:
    """What the analysis view displays."""

    highlighted: HighlightedText
    readability: Readability


@dataclass(frozen=True)
class ViewState:
    """
    Tagged view state.

    wiki_focus is only set for WIKI and analysis only for ANALYSIS.
    """

    view: View = View.MAIN
    wiki_focus: Optional[WikiFocus] = None
    analysis: Optional[AnalysisReport] = None

    @classmethod
    def main(cls) -> 'ViewState':
        return cls(View.MAIN)

    @classmethod
    def notes(cls) -> 'ViewState':
        return cls(View.NOTES)

    @classmethod
    def wiki(cls, focus: WikiFocus = WikiFocus.LIST) -> 'ViewState':
        return cls(View.WIKI, wiki_focus=focus)

    @classmethod
    def analyzing(cls, report: AnalysisReport) -> 'ViewState':
        return cls(View.ANALYSIS, analysis=report)

    @property
    def shows_document(self) -> bool:
        """True when the body is an editable document surface."""
        return self.view is not View.ANALYSIS


def transition(state: ViewState, event: ViewEvent, report: Optional[AnalysisReport] = None) -> ViewState:
    """
    Compute the next view state. Pure; side effects belong to ViewController.

    Events that do not apply to the current state return it unchanged.
    """
    view = state.view

    if event is ViewEvent.TOGGLE_NOTES:
        if view in (View.NOTES, View.WIKI):
            return ViewState.main()
        return ViewState.notes()

    if event is ViewEvent.TOGGLE_WIKI:
        if view is View.WIKI:
            return ViewState.main()
        return ViewState.wiki(WikiFocus.LIST)

    if event is ViewEvent.ENTER_ANALYSIS:
        if view is not View.MAIN or report is None:
            return state
        return ViewState.analyzing(report)

    if event is ViewEvent.CANCEL:
        if view is View.ANALYSIS:
            return ViewState.main()
        return state

    if event is ViewEvent.TOGGLE_WIKI_FOCUS:
        if view is not View.WIKI:
            return state
        return replace(state, wiki_focus=state.wiki_focus.toggled())

    if event is ViewEvent.SELECT_WIKI_ENTRY:
        if view is not View.WIKI:
            return state
        return replace(state, wiki_focus=WikiFocus.CONTENT)

    raise ValueError(f"Unhandled view event: {event}")


class ViewController:
    """
    Applies view transitions to the document store.

    Every transition flushes the outgoing surface first and loads the
    incoming one afterwards. The centered and focus modifiers are kept
    across transitions.
    """

    def __init__(self, store: DocumentStore, target_width: int = TARGET_WIDTH):
        self.store = store
        self.target_width = target_width
        self.state = ViewState.main()
        self.centered = False
        self.focus = False

    @property
    def view(self) -> View:
        return self.state.view

    @property
    def chrome_visible(self) -> bool:
        """Borders, command bar and status line are hidden in focus mode."""
        return not self.focus

    def _apply(self, event: ViewEvent, report: Optional[AnalysisReport] = None) -> bool:
        new_state = transition(self.state, event, report)
        if new_state == self.state:
            return False

        self.store.flush()
        old_view = self.state.view
        self.state = new_state
        self._load_for(new_state)
        if old_view is not new_state.view:
            logger.debug(f"View {old_view.display_name} -> {new_state.view.display_name}")
        return True

    def _load_for(self, state: ViewState) -> None:
        if state.view in (View.MAIN, View.NOTES):
            self.store.load_chapter_surfaces()
        elif state.view is View.WIKI:
            self.store.load_wiki_surface()

    # ---- transitions --------------------------------------------------

    def toggle_notes(self) -> bool:
        return self._apply(ViewEvent.TOGGLE_NOTES)

    def toggle_wiki(self) -> bool:
        return self._apply(ViewEvent.TOGGLE_WIKI)

    def enter_analysis(self) -> bool:
        """Analyse the current chapter's live text. Only allowed from MAIN."""
        if self.view is not View.MAIN:
            return False

        text = self.store.surfaces.main.text
        report = AnalysisReport(highlighted=highlight(text), readability=score(text))
        return self._apply(ViewEvent.ENTER_ANALYSIS, report)

    def cancel(self) -> bool:
        return self._apply(ViewEvent.CANCEL)

    def toggle_wiki_focus(self) -> bool:
        return self._apply(ViewEvent.TOGGLE_WIKI_FOCUS)

    def select_wiki(self, index: int) -> None:
        """Open wiki entry index in the content pane. A bad index changes nothing."""
        self.store.switch_wiki(index)
        if self.view is not View.WIKI:
            self.toggle_wiki()
        self._apply(ViewEvent.SELECT_WIKI_ENTRY)

    def reset(self) -> None:
        """Back to the main editor after a project load. Centered is kept."""
        self.state = ViewState.main()
        self.focus = False

    # ---- modifiers ----------------------------------------------------

    def toggle_centered(self) -> bool:
        self.centered = not self.centered
        return self.centered

    def toggle_focus(self) -> bool:
        self.focus = not self.focus
        return self.focus

    def enter_command_mode(self) -> None:
        """The command bar needs chrome, so leave focus mode first."""
        if self.focus:
            self.focus = False

    def horizontal_padding(self, width: int) -> int:
        """Symmetric padding for the body at terminal width."""
        if self.centered and width > self.target_width + 4:
            return (width - self.target_width) // 2
        return DEFAULT_PADDING

    # ---- active surface -----------------------------------------------

    def active_text(self) -> str:
        """Live text of the displayed document (analysis reads the chapter)."""
        surfaces = self.store.surfaces
        if self.view is View.NOTES:
            return surfaces.notes.text
        if self.view is View.WIKI:
            return surfaces.wiki.text
        return surfaces.main.text

    def set_active_text(self, text: str) -> None:
        surfaces = self.store.surfaces
        if self.view is View.NOTES:
            surfaces.notes.text = text
        elif self.view is View.WIKI:
            surfaces.wiki.text = text
        else:
            surfaces.main.text = text
