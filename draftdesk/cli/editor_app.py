"""Full-screen editor built on prompt_toolkit."""

import asyncio
from functools import lru_cache
from typing import Callable, List, Optional

from prompt_toolkit import Application
from prompt_toolkit.data_structures import Point
from prompt_toolkit.document import Document
from prompt_toolkit.buffer import Buffer
from prompt_toolkit.filters import Condition
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.layout import (
    ConditionalContainer,
    DynamicContainer,
    Float,
    FloatContainer,
    HSplit,
    Layout,
    VSplit,
    Window,
)
from prompt_toolkit.layout.containers import WindowAlign
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.layout.menus import CompletionsMenu
from prompt_toolkit.styles import DynamicStyle, Style
from prompt_toolkit.widgets import Button, Dialog, Frame, Label, TextArea

from ..orchestration import View, WikiFocus
from ..storage import Direction, Surfaces
from ..utils.logging import get_logger
from .command_completer import CommandCompleter, create_command_descriptions
from .interactive import Confirmation, EditorSession, Notice, UiAction
from .themes import THEMES, Theme


@lru_cache(maxsize=None)
def _style_for(theme: Theme) -> Style:
    return theme.to_style()


class BufferSurface:
    """Adapts a prompt_toolkit buffer to the document store's surface."""

    def __init__(self, buffer: Buffer):
        self.buffer = buffer

    @property
    def text(self) -> str:
        return self.buffer.text

    @text.setter
    def text(self, value: str):
        self.buffer.set_document(Document(value, 0), bypass_readonly=True)


class EntryList:
    """Selectable list of titles with reorder keys."""

    def __init__(
        self,
        titles: Callable[[], List[str]],
        current: Callable[[], int],
        on_select: Callable[[int], None],
        on_move: Callable[[int, Direction], bool],
    ):
        self.titles = titles
        self.current = current
        self.on_select = on_select
        self.on_move = on_move
        self.cursor = 0

        kb = KeyBindings()

        @kb.add('up')
        def move_up(event):
            self.cursor = max(0, self.cursor - 1)

        @kb.add('down')
        def move_down(event):
            self.cursor = min(len(self.titles()) - 1, self.cursor + 1)

        @kb.add('enter')
        def select(event):
            self.on_select(self.cursor)

        @kb.add('<')
        def move_earlier(event):
            if self.on_move(self.cursor, Direction.EARLIER):
                self.cursor -= 1

        @kb.add('>')
        def move_later(event):
            if self.on_move(self.cursor, Direction.LATER):
                self.cursor += 1

        self.control = FormattedTextControl(
            self._fragments,
            focusable=True,
            key_bindings=kb,
            get_cursor_position=lambda: Point(0, self.cursor),
        )
        self.window = Window(self.control, style='class:list')

    def reset_cursor(self):
        self.cursor = self.current()

    def _fragments(self) -> FormattedText:
        titles = self.titles()
        self.cursor = min(self.cursor, len(titles) - 1)
        active = self.current()

        lines = []
        for i, title in enumerate(titles):
            style = 'class:list.current' if i == self.cursor else ''
            if i == active:
                style += ' class:list.active'
            marker = '*' if i == active else ' '
            lines.append((style, f"{marker} {i + 1}. {title}\n"))
        return FormattedText(lines)

    def __pt_container__(self):
        return self.window


class EditorApp:
    """Renders an EditorSession and routes keys to it."""

    def __init__(self, session: EditorSession):
        self.session = session
        self.logger = get_logger("app")
        self.descriptions = create_command_descriptions()

        self.main_area = TextArea(wrap_lines=True, style='class:editor')
        self.notes_area = TextArea(wrap_lines=True, style='class:notes')
        self.wiki_area = TextArea(wrap_lines=True, style='class:editor')
        session.store.bind_surfaces(Surfaces(
            main=BufferSurface(self.main_area.buffer),
            notes=BufferSurface(self.notes_area.buffer),
            wiki=BufferSurface(self.wiki_area.buffer),
        ))

        self._analysis_row = 0
        analysis_kb = KeyBindings()

        @analysis_kb.add('up')
        def scroll_up(event):
            self._analysis_row = max(0, self._analysis_row - 1)

        @analysis_kb.add('down')
        def scroll_down(event):
            self._analysis_row += 1

        self.analysis_window = Window(
            FormattedTextControl(
                self._analysis_fragments,
                focusable=True,
                key_bindings=analysis_kb,
                get_cursor_position=lambda: Point(0, self._analysis_row),
            ),
            wrap_lines=True,
            style='class:editor',
        )

        store = session.store
        self.wiki_list = EntryList(
            titles=lambda: [entry.title for entry in store.wiki],
            current=lambda: store.wiki_index,
            on_select=self._select_wiki,
            on_move=session.move_wiki,
        )
        self.chapter_list = EntryList(
            titles=lambda: [chapter.title for chapter in store.chapters],
            current=lambda: store.chapter_index,
            on_select=self._select_chapter,
            on_move=session.move_chapter,
        )
        self.wiki_split = VSplit([
            Frame(self.wiki_list, title="Entries", width=30),
            self.wiki_area,
        ])

        self.command_bar = TextArea(
            height=1,
            prompt=' > ',
            multiline=False,
            completer=CommandCompleter(self.descriptions, theme_provider=lambda: list(THEMES)),
            complete_while_typing=True,
            accept_handler=self._accept_command,
            style='class:command',
        )

        padded = VSplit([
            Window(width=self._padding, style='class:editor'),
            DynamicContainer(self._body),
            Window(width=self._padding, style='class:editor'),
        ])
        framed = Frame(padded, title=self.session.title_text)
        chrome = Condition(lambda: self.session.views.chrome_visible)

        status_line = VSplit([
            Window(FormattedTextControl(self._help_fragments), height=1, style='class:help-line'),
            Window(
                FormattedTextControl(self._position_fragments),
                height=1,
                align=WindowAlign.RIGHT,
                dont_extend_width=True,
                style='class:position',
            ),
        ])

        root = HSplit([
            DynamicContainer(lambda: framed if self.session.views.chrome_visible else padded),
            ConditionalContainer(Frame(self.command_bar, title="Command Palette"), filter=chrome),
            ConditionalContainer(status_line, filter=chrome),
        ])
        self.root = FloatContainer(
            content=root,
            floats=[
                Float(xcursor=True, ycursor=True, content=CompletionsMenu(max_height=8, scroll_offset=1)),
            ],
        )
        self._modals: List[Float] = []

        self.app = Application(
            layout=Layout(self.root, focused_element=self.main_area),
            key_bindings=self._create_key_bindings(),
            style=DynamicStyle(lambda: _style_for(self.session.theme)),
            full_screen=True,
            mouse_support=True,
        )

    # ---- layout callbacks ---------------------------------------------

    def _padding(self) -> int:
        width = self.app.output.get_size().columns
        return self.session.views.horizontal_padding(width)

    def _body(self):
        view = self.session.views.view
        if view is View.NOTES:
            return self.notes_area
        if view is View.ANALYSIS:
            return self.analysis_window
        if view is View.WIKI:
            return self.wiki_split
        return self.main_area

    def _focus_target(self):
        state = self.session.views.state
        if state.view is View.WIKI:
            return self.wiki_list if state.wiki_focus is WikiFocus.LIST else self.wiki_area
        return self._body()

    def _active_area(self) -> Optional[TextArea]:
        target = self._focus_target()
        return target if isinstance(target, TextArea) else None

    def _analysis_fragments(self) -> FormattedText:
        report = self.session.views.state.analysis
        if report is None:
            return FormattedText([])
        return FormattedText(report.highlighted.to_fragments())

    def _help_fragments(self) -> FormattedText:
        style = 'class:status-flash' if self.session.status_message else 'class:help-line'
        return FormattedText([(style, self.session.status_text())])

    def _position_fragments(self) -> FormattedText:
        fragments = [('class:position.count', f" Words: {self.session.progress_text()} ")]
        area = self._active_area()
        if area is not None:
            document = area.buffer.document
            fragments.append((
                'class:position',
                f"| Row: {document.cursor_position_row + 1} Col: {document.cursor_position_col + 1} "
            ))
        return FormattedText(fragments)

    # ---- focus and modals ---------------------------------------------

    def sync_focus(self):
        """Give the keyboard to whatever the current view shows."""
        if self._modals:
            return
        self.app.layout.focus(self._focus_target())

    def _open_modal(self, content, focus) -> Float:
        modal = Float(content=content)
        self.root.floats.append(modal)
        self._modals.append(modal)
        self.app.layout.focus(focus)
        return modal

    def _close_modal(self, modal: Float):
        if modal in self._modals:
            self._modals.remove(modal)
            self.root.floats.remove(modal)
        self.sync_focus()

    def _close_top_modal(self):
        if self._modals:
            self._close_modal(self._modals[-1])

    def show_notice(self, notice: Notice):
        modal = None

        def close():
            self._close_modal(modal)

        ok = Button(text="OK", handler=close)
        dialog = Dialog(
            title=notice.title,
            body=Label(text=notice.message, style='class:dialog.body'),
            buttons=[ok],
            with_background=False,
        )
        modal = self._open_modal(dialog, ok)

    def show_confirmation(self, confirmation: Confirmation):
        modal = None

        def answer(confirmed: bool):
            self._close_modal(modal)
            notice = self.session.resolve_confirmation(confirmed)
            if notice is not None:
                self.show_notice(notice)

        kb = KeyBindings()

        @kb.add('y')
        def _(event):
            answer(True)

        @kb.add('n')
        def _(event):
            answer(False)

        yes = Button(text="Yes", handler=lambda: answer(True))
        no = Button(text="No", handler=lambda: answer(False))
        dialog = Dialog(
            title="Confirm",
            body=Label(text=f"{confirmation.prompt} (y/N)", style='class:dialog.body'),
            buttons=[yes, no],
            with_background=False,
        )
        modal = self._open_modal(HSplit([dialog], key_bindings=kb), no)

    def show_help(self):
        lines = [
            "Keys:",
            "  F1 Help  Ctrl-E Command  Ctrl-S Save  Ctrl-N Notes",
            "  F2 Wiki  Ctrl-L Wiki list/content  Ctrl-T Center  F3 Focus",
            "  Esc Leave analysis  < > Reorder entries",
            "",
            "Commands:",
        ]
        for name, info in self.descriptions.items():
            lines.append(f"  {info['usage']:<44} {info['description']}")
        self.show_notice(Notice("Help", "\n".join(lines)))

    def show_chapter_list(self):
        self.chapter_list.reset_cursor()
        frame = Frame(
            self.chapter_list,
            title="Chapters (Enter: open, < >: reorder, Esc: close)",
            width=60,
            height=min(len(self.session.store.chapters) + 2, 20),
        )
        self._open_modal(frame, self.chapter_list)

    def _select_chapter(self, index: int):
        self.session.switch_chapter(index)
        self._close_top_modal()

    def _select_wiki(self, index: int):
        self.session.select_wiki(index)
        self.sync_focus()

    # ---- commands -----------------------------------------------------

    def handle_result(self, result):
        if result is None:
            return
        if isinstance(result, Notice):
            self.show_notice(result)
        elif isinstance(result, Confirmation):
            self.show_confirmation(result)
        elif result is UiAction.SHOW_HELP:
            self.show_help()
        elif result is UiAction.SHOW_CHAPTERS:
            self.show_chapter_list()
        elif result is UiAction.QUIT:
            self.app.exit()

    def _accept_command(self, buffer: Buffer) -> bool:
        line = buffer.text
        try:
            result = self.session.execute(line)
        except Exception as e:
            self.logger.error(f"Command failed: {line}", exc_info=True)
            result = Notice("Error", str(e), level="error")

        if result is UiAction.QUIT:
            self.app.exit()
            return False
        self.sync_focus()
        self.handle_result(result)
        return False

    def _create_key_bindings(self) -> KeyBindings:
        kb = KeyBindings()
        views = self.session.views
        no_modal = Condition(lambda: not self._modals)
        in_wiki = Condition(lambda: views.view is View.WIKI)

        @kb.add('c-c')
        def interrupt(event):
            event.app.exit()

        @kb.add('f1', filter=no_modal)
        def help_(event):
            self.show_help()

        @kb.add('c-e', filter=no_modal)
        def command_mode(event):
            if event.app.layout.has_focus(self.command_bar):
                self.command_bar.text = ""
                self.sync_focus()
                return
            views.enter_command_mode()
            event.app.layout.focus(self.command_bar)

        @kb.add('c-s', filter=no_modal)
        def quick_save(event):
            self.handle_result(self.session.execute("save"))

        @kb.add('c-n', filter=no_modal)
        def notes(event):
            views.toggle_notes()
            self.sync_focus()

        @kb.add('f2', filter=no_modal)
        def wiki(event):
            views.toggle_wiki()
            self.sync_focus()

        @kb.add('c-l', filter=no_modal & in_wiki)
        def wiki_focus(event):
            views.toggle_wiki_focus()
            self.sync_focus()

        @kb.add('c-t', filter=no_modal)
        def center(event):
            views.toggle_centered()

        @kb.add('f3', filter=no_modal)
        def focus(event):
            views.toggle_focus()
            self.sync_focus()

        @kb.add('escape', eager=True)
        def escape(event):
            if self._modals:
                self.session.resolve_confirmation(False)
                self._close_top_modal()
            elif views.view is View.ANALYSIS:
                views.cancel()
                self._analysis_row = 0
                self.sync_focus()
            else:
                self.command_bar.text = ""
                self.sync_focus()

        return kb

    # ---- run ----------------------------------------------------------

    async def run_async(self):
        self.session.on_change = self.app.invalidate
        background = [
            asyncio.ensure_future(self.session.autosave_ticker()),
            asyncio.ensure_future(self.session.process_inbox()),
        ]
        try:
            await self.app.run_async()
        finally:
            for task in background:
                task.cancel()
            await asyncio.gather(*background, return_exceptions=True)
            self.session.store.flush()
            self.logger.info("Editor closed")

    def run(self):
        asyncio.run(self.run_async())
