"""Unit tests for the editor session command surface."""
import asyncio
import json

import pytest

from draftdesk.cli.interactive import (
    AutosaveRequest,
    Confirmation,
    EditorSession,
    ExpireStatus,
    Notice,
    UiAction,
)
from draftdesk.config.constants import DEFAULT_HELP_TEXT, NOTES_HELP_TEXT
from draftdesk.orchestration import View, WikiFocus
from draftdesk.storage import Direction


def main_text(session: EditorSession) -> str:
    return session.store.surfaces.main.text


def set_main(session: EditorSession, text: str):
    session.store.surfaces.main.text = text


class TestSessionBasics:
    """Test initialization and dispatch."""

    def test_initialization(self, session):
        assert session.running
        assert session.current_path is None
        assert session.pending is None
        assert session.views.view is View.MAIN
        assert session.theme.name == "dark"
        assert 'help' in session.commands

    def test_blank_line(self, session):
        assert session.execute("   ") is None

    def test_unknown_command(self, session):
        notice = session.execute("frobnicate now")

        assert isinstance(notice, Notice)
        assert notice.is_error
        assert notice.title == "Error"
        assert "Unknown command: frobnicate" in notice.message

    def test_verbs_are_case_insensitive(self, session):
        assert session.execute("HELP") is UiAction.SHOW_HELP

    @pytest.mark.parametrize("verb", ["quit", "exit"])
    def test_quit(self, session, verb):
        assert session.execute(verb) is UiAction.QUIT
        assert not session.running

    def test_chapters_list(self, session):
        set_main(session, "typed")

        assert session.execute("chapters") is UiAction.SHOW_CHAPTERS
        assert session.execute("list") is UiAction.SHOW_CHAPTERS
        assert session.store.chapters[0].content == "typed"


class TestTextCommands:
    """Test word count, search, replace and target."""

    def test_wordcount(self, session):
        set_main(session, "Hello world\nagain")
        notice = session.execute("wordcount")

        assert notice.title == "Stats"
        assert notice.message == "Words: 3\nChars: 17\nLines: 2"

    def test_wordcount_empty(self, session):
        assert session.execute("wordcount").message == "Words: 0\nChars: 0\nLines: 0"

    def test_search(self, session):
        set_main(session, "the cat and the hat")

        assert session.execute("search the").message == "Found 2 of 'the'"

    def test_search_requires_term(self, session):
        assert session.execute("search").is_error

    def test_replace(self, session):
        set_main(session, "the cat and the hat")
        notice = session.execute("replace the a")

        assert not notice.is_error
        assert main_text(session) == "a cat and a hat"

    @pytest.mark.parametrize("line", ["replace", "replace one", "replace a b c"])
    def test_replace_usage(self, session, line):
        set_main(session, "a b c")
        notice = session.execute(line)

        assert notice.is_error
        assert "Usage: replace" in notice.message
        assert main_text(session) == "a b c"

    def test_replace_in_notes_only(self, session):
        set_main(session, "cat")
        session.execute("notes")
        session.views.set_active_text("cat notes")
        session.execute("replace cat dog")

        assert session.views.active_text() == "dog notes"
        assert main_text(session) == "cat"

    def test_replace_in_analysis_rejected(self, session):
        set_main(session, "cat")
        session.execute("analyze")

        notice = session.execute("replace cat dog")

        assert notice.is_error
        assert "read-only" in notice.message
        assert main_text(session) == "cat"

    def test_target(self, session):
        assert session.execute("target 500").message == "Target: 500"
        assert session.store.active_chapter().target == 500

        assert session.execute("target").message == "Target removed."
        assert session.store.active_chapter().target == 0

    @pytest.mark.parametrize("arg", ["abc", "-5"])
    def test_target_invalid(self, session, arg):
        session.execute("target 100")

        assert session.execute(f"target {arg}").is_error
        assert session.store.active_chapter().target == 100

    def test_progress_text(self, session):
        set_main(session, "one two three four five")
        assert session.progress_text() == "5"

        session.execute("target 10")
        assert session.progress_text() == "5 / 10 (50%)"

        session.execute("notes")
        assert session.progress_text() == "0"


class TestFileCommands:
    """Test save, open and export."""

    def test_save_needs_name(self, session):
        notice = session.execute("save")

        assert notice.is_error
        assert notice.message == "Please provide a filename: 'save <name>'"

    def test_save_and_resave(self, session, temp_dir):
        set_main(session, "Draft one.")
        notice = session.execute("save novel")

        assert notice.title == "Success"
        assert session.current_path == temp_dir / "novel.json"

        set_main(session, "Draft two.")
        session.execute("save")

        data = json.loads((temp_dir / "novel.json").read_text(encoding="utf-8"))
        assert data["chapters"][0]["content"] == "Draft two."

    def test_open(self, session, temp_dir):
        (temp_dir / "book.json").write_text(json.dumps({
            "chapters": [{"title": "A", "content": "alpha"}, {"title": "B", "content": "beta"}],
            "wiki": [{"title": "Bob", "content": "friend"}],
        }), encoding="utf-8")
        session.execute("chapter new")
        session.execute("wiki")
        session.views.toggle_focus()

        notice = session.execute("open book")

        assert notice.title == "Success"
        assert session.current_path == temp_dir / "book.json"
        assert session.store.chapter_index == 0
        assert session.views.view is View.MAIN
        assert not session.views.focus
        assert main_text(session) == "alpha"

    def test_load_alias_and_legacy(self, session, temp_dir):
        (temp_dir / "old.json").write_text(json.dumps([{"Title": "Old", "Content": "text"}]), encoding="utf-8")

        session.execute("load old.json")

        assert main_text(session) == "text"
        assert [w.title for w in session.store.wiki] == ["General"]

    def test_open_missing_leaves_state(self, session):
        set_main(session, "keep me")
        notice = session.execute("open missing")

        assert notice.is_error
        assert notice.title == "File Error"
        assert main_text(session) == "keep me"
        assert session.current_path is None

    def test_open_corrupt_leaves_state(self, session, temp_dir):
        (temp_dir / "bad.json").write_text("{nope", encoding="utf-8")
        set_main(session, "keep me")

        notice = session.execute("open bad")

        assert notice.title == "Corrupt File"
        assert notice.message == "Corrupt file format."
        assert main_text(session) == "keep me"

    def test_open_needs_name(self, session):
        assert session.execute("open").is_error

    def test_export(self, session, temp_dir):
        set_main(session, "Body text.")
        notice = session.execute("export manuscript")

        assert notice.title == "Success"
        text = (temp_dir / "manuscript.txt").read_text(encoding="utf-8")
        assert text == "# Chapter 1: The Beginning\n\nBody text.\n\n"

    def test_export_needs_name(self, session):
        assert session.execute("export").is_error


class TestAnalysisCommands:
    """Test spellcheck, analyze and theme."""

    def test_spellcheck(self, session, dictionary):
        set_main(session, "The cat sat on teh mat.")
        notice = session.execute("spellcheck")

        assert notice.title == "Spell Check Results"
        assert notice.message == "Potential misspellings:\n\n- teh"

    def test_spell_alias_clean(self, session, dictionary):
        set_main(session, "The cats sat.")

        assert session.execute("spell").message == "No misspellings found!"

    def test_spellcheck_missing_dictionary(self, session):
        notice = session.execute("spellcheck")

        assert notice.is_error
        assert notice.message == "Could not load 'dictionary.txt'."

    def test_spellcheck_unreadable_dictionary(self, session, settings):
        settings.dictionary_path.write_bytes(b"caf\xe9\nhello\n")

        notice = session.execute("spellcheck")

        assert notice.is_error
        assert notice.message == "Could not load 'dictionary.txt'."

    def test_analyze(self, session):
        set_main(session, "He ran quickly.")
        notice = session.execute("analyze")

        assert notice.title == "Readability Report"
        assert notice.message.startswith("Reading Age: ")
        assert "COLOR KEY" in notice.message
        assert "[" not in notice.message
        assert session.views.view is View.ANALYSIS

    def test_analyze_outside_main(self, session):
        session.execute("notes")

        assert session.execute("analyze").is_error
        assert session.views.view is View.NOTES

    def test_theme(self, session):
        assert session.execute("theme retro") is None
        assert session.theme.name == "retro"
        assert "retro" in session.status_message

    def test_unknown_theme(self, session):
        notice = session.execute("theme neon")

        assert notice.is_error
        assert session.theme.name == "dark"

    def test_toggles(self, session):
        session.execute("center")
        session.execute("focus")

        assert session.views.centered
        assert session.views.focus

        session.execute("notes")
        assert session.views.view is View.NOTES


class TestChapterCommands:
    """Test chapter management through the command bar."""

    def test_new(self, session):
        session.execute("chapter new")
        session.execute("chapter new The Storm")

        assert [c.title for c in session.store.chapters] == ["The Beginning", "New Chapter", "The Storm"]
        assert session.store.chapter_index == 2

    def test_new_leaves_analysis(self, session):
        session.execute("analyze")
        session.execute("chapter new")

        assert session.views.view is View.MAIN

    @pytest.mark.parametrize("line", [
        "chapter bogus",
        "chapter rename 1",
        "chapter move 5 up",
        "chapter move sideways",
        "chapter delete",
    ])
    def test_rejected_command_keeps_analysis(self, session, line):
        session.execute("analyze")

        assert session.execute(line).is_error
        assert session.views.view is View.ANALYSIS
        assert len(session.store.chapters) == 1

    def test_rename(self, session):
        session.execute("chapter new")
        session.execute("chapter rename 1 Prologue")
        session.execute("chapter rename Finale")

        assert [c.title for c in session.store.chapters] == ["Prologue", "Finale"]

    def test_rename_needs_name(self, session):
        assert session.execute("chapter rename 1").is_error

    def test_delete_requires_confirmation(self, session):
        session.execute("chapter new Second")
        result = session.execute("chapter delete 1")

        assert isinstance(result, Confirmation)
        assert result.prompt == "Delete Chapter 1?"
        assert session.pending is result
        assert len(session.store.chapters) == 2

        assert session.resolve_confirmation(False) is None
        assert len(session.store.chapters) == 2
        assert session.pending is None

    def test_delete_confirmed(self, session):
        session.execute("chapter new Second")
        session.execute("chapter delete 1")
        session.resolve_confirmation(True)

        assert [c.title for c in session.store.chapters] == ["Second"]
        assert session.store.chapter_index == 0

    def test_delete_only_chapter(self, session):
        notice = session.execute("chapter delete")

        assert notice.title == "Not Allowed"
        assert notice.message == "Cannot delete the only chapter."
        assert session.pending is None

    def test_delete_out_of_range(self, session):
        session.execute("chapter new")

        notice = session.execute("chapter delete 5")

        assert notice.is_error
        assert notice.message == "Invalid chapter: 5 (have 2)"

    def test_move(self, session):
        session.execute("chapter new Second")
        session.execute("chapter move 2 up")

        assert [c.title for c in session.store.chapters] == ["Second", "The Beginning"]
        assert session.store.active_chapter().title == "Second"

    def test_move_usage(self, session):
        assert session.execute("chapter move").is_error
        assert session.execute("chapter move 1 sideways").is_error

    def test_unknown_subcommand(self, session):
        assert session.execute("chapter explode").is_error
        assert session.execute("chapter").is_error

    def test_resolve_without_pending(self, session):
        assert session.resolve_confirmation(True) is None

    def test_switch_chapter(self, session):
        session.execute("chapter new")
        session.execute("analyze")
        session.switch_chapter(0)

        assert session.views.view is View.MAIN
        assert session.store.chapter_index == 0


class TestWikiCommands:
    """Test the story bible commands."""

    def test_toggle(self, session):
        session.execute("wiki")
        assert session.views.view is View.WIKI

        session.execute("wiki")
        assert session.views.view is View.MAIN

    def test_new(self, session):
        session.execute("wiki new Alice")

        assert session.views.view is View.WIKI
        assert session.views.state.wiki_focus is WikiFocus.CONTENT
        assert session.store.active_wiki().title == "Alice"
        assert [w.title for w in session.store.wiki] == ["General", "Alice"]

    def test_new_default_name(self, session):
        session.execute("wiki new")

        assert session.store.active_wiki().title == "New Entry"

    def test_rename(self, session):
        session.execute("wiki rename Places")

        assert session.store.wiki[0].title == "Places"

    def test_delete(self, session):
        session.execute("wiki new Alice")
        result = session.execute("wiki delete")

        assert isinstance(result, Confirmation)
        assert result.prompt == "Delete wiki entry 'Alice'?"

        session.resolve_confirmation(True)
        assert [w.title for w in session.store.wiki] == ["General"]

    def test_delete_only_entry(self, session):
        notice = session.execute("wiki delete")

        assert notice.message == "Cannot delete the only wiki entry."

    def test_select_and_move(self, session):
        session.execute("wiki new Alice")
        session.select_wiki(0)
        assert session.store.active_wiki().title == "General"

        assert session.move_wiki(0, Direction.LATER)
        assert [w.title for w in session.store.wiki] == ["Alice", "General"]


class TestStatus:
    """Test status line text and expiry."""

    def test_help_text_per_view(self, session):
        assert session.status_text() == DEFAULT_HELP_TEXT
        session.execute("notes")
        assert session.status_text() == NOTES_HELP_TEXT

    def test_flash_without_loop_stays(self, session):
        session.flash_status("Saved")

        assert session.status_text() == "Saved"
        assert session.inbox.empty()

    def test_stale_expiry_ignored(self, session):
        session.flash_status("first")
        stale = ExpireStatus(session._status_token)
        session.flash_status("second")

        session.handle_request(stale)
        assert session.status_message == "second"

        session.handle_request(ExpireStatus(session._status_token))
        assert session.status_message is None

    def test_title_text(self, session):
        assert session.title_text() == "draftdesk - Chapter 1: The Beginning"
        session.execute("notes")
        assert session.title_text().endswith("(NOTES)")
        session.execute("wiki")
        assert session.title_text() == "STORY BIBLE - General"

    def test_unknown_request(self, session):
        with pytest.raises(TypeError):
            session.handle_request("nonsense")


class TestAutosave:
    """Test autosave through the inbox."""

    def test_no_path_writes_nothing(self, session, temp_dir):
        assert not session.autosave()
        assert list(temp_dir.iterdir()) == []

    def test_autosave(self, session, temp_dir):
        session.execute("save novel")
        set_main(session, "Autosaved text.")

        assert session.autosave()

        data = json.loads((temp_dir / "novel.json").read_text(encoding="utf-8"))
        assert data["chapters"][0]["content"] == "Autosaved text."
        assert session.status_message.startswith(" [Autosaved to novel.json at ")

    def test_autosave_failure_is_quiet(self, session, temp_dir):
        session.current_path = temp_dir / "gone" / "novel.json"

        assert not session.autosave()
        assert session.status_message is None

    @pytest.mark.asyncio
    async def test_ticker_idle_without_path(self, session):
        ticker = asyncio.ensure_future(session.autosave_ticker(0.01))
        await asyncio.sleep(0.05)
        ticker.cancel()

        assert session.inbox.empty()

    @pytest.mark.asyncio
    async def test_ticker_enqueues_with_path(self, session, temp_dir):
        session.current_path = temp_dir / "novel.json"
        ticker = asyncio.ensure_future(session.autosave_ticker(0.01))
        await asyncio.sleep(0.05)
        ticker.cancel()

        assert isinstance(session.inbox.get_nowait(), AutosaveRequest)

    @pytest.mark.asyncio
    async def test_process_inbox(self, session, temp_dir):
        changes = []
        session.on_change = lambda: changes.append(True)
        session.execute("save novel")
        set_main(session, "From the inbox.")

        worker = asyncio.ensure_future(session.process_inbox())
        session.inbox.put_nowait(AutosaveRequest())
        await asyncio.wait_for(session.inbox.join(), timeout=1)

        data = json.loads((temp_dir / "novel.json").read_text(encoding="utf-8"))
        assert data["chapters"][0]["content"] == "From the inbox."
        assert changes

        # The flash scheduled by the autosave expires on its own
        await asyncio.sleep(0.1)
        await asyncio.wait_for(session.inbox.join(), timeout=1)
        assert session.status_message is None

        worker.cancel()
