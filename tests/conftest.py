"""Pytest configuration and fixtures."""
import shutil
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from draftdesk.cli.interactive import EditorSession
from draftdesk.config import Settings


DICTIONARY_WORDS = [
    "the", "a", "cat", "sat", "on", "mat", "dog", "ran", "quickly",
    "hello", "world", "story", "chapter", "word",
]


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for testing."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def settings(temp_dir: Path) -> Settings:
    """Settings rooted in the temp directory with fast timers."""
    return Settings(
        projects_dir=temp_dir,
        dictionary_path=temp_dir / "dictionary.txt",
        autosave_interval=0.01,
        status_flash_seconds=0.01,
        theme="dark",
    )


@pytest.fixture
def dictionary(settings: Settings) -> Path:
    """Write a small word list where the settings expect it."""
    settings.dictionary_path.write_text("\n".join(DICTIONARY_WORDS) + "\n", encoding="utf-8")
    return settings.dictionary_path


@pytest.fixture
def session(settings: Settings) -> EditorSession:
    """Headless editor session over in-memory surfaces."""
    return EditorSession(settings)
