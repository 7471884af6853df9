"""Application constants and defaults."""
from pathlib import Path

# Directory Structure
DEFAULT_PROJECTS_DIR = Path(".")
DEFAULT_DICTIONARY_PATH = Path("dictionary.txt")
USER_CONFIG_DIR = Path.home() / ".draftdesk"

# File extensions
PROJECT_SUFFIX = ".json"
EXPORT_SUFFIX = ".txt"

# Defaults for new entries
DEFAULT_CHAPTER_TITLE = "The Beginning"
NEW_CHAPTER_TITLE = "New Chapter"
DEFAULT_WIKI_TITLE = "General"
NEW_WIKI_TITLE = "New Entry"

# Timers (seconds)
DEFAULT_AUTOSAVE_INTERVAL = 60
DEFAULT_STATUS_FLASH_SECONDS = 3

# Layout
TARGET_WIDTH = 85        # Ideal reading width in characters
DEFAULT_PADDING = 2      # Horizontal padding when not centered

# Analysis thresholds (words per pseudo-sentence)
HARD_SENTENCE_WORDS = 14
VERY_HARD_SENTENCE_WORDS = 20

# Spell check
SPELL_DISPLAY_LIMIT = 20

# Themes
DEFAULT_THEME = "dark"
THEME_NAMES = ['dark', 'light', 'retro']

DEFAULT_HELP_TEXT = " F1: Help | Ctrl-N: Notes | F2: Wiki | Ctrl-T: Center | F3: Focus | Ctrl-S: Save | Ctrl-E: Command"
NOTES_HELP_TEXT = " EDITING NOTES | Ctrl-N: Back | Ctrl-T: Center | Ctrl-E: Command"
WIKI_HELP_TEXT = " STORY BIBLE | F2: Back | Ctrl-L: List/Content | < >: Reorder | Ctrl-E: Command"
ANALYSIS_HELP_TEXT = " ANALYSIS | Adverbs | Passive | Hard | Very Hard | Esc: Exit"
