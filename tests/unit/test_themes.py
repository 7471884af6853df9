"""Tests for color themes."""
import dataclasses

import pytest
from prompt_toolkit.styles import Style

from draftdesk.cli.themes import THEMES, get_theme
from draftdesk.config.constants import THEME_NAMES
from draftdesk.errors import UserError


class TestThemes:
    """Test theme lookup and style conversion."""

    def test_all_configured_themes_exist(self):
        assert sorted(THEMES) == sorted(THEME_NAMES)

    def test_lookup_is_case_insensitive(self):
        assert get_theme("Retro").name == "retro"

    def test_unknown_theme(self):
        with pytest.raises(UserError, match="Unknown theme 'neon'"):
            get_theme("neon")

    @pytest.mark.parametrize("name", THEME_NAMES)
    def test_to_style(self, name):
        style = get_theme(name).to_style()

        assert isinstance(style, Style)
        rules = dict(style.style_rules)
        assert 'analysis.adverb' in rules
        assert 'status-flash' in rules

    def test_themes_are_immutable(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            THEMES['dark'].text = '#123456'
