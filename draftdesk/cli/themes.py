"""Color themes for the editor."""

from dataclasses import dataclass
from typing import Dict

from prompt_toolkit.styles import Style

from ..errors import UserError


@dataclass(frozen=True)
class Theme:
    """Immutable palette handed to the rendering layer."""

    name: str
    background: str
    text: str
    notes_text: str
    border: str
    title: str
    accent: str
    help_text: str
    status_flash: str = "ansigreen"

    def to_style(self) -> Style:
        """Build the prompt_toolkit style for this palette."""
        bg = f"bg:{self.background}"
        return Style.from_dict({
            '': f"{bg} {self.text}",
            'editor': f"{bg} {self.text}",
            'notes': f"{bg} {self.notes_text}",
            'frame.border': self.border,
            'frame.label': f"{self.title} bold",
            'command': f"{bg} {self.text}",
            'command.label': self.accent,
            'help-line': f"{bg} {self.help_text}",
            'status-flash': f"{bg} {self.status_flash}",
            'position': f"{bg} {self.text}",
            'position.count': self.accent,
            'position.done': 'ansigreen',
            'list': f"{bg} {self.text}",
            'list.current': f"bg:{self.title} {self.background}",
            'list.active': 'bold',
            'dialog': f"bg:{self.border}",
            'dialog.body': f"{bg} {self.text}",
            'dialog frame.label': f"{self.title} bold",
            'button.focused': f"bg:{self.title} {self.background}",
            'analysis.adverb': 'ansiblue',
            'analysis.passive': 'ansigreen',
            'analysis.hard': 'ansiyellow',
            'analysis.very-hard': 'ansired',
            'completion-menu': f"bg:{self.border} {self.text}",
            'completion-menu.completion.current': f"bg:{self.title} {self.background}",
        })


THEMES: Dict[str, Theme] = {
    'dark': Theme(
        name='dark',
        background='#000000',
        text='#ffffff',
        notes_text='#ffff00',
        border='#555555',
        title='#ffff00',
        accent='#ffff00',
        help_text='#808080',
    ),
    'light': Theme(
        name='light',
        background='#ffffff',
        text='#000000',
        notes_text='#00008b',
        border='#000000',
        title='#00008b',
        accent='#00008b',
        help_text='#555555',
    ),
    'retro': Theme(
        name='retro',
        background='#000000',
        text='#00ff00',
        notes_text='#006400',
        border='#00ff00',
        title='#00ff00',
        accent='#00ff00',
        help_text='#00ff00',
    ),
}


def get_theme(name: str) -> Theme:
    """Look up a theme by case-insensitive name."""
    theme = THEMES.get(name.lower())
    if theme is None:
        raise UserError(f"Unknown theme '{name}'. Available: {', '.join(THEMES)}")
    return theme
