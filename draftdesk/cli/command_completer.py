"""Command completer for the command bar."""
from typing import Callable, Dict, Iterable, List, Optional
from prompt_toolkit.completion import Completer, Completion, CompleteEvent
from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import HTML


# Sub-commands offered after the verb
SUBCOMMANDS: Dict[str, List[str]] = {
    'chapter': ['new', 'delete', 'rename', 'move'],
    'wiki': ['new', 'delete', 'rename'],
}


class CommandCompleter(Completer):
    """Completer for command verbs, their sub-commands and theme names."""

    def __init__(self, commands: Dict[str, Dict[str, str]], theme_provider: Optional[Callable[[], List[str]]] = None):
        """
        Initialize the command completer.

        Args:
            commands: Dict mapping command names to their info:
                     {'command': {'description': '...', 'usage': '...'}}
            theme_provider: Callable that returns theme names for completion
        """
        self.commands = commands
        self.theme_provider = theme_provider

    def get_completions(
        self, document: Document, complete_event: CompleteEvent
    ) -> Iterable[Completion]:
        """Get completions for the current input."""
        text = document.text_before_cursor.lstrip()

        # Past the verb: complete the first argument
        if ' ' in text:
            command, arg_text = text.split(' ', 1)
            command = command.lower()
            if ' ' in arg_text:
                return

            if command == 'theme' and self.theme_provider:
                options = self.theme_provider()
                meta = 'Theme'
            else:
                options = SUBCOMMANDS.get(command, [])
                meta = command

            for option in options:
                if option.startswith(arg_text.lower()):
                    yield Completion(
                        text=option,
                        start_position=-len(arg_text),
                        display=HTML(f'<b>{option}</b>'),
                        display_meta=meta,
                    )
            return

        # Filter and sort commands
        matches = []
        for cmd, info in self.commands.items():
            if cmd.startswith(text.lower()):
                matches.append((cmd, info))

        # Sort by relevance (exact matches first, then alphabetical)
        matches.sort(key=lambda x: (not x[0] == text.lower(), x[0]))

        for cmd, info in matches:
            yield Completion(
                text=cmd,
                start_position=-len(text),
                display=HTML(f'<b>{cmd}</b>'),
                display_meta=info.get('description', ''),
            )


def create_command_descriptions() -> Dict[str, Dict[str, str]]:
    """Create command descriptions for the completer and help screen."""
    return {
        'help': {
            'description': 'Show keys and commands',
            'usage': 'help'
        },
        'wordcount': {
            'description': 'Word, character and line counts',
            'usage': 'wordcount'
        },
        'chapters': {
            'description': 'Pick or reorder chapters',
            'usage': 'chapters'
        },
        'list': {
            'description': 'Pick or reorder chapters',
            'usage': 'list'
        },
        'chapter': {
            'description': 'Create, delete, rename or move a chapter',
            'usage': 'chapter new|delete|rename|move [index] [name|up|down]'
        },
        'save': {
            'description': 'Save the project (JSON)',
            'usage': 'save [file]'
        },
        'open': {
            'description': 'Open a project file',
            'usage': 'open <file>'
        },
        'load': {
            'description': 'Open a project file',
            'usage': 'load <file>'
        },
        'export': {
            'description': 'Export the manuscript as plain text',
            'usage': 'export <file>'
        },
        'search': {
            'description': 'Count occurrences in the current text',
            'usage': 'search <term>'
        },
        'replace': {
            'description': 'Replace text in the current surface',
            'usage': 'replace <old> <new>'
        },
        'target': {
            'description': 'Set or clear the chapter word goal',
            'usage': 'target [words]'
        },
        'spellcheck': {
            'description': 'Check spelling against the dictionary',
            'usage': 'spellcheck'
        },
        'spell': {
            'description': 'Check spelling against the dictionary',
            'usage': 'spell'
        },
        'theme': {
            'description': 'Switch color theme',
            'usage': 'theme <dark|light|retro>'
        },
        'notes': {
            'description': 'Toggle scene notes',
            'usage': 'notes'
        },
        'wiki': {
            'description': 'Toggle the story bible or manage entries',
            'usage': 'wiki [new|delete|rename] [name]'
        },
        'analyze': {
            'description': 'Readability and style analysis',
            'usage': 'analyze'
        },
        'center': {
            'description': 'Toggle the centered reading column',
            'usage': 'center'
        },
        'focus': {
            'description': 'Hide borders and status (focus mode)',
            'usage': 'focus'
        },
        'exit': {
            'description': 'Exit the editor',
            'usage': 'exit'
        },
        'quit': {
            'description': 'Exit the editor',
            'usage': 'quit'
        },
    }
