"""DraftDesk - distraction-free terminal writing with prose analysis."""

__version__ = "1.0.0"
__author__ = "DraftDesk"

from .models import Project, Chapter, WikiEntry
from .errors import DraftDeskError, UserError, FileIOError, CorruptFile, InvalidOperation

__all__ = [
    '__version__',
    'Project',
    'Chapter',
    'WikiEntry',
    'DraftDeskError',
    'UserError',
    'FileIOError',
    'CorruptFile',
    'InvalidOperation',
]
