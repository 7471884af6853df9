"""Editor view orchestration."""

from .view_state import (
    View,
    ViewEvent,
    ViewState,
    WikiFocus,
    AnalysisReport,
    ViewController,
    transition,
)

__all__ = [
    'View',
    'ViewEvent',
    'ViewState',
    'WikiFocus',
    'AnalysisReport',
    'ViewController',
    'transition',
]
